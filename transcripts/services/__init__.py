# transcripts/services/__init__.py
"""Service layer utilities for transcript match highlighting."""

from .analysis import (
    AnalysisError,
    SearchServiceAnalyzer,
    TextAnalyzer,
    Token,
    build_token_dictionary,
)
from .matching import MatchSpan, find_matches, format_matches, merge_matches
from .phrases import PhraseMatch, find_phrase_matches
from .query_parser import ParsedQuery, classify_terms, extract_phrases, parse_query

__all__ = [
    "AnalysisError",
    "SearchServiceAnalyzer",
    "TextAnalyzer",
    "Token",
    "build_token_dictionary",
    "MatchSpan",
    "find_matches",
    "format_matches",
    "merge_matches",
    "PhraseMatch",
    "find_phrase_matches",
    "ParsedQuery",
    "classify_terms",
    "extract_phrases",
    "parse_query",
]
