# transcripts/services/matching.py
"""Find the transcript spans a highlighter should mark for a search query."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .analysis import TextAnalyzer, Token, TokenDictionary, build_token_dictionary
from .phrases import PhraseMatch, find_phrase_matches
from .query_parser import ParsedQuery, parse_query

__all__ = ["MatchSpan", "merge_matches", "format_matches", "find_matches"]

LOGGER = logging.getLogger(__name__)

MatchRecord = Union[PhraseMatch, Token]


@dataclass(frozen=True, slots=True)
class MatchSpan:
    """Character offsets of one highlighted transcript location."""

    start_offset: int
    end_offset: int

    def as_dict(self) -> Dict[str, int]:
        return {"startOffset": self.start_offset, "endOffset": self.end_offset}


def _claim(merged: Dict[int, MatchRecord], position: int, record: MatchRecord) -> None:
    if position not in merged:
        merged[position] = record


def merge_matches(
    phrase_matches: Iterable[PhraseMatch],
    token_dictionary: TokenDictionary,
    query_tokens: Sequence[Token] = (),
    prefix_terms: Sequence[str] = (),
) -> Dict[int, MatchRecord]:
    """Combine every match source into one position-keyed, position-ordered map.

    Phrase matches go in first, keyed by character index. Exact then prefix
    term matches follow, keyed by the analyzer's word ordinal. The first
    record to claim a position keeps it.

    Character indexes and word ordinals share one key space here, so a
    phrase starting at character 3 shadows a token at word 3. Existing
    highlight consumers depend on this, so it is kept as is.
    """

    merged: Dict[int, MatchRecord] = {}

    for match in phrase_matches:
        _claim(merged, match.start_offset, match)

    for query_token in query_tokens:
        for token in token_dictionary.get(query_token.text, ()):
            _claim(merged, token.position, token)

    for prefix in prefix_terms:
        for key, tokens in token_dictionary.items():
            if key.startswith(prefix):
                for token in tokens:
                    _claim(merged, token.position, token)

    return dict(sorted(merged.items()))


def format_matches(merged: Dict[int, MatchRecord]) -> List[MatchSpan]:
    """Turn position-ordered merged records into spans."""

    return [
        MatchSpan(start_offset=record.start_offset, end_offset=record.end_offset)
        for record in merged.values()
    ]


async def _analyze_terms(
    parsed: ParsedQuery, transcript_text: str, analyzer: TextAnalyzer
) -> Tuple[TokenDictionary, List[Token]]:
    """Tokenize the transcript, and the exact terms alongside it when present."""

    if parsed.exact_terms.strip():
        tasks = [
            asyncio.ensure_future(analyzer.analyze(transcript_text)),
            asyncio.ensure_future(analyzer.analyze(parsed.exact_terms)),
        ]
        try:
            transcript_tokens, query_tokens = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                if not task.done():
                    task.cancel()
            raise
    else:
        transcript_tokens = await analyzer.analyze(transcript_text)
        query_tokens = []

    return build_token_dictionary(transcript_tokens), list(query_tokens)


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


async def find_matches(
    query_terms: Optional[str],
    transcript_text: Optional[str],
    analyzer: TextAnalyzer,
) -> List[MatchSpan]:
    """Locate the query's matches within a transcript.

    Parameters
    ----------
    query_terms:
        Raw search query; supports ``term``, ``-term``, ``term*`` and
        ``"quoted phrases"``.
    transcript_text:
        The transcript to scan.
    analyzer:
        Backend used to tokenize the transcript and the exact query terms.

    Raises
    ------
    AnalysisError
        When the analyzer cannot tokenize text. Blank input never reaches
        the analyzer and yields an empty list instead.
    """

    if _is_blank(query_terms) or _is_blank(transcript_text):
        return []

    parsed = parse_query(query_terms)

    phrase_matches: List[PhraseMatch] = []
    for phrase in parsed.phrases:
        phrase_matches.extend(find_phrase_matches(phrase, transcript_text))

    token_dictionary: TokenDictionary = {}
    query_tokens: List[Token] = []
    if parsed.needs_analysis:
        token_dictionary, query_tokens = await _analyze_terms(parsed, transcript_text, analyzer)

    merged = merge_matches(phrase_matches, token_dictionary, query_tokens, parsed.prefix_terms)
    spans = format_matches(merged)
    LOGGER.debug(
        "Found %d matches (%d phrase occurrences) for query %r",
        len(spans),
        len(phrase_matches),
        query_terms,
    )
    return spans
