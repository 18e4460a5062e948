# transcripts/services/query_parser.py
"""Split free-text search queries into phrases, exact terms and prefix terms.

The supported syntax is the subset of the simple query language that matters
for highlighting: plain terms, negated terms (``-term``), prefix wildcards
(``term*``) and quoted phrases (``"a b"``, or ``-"a b"`` to negate).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import logging
import re
from typing import List, Optional, Tuple

__all__ = [
    "TERM_BREAK_CHARACTERS",
    "ParsedQuery",
    "extract_phrases",
    "classify_terms",
    "parse_query",
]

LOGGER = logging.getLogger(__name__)

# Operator characters +|() have no meaning for highlighting and act as separators.
TERM_BREAK_CHARACTERS = frozenset(" \t\r\n+|()")

_TERM_SPLITTER = re.compile(
    "[" + "".join(re.escape(char) for char in sorted(TERM_BREAK_CHARACTERS)) + "]+"
)
_SPECIAL_CHARACTERS = ("*", "-", '"')
_QUOTE = '"'
_NEGATION = "-"
_WILDCARD = "*"


class _ScanState(Enum):
    SCANNING = "scanning"
    IN_PHRASE_CANDIDATE = "in_phrase_candidate"


@dataclass(slots=True)
class ParsedQuery:
    """Query pieces that take part in transcript matching."""

    exact_terms: str = ""
    prefix_terms: List[str] = field(default_factory=list)
    phrases: List[str] = field(default_factory=list)

    @property
    def needs_analysis(self) -> bool:
        """Whether term matching requires the transcript to be tokenized."""

        return bool(self.prefix_terms) or bool(self.exact_terms.strip())


def _is_negated_phrase(query: str, opening: int) -> bool:
    """Return True when the quote at ``opening`` is preceded by a standalone ``-``."""

    if opening < 1 or query[opening - 1] != _NEGATION:
        return False
    if opening == 1:
        return True
    return query[opening - 2] in TERM_BREAK_CHARACTERS


def extract_phrases(query: Optional[str]) -> Tuple[str, List[str]]:
    """Remove quoted phrases from ``query``.

    Returns the residual query with every quoted segment removed, and the
    non-empty, trimmed, non-negated phrases in the order they appear.
    Negated phrases vanish together with their ``-`` marker. An unpaired
    quote truncates the residual at that quote.
    """

    if not query:
        return "", []

    residual: List[str] = []
    phrases: List[str] = []
    state = _ScanState.SCANNING
    segment_start = 0
    opening = -1

    for index, char in enumerate(query):
        if char != _QUOTE:
            continue

        if state is _ScanState.SCANNING:
            opening = index
            state = _ScanState.IN_PHRASE_CANDIDATE
            continue

        if _is_negated_phrase(query, opening):
            residual.append(query[segment_start : opening - 1])
        else:
            residual.append(query[segment_start:opening])
            phrase = query[opening + 1 : index].strip()
            if phrase:
                phrases.append(phrase)

        segment_start = index + 1
        state = _ScanState.SCANNING

    if state is _ScanState.IN_PHRASE_CANDIDATE:
        residual.append(query[segment_start:opening])
    else:
        residual.append(query[segment_start:])

    return "".join(residual), phrases


def classify_terms(residual: Optional[str]) -> Tuple[str, List[str]]:
    """Bucket the terms of a phrase-free query into exact and prefix terms.

    Negated terms are dropped. Exact terms come back joined by single spaces,
    ready to be handed to the analyzer in one call.
    """

    exact: List[str] = []
    prefixes: List[str] = []

    for term in _TERM_SPLITTER.split(residual or ""):
        if not term or term.startswith(_NEGATION):
            continue
        if term.endswith(_WILDCARD):
            prefixes.append(term[:-1])
        else:
            exact.append(term)

    return " ".join(exact), prefixes


def parse_query(query: Optional[str]) -> ParsedQuery:
    """Parse a raw search query into its matchable parts."""

    if not query:
        return ParsedQuery()

    if not any(char in query for char in _SPECIAL_CHARACTERS):
        return ParsedQuery(exact_terms=query)

    residual, phrases = extract_phrases(query)
    exact_terms, prefix_terms = classify_terms(residual)
    LOGGER.debug(
        "Parsed query %r into exact=%r prefixes=%s phrases=%s",
        query,
        exact_terms,
        prefix_terms,
        phrases,
    )
    return ParsedQuery(exact_terms=exact_terms, prefix_terms=prefix_terms, phrases=phrases)
