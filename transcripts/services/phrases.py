# transcripts/services/phrases.py
"""Literal phrase matching against raw transcript text."""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import List, Pattern

__all__ = ["PhraseMatch", "build_phrase_pattern", "find_phrase_matches"]


@dataclass(frozen=True, slots=True)
class PhraseMatch:
    """A contiguous phrase occurrence; ``end_offset`` is inclusive."""

    text: str
    start_offset: int
    end_offset: int


def build_phrase_pattern(phrase: str) -> Pattern[str]:
    """Compile a case-insensitive pattern for the words of ``phrase`` in order.

    Words are separated by one or more non-word characters; nothing is
    required after the last word.
    """

    words = [re.escape(word) for word in phrase.split(" ") if word]
    return re.compile(r"\W+".join(words), re.IGNORECASE)


def find_phrase_matches(phrase: str, text: str) -> List[PhraseMatch]:
    """Return every occurrence of ``phrase`` in ``text``, in transcript order."""

    if not phrase.strip() or not text:
        return []

    pattern = build_phrase_pattern(phrase)
    return [
        PhraseMatch(
            text=match.group(0),
            start_offset=match.start(),
            end_offset=match.start() + len(match.group(0)) - 1,
        )
        for match in pattern.finditer(text)
    ]
