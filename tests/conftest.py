"""Shared fixtures for transcript highlighting tests."""

from __future__ import annotations

import re
from typing import Callable, Dict, List, Optional, Sequence

import pytest

from transcripts.services.analysis import AnalysisError, Token

_WORD = re.compile(r"\w+")


class FakeAnalyzer:
    """Deterministic stand-in for the search service analyzer.

    Lowercases each word and emits it at its word ordinal with exclusive end
    offsets, like the real service. ``expansions`` adds extra tokens at the
    same position, mimicking stemming.
    """

    def __init__(
        self,
        expansions: Optional[Dict[str, Sequence[str]]] = None,
        *,
        fail: bool = False,
    ) -> None:
        self.expansions = expansions or {}
        self.fail = fail
        self.calls: List[str] = []

    async def analyze(self, text: str) -> List[Token]:
        self.calls.append(text)
        if self.fail:
            raise AnalysisError("analyzer unavailable", status_code=503)

        tokens: List[Token] = []
        for position, match in enumerate(_WORD.finditer(text)):
            word = match.group(0).lower()
            for form in self.expansions.get(word, [word]):
                tokens.append(Token(form, position, match.start(), match.end()))
        return tokens


@pytest.fixture
def analyzer() -> FakeAnalyzer:
    return FakeAnalyzer()


@pytest.fixture
def make_analyzer() -> Callable[..., FakeAnalyzer]:
    return FakeAnalyzer
