# transcripts/services/analysis.py
"""Text analysis backends used to tokenize transcripts and query terms."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
import logging
from typing import Dict, List, Optional, Protocol, Sequence

import httpx
from httpx import AsyncClient
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from config import Settings

__all__ = [
    "Token",
    "TokenDictionary",
    "TextAnalyzer",
    "AnalysisError",
    "SearchServiceAnalyzer",
    "build_token_dictionary",
]

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Token:
    """A single analyzer token with its word ordinal and character offsets."""

    text: str
    position: int
    start_offset: int
    end_offset: int


TokenDictionary = Dict[str, List[Token]]


class AnalysisError(Exception):
    """Raised when text could not be analyzed; distinct from "no tokens"."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TextAnalyzer(Protocol):
    """Anything able to turn text into language-aware tokens."""

    async def analyze(self, text: str) -> List[Token]:
        ...


def build_token_dictionary(tokens: Sequence[Token]) -> TokenDictionary:
    """Group tokens by text, keeping every occurrence in analyzer order.

    A word may yield several tokens (``running`` gives ``running`` and
    ``run``), so one transcript position can appear under several keys.
    """

    dictionary: Dict[str, List[Token]] = defaultdict(list)
    for token in tokens:
        dictionary[token.text].append(token)
    return dict(dictionary)


class _AnalyzedToken(BaseModel):
    """Wire format of one token returned by the analyze endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    token: str
    position: Optional[int] = None
    start_offset: Optional[int] = Field(default=None, alias="startOffset")
    end_offset: Optional[int] = Field(default=None, alias="endOffset")

    def to_token(self) -> Token:
        return Token(
            text=self.token,
            position=self.position or 0,
            start_offset=self.start_offset or 0,
            end_offset=self.end_offset or 0,
        )


class _AnalyzeResponse(BaseModel):
    tokens: List[_AnalyzedToken] = Field(default_factory=list)


class SearchServiceAnalyzer:
    """Client for the search service's REST ``analyze`` endpoint."""

    def __init__(
        self,
        endpoint: str,
        api_key: str,
        *,
        index_name: str = "stories",
        analyzer: str = "en.microsoft",
        api_version: str = "2020-06-30",
        timeout: float = 30.0,
    ) -> None:
        self._endpoint = endpoint.rstrip("/")
        self._api_key = api_key
        self._index_name = index_name
        self._analyzer = analyzer
        self._api_version = api_version
        self._timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "SearchServiceAnalyzer":
        """Build an analyzer from application settings."""

        return cls(
            settings.search_endpoint,
            settings.api_key.get_secret_value(),
            index_name=settings.index_name,
            analyzer=settings.analyzer,
            api_version=settings.api_version,
            timeout=settings.request_timeout_seconds,
        )

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[AsyncClient]:
        """Yield an AsyncClient configured for the search service."""

        async with httpx.AsyncClient(
            base_url=self._endpoint,
            timeout=self._timeout,
            headers={"api-key": self._api_key},
        ) as client:
            yield client

    async def analyze(self, text: str) -> List[Token]:
        """Tokenize ``text`` with the configured language analyzer."""

        try:
            async with self._client() as client:
                response = await client.post(
                    f"/indexes/{self._index_name}/analyze",
                    params={"api-version": self._api_version},
                    json={"text": text, "analyzer": self._analyzer},
                )
                response.raise_for_status()
                payload = _AnalyzeResponse.model_validate(response.json())
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            LOGGER.error("Search service returned %s while analyzing text: %s", status, exc)
            raise AnalysisError(
                f"Text analysis failed with status {status}", status_code=status
            ) from exc
        except httpx.HTTPError as exc:
            LOGGER.error("Search service transport error while analyzing text: %s", exc)
            raise AnalysisError("Search service could not be reached") from exc
        except (ValidationError, ValueError) as exc:
            LOGGER.error("Search service returned an unreadable analysis payload: %s", exc)
            raise AnalysisError("Search service returned a malformed analysis") from exc

        tokens = [item.to_token() for item in payload.tokens]
        LOGGER.debug("Analyzer produced %d tokens for %d characters", len(tokens), len(text))
        return tokens
