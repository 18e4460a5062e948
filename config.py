# config.py
"""Configuration helpers for the archive transcript highlighter."""

from __future__ import annotations

from typing import Optional

from pydantic import AnyHttpUrl, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Load search-service configuration from environment variables and .env files."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="ARCHIVE_SEARCH_",
        extra="ignore",
    )

    service_name: str = Field(
        default="",
        description="Name of the managed search service hosting the story index.",
    )
    endpoint: Optional[AnyHttpUrl] = Field(
        default=None,
        description="Explicit base URL of the search service; overrides service_name.",
    )
    api_key: SecretStr = Field(
        default=SecretStr(""),
        description="Admin or query key sent with analyze requests.",
    )
    index_name: str = Field(
        default="stories",
        description="Index whose analyzers tokenize transcripts.",
    )
    analyzer: str = Field(
        default="en.microsoft",
        description="Language analyzer used for transcript and query tokenization.",
    )
    api_version: str = Field(
        default="2020-06-30",
        description="REST API version of the search service.",
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        ge=1.0,
        description="HTTP timeout for analyze requests in seconds.",
    )

    @property
    def search_endpoint(self) -> str:
        """Base URL of the search service without a trailing slash."""

        if self.endpoint is not None:
            return str(self.endpoint).rstrip("/")
        return f"https://{self.service_name}.search.windows.net"
