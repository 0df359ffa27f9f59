"""Chroma vector store configuration settings."""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from config.retry import DEFAULT_VECTOR_RETRY, RetryConfig


@dataclass(frozen=True)
class ChromaSettings:
    """Connection settings for a Chroma server reached over its HTTP API."""

    base_url: str
    collection_name: str = "crypto_news"
    tenant: str = "default_tenant"
    database: str = "default_database"
    retry_config: RetryConfig = DEFAULT_VECTOR_RETRY

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> "ChromaSettings":
        """Load Chroma settings from environment variables."""
        if env is None:
            env = os.environ
        url = (env.get("CHROMA_URL") or "").strip()
        if not url:
            raise ValueError("CHROMA_URL environment variable not found or empty")
        collection = (env.get("CHROMA_COLLECTION") or "").strip() or "crypto_news"
        return ChromaSettings(base_url=url.rstrip("/"), collection_name=collection)
