"""CryptoPanic news provider configuration settings."""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from config.retry import DEFAULT_NEWS_RETRY, RetryConfig


@dataclass(frozen=True)
class CryptoPanicSettings:
    """Configuration settings for CryptoPanic API integration"""

    api_key: str
    base_url: str = "https://cryptopanic.com/api/developer/v2"
    retry_config: RetryConfig = DEFAULT_NEWS_RETRY

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> "CryptoPanicSettings":
        """Load CryptoPanic settings from environment variables."""
        if env is None:
            env = os.environ
        key = (env.get("CRYPTOPANIC_API_KEY") or "").strip()
        if not key:
            raise ValueError("CRYPTOPANIC_API_KEY environment variable not found or empty")
        return CryptoPanicSettings(api_key=key)
