"""Gemini LLM provider configuration settings."""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from config.retry import DEFAULT_LLM_RETRY, RetryConfig


@dataclass(frozen=True)
class GeminiSettings:
    """Configuration for Gemini LLM access."""

    api_key: str
    model_name: str = "gemini-2.5-flash"
    retry_config: RetryConfig = DEFAULT_LLM_RETRY

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> "GeminiSettings":
        """Load Gemini settings from environment variables (GEMINI_MODEL is optional)."""
        if env is None:
            env = os.environ
        key = (env.get("GEMINI_API_KEY") or "").strip()
        if not key:
            raise ValueError("GEMINI_API_KEY environment variable not found or empty")
        model = (env.get("GEMINI_MODEL") or "").strip() or GeminiSettings.model_name
        return GeminiSettings(api_key=key, model_name=model)
