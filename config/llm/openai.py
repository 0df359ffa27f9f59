"""OpenAI LLM provider configuration settings."""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from config.retry import DEFAULT_LLM_RETRY, RetryConfig


@dataclass(frozen=True)
class OpenAISettings:
    """Configuration for OpenAI LLM access."""

    api_key: str
    model_name: str = "gpt-5-mini"
    retry_config: RetryConfig = DEFAULT_LLM_RETRY

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> "OpenAISettings":
        """Load OpenAI settings from environment variables (OPENAI_MODEL is optional)."""
        if env is None:
            env = os.environ
        key = (env.get("OPENAI_API_KEY") or "").strip()
        if not key:
            raise ValueError("OPENAI_API_KEY environment variable not found or empty")
        model = (env.get("OPENAI_MODEL") or "").strip() or OpenAISettings.model_name
        return OpenAISettings(api_key=key, model_name=model)
