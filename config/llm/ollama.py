"""Ollama (local model server) provider configuration settings."""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from config.retry import DEFAULT_LLM_RETRY, RetryConfig


@dataclass(frozen=True)
class OllamaSettings:
    """Configuration for a local Ollama server.

    No API key is involved; the server URL and model names fall back to the
    Ollama defaults when the environment does not set them.
    """

    base_url: str = "http://localhost:11434"
    model_name: str = "qwen3:14b"
    embed_model_name: str = "nomic-embed-text"
    retry_config: RetryConfig = DEFAULT_LLM_RETRY

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> "OllamaSettings":
        """Load Ollama settings from environment variables."""
        if env is None:
            env = os.environ
        base_url = (env.get("OLLAMA_BASE_URL") or "").strip() or OllamaSettings.base_url
        model = (env.get("OLLAMA_MODEL") or "").strip() or OllamaSettings.model_name
        embed_model = (
            env.get("OLLAMA_EMBED_MODEL") or ""
        ).strip() or OllamaSettings.embed_model_name
        if not base_url.startswith(("http://", "https://")):
            raise ValueError(f"OLLAMA_BASE_URL must be an http(s) URL, got {base_url!r}")
        return OllamaSettings(
            base_url=base_url.rstrip("/"),
            model_name=model,
            embed_model_name=embed_model,
        )
