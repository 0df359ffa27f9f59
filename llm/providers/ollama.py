"""Ollama provider for locally served chat and embedding models."""

import logging

from config.llm import OllamaSettings
from data.base import DataSourceError
from llm.base import LLMError, LLMProvider
from utils.http import get_json_with_retry, post_json_with_retry
from utils.retry import RetryableError

logger = logging.getLogger(__name__)


class OllamaProvider(LLMProvider):
    """Talks to an Ollama server over its JSON HTTP API (``/api/chat``, ``/api/embeddings``)."""

    def __init__(
        self,
        settings: OllamaSettings,
        model_name: str | None = None,
        *,
        temperature: float | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.settings = settings
        self.model_name = model_name or settings.model_name
        self.temperature = temperature

    async def generate(self, prompt: str, system_instruction: str | None = None) -> str:
        """Send one non-streaming chat turn and return the assistant message text."""
        messages = []
        if system_instruction:
            messages.append({"role": "system", "content": system_instruction})
        messages.append({"role": "user", "content": prompt})

        body: dict = {"model": self.model_name, "messages": messages, "stream": False}
        options = dict(self.config.get("options") or {})
        if self.temperature is not None:
            options["temperature"] = self.temperature
        if options:
            body["options"] = options

        try:
            data = await post_json_with_retry(
                f"{self.settings.base_url}/api/chat",
                body,
                policy=self.settings.retry_config,
            )
        except DataSourceError as exc:
            raise LLMError(f"Ollama chat failed: {exc}") from exc

        message = data.get("message") if isinstance(data, dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str):
            raise LLMError("Ollama chat response has no message content")
        return content

    async def embed(self, text: str) -> list[float]:
        """Return the embedding vector for ``text`` from the configured embedding model."""
        try:
            data = await post_json_with_retry(
                f"{self.settings.base_url}/api/embeddings",
                {"model": self.settings.embed_model_name, "prompt": text},
                policy=self.settings.retry_config,
            )
        except DataSourceError as exc:
            raise LLMError(f"Ollama embedding failed: {exc}") from exc

        embedding = data.get("embedding") if isinstance(data, dict) else None
        if not isinstance(embedding, list) or not embedding:
            raise LLMError("Ollama embedding response has no vector")
        return [float(x) for x in embedding]

    async def validate_connection(self) -> bool:
        try:
            await get_json_with_retry(
                f"{self.settings.base_url}/api/tags", policy=self.settings.retry_config
            )
            return True
        except (DataSourceError, RetryableError, ValueError) as exc:
            logger.warning(f"OllamaProvider connection validation failed: {exc}")
            return False
