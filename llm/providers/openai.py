"""OpenAI Responses API provider."""

import logging
from collections.abc import Mapping
from typing import Any

from openai import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AsyncOpenAI,
    ConflictError,
    RateLimitError,
)

from config.llm import OpenAISettings
from llm.base import LLMError, LLMProvider
from utils.retry import RetryableError, parse_retry_after, retry_and_call

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    def __init__(
        self,
        settings: OpenAISettings,
        model_name: str | None = None,
        *,
        temperature: float | None = None,
        reasoning: Mapping[str, Any] | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.settings = settings
        self.model_name = model_name or settings.model_name
        self.temperature = temperature
        self.reasoning = reasoning if reasoning is not None else {"effort": "low"}
        self.client = AsyncOpenAI(
            api_key=settings.api_key, max_retries=0, timeout=settings.retry_config.timeout_seconds
        )

    async def generate(self, prompt: str, system_instruction: str | None = None) -> str:
        """Generate a text response from OpenAI for the given prompt."""
        args = {"model": self.model_name, "input": prompt, **self.config}

        if system_instruction:
            args["instructions"] = system_instruction

        if self.temperature is not None:
            args["temperature"] = self.temperature

        if self.reasoning is not None:
            args["reasoning"] = self.reasoning

        async def _attempt() -> str:
            """Single API call attempt with error mapping to RetryableError."""
            try:
                resp = await self.client.responses.create(**args)
                return resp.output_text
            except (
                APIConnectionError,
                APIStatusError,
                APITimeoutError,
                ValueError,
                TypeError,
                RuntimeError,
            ) as exc:
                raise self._classify_openai_exception(exc) from exc

        return await retry_and_call(
            _attempt, policy=self.settings.retry_config, label=f"openai {self.model_name}"
        )

    def _classify_openai_exception(self, e: Exception) -> Exception:
        """Map OpenAI SDK exceptions to RetryableError (transient) or LLMError (permanent)."""
        if isinstance(e, (APITimeoutError, APIConnectionError)):
            return RetryableError(f"OpenAI unreachable: {e}")

        if isinstance(e, APIStatusError):
            code = getattr(e, "status_code", None)
            if isinstance(e, RateLimitError) or code == 429:
                headers = getattr(getattr(e, "response", None), "headers", None)
                retry_after = parse_retry_after(headers.get("retry-after")) if headers else None
                return RetryableError(f"Rate limited: {e}", retry_after=retry_after)
            if isinstance(e, ConflictError) or (isinstance(code, int) and code >= 500):
                return RetryableError(f"Server error ({code}): {e}")

            labels = {
                400: "Invalid request",
                401: "Authentication failed",
                403: "Permission denied",
                404: "Resource not found",
                422: "Unprocessable entity",
            }
            label = labels.get(code if isinstance(code, int) else -1, f"API error ({code})")
            return LLMError(f"{label}: {e}")

        return LLMError(f"Unexpected error: {e}")

    async def validate_connection(self) -> bool:
        """Return True when OpenAI models.list succeeds; False when API errors."""
        try:
            await self.client.models.list()
            return True
        except (
            APIConnectionError,
            APIStatusError,
            APITimeoutError,
            ValueError,
            TypeError,
            RuntimeError,
        ) as exc:
            logger.warning(f"OpenAIProvider connection validation failed: {exc}")
            return False
