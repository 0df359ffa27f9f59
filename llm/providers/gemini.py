"""Google Gemini provider via the google-genai SDK."""

import logging
from collections.abc import Mapping
from typing import Any, cast

from google import genai
from google.genai import types
from google.genai.errors import APIError, ServerError

from config.llm import GeminiSettings
from llm.base import LLMError, LLMProvider
from utils.retry import RetryableError, parse_retry_after, retry_and_call

logger = logging.getLogger(__name__)

_RETRYABLE_CODES = {408, 429, 500, 502, 503, 504}


class GeminiProvider(LLMProvider):
    def __init__(
        self,
        settings: GeminiSettings,
        model_name: str | None = None,
        *,
        temperature: float | None = None,
        thinking_config: Mapping[str, Any] | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.settings = settings
        self.model_name = model_name or settings.model_name
        self.temperature = temperature
        # Gemini rejects thinking budgets below 128 tokens
        budget_key = "thinking_budget"
        cfg = dict(thinking_config) if thinking_config is not None else {budget_key: 128}
        if isinstance(cfg.get(budget_key), int):
            cfg[budget_key] = max(128, cfg[budget_key])
        self.thinking_config = cfg
        self.client = genai.Client(
            api_key=settings.api_key,
            http_options=types.HttpOptions(timeout=settings.retry_config.timeout_seconds * 1000),
        )

    async def generate(self, prompt: str, system_instruction: str | None = None) -> str:
        """Generate a text response from Gemini for the given prompt."""
        args: dict[str, Any] = {"candidate_count": 1, **self.config}

        if system_instruction:
            args["system_instruction"] = system_instruction

        if self.temperature is not None:
            args["temperature"] = self.temperature

        if self.thinking_config:
            thinking_ctor = cast(Any, types.ThinkingConfig)
            args["thinking_config"] = thinking_ctor(**self.thinking_config)

        config = types.GenerateContentConfig(**args)

        async def _attempt() -> str:
            try:
                resp = await self.client.aio.models.generate_content(
                    model=self.model_name, contents=prompt, config=config
                )
            except (APIError, ValueError, TypeError, RuntimeError) as exc:
                raise self._classify_gemini_exception(exc) from exc

            if not resp.candidates:
                feedback = getattr(resp, "prompt_feedback", None)
                suffix = f" - feedback: {feedback}" if feedback else ""
                raise LLMError(f"No candidates in response{suffix}")

            content = getattr(resp.candidates[0], "content", None)
            parts = getattr(content, "parts", None) or []
            return "\n".join(p.text for p in parts if getattr(p, "text", None)).strip()

        return await retry_and_call(
            _attempt, policy=self.settings.retry_config, label=f"gemini {self.model_name}"
        )

    def _classify_gemini_exception(self, e: Exception) -> Exception:
        """Map Gemini SDK exceptions to RetryableError or LLMError."""
        if isinstance(e, ServerError):
            return RetryableError(f"Server error: {e}")

        if isinstance(e, APIError):
            code = getattr(e, "code", None)
            if code in _RETRYABLE_CODES:
                retry_after = None
                headers = getattr(getattr(e, "response", None), "headers", None)
                if headers:
                    retry_after = parse_retry_after(headers.get("retry-after"))
                return RetryableError(f"Transient error ({code}): {e}", retry_after=retry_after)
            labels = {
                400: "Invalid request",
                401: "Authentication failed",
                403: "Permission denied",
                404: "Resource not found",
            }
            return LLMError(f"{labels.get(code, f'API error ({code})')}: {e}")

        message = str(e).lower()
        if "timeout" in message or "timed out" in message:
            return RetryableError(f"Request timeout: {e}")
        if "connection" in message:
            return RetryableError(f"Connection error: {e}")
        return LLMError(f"Unexpected error: {e}")

    async def validate_connection(self) -> bool:
        """Return True when Gemini API responds to models.list; False on failure."""
        try:
            await self.client.aio.models.list()
            return True
        except (APIError, RetryableError, ValueError, TypeError, RuntimeError) as exc:
            logger.warning(f"GeminiProvider connection validation failed: {exc}")
            return False
