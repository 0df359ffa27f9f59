"""Base interfaces and errors for LLM providers."""

from abc import ABC, abstractmethod


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    def __init__(self, **kwargs) -> None:
        """Initialize provider with arbitrary config passed to SDK calls."""
        self.config = kwargs

    @property
    def name(self) -> str:
        """Human-readable provider/model label for logs."""
        model = getattr(self, "model_name", None)
        base = self.__class__.__name__
        return f"{base}({model})" if model else base

    @abstractmethod
    async def generate(self, prompt: str, system_instruction: str | None = None) -> str:
        """Generate a text completion for ``prompt`` under an optional system instruction."""
        raise NotImplementedError(
            f"generate() not implemented for prompt={prompt!r}"
        )  # pragma: no cover

    @abstractmethod
    async def validate_connection(self) -> bool:
        """Test if the LLM provider is reachable and credentials work."""
        raise NotImplementedError("validate_connection() must be implemented")  # pragma: no cover


class LLMError(Exception):
    """Non-retryable LLM provider error (auth failures, invalid requests, etc.)"""

    pass
