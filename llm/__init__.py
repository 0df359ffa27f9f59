"""LLM providers facade for the crypto analysis workflow."""

from llm.base import LLMError, LLMProvider
from llm.providers.gemini import GeminiProvider
from llm.providers.ollama import OllamaProvider
from llm.providers.openai import OpenAIProvider

__all__ = ["LLMProvider", "LLMError", "OpenAIProvider", "GeminiProvider", "OllamaProvider"]
