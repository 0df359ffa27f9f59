"""Configuration settings for LLM providers."""

from config.llm.gemini import GeminiSettings
from config.llm.ollama import OllamaSettings
from config.llm.openai import OpenAISettings

__all__ = ["OpenAISettings", "GeminiSettings", "OllamaSettings"]
