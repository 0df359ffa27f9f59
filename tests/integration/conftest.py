"""Shared pytest configuration for integration tests."""

import pytest
from dotenv import load_dotenv

from config.llm import GeminiSettings, OllamaSettings, OpenAISettings
from config.providers import CryptoPanicSettings

load_dotenv(override=True)


@pytest.fixture
def cryptopanic_settings() -> CryptoPanicSettings:
    try:
        return CryptoPanicSettings.from_env()
    except ValueError as exc:
        pytest.skip(f"CRYPTOPANIC settings unavailable: {exc}")


@pytest.fixture
def openai_settings() -> OpenAISettings:
    try:
        return OpenAISettings.from_env()
    except ValueError as exc:
        pytest.skip(f"OPENAI settings unavailable: {exc}")


@pytest.fixture
def gemini_settings() -> GeminiSettings:
    try:
        return GeminiSettings.from_env()
    except ValueError as exc:
        pytest.skip(f"GEMINI settings unavailable: {exc}")


@pytest.fixture
def ollama_settings() -> OllamaSettings:
    try:
        return OllamaSettings.from_env()
    except ValueError as exc:
        pytest.skip(f"OLLAMA settings unavailable: {exc}")
