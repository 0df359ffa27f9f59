"""Common fixtures for provider tests."""

import pytest

from config.providers.chroma import ChromaSettings
from config.providers.cryptopanic import CryptoPanicSettings
from config.retry import RetryConfig

FAST = RetryConfig(timeout_seconds=5, max_retries=0)


@pytest.fixture
def cryptopanic_settings():
    return CryptoPanicSettings(api_key="test_key", retry_config=FAST)


@pytest.fixture
def chroma_settings():
    return ChromaSettings(base_url="http://chroma:8000", retry_config=FAST)

