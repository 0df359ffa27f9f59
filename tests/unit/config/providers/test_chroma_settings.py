"""Tests for ChromaSettings."""

import pytest

from config.providers.chroma import ChromaSettings
from config.retry import DEFAULT_VECTOR_RETRY


class TestChromaSettings:
    def test_from_env(self):
        settings = ChromaSettings.from_env({"CHROMA_URL": "http://localhost:8000/"})

        assert settings.base_url == "http://localhost:8000"
        assert settings.collection_name == "crypto_news"
        assert settings.tenant == "default_tenant"
        assert settings.database == "default_database"
        assert settings.retry_config == DEFAULT_VECTOR_RETRY

    def test_custom_collection(self):
        settings = ChromaSettings.from_env(
            {"CHROMA_URL": "http://chroma:8000", "CHROMA_COLLECTION": "alt_news"}
        )
        assert settings.collection_name == "alt_news"

    @pytest.mark.parametrize("env", [{}, {"CHROMA_URL": "   "}])
    def test_missing_url(self, env):
        with pytest.raises(ValueError, match="CHROMA_URL environment variable not found or empty"):
            ChromaSettings.from_env(env)
