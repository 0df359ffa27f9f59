"""Live integration tests for the CryptoPanic news provider using the real API."""

from datetime import UTC

import pytest

from data.providers.cryptopanic import CryptoPanicNewsProvider

pytestmark = [pytest.mark.network, pytest.mark.asyncio]


async def test_live_connection(cryptopanic_settings):
    provider = CryptoPanicNewsProvider(cryptopanic_settings)

    assert await provider.validate_connection() is True


async def test_live_news_fetch(cryptopanic_settings):
    """BTC nearly always has recent posts; validate structure of whatever comes back"""
    provider = CryptoPanicNewsProvider(cryptopanic_settings)

    articles = await provider.fetch("BTC", 5)

    assert len(articles) <= 5
    for article in articles:
        assert article.subject == "BTC"
        assert article.article_id.startswith("cryptopanic-")
        assert article.title
        assert article.published.tzinfo == UTC
