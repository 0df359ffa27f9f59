"""Crypto news provider backed by CryptoPanic's /posts endpoint."""

import logging
from typing import Any

from config.providers.cryptopanic import CryptoPanicSettings
from data import DataSourceError, NewsDataSource
from data.models import NewsArticle
from data.providers.cryptopanic.cryptopanic_client import CryptoPanicClient
from utils.datetime_utils import parse_rfc3339

logger = logging.getLogger(__name__)

ARTICLE_URL = "https://cryptopanic.com/news/{slug}"


class CryptoPanicNewsProvider(NewsDataSource):
    """Fetches recent news posts for one currency from CryptoPanic."""

    def __init__(self, settings: CryptoPanicSettings, source_name: str = "CryptoPanic") -> None:
        super().__init__(source_name)
        self.settings = settings
        self.client = CryptoPanicClient(settings)

    async def validate_connection(self) -> bool:
        return await self.client.validate_connection()

    async def fetch(self, subject: str, max_count: int) -> list[NewsArticle]:
        if max_count < 1:
            raise ValueError("max_count must be >= 1")
        subject = subject.strip().upper()
        if not subject:
            raise ValueError("subject cannot be empty")

        data = await self.client.get("/posts/", {"currencies": subject, "kind": "news"})

        if not isinstance(data, dict) or not isinstance(data.get("results"), list):
            raise DataSourceError(
                f"CryptoPanic API returned {type(data).__name__} without a results list"
            )

        articles: list[NewsArticle] = []
        for post in data["results"]:
            if len(articles) >= max_count:
                break
            try:
                article = self._parse_post(post, subject)
            except (ValueError, TypeError, KeyError, AttributeError) as exc:
                logger.debug(f"Failed to parse CryptoPanic post for {subject}: {exc}")
                continue
            if article:
                articles.append(article)

        logger.info(f"Fetched {len(articles)} news articles for {subject} from CryptoPanic")
        return articles

    def _parse_post(self, post: dict[str, Any], subject: str) -> NewsArticle | None:
        # Only news posts with a description carry enough text to analyze
        if post.get("kind") != "news":
            return None
        description = (post.get("description") or "").strip()
        title = (post.get("title") or "").strip()
        if not description or not title:
            return None

        slug = (post.get("slug") or "").strip()
        return NewsArticle(
            article_id=f"cryptopanic-{post['id']}",
            title=title,
            body=description,
            source=self.source_name,
            published=parse_rfc3339(post["published_at"]),
            subject=subject,
            url=ARTICLE_URL.format(slug=slug) if slug else None,
        )
