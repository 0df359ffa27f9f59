"""Chroma vector store reached over its v2 HTTP API."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from config.providers.chroma import ChromaSettings
from data import DataSourceError, VectorStore
from data.models import NewsArticle
from utils.http import get_json_with_retry, post_json_with_retry
from utils.retry import RetryableError

logger = logging.getLogger(__name__)

EmbedFn = Callable[[str], Awaitable[list[float]]]


def article_document(article: NewsArticle) -> str:
    """Text indexed for an article: title, blank line, body."""
    return f"{article.title}\n\n{article.body}"


class ChromaVectorStore(VectorStore):
    """
    Indexes collected articles in a Chroma collection for later retrieval.

    Embeddings are produced by ``embed`` (e.g. ``OllamaProvider.embed``); the
    collection is created on first use with cosine distance.
    """

    def __init__(
        self, settings: ChromaSettings, embed: EmbedFn, source_name: str = "Chroma"
    ) -> None:
        super().__init__(source_name)
        self.settings = settings
        self.embed = embed
        self._collection_id: str | None = None
        self._collection_lock = asyncio.Lock()

    @property
    def _database_url(self) -> str:
        s = self.settings
        return f"{s.base_url}/api/v2/tenants/{s.tenant}/databases/{s.database}"

    async def validate_connection(self) -> bool:
        try:
            await get_json_with_retry(
                f"{self.settings.base_url}/api/v2/heartbeat", policy=self.settings.retry_config
            )
            return True
        except (DataSourceError, RetryableError, ValueError, TypeError) as exc:
            logger.warning("ChromaVectorStore connection validation failed: %s", exc)
            return False

    async def _ensure_collection(self) -> str:
        """Get or create the collection once and cache its id."""
        async with self._collection_lock:
            if self._collection_id is None:
                data = await post_json_with_retry(
                    f"{self._database_url}/collections",
                    {
                        "name": self.settings.collection_name,
                        "metadata": {"hnsw:space": "cosine"},
                        "get_or_create": True,
                    },
                    policy=self.settings.retry_config,
                )
                if not isinstance(data, dict) or not data.get("id"):
                    raise DataSourceError("Chroma returned a collection without an id")
                self._collection_id = str(data["id"])
                logger.info(
                    f"Using Chroma collection {self.settings.collection_name} "
                    f"({self._collection_id})"
                )
            return self._collection_id

    async def add_batch(self, articles: Sequence[NewsArticle]) -> None:
        if not articles:
            return

        collection_id = await self._ensure_collection()
        documents = [article_document(a) for a in articles]
        embeddings = await asyncio.gather(*(self.embed(doc) for doc in documents))

        metadatas: list[dict[str, Any]] = [
            {
                "title": a.title,
                "source": a.source,
                "publishedAt": a.published.isoformat(),
                "cryptocurrency": a.subject,
            }
            for a in articles
        ]

        await post_json_with_retry(
            f"{self._database_url}/collections/{collection_id}/upsert",
            {
                "ids": [a.article_id for a in articles],
                "documents": documents,
                "metadatas": metadatas,
                "embeddings": list(embeddings),
            },
            policy=self.settings.retry_config,
        )
        logger.info(f"Indexed {len(articles)} articles in Chroma")
