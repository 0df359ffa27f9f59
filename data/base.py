from abc import ABC, abstractmethod
from collections.abc import Sequence

from data.models import NewsArticle


class DataSourceError(Exception):
    """Base exception for data source related errors."""

    pass


class DataSource(ABC):
    """Abstract base class for all remote data collaborators (news feeds, vector stores)."""

    def __init__(self, source_name: str) -> None:
        """Validate and store a human-readable provider name."""
        if source_name is None:
            raise ValueError("source_name cannot be None")
        if not isinstance(source_name, str):
            raise TypeError(f"source_name must be a string, got {type(source_name).__name__}")
        if not source_name.strip():
            raise ValueError("source_name cannot be empty or whitespace only")
        if len(source_name) > 100:
            raise ValueError(f"source_name too long: {len(source_name)} characters (max 100)")

        self.source_name = source_name.strip()

    @abstractmethod
    async def validate_connection(self) -> bool:
        """Test whether the remote service is reachable and credentials work."""


class NewsDataSource(DataSource):
    """Abstract base class for sources that return recent news for one subject."""

    @abstractmethod
    async def fetch(self, subject: str, max_count: int) -> list[NewsArticle]:
        """Return at most ``max_count`` recent articles for ``subject``, newest first.

        Notes:
            Transport failures propagate (DataSourceError / RetryableError);
            an empty list means the source had nothing to offer.
        """
        raise NotImplementedError(
            f"fetch must be implemented by subclasses (subject={subject!r}, "
            f"max_count={max_count!r})"
        )


class VectorStore(DataSource):
    """Abstract base class for similarity stores that index collected articles."""

    @abstractmethod
    async def add_batch(self, articles: Sequence[NewsArticle]) -> None:
        """Index a batch of articles; raises DataSourceError / RetryableError on failure."""
        raise NotImplementedError(
            f"add_batch must be implemented by subclasses ({len(articles)} articles)"
        )
