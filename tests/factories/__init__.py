"""Shared factory helpers and collaborator stubs for tests."""

from tests.factories.models import make_article, make_articles, make_judgment
from tests.factories.stubs import (
    InMemoryGateway,
    RecordingPublisher,
    StubLLM,
    StubNews,
    StubVectorStore,
)

__all__ = [
    "make_article",
    "make_articles",
    "make_judgment",
    "InMemoryGateway",
    "RecordingPublisher",
    "StubLLM",
    "StubNews",
    "StubVectorStore",
]
