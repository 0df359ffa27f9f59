"""Chroma vector store package."""

from data.providers.chroma.chroma_store import ChromaVectorStore

__all__ = ["ChromaVectorStore"]
