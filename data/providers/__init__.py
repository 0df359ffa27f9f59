"""Public provider facades for the crypto analysis workflow."""

from data.providers import chroma, cryptopanic

__all__ = ["chroma", "cryptopanic"]
