"""Configuration settings for news and vector-store providers."""

from config.providers.chroma import ChromaSettings
from config.providers.cryptopanic import CryptoPanicSettings

__all__ = ["CryptoPanicSettings", "ChromaSettings"]
