"""CryptoPanic provider package."""

from data.providers.cryptopanic.cryptopanic_client import CryptoPanicClient
from data.providers.cryptopanic.cryptopanic_news import CryptoPanicNewsProvider

__all__ = ["CryptoPanicClient", "CryptoPanicNewsProvider"]
