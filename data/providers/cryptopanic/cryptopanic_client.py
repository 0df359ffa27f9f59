"""CryptoPanic API client wrapper."""

import logging
from typing import Any

from config.providers.cryptopanic import CryptoPanicSettings
from data import DataSourceError
from utils.http import get_json_with_retry
from utils.retry import RetryableError

logger = logging.getLogger(__name__)


class CryptoPanicClient:
    """Minimal async HTTP client wrapper for CryptoPanic API calls."""

    def __init__(self, settings: CryptoPanicSettings) -> None:
        self.settings = settings

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Perform an authenticated GET request to the CryptoPanic API."""
        url = f"{self.settings.base_url}{path}"
        params = {**(params or {}), "auth_token": self.settings.api_key}

        return await get_json_with_retry(url, params=params, policy=self.settings.retry_config)

    async def validate_connection(self) -> bool:
        """Validate API connection with a single BTC posts request."""
        try:
            await self.get("/posts/", {"currencies": "BTC"})
            return True
        except (DataSourceError, RetryableError, ValueError, TypeError) as exc:
            logger.warning("CryptoPanicClient connection validation failed: %s", exc)
            return False
