from collections.abc import Mapping
from typing import Any

import httpx

from config.retry import RetryConfig
from data.base import DataSourceError
from utils.retry import RetryableError, parse_retry_after, retry_and_call


def _check_status(url: str, response: httpx.Response) -> Any:
    """Map an HTTP response to parsed JSON, DataSourceError, or RetryableError."""
    if response.status_code in (200, 201):
        try:
            return response.json()
        except ValueError as exc:
            # Malformed body is a server/data problem, retrying won't help
            raise DataSourceError(f"Invalid JSON response from {url}: {exc}") from exc

    if response.status_code == 204:
        return None

    if response.status_code in (401, 403):
        raise DataSourceError(f"Authentication failed (status {response.status_code})")

    if response.status_code in (408, 429) or response.status_code >= 500:
        retry_after = parse_retry_after(response.headers.get("Retry-After"))
        raise RetryableError(
            f"Transient error (status {response.status_code})",
            retry_after=retry_after,
        )

    if 400 <= response.status_code < 500:
        raise DataSourceError(f"Client error (status {response.status_code})")

    raise DataSourceError(f"Unexpected HTTP status: {response.status_code}")


async def request_json_with_retry(
    method: str,
    url: str,
    *,
    policy: RetryConfig,
    params: Mapping[str, Any] | None = None,
    headers: Mapping[str, str] | None = None,
    json_body: Any = None,
) -> Any:
    """Async HTTP request with retries and JSON parsing.

    Notes:
        Handles 200/201/204, 4xx/5xx, Retry-After, and network timeouts.
        4xx (except 408/429) raise DataSourceError immediately; 408, 429, 5xx
        and transport failures are retried per ``policy``.
    """
    if method not in ("GET", "POST"):
        raise ValueError(f"unsupported method: {method!r}")
    if not isinstance(url, str) or not url.strip():
        raise ValueError("url must be a non-empty string")
    if policy.timeout_seconds <= 0:
        raise ValueError("timeout must be > 0")

    async def _op() -> Any:
        """Single HTTP attempt; retry_and_call re-invokes it on RetryableError."""
        try:
            async with httpx.AsyncClient() as client:
                if method == "GET":
                    response = await client.get(
                        url, params=params, headers=headers, timeout=policy.timeout_seconds
                    )
                else:
                    response = await client.post(
                        url,
                        params=params,
                        headers=headers,
                        json=json_body,
                        timeout=policy.timeout_seconds,
                    )
        except httpx.TimeoutException as exc:
            raise RetryableError("Network/timeout", retry_after=None) from exc
        except httpx.TransportError as exc:
            raise RetryableError(f"Network/transport error: {exc}", retry_after=None) from exc
        except httpx.HTTPError as exc:
            raise DataSourceError(f"Unexpected HTTP error during request: {exc}") from exc

        return _check_status(url, response)

    return await retry_and_call(_op, policy=policy, label=f"{method} {url}")


async def get_json_with_retry(
    url: str,
    *,
    policy: RetryConfig,
    params: Mapping[str, Any] | None = None,
    headers: Mapping[str, str] | None = None,
) -> Any:
    """GET ``url`` and return the decoded JSON body."""
    return await request_json_with_retry("GET", url, policy=policy, params=params, headers=headers)


async def post_json_with_retry(
    url: str,
    json_body: Any,
    *,
    policy: RetryConfig,
    headers: Mapping[str, str] | None = None,
) -> Any:
    """POST a JSON body to ``url`` and return the decoded JSON response."""
    return await request_json_with_retry(
        "POST", url, policy=policy, headers=headers, json_body=json_body
    )
