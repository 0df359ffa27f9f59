import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime

from config.retry import RetryConfig

logger = logging.getLogger(__name__)


def parse_retry_after(value: str | float | int | None) -> float | None:
    """Parse a Retry-After header value (numeric seconds or HTTP-date).

    Returns seconds to wait (floored at 0.0), or None if the value is unusable.
    """
    if value is None:
        return None

    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None

    try:
        return max(0.0, float(value))
    except (TypeError, ValueError):
        # Not numeric; try the HTTP-date form below
        pass

    if not isinstance(value, str):
        return None

    try:
        retry_time = parsedate_to_datetime(value)
    except (ValueError, TypeError, AttributeError) as e:
        logger.warning(f"Invalid Retry-After header {value!r}: {e}")
        return None

    if retry_time.tzinfo is None:
        retry_time = retry_time.replace(tzinfo=UTC)
    return max(0.0, (retry_time - datetime.now(UTC)).total_seconds())


class RetryableError(Exception):
    """Transient collaborator failure (rate limit, timeout, 5xx)."""

    def __init__(self, message: str, retry_after: float | None = None) -> None:
        super().__init__(message)
        self.retry_after = retry_after


def backoff_delay(policy: RetryConfig, attempt: int, retry_after: float | None = None) -> float:
    """Delay before the next attempt: server hint if given, else base * mult**attempt ± jitter."""
    if retry_after is not None:
        return retry_after
    jittered = policy.base * (policy.mult**attempt) + random.uniform(-policy.jitter, policy.jitter)
    return max(0.1, jittered)


async def retry_and_call[T](
    op: Callable[[], Awaitable[T]],
    *,
    policy: RetryConfig,
    label: str = "call",
) -> T:
    """Run ``op`` and retry it on RetryableError according to ``policy``.

    Any other exception propagates immediately. After the last attempt the
    final RetryableError is re-raised unchanged.
    """
    if policy.max_retries < 0:
        raise ValueError("max_retries must be >= 0")
    if policy.base <= 0:
        raise ValueError("base must be > 0")
    if policy.mult < 1.0:
        raise ValueError("mult must be >= 1.0")
    if policy.jitter < 0:
        raise ValueError("jitter must be >= 0")

    attempt = 0
    while True:
        try:
            return await op()
        except RetryableError as e:
            if attempt >= policy.max_retries:
                raise
            delay = backoff_delay(policy, attempt, e.retry_after)
            logger.debug(
                f"{label} failed ({e}); retry {attempt + 1}/{policy.max_retries} in {delay:.2f}s"
            )
            await asyncio.sleep(delay)
            attempt += 1
