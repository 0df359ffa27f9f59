"""Datetime helpers for UTC normalization and conversion."""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def normalize_to_utc(dt: datetime) -> datetime:
    """Return a timezone-aware UTC datetime (naive values are assumed to be UTC)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def parse_rfc3339(timestamp_str: str) -> datetime:
    """Parse an RFC3339/ISO 8601 timestamp (Z, offset, or naive) to UTC."""
    if not isinstance(timestamp_str, str):
        raise TypeError(f"timestamp_str must be str, got {type(timestamp_str).__name__}")

    cleaned = timestamp_str.strip()
    if cleaned.endswith("Z"):
        cleaned = cleaned[:-1] + "+00:00"
    return normalize_to_utc(datetime.fromisoformat(cleaned))
