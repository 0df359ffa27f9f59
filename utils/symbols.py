"""
Helpers for parsing crypto asset symbols.

Notes:
    Symbols are short alphanumeric tickers (BTC, ETH, 1INCH). Input is
    trimmed and upper-cased before validation.
"""

import logging
import re
from collections.abc import Iterable

logger = logging.getLogger(__name__)

_SYMBOL_PATTERN = re.compile(r"[A-Z0-9]{1,10}")


def is_valid_symbol(symbol: str) -> bool:
    """Return True if symbol looks like a crypto ticker (1-10 letters/digits)."""
    return bool(_SYMBOL_PATTERN.fullmatch(symbol))


def normalize_symbol(symbol: str) -> str:
    """Trim and upper-case one symbol, raising ValueError when it is unusable."""
    if not isinstance(symbol, str):
        raise TypeError(f"symbol must be str, got {type(symbol).__name__}")
    cleaned = symbol.strip().upper()
    if not cleaned:
        raise ValueError("symbol cannot be empty")
    if not is_valid_symbol(cleaned):
        raise ValueError(f"invalid crypto symbol: {symbol!r}")
    return cleaned


def parse_symbols(raw: Iterable[str] | str | None) -> list[str]:
    """Parse symbols from a comma-separated string or an iterable of tokens.

    Deduplicates while preserving order; invalid tokens are logged and dropped.
    """
    if not raw:
        return []

    tokens = raw.split(",") if isinstance(raw, str) else list(raw)

    out: list[str] = []
    seen: set[str] = set()
    for token in tokens:
        if not isinstance(token, str) or not token.strip():
            continue
        try:
            sym = normalize_symbol(token)
        except ValueError:
            logger.debug("Unexpected symbol entry format: %s", token)
            continue
        if sym in seen:
            continue
        out.append(sym)
        seen.add(sym)

    return out
