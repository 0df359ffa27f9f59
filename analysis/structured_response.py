"""
Parsing of free-text model replies that embed one JSON object.

Models are asked for a fixed JSON shape but often wrap it in prose or
markdown fences. ``extract_json_object`` finds the first well-formed object;
``parse_sentiment_judgment`` turns a reply into a ``SentimentJudgment`` and
falls back to a neutral record when nothing usable is found.
"""

import json
import logging
import math
from collections.abc import Mapping
from typing import Any

from data.models import Sentiment, SentimentJudgment
from workflows.errors import MalformedModelOutputError

logger = logging.getLogger(__name__)

FALLBACK_SUMMARY_CHARS = 200
NEUTRAL_SCORE = 50

_decoder = json.JSONDecoder()


def extract_json_object(text: str) -> dict[str, Any]:
    """
    Return the first JSON object embedded in ``text``.

    Every ``{`` is tried as a starting point in order; the first position that
    decodes to a dict wins. Raises MalformedModelOutputError when none does.
    """
    if not isinstance(text, str):
        raise MalformedModelOutputError(f"Expected text, got {type(text).__name__}")

    start = text.find("{")
    while start != -1:
        try:
            value, _ = _decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            value = None
        if isinstance(value, dict):
            return value
        start = text.find("{", start + 1)

    raise MalformedModelOutputError("No JSON object found in model reply")


def _pick(obj: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in obj:
            return obj[key]
    return None


def _score(value: Any) -> int:
    """Coerce a 0-100 score; non-numeric becomes 50, numbers are clamped."""
    if isinstance(value, bool):
        return NEUTRAL_SCORE
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return NEUTRAL_SCORE
    if not isinstance(value, int | float) or not math.isfinite(value):
        return NEUTRAL_SCORE
    return max(0, min(100, int(round(value))))


def _label(value: Any) -> Sentiment:
    if isinstance(value, str):
        try:
            return Sentiment(value.strip().lower())
        except ValueError:
            pass
    return Sentiment.NEUTRAL


def _points(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(str(item).strip() for item in value if str(item).strip())


def judgment_from_mapping(obj: Mapping[str, Any]) -> SentimentJudgment:
    """Build a judgment from a decoded object, normalising each field on its own."""
    summary = _pick(obj, "summary")
    return SentimentJudgment(
        overall_sentiment=_label(_pick(obj, "overallSentiment", "overall_sentiment")),
        fear_greed_index=_score(_pick(obj, "fearGreedIndex", "fear_greed_index")),
        confidence=_score(_pick(obj, "confidence")),
        bullish_points=_points(_pick(obj, "bullishPoints", "bullish_points")),
        bearish_points=_points(_pick(obj, "bearishPoints", "bearish_points")),
        key_drivers=_points(_pick(obj, "keyDrivers", "key_drivers")),
        summary=summary.strip() if isinstance(summary, str) else "",
    )


def parse_sentiment_judgment(text: str) -> SentimentJudgment:
    """
    Parse a sentiment reply, never raising for malformed content.

    Returns:
        The parsed judgment, or neutral/50/50 with empty lists and the first
        200 characters of the reply as summary when no JSON object is found.
    """
    try:
        obj = extract_json_object(text)
    except MalformedModelOutputError as exc:
        logger.info(f"Sentiment reply not parseable, using neutral fallback: {exc}")
        raw = text if isinstance(text, str) else ""
        return SentimentJudgment.neutral(summary=raw[:FALLBACK_SUMMARY_CHARS])
    return judgment_from_mapping(obj)
