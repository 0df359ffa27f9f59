"""Rules that turn a sentiment judgment into a trading recommendation."""

from typing import Any

from data.models import Action, RiskLevel, Sentiment

# Index values strictly outside [30, 70] count as extreme sentiment.
EXTREME_FEAR_BELOW = 30
EXTREME_GREED_ABOVE = 70
TIME_HORIZON = "medium"

_ACTIONS = {
    Sentiment.BULLISH: Action.BUY,
    Sentiment.BEARISH: Action.SELL,
    Sentiment.NEUTRAL: Action.HOLD,
}


def derive_action(sentiment: Sentiment | str) -> Action:
    """bullish -> buy, bearish -> sell, anything else -> hold."""
    if isinstance(sentiment, str):
        try:
            sentiment = Sentiment(sentiment.strip().lower())
        except ValueError:
            return Action.HOLD
    return _ACTIONS.get(sentiment, Action.HOLD)


def derive_risk_level(fear_greed_index: int) -> RiskLevel:
    """High risk at either extreme of the fear/greed scale, medium otherwise."""
    if fear_greed_index < EXTREME_FEAR_BELOW or fear_greed_index > EXTREME_GREED_ABOVE:
        return RiskLevel.HIGH
    return RiskLevel.MEDIUM


def build_recommendation(
    sentiment: Sentiment | str, fear_greed_index: int, reasoning: str
) -> dict[str, Any]:
    """JSON-ready recommendation section of a report."""
    return {
        "action": derive_action(sentiment).value,
        "risk_level": derive_risk_level(fear_greed_index).value,
        "reasoning": reasoning,
        "time_horizon": TIME_HORIZON,
    }
