"""Action and risk rules derived from sentiment."""

import pytest

from analysis.recommendation import build_recommendation, derive_action, derive_risk_level
from data.models import Action, RiskLevel, Sentiment


@pytest.mark.parametrize(
    "sentiment, expected",
    [
        (Sentiment.BULLISH, Action.BUY),
        (Sentiment.BEARISH, Action.SELL),
        (Sentiment.NEUTRAL, Action.HOLD),
        ("bullish", Action.BUY),
        (" Bearish ", Action.SELL),
        ("sideways", Action.HOLD),
    ],
)
def test_derive_action(sentiment, expected):
    assert derive_action(sentiment) is expected


@pytest.mark.parametrize(
    "index, expected",
    [
        (0, RiskLevel.HIGH),
        (29, RiskLevel.HIGH),
        (30, RiskLevel.MEDIUM),
        (50, RiskLevel.MEDIUM),
        (70, RiskLevel.MEDIUM),
        (71, RiskLevel.HIGH),
        (100, RiskLevel.HIGH),
    ],
)
def test_derive_risk_level_boundaries(index, expected):
    assert derive_risk_level(index) is expected


def test_build_recommendation():
    rec = build_recommendation(Sentiment.BULLISH, 72, "Full report text")

    assert rec == {
        "action": "buy",
        "risk_level": "high",
        "reasoning": "Full report text",
        "time_horizon": "medium",
    }


def test_build_recommendation_neutral_defaults():
    rec = build_recommendation("neutral", 50, "")

    assert rec["action"] == "hold"
    assert rec["risk_level"] == "medium"
