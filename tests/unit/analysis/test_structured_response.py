"""Extraction and normalisation of JSON embedded in model replies."""

import pytest

from analysis.structured_response import (
    extract_json_object,
    judgment_from_mapping,
    parse_sentiment_judgment,
)
from data.models import Sentiment
from workflows.errors import MalformedModelOutputError

FULL_REPLY = """Here is my analysis:
```json
{
  "overallSentiment": "bullish",
  "fearGreedIndex": 72,
  "confidence": 81,
  "bullishPoints": ["ETF inflows", "Halving narrative"],
  "bearishPoints": ["Regulatory noise"],
  "keyDrivers": ["ETF"],
  "summary": "Momentum is positive."
}
```
Let me know if you need more."""


class TestExtractJsonObject:
    def test_object_wrapped_in_prose(self):
        obj = extract_json_object(FULL_REPLY)

        assert obj["overallSentiment"] == "bullish"
        assert obj["fearGreedIndex"] == 72

    def test_skips_braces_that_do_not_decode(self):
        text = 'Scores use {curly} notes. {"overallSentiment": "bearish"}'

        assert extract_json_object(text) == {"overallSentiment": "bearish"}

    def test_first_object_wins(self):
        assert extract_json_object('{"a": 1} and {"b": 2}') == {"a": 1}

    @pytest.mark.parametrize("text", ["no json here", "", '{"unterminated": 1', "[1, 2, 3]"])
    def test_no_object_raises(self, text):
        with pytest.raises(MalformedModelOutputError):
            extract_json_object(text)

    def test_non_text_rejected(self):
        with pytest.raises(MalformedModelOutputError, match="Expected text"):
            extract_json_object(None)  # type: ignore[arg-type]


class TestJudgmentFromMapping:
    def test_camel_case_keys(self):
        judgment = judgment_from_mapping(extract_json_object(FULL_REPLY))

        assert judgment.overall_sentiment is Sentiment.BULLISH
        assert judgment.fear_greed_index == 72
        assert judgment.confidence == 81
        assert judgment.bullish_points == ("ETF inflows", "Halving narrative")
        assert judgment.bearish_points == ("Regulatory noise",)
        assert judgment.key_drivers == ("ETF",)
        assert judgment.summary == "Momentum is positive."

    def test_snake_case_keys(self):
        judgment = judgment_from_mapping(
            {"overall_sentiment": "BEARISH", "fear_greed_index": 20, "key_drivers": ["FUD"]}
        )

        assert judgment.overall_sentiment is Sentiment.BEARISH
        assert judgment.fear_greed_index == 20
        assert judgment.key_drivers == ("FUD",)

    @pytest.mark.parametrize(
        "raw, expected",
        [
            (150, 100),
            (-5, 0),
            (64.6, 65),
            ("42", 42),
            ("high", 50),
            (True, 50),
            (None, 50),
            (float("nan"), 50),
        ],
    )
    def test_scores_normalised(self, raw, expected):
        judgment = judgment_from_mapping({"fearGreedIndex": raw, "confidence": raw})

        assert judgment.fear_greed_index == expected
        assert judgment.confidence == expected

    def test_unknown_label_and_bad_lists_default(self):
        judgment = judgment_from_mapping(
            {"overallSentiment": "euphoric", "bullishPoints": "not a list", "summary": 12}
        )

        assert judgment.overall_sentiment is Sentiment.NEUTRAL
        assert judgment.bullish_points == ()
        assert judgment.summary == ""

    def test_blank_points_dropped(self):
        judgment = judgment_from_mapping({"bearishPoints": [" ", "Outflows ", 3]})

        assert judgment.bearish_points == ("Outflows", "3")


class TestParseSentimentJudgment:
    def test_parses_embedded_object(self):
        reply = 'bullish outlook {"overallSentiment":"bullish","fearGreedIndex":72}'

        judgment = parse_sentiment_judgment(reply)

        assert judgment.overall_sentiment is Sentiment.BULLISH
        assert judgment.fear_greed_index == 72
        assert judgment.confidence == 50

    def test_stray_braces_before_object_do_not_force_fallback(self):
        reply = (
            "Signals {mixed, see below}. "
            '{"overallSentiment":"bearish","fearGreedIndex":22,"summary":"Sellers lead."}'
        )

        judgment = parse_sentiment_judgment(reply)

        assert judgment.overall_sentiment is Sentiment.BEARISH
        assert judgment.fear_greed_index == 22
        assert judgment.summary == "Sellers lead."

    def test_neutral_fallback_without_braces(self):
        reply = "The market looks calm. " * 20

        judgment = parse_sentiment_judgment(reply)

        assert judgment.overall_sentiment is Sentiment.NEUTRAL
        assert judgment.fear_greed_index == 50
        assert judgment.confidence == 50
        assert judgment.bullish_points == ()
        assert judgment.summary == reply[:200]

    def test_short_reply_kept_whole(self):
        assert parse_sentiment_judgment("unsure").summary == "unsure"
