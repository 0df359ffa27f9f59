"""Sentiment analysis stage."""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from analysis.structured_response import parse_sentiment_judgment
from workflows.context import AnalysisContext
from workflows.errors import MissingUpstreamDataError
from workflows.stages.base import Stage, StageResult
from workflows.stages.collector import NewsCollector

logger = logging.getLogger(__name__)

EXCERPT_ARTICLES = 10

SYSTEM_INSTRUCTION = """You are a crypto market sentiment analyzer. Analyze news articles and provide:
1. Overall sentiment (bullish/bearish/neutral)
2. Fear & Greed score (0-100, where 0=extreme fear, 50=neutral, 100=extreme greed)
3. Key sentiment drivers
4. Market psychology insights

Be objective and data-driven. Focus on market impact."""

RESPONSE_SHAPE = """{
  "overallSentiment": "bullish" | "bearish" | "neutral",
  "fearGreedIndex": <number 0-100>,
  "confidence": <number 0-100>,
  "bullishPoints": ["point1", "point2", ...],
  "bearishPoints": ["point1", "point2", ...],
  "keyDrivers": ["driver1", "driver2", ...],
  "summary": "<2-3 sentence summary>"
}"""


def build_excerpt(articles: Sequence[Mapping[str, Any]], limit: int = EXCERPT_ARTICLES) -> str:
    """Numbered title + body blocks for the first ``limit`` articles."""
    return "\n\n".join(
        f"[Article {i}] {a.get('title', '')}\n{a.get('body', '')}"
        for i, a in enumerate(articles[:limit], start=1)
    )


class SentimentAnalyzer(Stage):
    """Asks the model for a structured sentiment judgment over the collected news."""

    name = "sentiment-analyzer"
    label = "Sentiment Analyzer"
    system_instruction = SYSTEM_INSTRUCTION
    failure_summary = "No news available for sentiment analysis"
    error_summary = "Failed to analyze sentiment"

    async def run(self, context: AnalysisContext) -> StageResult:
        news = context.output(NewsCollector.name) or {}
        articles = news.get("articles")
        if not isinstance(articles, Sequence) or isinstance(articles, str) or not articles:
            raise MissingUpstreamDataError(f"No news data in context for {context.subject}")

        logger.info(f"Analyzing {len(articles)} news articles for {context.subject}")
        prompt = (
            f"Analyze the market sentiment for {context.subject} based on these recent "
            f"news articles:\n\n{build_excerpt(articles)}\n\n"
            f"Provide your analysis in the following JSON format:\n{RESPONSE_SHAPE}"
        )
        reply = await self.generate(prompt)
        judgment = parse_sentiment_judgment(reply)

        payload = judgment.to_payload()
        payload["articles_analyzed"] = len(articles)
        return StageResult.success(
            f"Sentiment: {judgment.overall_sentiment.value.upper()} | "
            f"Fear/Greed: {judgment.fear_greed_index}/100. {judgment.summary}",
            payload,
        )
