"""Report writing stage."""

import logging
from collections.abc import Mapping
from typing import Any

from workflows.context import AnalysisContext
from workflows.stages.analyzer import SentimentAnalyzer
from workflows.stages.base import Stage, StageResult
from workflows.stages.collector import NewsCollector

logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = """You are a professional crypto market analyst and report writer.
Generate comprehensive, well-structured analysis reports that combine news, sentiment, and technical insights.
Write in a clear, professional tone. Include:
- Executive Summary
- Market Analysis
- Sentiment Overview
- Key Findings
- Recommendations
Format your response as a structured report."""

REPORT_SECTIONS = """Generate a detailed analysis report with the following sections:
1. EXECUTIVE SUMMARY (2-3 paragraphs)
2. MARKET NARRATIVE (what's happening in the news)
3. SENTIMENT ANALYSIS (interpret the data above)
4. KEY INSIGHTS (3-5 bullet points)
5. RISK ASSESSMENT (major risks and opportunities)
6. RECOMMENDATIONS (actionable advice)

Write professionally and be specific with data points."""


def _bullets(values: Any) -> str:
    if not isinstance(values, list | tuple) or not values:
        return "- None"
    return "\n".join(f"- {v}" for v in values)


def build_report_prompt(
    subject: str, news: Mapping[str, Any], sentiment: Mapping[str, Any]
) -> str:
    """Prompt embedding the news summary and the full sentiment judgment.

    Missing values are replaced by placeholders so the prompt can always be built.
    """
    return f"""Generate a comprehensive crypto analysis report for {subject}.

NEWS SUMMARY:
{news.get("summary") or "No news summary available"}
News articles analyzed: {news.get("article_count", 0)}

SENTIMENT ANALYSIS:
Overall Sentiment: {sentiment.get("overall_sentiment") or "Unknown"}
Fear & Greed Index: {sentiment.get("fear_greed_index", 50)}/100
Confidence: {sentiment.get("confidence", 50)}%

Bullish Points:
{_bullets(sentiment.get("bullish_points"))}

Bearish Points:
{_bullets(sentiment.get("bearish_points"))}

Key Drivers:
{_bullets(sentiment.get("key_drivers"))}

{REPORT_SECTIONS}"""


class ReportWriter(Stage):
    """Writes the six-section narrative report from the earlier stages' outputs."""

    name = "report-writer"
    label = "Report Writer"
    system_instruction = SYSTEM_INSTRUCTION
    error_summary = "Failed to generate report"

    async def run(self, context: AnalysisContext) -> StageResult:
        news = context.output(NewsCollector.name) or {}
        sentiment = context.output(SentimentAnalyzer.name) or {}

        report = (await self.generate(build_report_prompt(context.subject, news, sentiment))).strip()

        return StageResult.success(
            "Comprehensive analysis report generated",
            {
                "report": report,
                "subject": context.subject,
                "articles_analyzed": news.get("article_count", 0),
                "sentiment": sentiment.get("overall_sentiment") or "unknown",
                "fear_greed_index": sentiment.get("fear_greed_index", 50),
            },
        )
