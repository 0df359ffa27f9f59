"""
Analysis workflow orchestrator.

Runs the news, sentiment, and report stages in a fixed order for one
(analysis id, subject) pair, records each stage outcome, stores the report on
success, and publishes progress events along the way.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from analysis.recommendation import build_recommendation
from data.gateway import PersistenceGateway
from data.models import AnalysisStatus
from utils.datetime_utils import utc_now
from workflows.context import AnalysisContext
from workflows.errors import StageFailedError
from workflows.events import EventPublisher, WorkflowEvent
from workflows.stages import NewsCollector, ReportWriter, SentimentAnalyzer, Stage

logger = logging.getLogger(__name__)

HEADLINES_IN_REPORT = 5


@dataclass(frozen=True)
class WorkflowResult:
    success: bool
    analysis_id: str
    report_id: str | None = None
    error: str | None = None


def error_text(exc: BaseException) -> str:
    """Message stored for a failed run; never empty."""
    return str(exc).strip() or type(exc).__name__


def assemble_report_sections(context: AnalysisContext) -> dict[str, dict[str, Any]]:
    """Build the technical, sentiment, and recommendation sections from stage payloads."""
    news = context.output(NewsCollector.name) or {}
    sentiment = context.output(SentimentAnalyzer.name) or {}
    report = context.output(ReportWriter.name) or {}

    articles = news.get("articles") or []
    label = sentiment.get("overall_sentiment", "neutral")
    index = sentiment.get("fear_greed_index", 50)

    return {
        "technical": {"news_count": news.get("article_count", len(articles))},
        "sentiment": {
            "overall_sentiment": label,
            "fear_greed_index": index,
            "confidence": sentiment.get("confidence", 50),
            "bullish_points": list(sentiment.get("bullish_points", [])),
            "bearish_points": list(sentiment.get("bearish_points", [])),
            "key_drivers": list(sentiment.get("key_drivers", [])),
            "news_headlines": [a.get("title") for a in articles[:HEADLINES_IN_REPORT]],
        },
        "recommendation": build_recommendation(label, index, report.get("report", "")),
    }


class AnalysisWorkflow:
    """
    Drives one analysis from ``processing`` to ``completed`` or ``failed``.

    The orchestrator does not retry: the first stage failure or collaborator
    error ends the run. Event publishing is best-effort and never ends a run.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        publisher: EventPublisher,
        collector: NewsCollector,
        analyzer: SentimentAnalyzer,
        synthesizer: ReportWriter,
    ) -> None:
        self.gateway = gateway
        self.publisher = publisher
        self.stages: tuple[Stage, ...] = (collector, analyzer, synthesizer)

    def _emit(self, event: WorkflowEvent, analysis_id: str, **fields: Any) -> None:
        payload: Mapping[str, Any] = {"analysis_id": analysis_id, **fields}
        try:
            self.publisher.publish(event.value, payload)
        except Exception:
            logger.exception(f"Failed to publish {event.value} for {analysis_id}")

    async def execute(self, analysis_id: str, subject: str) -> WorkflowResult:
        """Run every stage for ``subject`` and return how the analysis ended."""
        await self.gateway.update_analysis_status(analysis_id, AnalysisStatus.PROCESSING)
        self._emit(WorkflowEvent.ANALYSIS_STARTED, analysis_id, subject=subject)
        logger.info(f"Analysis {analysis_id} started for {subject}")

        try:
            context = AnalysisContext(analysis_id, subject)
            for stage in self.stages:
                context = await self._run_stage(stage, context)

            sections = assemble_report_sections(context)
            narrative = (context.output(ReportWriter.name) or {}).get("report", "")
            report_id = await self.gateway.write_report(
                analysis_id,
                context.subject,
                narrative,
                sections["technical"],
                sections["sentiment"],
                sections["recommendation"],
            )
        except Exception as exc:
            return await self._fail(analysis_id, exc)

        await self.gateway.update_analysis_status(
            analysis_id, AnalysisStatus.COMPLETED, completed_at=utc_now()
        )
        self._emit(WorkflowEvent.ANALYSIS_COMPLETED, analysis_id, report_id=report_id)
        logger.info(f"Analysis {analysis_id} completed with report {report_id}")
        return WorkflowResult(True, analysis_id, report_id=report_id)

    async def _run_stage(self, stage: Stage, context: AnalysisContext) -> AnalysisContext:
        analysis_id = context.analysis_id
        self._emit(
            WorkflowEvent.STAGE_STARTED, analysis_id, stage=stage.name, label=stage.label
        )

        result = await stage.execute(context)

        payload = result.payload if result.succeeded else {"error": result.error_detail}
        await self.gateway.write_stage_outcome(analysis_id, stage.name, result.summary, payload)
        self._emit(
            WorkflowEvent.AGENT_MESSAGE, analysis_id, stage=stage.name, content=result.summary
        )

        if not result.succeeded:
            self._emit(WorkflowEvent.STAGE_FINISHED, analysis_id, stage=stage.name, status="error")
            raise StageFailedError(stage.name, f"{stage.label} failed: {result.error_detail}")

        self._emit(WorkflowEvent.STAGE_FINISHED, analysis_id, stage=stage.name, status="done")
        return context.with_output(stage.name, result.payload)

    async def _fail(self, analysis_id: str, exc: Exception) -> WorkflowResult:
        error = error_text(exc)
        logger.error(f"Analysis {analysis_id} failed: {error}")
        await self.gateway.update_analysis_status(
            analysis_id, AnalysisStatus.FAILED, error=error, completed_at=utc_now()
        )
        self._emit(WorkflowEvent.ANALYSIS_FAILED, analysis_id, error=error)
        return WorkflowResult(False, analysis_id, error=error)
