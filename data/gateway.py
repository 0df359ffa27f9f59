"""
Persistence gateway used by the analysis workflow.

The workflow only needs three writes (stage outcome, report, status change).
``SqlitePersistenceGateway`` runs the blocking SQLite helpers on worker threads
so concurrent analyses on one event loop do not stall each other.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from data.models import AnalysisStatus
from data.storage import store_report, store_stage_outcome, update_analysis_status

logger = logging.getLogger(__name__)


class PersistenceGateway(ABC):
    """Append-only writer of stage outcomes, reports, and analysis status."""

    @abstractmethod
    async def write_stage_outcome(
        self,
        analysis_id: str,
        stage_name: str,
        content: str,
        payload: dict[str, Any] | None = None,
    ) -> None:
        """Append the outcome of one stage invocation."""

    @abstractmethod
    async def write_report(
        self,
        analysis_id: str,
        subject: str,
        narrative: str,
        technical: dict[str, Any],
        sentiment: dict[str, Any],
        recommendation: dict[str, Any],
    ) -> str:
        """Persist the final report and return its id."""

    @abstractmethod
    async def update_analysis_status(
        self,
        analysis_id: str,
        status: AnalysisStatus,
        error: str | None = None,
        completed_at: datetime | None = None,
    ) -> None:
        """Record a status transition (errors propagate to the caller)."""


class SqlitePersistenceGateway(PersistenceGateway):
    """PersistenceGateway backed by the SQLite storage helpers."""

    def __init__(self, db_path: str) -> None:
        self.db_path = db_path

    async def write_stage_outcome(
        self,
        analysis_id: str,
        stage_name: str,
        content: str,
        payload: dict[str, Any] | None = None,
    ) -> None:
        await asyncio.to_thread(
            store_stage_outcome, self.db_path, analysis_id, stage_name, content, payload
        )
        logger.debug(f"Stored {stage_name} outcome for analysis {analysis_id}")

    async def write_report(
        self,
        analysis_id: str,
        subject: str,
        narrative: str,
        technical: dict[str, Any],
        sentiment: dict[str, Any],
        recommendation: dict[str, Any],
    ) -> str:
        report = await asyncio.to_thread(
            store_report,
            self.db_path,
            analysis_id,
            subject,
            narrative,
            technical,
            sentiment,
            recommendation,
        )
        return report.report_id

    async def update_analysis_status(
        self,
        analysis_id: str,
        status: AnalysisStatus,
        error: str | None = None,
        completed_at: datetime | None = None,
    ) -> None:
        await asyncio.to_thread(
            update_analysis_status,
            self.db_path,
            analysis_id,
            status,
            error=error,
            completed_at=completed_at,
        )
        logger.debug(f"Analysis {analysis_id} -> {status.value}")
