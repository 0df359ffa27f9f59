"""
CRUD operations for analysis storage.
Handles analyses and their status lifecycle, append-only stage outcomes, and reports.
"""

import uuid
from datetime import datetime
from typing import Any

from data.models import (
    Analysis,
    AnalysisStatus,
    Report,
    StageOutcome,
    can_transition,
)
from data.storage.db_context import _cursor_context
from data.storage.storage_utils import (
    _datetime_to_iso,
    _row_to_analysis,
    _row_to_report,
    _row_to_stage_outcome,
    _to_json,
)
from utils.datetime_utils import utc_now

_ANALYSIS_COLUMNS = (
    "analysis_id, subject, status, started_at_iso, completed_at_iso, error, metadata_json"
)
_REPORT_COLUMNS = (
    "report_id, analysis_id, subject, narrative, technical_json, sentiment_json, "
    "recommendation_json, generated_at_iso"
)


def _check_page(limit: int, offset: int) -> None:
    if not (1 <= limit <= 50):
        raise ValueError("limit must be between 1 and 50")
    if offset < 0:
        raise ValueError("offset must be >= 0")


def create_analysis(
    db_path: str,
    subject: str,
    *,
    metadata: dict[str, Any] | None = None,
    analysis_id: str | None = None,
    started_at: datetime | None = None,
) -> Analysis:
    """Insert a new ``pending`` analysis and return it."""
    analysis = Analysis(
        analysis_id=analysis_id or uuid.uuid4().hex,
        subject=subject,
        status=AnalysisStatus.PENDING,
        started_at=started_at or utc_now(),
        metadata=metadata,
    )

    with _cursor_context(db_path) as cursor:
        cursor.execute(
            f"""
            INSERT INTO analyses ({_ANALYSIS_COLUMNS})
            VALUES (?, ?, ?, ?, NULL, NULL, ?)
        """,
            (
                analysis.analysis_id,
                analysis.subject,
                analysis.status.value,
                _datetime_to_iso(analysis.started_at),
                _to_json(analysis.metadata),
            ),
        )

    return analysis


def get_analysis(db_path: str, analysis_id: str) -> Analysis | None:
    """Return one analysis or None when the id is unknown."""
    with _cursor_context(db_path, commit=False) as cursor:
        cursor.execute(
            f"SELECT {_ANALYSIS_COLUMNS} FROM analyses WHERE analysis_id = ?",
            (analysis_id,),
        )
        row = cursor.fetchone()
        return _row_to_analysis(dict(row)) if row else None


def list_analyses(db_path: str, *, limit: int = 20, offset: int = 0) -> list[Analysis]:
    """Return analyses, most recently started first."""
    _check_page(limit, offset)
    with _cursor_context(db_path, commit=False) as cursor:
        cursor.execute(
            f"""
            SELECT {_ANALYSIS_COLUMNS}
            FROM analyses
            ORDER BY started_at_iso DESC, analysis_id ASC
            LIMIT ? OFFSET ?
        """,
            (limit, offset),
        )
        return [_row_to_analysis(dict(row)) for row in cursor.fetchall()]


def delete_analysis(db_path: str, analysis_id: str) -> bool:
    """Delete an analysis with its outcomes and report; return True if a row was removed."""
    with _cursor_context(db_path) as cursor:
        cursor.execute("DELETE FROM analyses WHERE analysis_id = ?", (analysis_id,))
        return cursor.rowcount > 0


def update_analysis_status(
    db_path: str,
    analysis_id: str,
    status: AnalysisStatus,
    *,
    error: str | None = None,
    completed_at: datetime | None = None,
) -> None:
    """
    Move an analysis to ``status``.
    Raises ValueError for unknown ids and for transitions that are not monotonic
    (pending -> processing -> completed | failed).
    """
    if not isinstance(status, AnalysisStatus):
        raise ValueError("status must be an AnalysisStatus enum value")

    with _cursor_context(db_path) as cursor:
        cursor.execute("SELECT status FROM analyses WHERE analysis_id = ?", (analysis_id,))
        row = cursor.fetchone()
        if row is None:
            raise ValueError(f"Analysis not found: {analysis_id}")

        current = AnalysisStatus(row["status"])
        if not can_transition(current, status):
            raise ValueError(
                f"Illegal status transition for {analysis_id}: "
                f"{current.value} -> {status.value}"
            )

        cursor.execute(
            """
            UPDATE analyses
            SET status = ?,
                error = COALESCE(?, error),
                completed_at_iso = COALESCE(?, completed_at_iso)
            WHERE analysis_id = ?
        """,
            (
                status.value,
                error,
                _datetime_to_iso(completed_at) if completed_at else None,
                analysis_id,
            ),
        )


def store_stage_outcome(
    db_path: str,
    analysis_id: str,
    stage_name: str,
    content: str,
    payload: dict[str, Any] | None = None,
) -> StageOutcome:
    """Append one stage outcome; outcomes are never updated afterwards."""
    outcome = StageOutcome(
        analysis_id=analysis_id,
        stage_name=stage_name,
        content=content,
        created_at=utc_now(),
        payload=payload,
    )

    with _cursor_context(db_path) as cursor:
        cursor.execute(
            """
            INSERT INTO stage_outcomes
            (analysis_id, stage_name, content, payload_json, created_at_iso)
            VALUES (?, ?, ?, ?, ?)
        """,
            (
                outcome.analysis_id,
                outcome.stage_name,
                outcome.content,
                _to_json(outcome.payload),
                _datetime_to_iso(outcome.created_at),
            ),
        )

    return outcome


def get_stage_outcomes(
    db_path: str, analysis_id: str, *, newest_first: bool = False
) -> list[StageOutcome]:
    """Return the outcomes recorded for an analysis in insertion order."""
    order = "DESC" if newest_first else "ASC"
    with _cursor_context(db_path, commit=False) as cursor:
        cursor.execute(
            f"""
            SELECT analysis_id, stage_name, content, payload_json, created_at_iso
            FROM stage_outcomes
            WHERE analysis_id = ?
            ORDER BY outcome_id {order}
        """,
            (analysis_id,),
        )
        return [_row_to_stage_outcome(dict(row)) for row in cursor.fetchall()]


def store_report(
    db_path: str,
    analysis_id: str,
    subject: str,
    narrative: str,
    technical: dict[str, Any],
    sentiment: dict[str, Any],
    recommendation: dict[str, Any],
) -> Report:
    """
    Insert the report for an analysis.
    The UNIQUE constraint on analysis_id rejects a second report (sqlite3.IntegrityError).
    """
    report = Report(
        report_id=uuid.uuid4().hex,
        analysis_id=analysis_id,
        subject=subject,
        narrative=narrative,
        generated_at=utc_now(),
        technical=technical,
        sentiment=sentiment,
        recommendation=recommendation,
    )

    with _cursor_context(db_path) as cursor:
        cursor.execute(
            f"""
            INSERT INTO reports ({_REPORT_COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """,
            (
                report.report_id,
                report.analysis_id,
                report.subject,
                report.narrative,
                _to_json(report.technical),
                _to_json(report.sentiment),
                _to_json(report.recommendation),
                _datetime_to_iso(report.generated_at),
            ),
        )

    return report


def get_report(db_path: str, report_id: str) -> Report | None:
    with _cursor_context(db_path, commit=False) as cursor:
        cursor.execute(f"SELECT {_REPORT_COLUMNS} FROM reports WHERE report_id = ?", (report_id,))
        row = cursor.fetchone()
        return _row_to_report(dict(row)) if row else None


def get_report_by_analysis(db_path: str, analysis_id: str) -> Report | None:
    with _cursor_context(db_path, commit=False) as cursor:
        cursor.execute(
            f"SELECT {_REPORT_COLUMNS} FROM reports WHERE analysis_id = ?", (analysis_id,)
        )
        row = cursor.fetchone()
        return _row_to_report(dict(row)) if row else None


def list_reports(
    db_path: str, *, limit: int = 20, offset: int = 0, subject: str | None = None
) -> list[Report]:
    """Return reports newest first, optionally filtered by subject."""
    _check_page(limit, offset)
    with _cursor_context(db_path, commit=False) as cursor:
        if subject:
            cursor.execute(
                f"""
                SELECT {_REPORT_COLUMNS}
                FROM reports
                WHERE subject = ?
                ORDER BY generated_at_iso DESC
                LIMIT ? OFFSET ?
            """,
                (subject.strip().upper(), limit, offset),
            )
        else:
            cursor.execute(
                f"""
                SELECT {_REPORT_COLUMNS}
                FROM reports
                ORDER BY generated_at_iso DESC
                LIMIT ? OFFSET ?
            """,
                (limit, offset),
            )
        return [_row_to_report(dict(row)) for row in cursor.fetchall()]
