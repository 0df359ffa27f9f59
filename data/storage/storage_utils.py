"""Utility helpers and type conversions for analysis storage."""

import json
from datetime import UTC, datetime
from typing import Any

from data.models import Analysis, Report, StageOutcome


def _datetime_to_iso(dt: datetime) -> str:
    """Convert datetime to the UTC ISO string format stored in the database ('Z' suffix)."""
    dt = dt.replace(tzinfo=UTC) if dt.tzinfo is None else dt.astimezone(UTC)
    return dt.isoformat(timespec="microseconds").replace("+00:00", "Z")


def _iso_to_datetime(iso_str: str) -> datetime:
    """Convert ISO string from database to UTC datetime object."""
    return datetime.fromisoformat(iso_str.replace("Z", "+00:00"))


def _to_json(value: dict[str, Any] | None) -> str | None:
    """Serialize a JSON object column; None stays NULL."""
    if value is None:
        return None
    return json.dumps(value, ensure_ascii=False, sort_keys=True)


def _from_json(text: str | None) -> dict[str, Any] | None:
    if text is None:
        return None
    return json.loads(text)


def _row_to_analysis(row: dict[str, Any]) -> Analysis:
    """Convert database row to Analysis model."""
    completed = row.get("completed_at_iso")
    return Analysis(
        analysis_id=row["analysis_id"],
        subject=row["subject"],
        status=row["status"],
        started_at=_iso_to_datetime(row["started_at_iso"]),
        completed_at=_iso_to_datetime(completed) if completed else None,
        error=row.get("error"),
        metadata=_from_json(row.get("metadata_json")),
    )


def _row_to_stage_outcome(row: dict[str, Any]) -> StageOutcome:
    """Convert database row to StageOutcome model."""
    return StageOutcome(
        analysis_id=row["analysis_id"],
        stage_name=row["stage_name"],
        content=row["content"],
        created_at=_iso_to_datetime(row["created_at_iso"]),
        payload=_from_json(row.get("payload_json")),
    )


def _row_to_report(row: dict[str, Any]) -> Report:
    """Convert database row to Report model."""
    return Report(
        report_id=row["report_id"],
        analysis_id=row["analysis_id"],
        subject=row["subject"],
        narrative=row["narrative"],
        generated_at=_iso_to_datetime(row["generated_at_iso"]),
        technical=_from_json(row["technical_json"]) or {},
        sentiment=_from_json(row["sentiment_json"]) or {},
        recommendation=_from_json(row["recommendation_json"]) or {},
    )
