"""Domain models and validation helpers for analyses, news, and reports."""

import json
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any
from urllib.parse import urlparse

from utils.datetime_utils import normalize_to_utc


class AnalysisStatus(Enum):
    PENDING = "pending"  # Created by the caller, workflow not started
    PROCESSING = "processing"  # Workflow running
    COMPLETED = "completed"  # Terminal: report stored
    FAILED = "failed"  # Terminal: error text stored

    @property
    def is_terminal(self) -> bool:
        return self in (AnalysisStatus.COMPLETED, AnalysisStatus.FAILED)


# Status transitions are monotonic; terminal states have no successors.
ALLOWED_TRANSITIONS: dict[AnalysisStatus, frozenset[AnalysisStatus]] = {
    AnalysisStatus.PENDING: frozenset({AnalysisStatus.PROCESSING}),
    AnalysisStatus.PROCESSING: frozenset({AnalysisStatus.COMPLETED, AnalysisStatus.FAILED}),
    AnalysisStatus.COMPLETED: frozenset(),
    AnalysisStatus.FAILED: frozenset(),
}


def can_transition(current: AnalysisStatus, target: AnalysisStatus) -> bool:
    """Return True when ``current -> target`` is a legal status change."""
    return target in ALLOWED_TRANSITIONS[current]


class Sentiment(Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class Action(Enum):
    BUY = "buy"
    SELL = "sell"
    HOLD = "hold"


class RiskLevel(Enum):
    MEDIUM = "medium"
    HIGH = "high"


def _valid_http_url(u: str) -> bool:
    """Check if url is a real host."""
    p = urlparse(u.strip())
    return p.scheme in ("http", "https") and bool(p.netloc)


def _require_json_object(value: Any, name: str) -> None:
    """Raise ValueError unless ``value`` is a JSON-serializable dict."""
    if not isinstance(value, dict):
        raise ValueError(f"{name} must be a dict")
    try:
        json.dumps(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be JSON-serializable: {exc}") from exc


@dataclass
class NewsArticle:
    """Normalized news article for one crypto subject."""

    article_id: str
    title: str
    body: str
    source: str
    published: datetime
    subject: str
    url: str | None = None

    def __post_init__(self) -> None:
        """Normalize fields and validate id, title, source, subject, and URL."""
        self.article_id = self.article_id.strip()
        self.title = self.title.strip()
        self.body = self.body.strip()
        self.source = self.source.strip()
        self.subject = self.subject.strip().upper()
        if not self.article_id:
            raise ValueError("article_id cannot be empty")
        if not self.title:
            raise ValueError("title cannot be empty")
        if not self.source:
            raise ValueError("source cannot be empty")
        if not self.subject:
            raise ValueError("subject cannot be empty")
        if not self.body:
            self.body = self.title
        if self.url is not None:
            self.url = self.url.strip()
            if not _valid_http_url(self.url):
                raise ValueError("url must be http(s)")
        if not isinstance(self.published, datetime):
            raise ValueError("published must be a datetime")
        self.published = normalize_to_utc(self.published)

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready representation used in stage payloads."""
        return {
            "id": self.article_id,
            "title": self.title,
            "body": self.body,
            "source": self.source,
            "published_at": self.published.isoformat(),
            "subject": self.subject,
            "url": self.url,
        }


@dataclass(frozen=True)
class SentimentJudgment:
    """Structured sentiment verdict extracted from a model reply."""

    overall_sentiment: Sentiment
    fear_greed_index: int
    confidence: int
    bullish_points: tuple[str, ...] = ()
    bearish_points: tuple[str, ...] = ()
    key_drivers: tuple[str, ...] = ()
    summary: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.overall_sentiment, Sentiment):
            raise ValueError("overall_sentiment must be a Sentiment enum value")
        for name in ("fear_greed_index", "confidence"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an int")
            if not (0 <= value <= 100):
                raise ValueError(f"{name} must be between 0 and 100")

    @classmethod
    def neutral(cls, summary: str = "") -> "SentimentJudgment":
        return cls(Sentiment.NEUTRAL, 50, 50, summary=summary)

    def to_payload(self) -> dict[str, Any]:
        return {
            "overall_sentiment": self.overall_sentiment.value,
            "fear_greed_index": self.fear_greed_index,
            "confidence": self.confidence,
            "bullish_points": list(self.bullish_points),
            "bearish_points": list(self.bearish_points),
            "key_drivers": list(self.key_drivers),
            "summary": self.summary,
        }


@dataclass
class Analysis:
    """One analysis run for a subject, tracked through its status lifecycle."""

    analysis_id: str
    subject: str
    status: AnalysisStatus
    started_at: datetime
    completed_at: datetime | None = None
    error: str | None = None
    metadata: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        """Normalize fields and validate status, timestamps, and metadata."""
        self.analysis_id = self.analysis_id.strip()
        self.subject = self.subject.strip().upper()
        if not self.analysis_id:
            raise ValueError("analysis_id cannot be empty")
        if not self.subject:
            raise ValueError("subject cannot be empty")
        if len(self.subject) > 50:
            raise ValueError("subject too long (max 50 characters)")
        if isinstance(self.status, str):
            self.status = AnalysisStatus(self.status)
        if not isinstance(self.status, AnalysisStatus):
            raise ValueError("status must be an AnalysisStatus enum value")
        if not isinstance(self.started_at, datetime):
            raise ValueError("started_at must be a datetime")
        self.started_at = normalize_to_utc(self.started_at)
        if self.completed_at is not None:
            if not isinstance(self.completed_at, datetime):
                raise ValueError("completed_at must be a datetime")
            self.completed_at = normalize_to_utc(self.completed_at)
        if self.metadata is not None:
            _require_json_object(self.metadata, "metadata")


@dataclass
class StageOutcome:
    """Append-only record of what one stage produced for an analysis."""

    analysis_id: str
    stage_name: str
    content: str
    created_at: datetime
    payload: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        self.stage_name = self.stage_name.strip()
        if not self.analysis_id.strip():
            raise ValueError("analysis_id cannot be empty")
        if not self.stage_name:
            raise ValueError("stage_name cannot be empty")
        if not isinstance(self.created_at, datetime):
            raise ValueError("created_at must be a datetime")
        self.created_at = normalize_to_utc(self.created_at)
        if self.payload is not None:
            _require_json_object(self.payload, "payload")


@dataclass
class Report:
    """Final report for a completed analysis (one per analysis)."""

    report_id: str
    analysis_id: str
    subject: str
    narrative: str
    generated_at: datetime
    technical: dict[str, Any] = field(default_factory=dict)
    sentiment: dict[str, Any] = field(default_factory=dict)
    recommendation: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Normalize fields and validate JSON sections."""
        self.subject = self.subject.strip().upper()
        if not self.report_id.strip():
            raise ValueError("report_id cannot be empty")
        if not self.analysis_id.strip():
            raise ValueError("analysis_id cannot be empty")
        if not self.subject:
            raise ValueError("subject cannot be empty")
        if not isinstance(self.generated_at, datetime):
            raise ValueError("generated_at must be a datetime")
        self.generated_at = normalize_to_utc(self.generated_at)
        for name in ("technical", "sentiment", "recommendation"):
            _require_json_object(getattr(self, name), name)

    @property
    def summary(self) -> str:
        """Short form of the narrative for listings."""
        if len(self.narrative) <= 500:
            return self.narrative
        return self.narrative[:500] + "..."
