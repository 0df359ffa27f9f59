"""Public data models, collaborator interfaces, and storage helpers for the analysis workflow."""

# Core abstractions (available immediately)
from data.base import (
    DataSource,
    DataSourceError,
    NewsDataSource,
    VectorStore,
)
from data.gateway import PersistenceGateway, SqlitePersistenceGateway

# Data models
from data.models import (
    Action,
    Analysis,
    AnalysisStatus,
    NewsArticle,
    Report,
    RiskLevel,
    Sentiment,
    SentimentJudgment,
    StageOutcome,
)

# Storage operations
from data.storage import (
    connect,
    create_analysis,
    delete_analysis,
    get_analysis,
    get_report,
    get_report_by_analysis,
    get_stage_outcomes,
    init_database,
    list_analyses,
    list_reports,
    store_report,
    store_stage_outcome,
    update_analysis_status,
)

__all__ = [
    "DataSource",
    "NewsDataSource",
    "VectorStore",
    "DataSourceError",
    "PersistenceGateway",
    "SqlitePersistenceGateway",
    "Action",
    "Analysis",
    "AnalysisStatus",
    "NewsArticle",
    "Report",
    "RiskLevel",
    "Sentiment",
    "SentimentJudgment",
    "StageOutcome",
    "connect",
    "init_database",
    "create_analysis",
    "get_analysis",
    "list_analyses",
    "delete_analysis",
    "update_analysis_status",
    "store_stage_outcome",
    "get_stage_outcomes",
    "store_report",
    "get_report",
    "get_report_by_analysis",
    "list_reports",
]
