"""Public facade for analysis storage helpers."""

from data.storage.storage_core import (
    connect,
    init_database,
)
from data.storage.storage_crud import (
    create_analysis,
    delete_analysis,
    get_analysis,
    get_report,
    get_report_by_analysis,
    get_stage_outcomes,
    list_analyses,
    list_reports,
    store_report,
    store_stage_outcome,
    update_analysis_status,
)

__all__ = [
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
