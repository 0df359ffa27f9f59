"""Database lifecycle and connection management for analysis storage."""

import logging
import sqlite3
from contextlib import closing
from importlib.resources import files

logger = logging.getLogger(__name__)

# Applied to every connection; WAL + busy_timeout let concurrent analyses share one file.
_CONNECTION_PRAGMAS = (
    "PRAGMA foreign_keys = ON",
    "PRAGMA busy_timeout = 5000",
    "PRAGMA journal_mode = WAL",
    "PRAGMA synchronous = NORMAL",
)

REQUIRED_TABLES = frozenset({"analyses", "stage_outcomes", "reports"})


def connect(db_path: str, **kwargs) -> sqlite3.Connection:
    """Open a SQLite connection with the required PRAGMAs enabled."""
    conn = sqlite3.connect(db_path, **kwargs)
    for pragma in _CONNECTION_PRAGMAS:
        try:
            conn.execute(pragma)
        except sqlite3.Error as e:
            logger.warning("Failed to apply SQLite pragma %r: %s", pragma, e)
    return conn


def _check_json1_support(conn: sqlite3.Connection) -> bool:
    """Check if SQLite JSON1 extension is available."""
    try:
        conn.execute("SELECT json_valid('{}')")
        return True
    except sqlite3.OperationalError as exc:
        logger.debug("SQLite JSON1 extension not available: %s", exc)
        return False


def init_database(db_path: str) -> None:
    """Create the analysis schema (idempotent), failing fast without JSON1."""
    with closing(sqlite3.connect(":memory:")) as conn:
        if not _check_json1_support(conn):
            raise RuntimeError(
                "SQLite JSON1 extension required but not available. "
                "Use a Python build whose sqlite3 bundles JSON1."
            )

    schema_sql = files("data").joinpath("schema.sql").read_text()

    with closing(connect(db_path)) as conn:
        conn.executescript(schema_sql)
        conn.commit()
        rows = conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'").fetchall()

    missing = REQUIRED_TABLES - {row[0] for row in rows}
    if missing:
        raise RuntimeError(f"Schema initialization incomplete, missing tables: {sorted(missing)}")
