"""Internal database context manager utilities for SQLite work."""

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager

from data.storage.storage_core import connect


@contextmanager
def _cursor_context(db_path: str, *, commit: bool = True) -> Iterator[sqlite3.Cursor]:
    """Yield a Row-factory cursor; commit on success, roll back on any exception.

    ``BEGIN IMMEDIATE`` is issued for writing contexts so read-check-write
    sequences (status transitions) hold the write lock for their whole duration.
    """
    conn = connect(db_path, isolation_level=None)
    conn.row_factory = sqlite3.Row

    try:
        cursor = conn.cursor()
        if commit:
            cursor.execute("BEGIN IMMEDIATE")
        yield cursor
        if commit:
            conn.commit()
    except BaseException:
        if conn.in_transaction:
            conn.rollback()
        raise
    finally:
        conn.close()
