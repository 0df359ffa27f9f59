"""
Tests for _cursor_context() internal database context manager.

Tests commit/rollback behavior and row_factory configuration.
"""

import sqlite3

import pytest

from data.storage.db_context import _cursor_context

_INSERT = """
    INSERT INTO analyses (analysis_id, subject, status, started_at_iso)
    VALUES (?, ?, 'pending', '2024-01-01T00:00:00.000000Z')
"""


class TestCursorContext:
    """Test _cursor_context() context manager behavior"""

    def test_commit_true_commits_on_success(self, temp_db):
        with _cursor_context(temp_db) as cursor:
            cursor.execute(_INSERT, ("a1", "BTC"))

        with _cursor_context(temp_db, commit=False) as cursor:
            cursor.execute("SELECT subject FROM analyses WHERE analysis_id = ?", ("a1",))
            row = cursor.fetchone()

        assert row is not None
        assert row["subject"] == "BTC"

    def test_exception_rolls_back(self, temp_db):
        with pytest.raises(RuntimeError):
            with _cursor_context(temp_db) as cursor:
                cursor.execute(_INSERT, ("a2", "ETH"))
                raise RuntimeError("abort")

        with _cursor_context(temp_db, commit=False) as cursor:
            cursor.execute("SELECT COUNT(*) AS n FROM analyses")
            assert cursor.fetchone()["n"] == 0

    def test_constraint_violation_rolls_back_whole_block(self, temp_db):
        with pytest.raises(sqlite3.IntegrityError):
            with _cursor_context(temp_db) as cursor:
                cursor.execute(_INSERT, ("a3", "SOL"))
                cursor.execute(_INSERT, ("a3", "SOL"))

        with _cursor_context(temp_db, commit=False) as cursor:
            cursor.execute("SELECT COUNT(*) AS n FROM analyses")
            assert cursor.fetchone()["n"] == 0

    def test_rows_support_name_access(self, temp_db):
        with _cursor_context(temp_db, commit=False) as cursor:
            cursor.execute("SELECT 1 AS one")
            assert cursor.fetchone()["one"] == 1
