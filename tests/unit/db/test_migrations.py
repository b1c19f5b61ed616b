"""Tests for the forward-only migration runner."""

from __future__ import annotations

import sqlite3

import pytest

from resumerag.db.connection import Database
from resumerag.db.migrations import MIGRATIONS, current_version, run_migrations


def _fresh_conn(tmp_path):
    """Open a new connection without running migrations."""
    return Database(tmp_path / "test.db").connect()


def _table_exists(conn, name: str) -> bool:
    return conn.execute(
        "SELECT name FROM sqlite_master WHERE type = 'table' AND name = ?", (name,)
    ).fetchone() is not None


def test_run_migrations_creates_tables(tmp_path):
    conn = _fresh_conn(tmp_path)
    run_migrations(conn)
    for table in ("schema_version", "documents", "chunks"):
        assert _table_exists(conn, table)
    conn.close()


def test_run_migrations_records_version(tmp_path):
    conn = _fresh_conn(tmp_path)
    run_migrations(conn)
    assert current_version(conn) == MIGRATIONS[-1][0]
    conn.close()


def test_run_migrations_idempotent(tmp_path):
    conn = _fresh_conn(tmp_path)
    run_migrations(conn)
    run_migrations(conn)
    count = conn.execute("SELECT COUNT(*) FROM schema_version").fetchone()[0]
    assert count == len(MIGRATIONS)
    conn.close()


def test_document_type_constraint(tmp_path):
    conn = _fresh_conn(tmp_path)
    run_migrations(conn)
    with pytest.raises(sqlite3.IntegrityError):
        conn.execute(
            "INSERT INTO documents (name, content, type) VALUES ('x', 'y', 'letter')"
        )
    conn.close()


def test_chunks_index_exists(tmp_path):
    conn = _fresh_conn(tmp_path)
    run_migrations(conn)
    row = conn.execute(
        "SELECT name FROM sqlite_master WHERE type = 'index' AND name = 'chunks_document_id_idx'"
    ).fetchone()
    assert row is not None
    conn.close()
