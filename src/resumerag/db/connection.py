"""SQLite connection setup: sqlite-vec, foreign keys, WAL."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import sqlite_vec

_MEMORY = ":memory:"


class Database:
    """Opens connections to one resumerag database file.

    Every connection gets sqlite-vec loaded (``vec_f32``, ``vec_to_json``,
    ``vec_distance_cosine``), ``sqlite3.Row`` rows, enforced foreign keys
    and, for files, WAL journaling.

    Args:
        db_path: Database file (created if missing) or ``":memory:"``.
        timeout: Seconds to wait on a locked database before failing.
    """

    def __init__(self, db_path: Path | str, timeout: float = 5.0) -> None:
        self.db_path: Path | str = db_path if db_path == _MEMORY else Path(db_path)
        self.timeout = timeout
        self._conn: sqlite3.Connection | None = None

    @property
    def in_memory(self) -> bool:
        return self.db_path == _MEMORY

    def connect(self) -> sqlite3.Connection:
        """Open and configure a new connection. The caller closes it."""
        conn = sqlite3.connect(self.db_path, timeout=self.timeout)
        conn.row_factory = sqlite3.Row
        _load_vec(conn)
        # documents -> chunks cascade relies on this, and it is per connection.
        conn.execute("PRAGMA foreign_keys = ON")
        if not self.in_memory:
            conn.execute("PRAGMA journal_mode = WAL")
        return conn

    def __enter__(self) -> sqlite3.Connection:
        self._conn = self.connect()
        return self._conn

    def __exit__(self, *args: object) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None


def _load_vec(conn: sqlite3.Connection) -> None:
    conn.enable_load_extension(True)
    try:
        sqlite_vec.load(conn)
    finally:
        conn.enable_load_extension(False)
