# movie_watch_db.py
from __future__ import annotations
import sqlite3, threading
from pathlib import Path

_SCHEMA = """
CREATE TABLE IF NOT EXISTS kv_store (
    key   TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""


class LocalStorage:
    """
    Durable key → value strings in one SQLite file.

    One connection per instance, shared across threads; every statement
    runs under the instance lock so writes never interleave.
    Pass ``":memory:"`` for a throw-away store.
    """

    def __init__(self, path: Path | str):
        self.path = path
        self._lock = threading.RLock()
        self._conn: sqlite3.Connection | None = None

    # ─── internal helpers ────────────────────────────────────────────────
    def _connection(self) -> sqlite3.Connection:
        """Open the connection and run the schema SQL on first use."""
        if self._conn is None:
            if str(self.path) != ":memory:":
                Path(self.path).parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(
                str(self.path),
                check_same_thread=False,    # guarded by self._lock instead
                isolation_level="DEFERRED",
            )
            conn.row_factory = sqlite3.Row
            conn.executescript(_SCHEMA)
            conn.commit()
            self._conn = conn
        return self._conn

    # ─── public helpers ──────────────────────────────────────────────────
    def get(self, key: str) -> str | None:
        with self._lock:
            row = self._connection().execute(
                "SELECT value FROM kv_store WHERE key=?", (key,)
            ).fetchone()
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        with self._lock:
            conn = self._connection()
            try:
                conn.execute(
                    "INSERT OR REPLACE INTO kv_store(key, value) VALUES(?,?)",
                    (key, value),
                )
                conn.commit()
            except sqlite3.Error:
                conn.rollback()
                raise

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
