"""SQLite database connection management."""

import sqlite3
from pathlib import Path
from typing import Any, Callable


class Database:
    """SQLite database wrapper with connection management.

    The notes database is written by request handlers and read by searches at
    the same time, so it runs in WAL mode and waits briefly on a locked file
    instead of failing at once.
    """

    def __init__(self, db_path: Path, busy_timeout_ms: int = 5000):
        """Initialize database connection."""
        self.db_path = db_path
        db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA journal_mode = WAL")
        self._conn.execute(f"PRAGMA busy_timeout = {int(busy_timeout_ms)}")

    def create_function(self, name: str, num_params: int, func: Callable[..., Any]) -> None:
        """Register a deterministic Python function for use in SQL."""
        self._conn.create_function(name, num_params, func, deterministic=True)

    def execute(self, sql: str, params: tuple[Any, ...] = ()) -> sqlite3.Cursor:
        """Execute SQL statement."""
        return self._conn.execute(sql, params)

    def executescript(self, sql: str) -> sqlite3.Cursor:
        """Execute multiple SQL statements as a script."""
        return self._conn.executescript(sql)

    def commit(self) -> None:
        """Commit current transaction."""
        self._conn.commit()

    def rollback(self) -> None:
        """Rollback current transaction."""
        self._conn.rollback()

    def close(self) -> None:
        """Close database connection."""
        self._conn.close()
