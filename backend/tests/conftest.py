"""Shared pytest fixtures for all tests.

These fixtures properly clean up resources to prevent file descriptor leaks.
"""

import gc
from datetime import UTC, datetime
from typing import Optional

import pytest

from gravity.db.connection import Database
from gravity.db.migrations import run_migrations
from gravity.notes.schemas import Note
from gravity.notes.store import SqliteNoteStore

# Fixed "now" for temporal tests: boundaries fall on
# 2025-08-29 (yesterday), 2025-08-23 (last week) and 2025-07-31 (last month).
FIXED_NOW = datetime(2025, 8, 30, 15, 0, 0, tzinfo=UTC)


def make_note(
    note_id: str,
    updated_at: Optional[str] = "2025-08-30T10:00:00+00:00",
    content: str = "",
    title: Optional[str] = None,
    user_id: str = "user-1",
) -> Note:
    """Build a note with sensible defaults for tests."""
    return Note(
        id=note_id,
        user_id=user_id,
        title=title,
        content=content,
        created_at=updated_at,
        updated_at=updated_at,
    )


@pytest.fixture(autouse=True)
def cleanup_after_test():
    """Force garbage collection after each test to release SQLite handles."""
    yield
    gc.collect()


@pytest.fixture
def temp_db(tmp_path):
    """Create a temporary database with the production schema."""
    db = Database(tmp_path / "test.db")
    run_migrations(db)
    yield db
    db.close()
    gc.collect()


@pytest.fixture
def store(temp_db):
    """SQLite note store over the temporary database."""
    return SqliteNoteStore(temp_db)


@pytest.fixture
def fixed_clock():
    """Clock returning FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def app_env(tmp_path, monkeypatch):
    """Point the application at a temporary data directory.

    Yields:
        dict with 'data_dir' and 'db_path'
    """
    from gravity.api.deps import _reset_db_instance, get_settings
    from gravity.config import load_settings

    data_dir = tmp_path / "gravity"
    data_dir.mkdir()
    monkeypatch.setenv("GRAVITY_DATA_DIR", str(data_dir))
    monkeypatch.delenv("GRAVITY_DB_PATH", raising=False)

    load_settings.cache_clear()
    get_settings.cache_clear()
    _reset_db_instance()

    yield {"data_dir": data_dir, "db_path": data_dir / "gravity.db"}

    _reset_db_instance()
    load_settings.cache_clear()
    get_settings.cache_clear()
