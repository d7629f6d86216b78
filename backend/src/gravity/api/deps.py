"""FastAPI dependency injection functions."""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header, HTTPException, status

from gravity.config import Config, load_settings
from gravity.db.connection import Database
from gravity.db.migrations import run_migrations
from gravity.notes.service import NotesService
from gravity.notes.store import NoteStore, SqliteNoteStore
from gravity.search.service import UnifiedSearchService
from gravity.timestamps import local_timezone


@lru_cache
def get_settings() -> Config:
    """Get cached application settings."""
    return load_settings()


_db_instance: Database | None = None


def get_db() -> Database:
    """Get database connection with migrations applied."""
    global _db_instance

    settings = get_settings()

    # Check if cached connection is stale (db file was deleted)
    if _db_instance is not None and not settings.db_path.exists():
        _db_instance.close()
        _db_instance = None

    if _db_instance is None:
        _db_instance = Database(settings.db_path)
        run_migrations(_db_instance)
    return _db_instance


def _reset_db_instance() -> None:
    """Reset database instance (for testing only)."""
    global _db_instance
    if _db_instance is not None:
        _db_instance.close()
        _db_instance = None


def get_note_store(db: Database = Depends(get_db)) -> NoteStore:
    """Get the note store over the application database."""
    return SqliteNoteStore(db)


def get_search_service(store: NoteStore = Depends(get_note_store)) -> UnifiedSearchService:
    """Get the unified search service."""
    settings = get_settings()
    return UnifiedSearchService(
        store,
        loose_min_length=settings.search.loose_min_length,
        timezone=local_timezone(settings.search.timezone),
    )


def get_notes_service(store: NoteStore = Depends(get_note_store)) -> NotesService:
    """Get the notes service."""
    settings = get_settings()
    return NotesService(store, max_content_length=settings.notes.max_content_length)


def get_current_user_id(x_user_id: Optional[str] = Header(None)) -> str:
    """Get the caller's user id from the X-User-Id header.

    The header is set by the authenticating proxy in front of this service.

    Raises:
        HTTPException: 401 if the header is missing or blank.
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not authenticated",
        )
    return x_user_id.strip()
