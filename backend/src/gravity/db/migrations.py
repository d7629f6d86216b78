"""Database migrations and schema management for Gravity Note."""

import sqlite3

from gravity.db.connection import Database

# Schema version for tracking migrations
SCHEMA_VERSION = 1

# Strips U+200B, U+200C, U+200D and U+FEFF (see constants.notes.INVISIBLE_CHARS)
_NORMALIZE_SQL = (
    "replace(replace(replace(replace({column}, char(8203), ''), char(8204), ''), "
    "char(8205), ''), char(65279), '')"
)

SCHEMA_SQL = f"""
-- Schema version tracking
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY,
    applied_at TEXT NOT NULL DEFAULT (datetime('now'))
);

-- Note stream
-- One row per note; updated_at drives ordering and time grouping
CREATE TABLE IF NOT EXISTS notes (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    title TEXT,
    content TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    is_rescued INTEGER NOT NULL DEFAULT 0,  -- Boolean: brought back to the top
    original_note_id TEXT,
    -- Normalized copies for substring search (invisible characters removed)
    content_norm TEXT GENERATED ALWAYS AS ({_NORMALIZE_SQL.format(column="content")}) VIRTUAL,
    title_norm TEXT GENERATED ALWAYS AS (
        CASE WHEN title IS NULL THEN NULL
        ELSE {_NORMALIZE_SQL.format(column="title")} END
    ) VIRTUAL
);

-- Indexes for common queries
CREATE INDEX IF NOT EXISTS idx_notes_user_updated ON notes(user_id, updated_at DESC);
"""


def run_migrations(db: Database) -> None:
    """Run database migrations to set up or upgrade schema.

    Args:
        db: Database connection to run migrations on.
    """
    try:
        result = db.execute(
            "SELECT version FROM schema_version ORDER BY version DESC LIMIT 1"
        ).fetchone()
        current_version = result[0] if result else 0
    except sqlite3.OperationalError:
        # Table doesn't exist yet
        current_version = 0

    if current_version < SCHEMA_VERSION:
        # executescript auto-commits, so the version insert is handled separately
        db.executescript(SCHEMA_SQL)

        db.execute(
            "INSERT OR REPLACE INTO schema_version (version) VALUES (?)",
            (SCHEMA_VERSION,),
        )
        db.commit()
