"""Note store: the data-access layer the search engine and notes service use."""

import sqlite3
from abc import ABC, abstractmethod
from typing import Any, Optional

from gravity.db.connection import Database
from gravity.notes.schemas import Note
from gravity.timestamps import sort_key

# Escape character for LIKE patterns built by gravity.search.strategy
LIKE_ESCAPE = "!"

# Newest first by parsed instant; unparseable timestamps sort last
ORDER_BY_UPDATED = "ORDER BY note_time(updated_at) DESC"

NOTE_COLUMNS = (
    "id, user_id, title, content, created_at, updated_at, is_rescued, original_note_id"
)

# Columns a caller may change through update()
UPDATABLE_COLUMNS = frozenset({"title", "content", "updated_at", "is_rescued"})


def _casefold(value: Optional[str]) -> Optional[str]:
    return value.casefold() if isinstance(value, str) else value


class NoteStoreError(Exception):
    """Raised when the underlying note storage fails."""

    pass


class NoteStore(ABC):
    """Data access for a single notes table.

    Every method takes the owning user's id and must never return or touch
    another user's rows. Match methods take LIKE patterns (``%`` and ``_``
    wildcards, ``LIKE_ESCAPE`` as escape character), compare
    case-insensitively, order by ``updated_at`` descending and return at most
    ``limit`` rows.
    """

    @abstractmethod
    def match_by_normalized_fields(self, user_id: str, pattern: str, limit: int) -> list[Note]:
        """Match the pattern against the normalized title/content columns."""

    @abstractmethod
    def match_by_raw_fields(self, user_id: str, pattern: str, limit: int) -> list[Note]:
        """Match the pattern against the stored title/content columns."""

    @abstractmethod
    def fetch_recent(self, user_id: str, limit: int) -> list[Note]:
        """Return the most recently updated notes."""

    @abstractmethod
    def diagnose(
        self,
        user_id: str,
        pattern: str,
        loose_pattern: str,
        whitespace_patterns: list[str],
    ) -> dict[str, int]:
        """Count how each search technique would match the user's notes."""

    @abstractmethod
    def get(self, user_id: str, note_id: str) -> Optional[Note]:
        """Get one note, or None if missing or owned by another user."""

    @abstractmethod
    def insert(self, note: Note) -> Note:
        """Store a new note."""

    @abstractmethod
    def update(self, user_id: str, note_id: str, changes: dict[str, Any]) -> Optional[Note]:
        """Apply column changes; returns None if the note was not found."""

    @abstractmethod
    def delete(self, user_id: str, note_id: str) -> bool:
        """Delete a note; returns False if it was not found."""


class SqliteNoteStore(NoteStore):
    """NoteStore over the SQLite ``notes`` table.

    SQLite's LIKE folds ASCII letters only, so both sides of every match go
    through Python's ``str.casefold`` (registered as ``casefold()``). Rows
    are ordered by ``note_time()``, the parsed instant of ``updated_at``.
    """

    def __init__(self, db: Database) -> None:
        self._db = db
        db.create_function("casefold", 1, _casefold)
        db.create_function("note_time", 1, sort_key)

    def _fetch_all(self, sql: str, params: tuple[Any, ...]) -> list[Note]:
        try:
            rows = self._db.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise NoteStoreError(f"Failed to query notes: {e}") from e
        return [Note(**dict(row)) for row in rows]

    def _match(
        self, user_id: str, pattern: str, limit: int, content_col: str, title_col: str
    ) -> list[Note]:
        sql = f"""
            SELECT {NOTE_COLUMNS}
            FROM notes
            WHERE user_id = ?
              AND (casefold({content_col}) LIKE ? ESCAPE '{LIKE_ESCAPE}'
                   OR casefold({title_col}) LIKE ? ESCAPE '{LIKE_ESCAPE}')
            {ORDER_BY_UPDATED}
            LIMIT ?
        """
        folded = pattern.casefold()
        return self._fetch_all(sql, (user_id, folded, folded, limit))

    def match_by_normalized_fields(self, user_id: str, pattern: str, limit: int) -> list[Note]:
        return self._match(user_id, pattern, limit, "content_norm", "title_norm")

    def match_by_raw_fields(self, user_id: str, pattern: str, limit: int) -> list[Note]:
        return self._match(user_id, pattern, limit, "content", "title")

    def fetch_recent(self, user_id: str, limit: int) -> list[Note]:
        sql = f"""
            SELECT {NOTE_COLUMNS}
            FROM notes
            WHERE user_id = ?
            {ORDER_BY_UPDATED}
            LIMIT ?
        """
        return self._fetch_all(sql, (user_id, limit))

    def diagnose(
        self,
        user_id: str,
        pattern: str,
        loose_pattern: str,
        whitespace_patterns: list[str],
    ) -> dict[str, int]:
        like = f"LIKE ? ESCAPE '{LIKE_ESCAPE}'"
        whitespace_clause = (
            " OR ".join(f"casefold(content) {like}" for _ in whitespace_patterns) or "0"
        )
        sql = f"""
            SELECT
                COALESCE(SUM((casefold(content) {like})
                    + (casefold(COALESCE(title, '')) {like})), 0) AS raw_matches,
                COALESCE(SUM((casefold(content_norm) {like})
                    + (casefold(COALESCE(title_norm, '')) {like})), 0) AS normalized_matches,
                COALESCE(SUM((casefold(content_norm) {like})
                    + (casefold(COALESCE(title_norm, '')) {like})), 0) AS loose_matches,
                COALESCE(SUM(content != content_norm), 0) AS invisible_char_notes,
                COALESCE(SUM({whitespace_clause}), 0) AS whitespace_prefixed_matches,
                COUNT(*) AS total
            FROM notes
            WHERE user_id = ?
        """
        pattern = pattern.casefold()
        loose_pattern = loose_pattern.casefold()
        params = (
            pattern,
            pattern,
            pattern,
            pattern,
            loose_pattern,
            loose_pattern,
            *(p.casefold() for p in whitespace_patterns),
            user_id,
        )
        try:
            row = self._db.execute(sql, params).fetchone()
        except sqlite3.Error as e:
            raise NoteStoreError(f"Failed to diagnose search: {e}") from e
        return {key: int(row[key]) for key in row.keys()}

    def get(self, user_id: str, note_id: str) -> Optional[Note]:
        sql = f"SELECT {NOTE_COLUMNS} FROM notes WHERE id = ? AND user_id = ?"
        notes = self._fetch_all(sql, (note_id, user_id))
        return notes[0] if notes else None

    def insert(self, note: Note) -> Note:
        sql = f"""
            INSERT INTO notes ({NOTE_COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """
        try:
            self._db.execute(
                sql,
                (
                    note.id,
                    note.user_id,
                    note.title,
                    note.content,
                    note.created_at,
                    note.updated_at,
                    int(note.is_rescued),
                    note.original_note_id,
                ),
            )
            self._db.commit()
        except sqlite3.Error as e:
            self._db.rollback()
            raise NoteStoreError(f"Failed to insert note: {e}") from e
        return note

    def update(self, user_id: str, note_id: str, changes: dict[str, Any]) -> Optional[Note]:
        unknown = set(changes) - UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"Cannot update columns: {sorted(unknown)}")
        if changes:
            assignments = ", ".join(f"{column} = ?" for column in changes)
            values = tuple(
                int(value) if isinstance(value, bool) else value for value in changes.values()
            )
            sql = f"UPDATE notes SET {assignments} WHERE id = ? AND user_id = ?"
            try:
                cursor = self._db.execute(sql, (*values, note_id, user_id))
                self._db.commit()
            except sqlite3.Error as e:
                self._db.rollback()
                raise NoteStoreError(f"Failed to update note: {e}") from e
            if cursor.rowcount == 0:
                return None
        return self.get(user_id, note_id)

    def delete(self, user_id: str, note_id: str) -> bool:
        try:
            cursor = self._db.execute(
                "DELETE FROM notes WHERE id = ? AND user_id = ?", (note_id, user_id)
            )
            self._db.commit()
        except sqlite3.Error as e:
            self._db.rollback()
            raise NoteStoreError(f"Failed to delete note: {e}") from e
        return cursor.rowcount > 0
