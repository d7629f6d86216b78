"""Notes module for the user's note stream."""

from gravity.notes.schemas import Note, NoteCreate, NoteUpdate
from gravity.notes.service import NotesService
from gravity.notes.store import NoteStore, NoteStoreError, SqliteNoteStore

__all__ = [
    "Note",
    "NoteCreate",
    "NoteStore",
    "NoteStoreError",
    "NoteUpdate",
    "NotesService",
    "SqliteNoteStore",
]
