"""Unified search, browse and temporal grouping."""

from gravity.search.schemas import (
    NoteTimeSection,
    SearchMode,
    UnifiedNoteResult,
    UnifiedNotesOptions,
    UnifiedNotesResponse,
    UnifiedSearchMetadata,
)
from gravity.search.service import UnifiedSearchService
from gravity.search.temporal import TimeGroup

__all__ = [
    "NoteTimeSection",
    "SearchMode",
    "TimeGroup",
    "UnifiedNoteResult",
    "UnifiedNotesOptions",
    "UnifiedNotesResponse",
    "UnifiedSearchMetadata",
    "UnifiedSearchService",
]
