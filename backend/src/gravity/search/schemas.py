"""Schemas for unified search and browse responses."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from gravity.constants.search import DEFAULT_MAX_RESULTS
from gravity.notes.schemas import Note
from gravity.search.temporal import TimeGroup


class SearchMode(str, Enum):
    """Whether an operation filtered by text or listed recent notes."""

    SEARCH = "search"
    BROWSE = "browse"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UnifiedNoteResult(Note):
    """A note with grouping, highlighting and ranking attached.

    Built fresh for every operation and never persisted.
    """

    time_group: TimeGroup = Field(..., description="Time bucket of the note")
    group_rank: int = Field(..., description="Rank within the time group (constant 1)")
    highlighted_content: str = Field(..., description="Content with <mark> markers")
    highlighted_title: Optional[str] = Field(None, description="Title with <mark> markers")
    search_rank: float = Field(..., ge=0.0, le=1.0, description="Relevance, 0.0 for browse")


class NoteTimeSection(_CamelModel):
    """One time bucket of results."""

    time_group: TimeGroup
    display_name: str
    notes: list[UnifiedNoteResult]
    total_count: int
    is_expanded: bool = True


class UnifiedSearchMetadata(_CamelModel):
    """Timing and tally information for an operation."""

    search_time: int = Field(..., description="Wall-clock duration in milliseconds")
    total_results: int
    used_enhanced_search: bool = False
    query: str
    temporal_grouping: bool
    group_counts: dict[TimeGroup, int]
    mode: SearchMode


class UnifiedNotesResponse(_CamelModel):
    """Response shared by search and browse."""

    sections: list[NoteTimeSection]
    total_notes: int
    metadata: UnifiedSearchMetadata


class UnifiedNotesOptions(_CamelModel):
    """Options for a search or browse operation.

    ``max_per_group`` and ``use_enhanced_search`` are accepted for forward
    compatibility and have no effect.
    """

    max_results: int = Field(DEFAULT_MAX_RESULTS, ge=1)
    group_by_time: bool = True
    max_per_group: Optional[int] = Field(None, ge=1)
    show_empty_groups: bool = False
    use_enhanced_search: bool = False


class SearchDiagnostics(_CamelModel):
    """How each search technique matches a user's notes for one query."""

    query: str
    expanded: str = Field(..., description="Loose LIKE pattern used for the query")
    raw_matches: int
    normalized_matches: int
    loose_matches: int
    invisible_char_notes: int
    whitespace_prefixed_matches: int
    total: int
