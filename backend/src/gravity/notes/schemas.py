"""Note schemas for the note stream."""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class Note(BaseModel):
    """A note in a user's stream.

    Timestamps stay as the stored ISO-8601 strings. A malformed value must not
    stop the row from loading; the temporal classifier degrades it instead.
    """

    model_config = {"from_attributes": True}

    id: str = Field(..., description="Note identifier")
    user_id: str = Field(..., description="Owner identifier")
    title: Optional[str] = Field(None, description="Optional short title")
    content: str = Field("", description="Note body")
    created_at: Optional[str] = Field(None, description="Creation timestamp (ISO-8601)")
    updated_at: Optional[str] = Field(None, description="Last update timestamp (ISO-8601)")
    is_rescued: bool = Field(False, description="Whether the note was rescued to the top")
    original_note_id: Optional[str] = Field(None, description="Source note for lineage")

    @field_validator("content", mode="before")
    @classmethod
    def _content_defaults_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class NoteCreate(BaseModel):
    """Request to append a new note."""

    content: str = Field(..., min_length=1, description="Note body")
    title: Optional[str] = Field(None, description="Optional short title")


class NoteUpdate(BaseModel):
    """Request to edit an existing note."""

    content: Optional[str] = Field(None, description="New note body")
    title: Optional[str] = Field(None, description="New title")
