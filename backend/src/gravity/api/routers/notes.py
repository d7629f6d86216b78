"""Notes API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status

from gravity.api.deps import get_current_user_id, get_notes_service
from gravity.errors import NoteNotFoundError, NoteValidationError
from gravity.notes.schemas import Note, NoteCreate, NoteUpdate
from gravity.notes.service import NotesService
from gravity.notes.store import NoteStoreError


router = APIRouter(prefix="/api/notes", tags=["notes"])


def _to_http_error(e: Exception) -> HTTPException:
    if isinstance(e, NoteNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Note not found")
    if isinstance(e, NoteValidationError):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))


@router.post("", response_model=Note, status_code=status.HTTP_201_CREATED)
async def create_note(
    data: NoteCreate,
    user_id: str = Depends(get_current_user_id),
    service: NotesService = Depends(get_notes_service),
) -> Note:
    """Append a note to the top of the caller's stream."""
    try:
        return service.create(user_id, content=data.content, title=data.title)
    except (NoteValidationError, NoteStoreError) as e:
        raise _to_http_error(e) from e


@router.get("/{note_id}", response_model=Note)
async def get_note(
    note_id: str,
    user_id: str = Depends(get_current_user_id),
    service: NotesService = Depends(get_notes_service),
) -> Note:
    """Get a single note."""
    try:
        return service.get(user_id, note_id)
    except (NoteNotFoundError, NoteStoreError) as e:
        raise _to_http_error(e) from e


@router.patch("/{note_id}", response_model=Note)
async def update_note(
    note_id: str,
    data: NoteUpdate,
    user_id: str = Depends(get_current_user_id),
    service: NotesService = Depends(get_notes_service),
) -> Note:
    """Edit a note's content or title; the note moves to the top."""
    try:
        return service.update(user_id, note_id, content=data.content, title=data.title)
    except (NoteNotFoundError, NoteValidationError, NoteStoreError) as e:
        raise _to_http_error(e) from e


@router.post("/{note_id}/rescue", response_model=Note)
async def rescue_note(
    note_id: str,
    user_id: str = Depends(get_current_user_id),
    service: NotesService = Depends(get_notes_service),
) -> Note:
    """Bring an old note back to the top of the stream."""
    try:
        return service.rescue(user_id, note_id)
    except (NoteNotFoundError, NoteStoreError) as e:
        raise _to_http_error(e) from e


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(
    note_id: str,
    user_id: str = Depends(get_current_user_id),
    service: NotesService = Depends(get_notes_service),
) -> None:
    """Delete a note."""
    try:
        deleted = service.delete(user_id, note_id)
    except NoteStoreError as e:
        raise _to_http_error(e) from e
    if not deleted:
        raise HTTPException(status_code=404, detail="Note not found")
