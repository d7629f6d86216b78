"""Notes service for appending, editing and rescuing notes."""

import logging
import uuid
from datetime import UTC, datetime
from typing import Callable, Optional

from gravity.constants.notes import INVISIBLE_CHARS, MAX_CONTENT_LENGTH
from gravity.errors import AuthenticationRequiredError, NoteNotFoundError, NoteValidationError
from gravity.notes.schemas import Note
from gravity.notes.store import NoteStore

logger = logging.getLogger(__name__)


def normalize_for_search(text: str) -> str:
    """Remove invisible characters that break substring search."""
    for char in INVISIBLE_CHARS:
        text = text.replace(char, "")
    return text


def _utc_now() -> datetime:
    return datetime.now(UTC)


class NotesService:
    """Service for a user's note stream.

    Every operation is scoped to one user. Writes stamp ``updated_at`` so the
    touched note moves to the top of the stream.
    """

    def __init__(
        self,
        store: NoteStore,
        max_content_length: int = MAX_CONTENT_LENGTH,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """Initialize notes service.

        Args:
            store: Note store to write to.
            max_content_length: Maximum characters allowed in a note body.
            clock: Returns the current time; defaults to UTC now.
        """
        self._store = store
        self._max_content_length = max_content_length
        self._clock = clock or _utc_now

    def _timestamp(self) -> str:
        return self._clock().isoformat()

    @staticmethod
    def _require_user(user_id: Optional[str]) -> str:
        if not user_id:
            raise AuthenticationRequiredError()
        return user_id

    def _clean_content(self, content: str) -> str:
        content = normalize_for_search(content)
        if not content.strip():
            raise NoteValidationError("Note content is required")
        if len(content) > self._max_content_length:
            raise NoteValidationError(
                f"Note content is {len(content)} characters, "
                f"but maximum is {self._max_content_length}"
            )
        return content

    def create(self, user_id: Optional[str], content: str, title: Optional[str] = None) -> Note:
        """Append a note to the user's stream.

        Raises:
            AuthenticationRequiredError: If no user is given.
            NoteValidationError: If the content is blank or too long.
        """
        user_id = self._require_user(user_id)
        now = self._timestamp()
        note = Note(
            id=uuid.uuid4().hex,
            user_id=user_id,
            title=normalize_for_search(title) if title is not None else None,
            content=self._clean_content(content),
            created_at=now,
            updated_at=now,
        )
        self._store.insert(note)
        logger.info(f"Created note {note.id} for user {user_id}")
        return note

    def get(self, user_id: Optional[str], note_id: str) -> Note:
        """Get one of the user's notes.

        Raises:
            NoteNotFoundError: If the note is missing or owned by someone else.
        """
        user_id = self._require_user(user_id)
        note = self._store.get(user_id, note_id)
        if note is None:
            raise NoteNotFoundError(note_id)
        return note

    def update(
        self,
        user_id: Optional[str],
        note_id: str,
        content: Optional[str] = None,
        title: Optional[str] = None,
    ) -> Note:
        """Edit a note's content and/or title and move it to the top."""
        user_id = self._require_user(user_id)
        changes: dict[str, object] = {"updated_at": self._timestamp()}
        if content is not None:
            changes["content"] = self._clean_content(content)
        if title is not None:
            changes["title"] = normalize_for_search(title)

        note = self._store.update(user_id, note_id, changes)
        if note is None:
            raise NoteNotFoundError(note_id)
        return note

    def rescue(self, user_id: Optional[str], note_id: str) -> Note:
        """Bring an old note back to the top of the stream."""
        user_id = self._require_user(user_id)
        note = self._store.update(
            user_id, note_id, {"updated_at": self._timestamp(), "is_rescued": True}
        )
        if note is None:
            raise NoteNotFoundError(note_id)
        logger.info(f"Rescued note {note_id} for user {user_id}")
        return note

    def delete(self, user_id: Optional[str], note_id: str) -> bool:
        """Delete a note.

        Returns:
            True if deleted, False if not found.
        """
        user_id = self._require_user(user_id)
        return self._store.delete(user_id, note_id)
