"""Domain errors shared by the notes and search services."""


class AuthenticationRequiredError(Exception):
    """Raised when an operation is invoked without an identified user."""

    def __init__(self, message: str = "User not authenticated") -> None:
        super().__init__(message)


class NoteNotFoundError(Exception):
    """Raised when a note does not exist or belongs to another user."""

    def __init__(self, note_id: str) -> None:
        super().__init__(f"Note not found: {note_id}")
        self.note_id = note_id


class NoteValidationError(ValueError):
    """Raised when note input fails validation."""

    pass
