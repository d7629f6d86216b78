"""Search diagnostics for explaining why a query does or does not match."""

from gravity.notes.store import NoteStore
from gravity.search.schemas import SearchDiagnostics
from gravity.search.strategy import contains_pattern, escape_like, loose_pattern

# Whitespace characters checked directly in front of the query
WHITESPACE_CHARS = (" ", "\t", "\n", "\r")


def diagnose(store: NoteStore, user_id: str, query: str) -> SearchDiagnostics:
    """Count how the user's notes match ``query`` under each technique.

    Field counts add one per matching title and one per matching content,
    so a note can count twice.

    Raises:
        ValueError: If the query is blank.
    """
    trimmed = query.strip()
    if not trimmed:
        raise ValueError("Query is required")

    expanded = loose_pattern(trimmed)
    whitespace_patterns = [f"%{char}{escape_like(trimmed)}%" for char in WHITESPACE_CHARS]
    counts = store.diagnose(user_id, contains_pattern(trimmed), expanded, whitespace_patterns)
    return SearchDiagnostics(query=trimmed, expanded=expanded, **counts)
