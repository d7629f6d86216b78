"""Tiered substring search over the note store.

Search runs an ordered chain of increasingly permissive match attempts and
stops at the first one that returns rows:

1. substring match on the normalized title/content columns
2. substring match on the raw columns, for rows stored before normalization
3. loose match on the normalized columns (query length >= loose_min_length)
4. loose match on the raw columns (same length rule)

A loose match puts a wildcard between every query character, so "abc" also
finds "a b c" or text polluted with formatting characters.
"""

import logging
from dataclasses import dataclass
from typing import Callable

from gravity.constants.search import LOOSE_MATCH_MIN_LENGTH
from gravity.notes.schemas import Note
from gravity.notes.store import LIKE_ESCAPE, NoteStore

logger = logging.getLogger(__name__)

_LIKE_SPECIAL = (LIKE_ESCAPE, "%", "_")


def escape_like(text: str) -> str:
    """Escape LIKE metacharacters so ``text`` matches literally."""
    return "".join(LIKE_ESCAPE + char if char in _LIKE_SPECIAL else char for char in text)


def contains_pattern(query: str) -> str:
    """LIKE pattern matching ``query`` anywhere in a field."""
    return f"%{escape_like(query)}%"


def loose_pattern(query: str) -> str:
    """LIKE pattern matching the query characters in order, with gaps allowed."""
    return "%" + "%".join(escape_like(char) for char in query) + "%"


@dataclass(frozen=True)
class QueryTier:
    """One match attempt in the search chain."""

    name: str
    run: Callable[[str, str, int], list[Note]]
    min_query_length: int = 1

    def applies_to(self, query: str) -> bool:
        return len(query) >= self.min_query_length


class TieredQueryStrategy:
    """Runs the query tiers in order with early exit on the first hit."""

    def __init__(self, store: NoteStore, loose_min_length: int = LOOSE_MATCH_MIN_LENGTH) -> None:
        self.tiers = [
            QueryTier(
                "normalized",
                lambda user_id, query, limit: store.match_by_normalized_fields(
                    user_id, contains_pattern(query), limit
                ),
            ),
            QueryTier(
                "raw",
                lambda user_id, query, limit: store.match_by_raw_fields(
                    user_id, contains_pattern(query), limit
                ),
            ),
            QueryTier(
                "loose_normalized",
                lambda user_id, query, limit: store.match_by_normalized_fields(
                    user_id, loose_pattern(query), limit
                ),
                min_query_length=loose_min_length,
            ),
            QueryTier(
                "loose_raw",
                lambda user_id, query, limit: store.match_by_raw_fields(
                    user_id, loose_pattern(query), limit
                ),
                min_query_length=loose_min_length,
            ),
        ]

    def find_matches(self, user_id: str, query: str, max_results: int) -> list[Note]:
        """Return rows from the first tier that matches anything.

        Args:
            user_id: Owner whose notes are searched.
            query: Trimmed, non-empty query text.
            max_results: Row cap applied by every tier.

        Returns:
            Matching notes, newest first, or an empty list.
        """
        for tier in self.tiers:
            if not tier.applies_to(query):
                continue
            rows = tier.run(user_id, query, max_results)
            if rows:
                logger.debug(f"Search tier '{tier.name}' matched {len(rows)} note(s)")
                return rows
        return []
