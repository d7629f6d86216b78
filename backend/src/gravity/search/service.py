"""Unified search and browse over a user's notes."""

import logging
import time
from datetime import datetime, tzinfo
from typing import Callable, Optional

from gravity.constants.search import LOOSE_MATCH_MIN_LENGTH
from gravity.errors import AuthenticationRequiredError
from gravity.notes.store import NoteStore
from gravity.search.grouping import count_groups, group_results
from gravity.search.results import build_results
from gravity.search.schemas import (
    SearchMode,
    UnifiedNotesOptions,
    UnifiedNotesResponse,
    UnifiedSearchMetadata,
)
from gravity.search.strategy import TieredQueryStrategy
from gravity.search.temporal import compute_boundaries
from gravity.timestamps import local_timezone

logger = logging.getLogger(__name__)


class UnifiedSearchService:
    """Search and browse producing one response shape.

    A non-blank query runs the tiered substring search; a blank one lists the
    most recently updated notes. Either way the rows are classified into time
    groups, highlighted (search only) and sectioned.

    The service keeps no state between calls. Store errors propagate to the
    caller unchanged.
    """

    def __init__(
        self,
        store: NoteStore,
        clock: Optional[Callable[[], datetime]] = None,
        loose_min_length: int = LOOSE_MATCH_MIN_LENGTH,
        timezone: Optional[tzinfo] = None,
    ) -> None:
        """Initialize the service.

        Args:
            store: Note store to query.
            clock: Returns "now" for temporal classification. Defaults to the
                current time in ``timezone``.
            loose_min_length: Minimum query length for loose matching.
            timezone: Zone whose calendar days define the time groups.
                Defaults to the system zone.
        """
        self._store = store
        self._timezone = timezone or local_timezone()
        self._clock = clock or self._now
        self._strategy = TieredQueryStrategy(store, loose_min_length=loose_min_length)

    def _now(self) -> datetime:
        return datetime.now(self._timezone)

    def search(
        self, user_id: Optional[str], query: str, options: Optional[UnifiedNotesOptions] = None
    ) -> UnifiedNotesResponse:
        """Search notes; a blank query behaves exactly like browse()."""
        return self.execute(user_id, query, options)

    def browse(
        self, user_id: Optional[str], options: Optional[UnifiedNotesOptions] = None
    ) -> UnifiedNotesResponse:
        """List the most recently updated notes."""
        return self.execute(user_id, "", options)

    def execute(
        self, user_id: Optional[str], query: str, options: Optional[UnifiedNotesOptions] = None
    ) -> UnifiedNotesResponse:
        """Run one search or browse operation.

        Args:
            user_id: Identified caller; every store call is scoped to it.
            query: Raw query text; surrounding whitespace is ignored.
            options: Operation options, defaults when None.

        Returns:
            Sections, total count and metadata for the operation.

        Raises:
            AuthenticationRequiredError: If no user is given.
            NoteStoreError: If the store fails.
        """
        start = time.perf_counter()
        options = options or UnifiedNotesOptions()

        if not user_id:
            raise AuthenticationRequiredError()

        trimmed = (query or "").strip()
        mode = SearchMode.SEARCH if trimmed else SearchMode.BROWSE

        try:
            if mode == SearchMode.SEARCH:
                rows = self._strategy.find_matches(user_id, trimmed, options.max_results)
            else:
                rows = self._store.fetch_recent(user_id, options.max_results)
        except Exception as e:
            logger.error(f"Unified {mode.value} failed for user {user_id}: {e}")
            raise

        boundaries = compute_boundaries(self._clock())
        results = build_results(rows, mode, trimmed, boundaries)
        sections = group_results(
            results,
            group_by_time=options.group_by_time,
            mode=mode,
            show_empty_groups=options.show_empty_groups,
        )
        search_time = round((time.perf_counter() - start) * 1000)

        return UnifiedNotesResponse(
            sections=sections,
            total_notes=len(results),
            metadata=UnifiedSearchMetadata(
                search_time=search_time,
                total_results=len(results),
                used_enhanced_search=False,
                query=trimmed,
                temporal_grouping=options.group_by_time,
                group_counts=count_groups(results),
                mode=mode,
            ),
        )
