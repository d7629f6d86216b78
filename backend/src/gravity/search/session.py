"""Caller-side state for an interactive search box.

The search service is stateless; a UI that keeps a current query, a loading
flag and the last response wraps it in a SearchSession. The HTTP API does not
use it; it is exported for embedding the engine in a client process.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from gravity.search.schemas import SearchMode, UnifiedNotesOptions, UnifiedNotesResponse
from gravity.search.service import UnifiedSearchService


class SessionStatus(str, Enum):
    """Lifecycle of the most recent request."""

    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class SearchSession:
    """Query text, options and last response for one user's search box.

    Overlapping requests are allowed. Each request takes a generation number
    and its outcome is applied only if no newer request started meanwhile.
    """

    service: UnifiedSearchService
    user_id: Optional[str]
    query: str = ""
    status: SessionStatus = SessionStatus.IDLE
    results: Optional[UnifiedNotesResponse] = None
    error: Optional[str] = None
    options: UnifiedNotesOptions = field(default_factory=UnifiedNotesOptions)
    _generation: int = field(default=0, repr=False)

    @property
    def mode(self) -> SearchMode:
        return SearchMode.SEARCH if self.query.strip() else SearchMode.BROWSE

    @property
    def has_query(self) -> bool:
        return bool(self.query.strip())

    @property
    def has_results(self) -> bool:
        return self.results is not None

    @property
    def has_error(self) -> bool:
        return self.error is not None

    @property
    def is_loading(self) -> bool:
        return self.status == SessionStatus.LOADING

    def set_query(self, query: str) -> None:
        self.query = query

    def set_options(self, **changes: Any) -> None:
        """Merge option changes into the current options."""
        self.options = self.options.model_copy(update=changes)

    def run_search(
        self, query: Optional[str] = None, options: Optional[UnifiedNotesOptions] = None
    ) -> Optional[UnifiedNotesResponse]:
        """Search with the given or current query.

        Returns the response, or None if a newer request superseded this one
        before it finished.

        Raises:
            Exception: Whatever the service raised; also recorded in ``error``.
        """
        if query is not None:
            self.query = query
        return self._run(self.query, options or self.options, "Search failed")

    def run_browse(
        self, options: Optional[UnifiedNotesOptions] = None
    ) -> Optional[UnifiedNotesResponse]:
        """Browse recent notes, ignoring the current query."""
        return self._run("", options or self.options, "Browse failed")

    def _begin(self) -> int:
        self._generation += 1
        self.status = SessionStatus.LOADING
        return self._generation

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _run(
        self, query: str, options: UnifiedNotesOptions, fallback_message: str
    ) -> Optional[UnifiedNotesResponse]:
        generation = self._begin()
        try:
            response = self.service.execute(self.user_id, query, options)
        except Exception as e:
            if self._is_current(generation):
                self.error = str(e) or fallback_message
                self.status = SessionStatus.ERROR
            raise
        if not self._is_current(generation):
            return None
        self.results = response
        self.error = None
        self.status = SessionStatus.SUCCESS
        return response

    def reset(self) -> None:
        """Return to the initial state; in-flight requests are discarded."""
        self._generation += 1
        self.query = ""
        self.status = SessionStatus.IDLE
        self.results = None
        self.error = None
        self.options = UnifiedNotesOptions()

    def clear_results(self) -> None:
        self.results = None
        self.error = None
        if self.status != SessionStatus.LOADING:
            self.status = SessionStatus.IDLE
