"""Unified search and browse endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from gravity.api.deps import (
    get_current_user_id,
    get_note_store,
    get_search_service,
    get_settings,
)
from gravity.notes.store import NoteStore, NoteStoreError
from gravity.search.diagnostics import diagnose
from gravity.search.schemas import SearchDiagnostics, UnifiedNotesOptions, UnifiedNotesResponse
from gravity.search.service import UnifiedSearchService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/search", tags=["search"])


def get_search_options(
    max_results: int | None = Query(None, ge=1, le=1000, description="Maximum results"),
    group_by_time: bool | None = Query(None, description="Group results by time"),
    show_empty_groups: bool | None = Query(None, description="Keep empty time sections"),
) -> UnifiedNotesOptions:
    """Build operation options from query parameters and configured defaults."""
    defaults = get_settings().search
    return UnifiedNotesOptions(
        max_results=max_results if max_results is not None else defaults.max_results,
        group_by_time=group_by_time if group_by_time is not None else defaults.group_by_time,
        show_empty_groups=(
            show_empty_groups if show_empty_groups is not None else defaults.show_empty_groups
        ),
    )


def _store_unavailable(e: NoteStoreError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))


@router.get("", response_model=UnifiedNotesResponse)
async def search_notes(
    q: str = Query("", description="Search query; blank lists recent notes"),
    options: UnifiedNotesOptions = Depends(get_search_options),
    user_id: str = Depends(get_current_user_id),
    service: UnifiedSearchService = Depends(get_search_service),
) -> UnifiedNotesResponse:
    """Search notes, grouped into time sections."""
    try:
        return service.search(user_id, q, options)
    except NoteStoreError as e:
        raise _store_unavailable(e) from e


@router.get("/browse", response_model=UnifiedNotesResponse)
async def browse_notes(
    options: UnifiedNotesOptions = Depends(get_search_options),
    user_id: str = Depends(get_current_user_id),
    service: UnifiedSearchService = Depends(get_search_service),
) -> UnifiedNotesResponse:
    """List the most recently updated notes, grouped into time sections."""
    try:
        return service.browse(user_id, options)
    except NoteStoreError as e:
        raise _store_unavailable(e) from e


@router.get("/diagnostics", response_model=SearchDiagnostics)
async def search_diagnostics(
    q: str = Query("", description="Query to diagnose"),
    user_id: str = Depends(get_current_user_id),
    store: NoteStore = Depends(get_note_store),
) -> SearchDiagnostics:
    """Explain how a query matches the caller's notes under each technique."""
    if not q.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="q required")
    try:
        return diagnose(store, user_id, q)
    except NoteStoreError as e:
        raise _store_unavailable(e) from e
