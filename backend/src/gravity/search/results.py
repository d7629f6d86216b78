"""Conversion of store rows into unified results."""

from typing import Iterable

from gravity.constants.search import (
    DEFAULT_GROUP_RANK,
    SEARCH_RANK_BROWSE,
    SEARCH_RANK_SUBSTRING,
)
from gravity.notes.schemas import Note
from gravity.search.highlight import highlight
from gravity.search.schemas import SearchMode, UnifiedNoteResult
from gravity.search.temporal import TemporalBoundaries, classify


def build_results(
    rows: Iterable[Note],
    mode: SearchMode,
    query: str,
    boundaries: TemporalBoundaries,
) -> list[UnifiedNoteResult]:
    """Attach time group, highlights and rank to each row.

    Search mode highlights the query in title and content and ranks every
    hit equally. Browse mode copies the fields through unmarked with a zero
    rank. Rows are copied, never modified.
    """
    results = []
    for row in rows:
        fields = row.model_dump()
        if mode == SearchMode.SEARCH:
            highlighted_content = highlight(row.content, query) or ""
            highlighted_title = highlight(row.title or "", query)
            search_rank = SEARCH_RANK_SUBSTRING
        else:
            highlighted_content = row.content
            highlighted_title = row.title
            search_rank = SEARCH_RANK_BROWSE

        results.append(
            UnifiedNoteResult(
                **fields,
                time_group=classify(row.updated_at, boundaries),
                group_rank=DEFAULT_GROUP_RANK,
                highlighted_content=highlighted_content,
                highlighted_title=highlighted_title,
                search_rank=search_rank,
            )
        )
    return results
