"""Bucketing unified results into time sections."""

from gravity.search.schemas import NoteTimeSection, SearchMode, UnifiedNoteResult
from gravity.search.temporal import TimeGroup
from gravity.timestamps import sort_key

# Lower numbers come first
TIME_GROUP_PRIORITY: dict[TimeGroup, int] = {
    TimeGroup.YESTERDAY: 1,
    TimeGroup.LAST_WEEK: 2,
    TimeGroup.LAST_MONTH: 3,
    TimeGroup.EARLIER: 4,
    TimeGroup.ALL: 5,
}

DISPLAY_NAMES: dict[TimeGroup, str] = {
    TimeGroup.YESTERDAY: "Yesterday",
    TimeGroup.LAST_WEEK: "Last Week",
    TimeGroup.LAST_MONTH: "Last 30 Days",
    TimeGroup.EARLIER: "Earlier",
    TimeGroup.ALL: "All Notes",
}

SEARCH_RESULTS_DISPLAY_NAME = "Search Results"

# Buckets a grouped response can contain
TEMPORAL_GROUPS = (
    TimeGroup.YESTERDAY,
    TimeGroup.LAST_WEEK,
    TimeGroup.LAST_MONTH,
    TimeGroup.EARLIER,
)


def _newest_first(notes: list[UnifiedNoteResult]) -> list[UnifiedNoteResult]:
    return sorted(notes, key=lambda note: sort_key(note.updated_at), reverse=True)


def count_groups(results: list[UnifiedNoteResult]) -> dict[TimeGroup, int]:
    """Tally results per time group, with every group present."""
    counts = {group: 0 for group in TIME_GROUP_PRIORITY}
    for result in results:
        counts[result.time_group] += 1
    return counts


def group_results(
    results: list[UnifiedNoteResult],
    group_by_time: bool,
    mode: SearchMode,
    show_empty_groups: bool = False,
) -> list[NoteTimeSection]:
    """Split results into time sections.

    Every section lists its notes newest first, with unparseable timestamps
    last. Without grouping, everything goes into one "all" section. With
    grouping, buckets are ordered by TIME_GROUP_PRIORITY; empty buckets are
    dropped unless ``show_empty_groups`` is set.
    """
    if not group_by_time:
        display_name = (
            SEARCH_RESULTS_DISPLAY_NAME if mode == SearchMode.SEARCH else DISPLAY_NAMES[TimeGroup.ALL]
        )
        return [
            NoteTimeSection(
                time_group=TimeGroup.ALL,
                display_name=display_name,
                notes=_newest_first(results),
                total_count=len(results),
                is_expanded=True,
            )
        ]

    buckets: dict[TimeGroup, list[UnifiedNoteResult]] = {group: [] for group in TEMPORAL_GROUPS}
    for result in results:
        buckets.setdefault(result.time_group, []).append(result)

    sections = []
    for group in sorted(buckets, key=TIME_GROUP_PRIORITY.__getitem__):
        notes = buckets[group]
        if not notes and not show_empty_groups:
            continue
        sections.append(
            NoteTimeSection(
                time_group=group,
                display_name=DISPLAY_NAMES[group],
                notes=_newest_first(notes),
                total_count=len(notes),
                is_expanded=True,
            )
        )
    return sections
