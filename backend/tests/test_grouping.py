"""Result building and time sectioning tests."""

from datetime import timedelta

from conftest import FIXED_NOW, make_note
from hypothesis import given, settings
from hypothesis import strategies as st

from gravity.search.grouping import (
    DISPLAY_NAMES,
    TIME_GROUP_PRIORITY,
    count_groups,
    group_results,
)
from gravity.search.results import build_results
from gravity.search.schemas import SearchMode
from gravity.search.temporal import TimeGroup, compute_boundaries
from gravity.timestamps import parse_timestamp

BOUNDARIES = compute_boundaries(FIXED_NOW)


def _ago(**delta) -> str:
    return (FIXED_NOW - timedelta(**delta)).isoformat()


class TestBuildResults:
    """Tests for unified result construction."""

    def test_search_mode_highlights_and_ranks(self):
        rows = [make_note("n1", title="Project Alpha", content="alpha project notes")]
        [result] = build_results(rows, SearchMode.SEARCH, "proj", BOUNDARIES)

        assert result.highlighted_title == "<mark>Proj</mark>ect Alpha"
        assert result.highlighted_content == "alpha <mark>proj</mark>ect notes"
        assert result.search_rank == 0.5
        assert result.group_rank == 1

    def test_search_mode_missing_title_highlights_empty_string(self):
        [result] = build_results([make_note("n1", content="x")], SearchMode.SEARCH, "x", BOUNDARIES)
        assert result.highlighted_title == ""

    def test_browse_mode_copies_fields(self):
        rows = [make_note("n1", title=None, content="plain <b>text</b>")]
        [result] = build_results(rows, SearchMode.BROWSE, "", BOUNDARIES)

        assert result.highlighted_content == "plain <b>text</b>"
        assert result.highlighted_title is None
        assert result.search_rank == 0.0
        assert result.group_rank == 1

    def test_attaches_time_group(self):
        rows = [
            make_note("recent", updated_at=_ago(hours=2)),
            make_note("old", updated_at="2020-01-01T00:00:00+00:00"),
        ]
        results = build_results(rows, SearchMode.BROWSE, "", BOUNDARIES)
        assert [r.time_group for r in results] == [TimeGroup.YESTERDAY, TimeGroup.EARLIER]

    def test_does_not_mutate_rows(self):
        row = make_note("n1", title="Project", content="project")
        before = row.model_dump()
        build_results([row], SearchMode.SEARCH, "proj", BOUNDARIES)
        assert row.model_dump() == before

    def test_carries_lineage_fields(self):
        row = make_note("n1").model_copy(update={"is_rescued": True, "original_note_id": "n0"})
        [result] = build_results([row], SearchMode.BROWSE, "", BOUNDARIES)
        assert result.is_rescued is True
        assert result.original_note_id == "n0"


class TestGroupResults:
    """Tests for sectioning."""

    def _results(self):
        rows = [
            make_note("old", updated_at=_ago(days=60)),
            make_note("today", updated_at=_ago(hours=1)),
            make_note("week", updated_at=_ago(days=3)),
            make_note("today-earlier", updated_at=_ago(hours=5)),
        ]
        return build_results(rows, SearchMode.BROWSE, "", BOUNDARIES)

    def test_sections_ordered_by_priority(self):
        sections = group_results(self._results(), group_by_time=True, mode=SearchMode.BROWSE)
        assert [s.time_group for s in sections] == [
            TimeGroup.YESTERDAY,
            TimeGroup.LAST_WEEK,
            TimeGroup.EARLIER,
        ]

    def test_empty_groups_dropped(self):
        sections = group_results(self._results(), group_by_time=True, mode=SearchMode.BROWSE)
        assert TimeGroup.LAST_MONTH not in {s.time_group for s in sections}

    def test_show_empty_groups_keeps_all_buckets(self):
        sections = group_results(
            self._results(), group_by_time=True, mode=SearchMode.BROWSE, show_empty_groups=True
        )
        assert [s.time_group for s in sections] == [
            TimeGroup.YESTERDAY,
            TimeGroup.LAST_WEEK,
            TimeGroup.LAST_MONTH,
            TimeGroup.EARLIER,
        ]
        last_month = sections[2]
        assert last_month.notes == []
        assert last_month.total_count == 0

    def test_notes_sorted_newest_first_within_section(self):
        sections = group_results(self._results(), group_by_time=True, mode=SearchMode.BROWSE)
        assert [n.id for n in sections[0].notes] == ["today", "today-earlier"]

    def test_display_names(self):
        sections = group_results(self._results(), group_by_time=True, mode=SearchMode.BROWSE)
        assert [s.display_name for s in sections] == ["Yesterday", "Last Week", "Earlier"]
        assert DISPLAY_NAMES[TimeGroup.LAST_MONTH] == "Last 30 Days"

    def test_section_counts(self):
        sections = group_results(self._results(), group_by_time=True, mode=SearchMode.BROWSE)
        assert [s.total_count for s in sections] == [2, 1, 1]
        assert all(s.is_expanded for s in sections)

    def test_ungrouped_browse_is_single_all_section(self):
        results = self._results()
        [section] = group_results(results, group_by_time=False, mode=SearchMode.BROWSE)

        assert section.time_group == TimeGroup.ALL
        assert section.display_name == "All Notes"
        assert [n.id for n in section.notes] == ["today", "today-earlier", "week", "old"]
        assert section.total_count == 4

    def test_ungrouped_search_is_named_search_results(self):
        [section] = group_results(self._results(), group_by_time=False, mode=SearchMode.SEARCH)
        assert section.display_name == "Search Results"

    def test_ungrouped_section_orders_by_instant_not_text(self):
        rows = [
            make_note("bad", updated_at="garbage"),
            make_note("utc-plus-five", updated_at="2025-08-30T11:00:00+05:00"),
            make_note("utc-minus-four", updated_at="2025-08-30T05:00:00-04:00"),
        ]
        results = build_results(rows, SearchMode.BROWSE, "", BOUNDARIES)
        [section] = group_results(results, group_by_time=False, mode=SearchMode.BROWSE)
        assert [n.id for n in section.notes] == ["utc-minus-four", "utc-plus-five", "bad"]

    def test_malformed_timestamps_sort_last(self):
        rows = [
            make_note("bad", updated_at="garbage"),
            make_note("good", updated_at="2021-01-01T00:00:00+00:00"),
        ]
        results = build_results(rows, SearchMode.BROWSE, "", BOUNDARIES)
        [section] = group_results(results, group_by_time=True, mode=SearchMode.BROWSE)
        assert section.time_group == TimeGroup.EARLIER
        assert [n.id for n in section.notes] == ["good", "bad"]


class TestCountGroups:
    """Tests for per-group tallies."""

    def test_all_keys_present(self):
        counts = count_groups([])
        assert set(counts) == set(TIME_GROUP_PRIORITY)
        assert all(v == 0 for v in counts.values())

    def test_counts_each_group(self):
        rows = [
            make_note("a", updated_at=_ago(hours=1)),
            make_note("b", updated_at=_ago(hours=2)),
            make_note("c", updated_at=_ago(days=40)),
        ]
        counts = count_groups(build_results(rows, SearchMode.BROWSE, "", BOUNDARIES))
        assert counts[TimeGroup.YESTERDAY] == 2
        assert counts[TimeGroup.EARLIER] == 1
        assert counts[TimeGroup.ALL] == 0


@given(st.lists(st.integers(min_value=0, max_value=90 * 24 * 60), max_size=40))
@settings(max_examples=100)
def test_grouped_sections_are_ordered_property(minutes_ago: list[int]):
    """Property: sections follow priority order and notes within are newest first."""
    rows = [
        make_note(f"n{i}", updated_at=_ago(minutes=minutes))
        for i, minutes in enumerate(minutes_ago)
    ]
    results = build_results(rows, SearchMode.BROWSE, "", BOUNDARIES)
    sections = group_results(results, group_by_time=True, mode=SearchMode.BROWSE)

    priorities = [TIME_GROUP_PRIORITY[s.time_group] for s in sections]
    assert priorities == sorted(priorities)
    for section in sections:
        stamps = [parse_timestamp(n.updated_at) for n in section.notes]
        assert stamps == sorted(stamps, reverse=True)
    assert sum(len(s.notes) for s in sections) == len(rows)
