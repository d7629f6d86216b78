"""Tiered query strategy tests."""

from unittest.mock import MagicMock

import pytest
from conftest import make_note

from gravity.notes.store import NoteStore, NoteStoreError
from gravity.search.strategy import (
    TieredQueryStrategy,
    contains_pattern,
    escape_like,
    loose_pattern,
)


@pytest.fixture
def mock_store():
    """Store double where every tier returns nothing by default."""
    store = MagicMock(spec=NoteStore)
    store.match_by_normalized_fields.return_value = []
    store.match_by_raw_fields.return_value = []
    return store


class TestPatterns:
    """Tests for LIKE pattern construction."""

    def test_contains_pattern_wraps_query(self):
        assert contains_pattern("proj") == "%proj%"

    def test_loose_pattern_interleaves_wildcards(self):
        assert loose_pattern("abc") == "%a%b%c%"

    def test_escape_like_escapes_wildcards(self):
        assert escape_like("50%_off!") == "50!%!_off!!"

    def test_contains_pattern_escapes_query(self):
        assert contains_pattern("100%") == "%100!%%"

    def test_loose_pattern_escapes_each_character(self):
        assert loose_pattern("a_b") == "%a%!_%b%"


class TestFindMatches:
    """Tests for tier ordering and early exit."""

    def test_first_tier_hit_stops_chain(self, mock_store):
        rows = [make_note("n1", content="project")]
        mock_store.match_by_normalized_fields.return_value = rows
        strategy = TieredQueryStrategy(mock_store)

        assert strategy.find_matches("user-1", "proj", 50) == rows
        mock_store.match_by_normalized_fields.assert_called_once_with("user-1", "%proj%", 50)
        mock_store.match_by_raw_fields.assert_not_called()

    def test_falls_back_to_raw_fields(self, mock_store):
        """Tier 1 empty and tier 2 non-empty: tier 2 output wins, tier 3 never runs."""
        rows = [make_note("n2", content="project")]
        mock_store.match_by_raw_fields.return_value = rows
        strategy = TieredQueryStrategy(mock_store)

        assert strategy.find_matches("user-1", "proj", 50) == rows
        mock_store.match_by_normalized_fields.assert_called_once_with("user-1", "%proj%", 50)
        mock_store.match_by_raw_fields.assert_called_once_with("user-1", "%proj%", 50)

    def test_loose_match_on_normalized_fields(self, mock_store):
        rows = [make_note("n3", content="1 2 3 1 2 3")]

        def normalized(user_id, pattern, limit):
            return rows if pattern == "%1%2%3%1%2%3%" else []

        mock_store.match_by_normalized_fields.side_effect = normalized
        strategy = TieredQueryStrategy(mock_store)

        assert strategy.find_matches("user-1", "123123", 10) == rows
        patterns = [c.args[1] for c in mock_store.match_by_normalized_fields.call_args_list]
        assert patterns == ["%123123%", "%1%2%3%1%2%3%"]

    def test_loose_match_falls_back_to_raw_fields(self, mock_store):
        strategy = TieredQueryStrategy(mock_store)

        assert strategy.find_matches("user-1", "abc", 10) == []
        raw_patterns = [c.args[1] for c in mock_store.match_by_raw_fields.call_args_list]
        assert raw_patterns == ["%abc%", "%a%b%c%"]

    def test_short_query_skips_loose_tiers(self, mock_store):
        strategy = TieredQueryStrategy(mock_store)

        assert strategy.find_matches("user-1", "ab", 10) == []
        assert mock_store.match_by_normalized_fields.call_count == 1
        assert mock_store.match_by_raw_fields.call_count == 1

    def test_loose_min_length_is_configurable(self, mock_store):
        strategy = TieredQueryStrategy(mock_store, loose_min_length=2)

        strategy.find_matches("user-1", "ab", 10)
        assert mock_store.match_by_normalized_fields.call_count == 2

    def test_every_tier_scoped_to_user(self, mock_store):
        strategy = TieredQueryStrategy(mock_store)
        strategy.find_matches("user-42", "abcdef", 7)

        calls = (
            mock_store.match_by_normalized_fields.call_args_list
            + mock_store.match_by_raw_fields.call_args_list
        )
        assert len(calls) == 4
        assert all(c.args[0] == "user-42" and c.args[2] == 7 for c in calls)

    def test_store_error_propagates(self, mock_store):
        mock_store.match_by_normalized_fields.side_effect = NoteStoreError("down")
        strategy = TieredQueryStrategy(mock_store)

        with pytest.raises(NoteStoreError):
            strategy.find_matches("user-1", "proj", 10)

    def test_tier_names_in_order(self, mock_store):
        strategy = TieredQueryStrategy(mock_store)
        assert [tier.name for tier in strategy.tiers] == [
            "normalized",
            "raw",
            "loose_normalized",
            "loose_raw",
        ]
