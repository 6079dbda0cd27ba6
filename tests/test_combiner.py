"""Tests for rolodex.reactive.combiner — filtering and combine-latest."""

from __future__ import annotations

from rolodex.contacts.records import FilteredView, Record
from rolodex.reactive.combiner import Combiner, filter_records


class TestFilterRecords:
    """filter_records — case-insensitive substring rule."""

    def test_empty_query_is_identity(self, samples: tuple[Record, ...]) -> None:
        assert filter_records(samples, "") is samples

    def test_am_matches_amber_only(self, people: tuple[Record, ...]) -> None:
        # "Simon" contains "im", not "am"; "Sharon" contains neither.
        assert filter_records(people, "am") == (Record("Amber", "2"),)

    def test_case_insensitive(self, people: tuple[Record, ...]) -> None:
        assert filter_records(people, "ON") == (Record("Simon", "1"), Record("Sharon", "3"))

    def test_preserves_snapshot_order(self, samples: tuple[Record, ...]) -> None:
        result = filter_records(samples, "a")
        assert [r.name for r in result] == ["Amber", "Sharon", "Anna", "Harry"]

    def test_partition(self, samples: tuple[Record, ...]) -> None:
        query = "r"
        result = filter_records(samples, query)
        assert all(query in r.name.lower() for r in result)
        assert all(query not in r.name.lower() for r in samples if r not in result)

    def test_no_match_is_empty(self, people: tuple[Record, ...]) -> None:
        assert filter_records(people, "zz") == ()

    def test_query_longer_than_names(self, people: tuple[Record, ...]) -> None:
        assert filter_records(people, "Sharon Stone") == ()


class TestCombiner:
    """Combiner — latest snapshot x latest query."""

    def test_nothing_before_snapshot(self) -> None:
        combiner = Combiner()
        assert combiner.update_query("am") is None

    def test_nothing_before_query(self, people: tuple[Record, ...]) -> None:
        combiner = Combiner()
        assert combiner.update_snapshot(people) is None

    def test_first_view_once_both_seen(self, people: tuple[Record, ...]) -> None:
        combiner = Combiner()
        combiner.update_query("")
        view = combiner.update_snapshot(people)
        assert view == FilteredView(people, "")

    def test_query_update_uses_latest_snapshot(self, people: tuple[Record, ...]) -> None:
        combiner = Combiner()
        combiner.update_query("")
        combiner.update_snapshot(people)
        view = combiner.update_query("sh")
        assert list(view) == [Record("Sharon", "3")]
        assert view.query == "sh"

    def test_snapshot_update_uses_latest_query(self, people: tuple[Record, ...]) -> None:
        combiner = Combiner()
        combiner.update_query("am")
        combiner.update_snapshot(people)
        view = combiner.update_snapshot((*people, Record("Sam", "4")))
        assert [r.name for r in view] == ["Amber", "Sam"]

    def test_none_query_means_unfiltered(self, people: tuple[Record, ...]) -> None:
        combiner = Combiner()
        combiner.update_snapshot(people)
        view = combiner.update_query(None)
        assert view.records is people
        assert combiner.query == ""
