"""Tests for rolodex.observability — pipeline events."""

from __future__ import annotations

import dataclasses
import threading

import pytest

from rolodex.observability.collector import StackCollector
from rolodex.observability.events import (
    PipelineLifecycle,
    QuerySettled,
    SnapshotDiscarded,
    SnapshotLoaded,
    ViewComputed,
    now_ns,
)
from rolodex.observability.log import EventLog


def _query(q: str, ts: int | None = None) -> QuerySettled:
    return QuerySettled(query=q, timestamp_ns=now_ns() if ts is None else ts)


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


class TestEvents:
    """Event dataclasses."""

    def test_frozen(self) -> None:
        event = _query("am")
        with pytest.raises(dataclasses.FrozenInstanceError):
            event.query = "x"  # type: ignore[misc]

    def test_now_ns_monotonic(self) -> None:
        assert now_ns() <= now_ns()


# ---------------------------------------------------------------------------
# EventLog
# ---------------------------------------------------------------------------


class TestEventLog:
    """EventLog — bounded, queryable history."""

    def test_append_and_len(self) -> None:
        log = EventLog()
        assert len(log) == 0
        log.append(_query("a"))
        assert len(log) == 1

    def test_capacity_evicts_oldest(self) -> None:
        log = EventLog(max_events=3)
        for q in "abcde":
            log.append(_query(q))
        assert [e.query for e in log.recent()] == ["c", "d", "e"]
        assert log.stats()["evicted"] == 2

    def test_query_newest_first(self) -> None:
        log = EventLog()
        for q in "abc":
            log.append(_query(q))
        assert [e.query for e in log.query()] == ["c", "b", "a"]

    def test_query_by_type(self) -> None:
        log = EventLog()
        log.append(_query("a"))
        log.append(SnapshotDiscarded(generation=1, latest_generation=2, timestamp_ns=now_ns()))
        (event,) = log.query(event_type=SnapshotDiscarded)
        assert event.generation == 1

    def test_query_since(self) -> None:
        log = EventLog()
        log.append(_query("old", ts=100))
        log.append(_query("new", ts=200))
        assert [e.query for e in log.query(since_ns=150)] == ["new"]

    def test_query_limit(self) -> None:
        log = EventLog()
        for q in "abcdef":
            log.append(_query(q))
        assert [e.query for e in log.query(limit=2)] == ["f", "e"]

    def test_latest(self) -> None:
        log = EventLog()
        assert log.latest() is None
        log.append(_query("a"))
        log.append(SnapshotDiscarded(generation=1, latest_generation=2, timestamp_ns=now_ns()))
        assert isinstance(log.latest(), SnapshotDiscarded)
        assert log.latest(QuerySettled).query == "a"  # type: ignore[union-attr]

    def test_recent_fewer_than_n(self) -> None:
        log = EventLog()
        log.append(_query("a"))
        assert len(log.recent(5)) == 1

    def test_clear(self) -> None:
        log = EventLog()
        log.append(_query("a"))
        log.append(_query("b"))
        assert log.clear() == 2
        assert len(log) == 0

    def test_stats(self) -> None:
        log = EventLog(max_events=50)
        log.append(_query("a"))
        log.append(_query("b"))
        stats = log.stats()
        assert stats["total"] == 2
        assert stats["max_events"] == 50
        assert stats["by_type"] == {"QuerySettled": 2}

    def test_concurrent_appends(self) -> None:
        log = EventLog()

        def worker() -> None:
            for _ in range(200):
                log.append(_query("x"))

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(log) == 800


# ---------------------------------------------------------------------------
# StackCollector
# ---------------------------------------------------------------------------


class TestStackCollector:
    """StackCollector — record_* helpers and verbose output."""

    def test_default_log(self) -> None:
        assert isinstance(StackCollector().log, EventLog)

    def test_record_snapshot(self) -> None:
        collector = StackCollector()
        collector.record_snapshot(3, records=10, dropped=1, load_ms=2.5)
        event = collector.log.latest()
        assert isinstance(event, SnapshotLoaded)
        assert (event.generation, event.records, event.dropped) == (3, 10, 1)

    def test_record_discard(self) -> None:
        collector = StackCollector()
        collector.record_discard(1, latest_generation=2)
        event = collector.log.latest()
        assert isinstance(event, SnapshotDiscarded)
        assert event.latest_generation == 2

    def test_record_view(self) -> None:
        collector = StackCollector()
        collector.record_view("am", snapshot_size=3, result_size=1, trigger="query")
        event = collector.log.latest()
        assert isinstance(event, ViewComputed)
        assert (event.query, event.result_size, event.trigger) == ("am", 1, "query")

    def test_record_lifecycle(self) -> None:
        collector = StackCollector()
        collector.record_lifecycle("failed", "contacts", subscribers=2, detail="boom")
        event = collector.log.latest()
        assert isinstance(event, PipelineLifecycle)
        assert (event.kind, event.subscribers, event.detail) == ("failed", 2, "boom")

    def test_quiet_by_default(self, capsys: pytest.CaptureFixture[str]) -> None:
        StackCollector().record_snapshot(1, records=3)
        assert capsys.readouterr().err == ""

    def test_verbose_prints_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        collector = StackCollector(verbose=True)
        collector.record_snapshot(1, records=3, dropped=2)
        collector.record_view("am", snapshot_size=3, result_size=1, trigger="query")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "load #1 -> 3 contacts, 2 dropped" in captured.err
        assert "query: 'am' -> 1/3 contacts" in captured.err

    def test_shared_log(self) -> None:
        log = EventLog()
        StackCollector(log).record_query("a")
        assert len(log) == 1
