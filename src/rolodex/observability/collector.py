"""Stack collector — records pipeline events into the event log.

Provides one ``record_*`` method per event type so pipeline code never
builds event objects itself.  With ``verbose`` enabled, each event is also
summarised on stderr.

Thread Safety:
    The collector delegates to ``EventLog`` which is internally locked.
    Loader threads and the event loop may record concurrently.

"""

from __future__ import annotations

import sys

from rolodex.observability.events import (
    LifecycleKind,
    PipelineLifecycle,
    QuerySettled,
    SnapshotDiscarded,
    SnapshotLoaded,
    ViewComputed,
    ViewTrigger,
    now_ns,
)
from rolodex.observability.log import EventLog


class StackCollector:
    """Event collector for the contact pipeline.

    Args:
        log: The EventLog to store events in.
        verbose: Print a one-line summary of each event to stderr.

    """

    __slots__ = ("_log", "_verbose")

    def __init__(self, log: EventLog | None = None, *, verbose: bool = False) -> None:
        self._log = log if log is not None else EventLog()
        self._verbose = verbose

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    # ----- Load path -----

    def record_snapshot(
        self,
        generation: int,
        *,
        records: int = 0,
        dropped: int = 0,
        load_ms: float = 0.0,
    ) -> None:
        """Record a published snapshot."""
        self._log.append(
            SnapshotLoaded(
                generation=generation,
                records=records,
                dropped=dropped,
                load_ms=load_ms,
                timestamp_ns=now_ns(),
            )
        )
        dropped_note = f", {dropped} dropped" if dropped else ""
        self._say(f"[{load_ms:.0f}ms] load #{generation} -> {records} contacts{dropped_note}")

    def record_discard(self, generation: int, *, latest_generation: int) -> None:
        """Record a superseded load whose result was thrown away."""
        self._log.append(
            SnapshotDiscarded(
                generation=generation,
                latest_generation=latest_generation,
                timestamp_ns=now_ns(),
            )
        )
        self._say(f"load #{generation} superseded by #{latest_generation}, discarded")

    # ----- Query path -----

    def record_query(self, query: str) -> None:
        """Record a settled query."""
        self._log.append(QuerySettled(query=query, timestamp_ns=now_ns()))

    def record_view(
        self,
        query: str,
        *,
        snapshot_size: int = 0,
        result_size: int = 0,
        trigger: ViewTrigger = "snapshot",
        filter_ms: float = 0.0,
    ) -> None:
        """Record a recomputed filtered view."""
        self._log.append(
            ViewComputed(
                query=query,
                snapshot_size=snapshot_size,
                result_size=result_size,
                trigger=trigger,
                filter_ms=filter_ms,
                timestamp_ns=now_ns(),
            )
        )
        self._say(f"{trigger}: {query!r} -> {result_size}/{snapshot_size} contacts")

    # ----- Lifecycle -----

    def record_lifecycle(
        self,
        kind: LifecycleKind,
        name: str,
        *,
        subscribers: int = 0,
        detail: str = "",
    ) -> None:
        """Record a shared pipeline start, stop or failure."""
        self._log.append(
            PipelineLifecycle(
                kind=kind,
                name=name,
                subscribers=subscribers,
                detail=detail,
                timestamp_ns=now_ns(),
            )
        )
        suffix = f": {detail}" if detail else ""
        self._say(f"{name} {kind} ({subscribers} subscribers){suffix}")

    def _say(self, line: str) -> None:
        if self._verbose:
            print(f"  {line}", file=sys.stderr)
