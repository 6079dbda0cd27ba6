"""Pipeline observability — a unified event model for the contact pipeline.

Aggregates events from:
- **Loader**: Snapshot loads and discarded superseded loads
- **Debouncer/Combiner**: Settled queries and recomputed views
- **Shared result**: Pipeline start, stop and failure

All events are frozen dataclasses with nanosecond timestamps, safe for
concurrent production from the event loop and loader threads.

Quick Start:
    >>> from rolodex.observability import StackCollector, EventLog
    >>> log = EventLog()
    >>> collector = StackCollector(log)
    >>> # Pass collector to ContactPipeline(..., collector=collector)

"""

from rolodex.observability.collector import StackCollector
from rolodex.observability.events import (
    LifecycleKind,
    PipelineLifecycle,
    QuerySettled,
    SnapshotDiscarded,
    SnapshotLoaded,
    StackEvent,
    ViewComputed,
    ViewTrigger,
    now_ns,
)
from rolodex.observability.log import EventLog

__all__ = [
    "EventLog",
    "LifecycleKind",
    "PipelineLifecycle",
    "QuerySettled",
    "SnapshotDiscarded",
    "SnapshotLoaded",
    "StackCollector",
    "StackEvent",
    "ViewComputed",
    "ViewTrigger",
    "now_ns",
]
