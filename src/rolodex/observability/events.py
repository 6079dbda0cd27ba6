"""Event model for pipeline observability.

Defines event types for the load path, the query path and the shared
result lifecycle.

All events are frozen dataclasses with:
- ``timestamp_ns``: Monotonic nanosecond timestamp
- Descriptive fields for the specific event type

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass
from typing import Literal

# Which input caused a view recompute
type ViewTrigger = Literal["snapshot", "query"]

# Shared result lifecycle transition
type LifecycleKind = Literal["started", "stopped", "failed"]


# ---------------------------------------------------------------------------
# Load path events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SnapshotLoaded:
    """A load completed and its snapshot was published.

    Attributes:
        generation: Load generation (1 for the first load of a loader).
        records: Number of records in the snapshot.
        dropped: Rows dropped for lacking a display name.
        load_ms: Time spent in the source load, in milliseconds.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    generation: int
    records: int
    dropped: int
    load_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class SnapshotDiscarded:
    """A load completed after a newer load had started; its result was dropped.

    Attributes:
        generation: Generation of the discarded load.
        latest_generation: Newest generation started at completion time.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    generation: int
    latest_generation: int
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Query path events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class QuerySettled:
    """The debouncer settled a query.

    Attributes:
        query: The settled query text.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    query: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class ViewComputed:
    """A filtered view was recomputed and published.

    Attributes:
        query: Settled query used for filtering.
        snapshot_size: Records in the snapshot that was filtered.
        result_size: Records in the resulting view.
        trigger: Which input caused the recompute.
        filter_ms: Time spent filtering, in milliseconds.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    query: str
    snapshot_size: int
    result_size: int
    trigger: ViewTrigger
    filter_ms: float
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Lifecycle events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PipelineLifecycle:
    """The shared pipeline started, stopped or failed.

    Attributes:
        kind: Lifecycle transition.
        name: Name of the shared result.
        subscribers: Subscriber count at the time of the transition.
        detail: Error text for failures, empty otherwise.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    kind: LifecycleKind
    name: str
    subscribers: int
    detail: str
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

type StackEvent = (
    SnapshotLoaded
    | SnapshotDiscarded
    | QuerySettled
    | ViewComputed
    | PipelineLifecycle
)


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
