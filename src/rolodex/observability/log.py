"""Event log — bounded history of pipeline events.

Keeps the most recent ``StackEvent`` objects in a ring buffer so a running
pipeline can be inspected after the fact: which loads were discarded, what
queries settled, how large each view was.

Thread Safety:
    Loader threads record snapshot events while the event loop records
    query and view events; every access goes through one ``threading.Lock``.

"""

import threading
from collections import Counter, deque
from itertools import islice
from typing import Any

from rolodex.observability.events import StackEvent


class EventLog:
    """Ring buffer of pipeline events, newest last.

    Args:
        max_events: Capacity; the oldest event is evicted once it is reached.

    """

    __slots__ = ("_capacity", "_events", "_evicted", "_lock")

    def __init__(self, max_events: int = 10_000) -> None:
        self._capacity = max_events
        self._events: deque[StackEvent] = deque(maxlen=max_events)
        self._evicted = 0
        self._lock = threading.Lock()

    def append(self, event: StackEvent) -> None:
        with self._lock:
            if len(self._events) == self._capacity:
                self._evicted += 1
            self._events.append(event)

    def query(
        self,
        *,
        event_type: type | None = None,
        since_ns: int = 0,
        limit: int = 100,
    ) -> list[StackEvent]:
        """Matching events, most recent first.

        Args:
            event_type: Keep only instances of this event class.
            since_ns: Keep only events stamped at or after this time.
            limit: Stop after this many matches.

        """
        with self._lock:
            newest_first = reversed(self._events)
            matches = (
                event
                for event in newest_first
                if (event_type is None or isinstance(event, event_type))
                and event.timestamp_ns >= since_ns
            )
            return list(islice(matches, limit))

    def latest(self, event_type: type | None = None) -> StackEvent | None:
        """The newest event (of ``event_type``, if given), or None."""
        found = self.query(event_type=event_type, limit=1)
        return found[0] if found else None

    def recent(self, n: int = 20) -> list[StackEvent]:
        """The last ``n`` events in recording order."""
        with self._lock:
            start = max(len(self._events) - n, 0)
            return list(islice(self._events, start, None))

    def clear(self) -> int:
        """Forget every event; returns how many were dropped."""
        with self._lock:
            count = len(self._events)
            self._events.clear()
            self._evicted = 0
        return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def stats(self) -> dict[str, Any]:
        """Totals per event class plus buffer usage."""
        with self._lock:
            by_type = Counter(type(event).__name__ for event in self._events)
            total = len(self._events)
            evicted = self._evicted
        return {
            "total": total,
            "max_events": self._capacity,
            "evicted": evicted,
            "by_type": dict(by_type),
        }
