"""Data source protocols and the in-memory source.

A *source* is the opaque contact store behind the pipeline.  It offers a
full load and a push-based change subscription:

- ``load_all()`` returns every raw contact row (may be slow, may fail)
- ``subscribe_to_changes(on_change)`` registers a callback and returns a
  ``Subscription`` whose ``cancel()`` is idempotent

``on_change`` may be invoked from any thread.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from rolodex._types import ChangeCallback, RawContact


@runtime_checkable
class Subscription(Protocol):
    """Handle for a change subscription."""

    def cancel(self) -> None: ...


@runtime_checkable
class DataSource(Protocol):
    """An external, mutable contact store."""

    def load_all(self) -> Iterable[RawContact]: ...

    def subscribe_to_changes(self, on_change: ChangeCallback) -> Subscription: ...


class CallbackSubscription:
    """Subscription that runs its cancel callback exactly once.

    Thread-safe: the cancelled flag is guarded by a lock.

    """

    __slots__ = ("_cancelled", "_lock", "_on_cancel")

    def __init__(self, on_cancel: Callable[[], None]) -> None:
        self._on_cancel = on_cancel
        self._cancelled = False
        self._lock = threading.Lock()

    @property
    def cancelled(self) -> bool:
        with self._lock:
            return self._cancelled

    def cancel(self) -> None:
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
        self._on_cancel()


class MemorySource:
    """In-process contact source.

    Holds rows in a list and notifies listeners after every mutation.
    Used for demos and tests; the row list is replaced, never shared.

    Thread-safe: rows and listeners are protected by a lock.  Listeners
    are called outside the lock.

    """

    def __init__(self, rows: Iterable[RawContact] = ()) -> None:
        self._rows: list[RawContact] = list(rows)
        self._callbacks: dict[CallbackSubscription, ChangeCallback] = {}
        self._lock = threading.Lock()

    @property
    def listener_count(self) -> int:
        """Number of live change subscriptions."""
        with self._lock:
            return len(self._callbacks)

    def load_all(self) -> list[RawContact]:
        with self._lock:
            return list(self._rows)

    def subscribe_to_changes(self, on_change: ChangeCallback) -> Subscription:
        subscription: CallbackSubscription

        def _remove() -> None:
            with self._lock:
                self._callbacks.pop(subscription, None)

        subscription = CallbackSubscription(_remove)
        with self._lock:
            self._callbacks[subscription] = on_change
        return subscription

    def replace(self, rows: Iterable[RawContact]) -> None:
        """Replace all rows and notify listeners."""
        with self._lock:
            self._rows = list(rows)
        self.notify()

    def add(self, row: RawContact) -> None:
        """Append a row and notify listeners."""
        with self._lock:
            self._rows = [*self._rows, row]
        self.notify()

    def notify(self) -> None:
        """Fire every registered change callback."""
        with self._lock:
            callbacks = list(self._callbacks.values())
        for callback in callbacks:
            callback()
