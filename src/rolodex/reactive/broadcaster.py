"""Shared result — one producer, many observers, replay of the latest value.

The producer is started when the first observer subscribes and cancelled
when the last one leaves.  Each observer owns a queue that keeps only
the newest undelivered value, so a slow observer skips intermediate
views instead of buffering them.

A producer failure is delivered to every current observer as a terminal
error; the shared state is reset so the next observer starts a fresh
producer rather than inheriting the failure.
"""

from __future__ import annotations

import asyncio
import itertools
import threading
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from functools import partial
from typing import TYPE_CHECKING, Any

from rolodex._errors import ReactiveError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from rolodex.observability.collector import StackCollector
    from rolodex.observability.events import LifecycleKind

type Emit[T] = Callable[[T], None]
type Producer[T] = Callable[[Emit[T]], Awaitable[None]]


@dataclass(frozen=True, slots=True)
class _End:
    """Terminal marker: the stream completed, or failed with ``error``."""

    error: BaseException | None = None


@dataclass(frozen=True, slots=True)
class Subscriber:
    """An attached observer.

    Attributes:
        client_id: Unique identifier for this observer.
        queue: asyncio.Queue holding the newest undelivered value, followed
            by the end marker once the stream is over.

    """

    client_id: str
    queue: asyncio.Queue[Any] = field(default_factory=asyncio.Queue, compare=False, hash=False)

    def offer(self, item: Any) -> None:
        """Replace any undelivered value with ``item``."""
        while not self.queue.empty():
            self.queue.get_nowait()
        self.queue.put_nowait(item)

    def close(self, end: _End) -> None:
        """Queue the end marker behind any undelivered value."""
        self.queue.put_nowait(end)


class SharedResult[T]:
    """Reference-counted multicast stream with replay of the latest value.

    Thread-safe: subscriber set and cached value protected by a lock.
    The producer itself runs as a task on the subscribing event loop.

    Args:
        producer: Coroutine function receiving an ``emit`` callback; runs
            until cancelled or until it raises.
        name: Label used in lifecycle events and subscriber ids.
        collector: Optional event collector.

    """

    def __init__(
        self,
        producer: Producer[T],
        *,
        name: str = "view",
        collector: StackCollector | None = None,
    ) -> None:
        self._producer = producer
        self._name = name
        self._collector = collector
        self._subscribers: set[Subscriber] = set()
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._task: asyncio.Task[None] | None = None
        self._retired: asyncio.Task[None] | None = None
        self._token: object | None = None
        self._latest: T | None = None
        self._has_latest = False

    @property
    def subscriber_count(self) -> int:
        """Number of attached observers."""
        with self._lock:
            return len(self._subscribers)

    @property
    def is_active(self) -> bool:
        """Whether the producer is running."""
        with self._lock:
            return self._task is not None

    @property
    def latest(self) -> T | None:
        """The cached latest value, or None if nothing was produced yet."""
        with self._lock:
            return self._latest if self._has_latest else None

    async def subscribe(self) -> AsyncIterator[T]:
        """Yield the cached value (if any), then every new value.

        Raises the producer's error when the shared pipeline fails, and
        ``ReactiveError`` when the producer runs on a different event loop.

        """
        conn = Subscriber(client_id=f"{self._name}-{next(self._ids)}")
        self._attach(conn)
        try:
            while True:
                item = await conn.queue.get()
                if isinstance(item, _End):
                    if item.error is not None:
                        raise item.error
                    return
                yield item
        finally:
            self._detach(conn)

    def fail(self, error: BaseException) -> None:
        """Stop the producer and end every observer's stream with ``error``."""
        self._terminate(error, cancel=True)

    async def join(self) -> None:
        """Wait for the most recently stopped producer task to finish."""
        task = self._retired
        if task is not None:
            await asyncio.wait({task})

    def _attach(self, conn: Subscriber) -> None:
        loop = asyncio.get_running_loop()
        with self._lock:
            if self._task is not None and self._task.get_loop() is not loop:
                msg = f"Shared result {self._name!r} is running on another event loop"
                raise ReactiveError(msg)
            self._subscribers.add(conn)
            count = len(self._subscribers)
            if self._has_latest:
                conn.offer(self._latest)
            if self._task is not None:
                return
            token = object()
            self._token = token
            self._task = loop.create_task(
                self._run(token), name=f"rolodex-{self._name}",
            )
        if self._collector is not None:
            self._collector.record_lifecycle("started", self._name, subscribers=count)

    def _detach(self, conn: Subscriber) -> None:
        with self._lock:
            if conn not in self._subscribers:
                return
            self._subscribers.discard(conn)
            if self._subscribers or self._task is None:
                return
            task = self._reset()
        task.cancel()
        if self._collector is not None:
            self._collector.record_lifecycle("stopped", self._name, subscribers=0)

    async def _run(self, token: object) -> None:
        try:
            await self._producer(partial(self._publish, token))
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            if self._token is token:
                self._terminate(exc, cancel=False)
        else:
            if self._token is token:
                self._terminate(None, cancel=False)

    def _publish(self, token: object, value: T) -> None:
        with self._lock:
            if token is not self._token:
                return
            self._latest = value
            self._has_latest = True
            subscribers = list(self._subscribers)
        for conn in subscribers:
            conn.offer(value)

    def _terminate(self, error: BaseException | None, *, cancel: bool) -> None:
        with self._lock:
            subscribers = list(self._subscribers)
            self._subscribers.clear()
            task = self._reset() if self._task is not None else None
        if cancel and task is not None:
            task.cancel()
        for conn in subscribers:
            conn.close(_End(error))
        if self._collector is not None and (task is not None or subscribers):
            kind: LifecycleKind = "failed" if error is not None else "stopped"
            detail = f"{type(error).__name__}: {error}" if error is not None else ""
            self._collector.record_lifecycle(
                kind, self._name, subscribers=len(subscribers), detail=detail,
            )

    def _reset(self) -> asyncio.Task[None]:
        """Drop the running task and cached value.  Caller holds the lock."""
        task = self._task
        self._task = None
        self._retired = task
        self._token = None
        self._latest = None
        self._has_latest = False
        return task
