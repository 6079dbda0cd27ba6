"""Shared test fixtures for rolodex."""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Callable, Iterable
from typing import Any

import pytest

from rolodex.config import RolodexConfig
from rolodex.contacts.records import Record
from rolodex.contacts.samples import SAMPLE_CONTACTS
from rolodex.contacts.source import MemorySource, Subscription


class CountingSource(MemorySource):
    """MemorySource that counts loads and can be told to fail.

    Attributes:
        loads: Number of ``load_all`` calls.
        subscribes: Number of ``subscribe_to_changes`` calls.
        fail_load: Raised from ``load_all`` when set.
        fail_subscribe: Raised from ``subscribe_to_changes`` when set.

    """

    def __init__(self, rows: Iterable[Any] = ()) -> None:
        super().__init__(rows)
        self.loads = 0
        self.subscribes = 0
        self.fail_load: Exception | None = None
        self.fail_subscribe: Exception | None = None

    def load_all(self) -> list[Any]:
        self.loads += 1
        if self.fail_load is not None:
            raise self.fail_load
        return super().load_all()

    def subscribe_to_changes(self, on_change: Callable[[], None]) -> Subscription:
        self.subscribes += 1
        if self.fail_subscribe is not None:
            raise self.fail_subscribe
        return super().subscribe_to_changes(on_change)


class GatedSource(MemorySource):
    """MemorySource whose loads block until released, one gate per call.

    Rows are captured when a load starts, so overlapping loads can return
    different snapshots.  Calls listed in ``fail_calls`` (1-based) raise
    once released.

    """

    def __init__(self, rows: Iterable[Any] = ()) -> None:
        super().__init__(rows)
        self._gates: list[threading.Event] = []
        self._gates_lock = threading.Lock()
        self.fail_calls: set[int] = set()

    @property
    def started(self) -> int:
        with self._gates_lock:
            return len(self._gates)

    def load_all(self) -> list[Any]:
        rows = super().load_all()
        gate = threading.Event()
        with self._gates_lock:
            self._gates.append(gate)
            call = len(self._gates)
        gate.wait(timeout=5.0)
        if call in self.fail_calls:
            raise OSError(f"load {call} failed")
        return rows

    def release(self, call: int) -> None:
        """Let the ``call``-th load (1-based) finish."""
        with self._gates_lock:
            gate = self._gates[call - 1]
        gate.set()


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Poll ``predicate`` on the event loop until it holds."""
    async with asyncio.timeout(timeout):
        while not predicate():
            await asyncio.sleep(0.005)


async def next_item(stream: Any, timeout: float = 2.0) -> Any:
    """Next value of an async iterator, failing the test on timeout."""
    return await asyncio.wait_for(anext(stream), timeout)


@pytest.fixture
def people() -> tuple[Record, ...]:
    """Three contacts used throughout the filter scenarios."""
    return (Record("Simon", "1"), Record("Amber", "2"), Record("Sharon", "3"))


@pytest.fixture
def samples() -> tuple[Record, ...]:
    return SAMPLE_CONTACTS


@pytest.fixture
def fast_config() -> RolodexConfig:
    """Config with a short debounce window for timing tests."""
    return RolodexConfig(debounce_ms=30)


@pytest.fixture
def source(people: tuple[Record, ...]) -> CountingSource:
    return CountingSource(people)
