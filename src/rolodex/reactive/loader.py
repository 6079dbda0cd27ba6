"""Snapshot loader — fetches the full contact set off the event loop.

Every ``load()`` takes a new generation number when it starts.  Loads may
overlap; a load that completes after a newer one has started is discarded,
so only the most recently *started* load is ever published
(last-started-wins).  A superseded load that fails is discarded the same
way: its error never reaches observers.  Rows without a display name are
dropped while the snapshot is built.
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING

from rolodex._errors import SourceUnavailable
from rolodex.contacts.records import build_snapshot

if TYPE_CHECKING:
    from rolodex._types import Snapshot
    from rolodex.contacts.source import DataSource
    from rolodex.observability.collector import StackCollector


class SnapshotLoader:
    """Loads snapshots in a worker thread with last-started-wins ordering.

    Args:
        source: The data source to load from.
        collector: Optional event collector.

    """

    def __init__(self, source: DataSource, collector: StackCollector | None = None) -> None:
        self._source = source
        self._collector = collector
        self._generation = 0

    @property
    def generation(self) -> int:
        """Number of loads started so far."""
        return self._generation

    async def load(self) -> Snapshot | None:
        """Load a fresh snapshot.

        Returns:
            The snapshot, or None if a newer load started while this one ran.

        Raises:
            SourceUnavailable: The source load failed and no newer load has
                started since.

        """
        self._generation += 1
        generation = self._generation

        t0 = time.perf_counter()
        try:
            snapshot, dropped = await asyncio.to_thread(self._load_blocking)
        except SourceUnavailable:
            if self._superseded(generation):
                return None
            raise
        load_ms = (time.perf_counter() - t0) * 1000

        if self._superseded(generation):
            return None

        if self._collector is not None:
            self._collector.record_snapshot(
                generation, records=len(snapshot), dropped=dropped, load_ms=load_ms,
            )
        return snapshot

    def _superseded(self, generation: int) -> bool:
        """Whether a newer load started; records the discard if so."""
        if generation == self._generation:
            return False
        if self._collector is not None:
            self._collector.record_discard(generation, latest_generation=self._generation)
        return True

    def _load_blocking(self) -> tuple[Snapshot, int]:
        """Worker thread: call the source and build the snapshot."""
        try:
            rows = self._source.load_all()
            return build_snapshot(rows)
        except SourceUnavailable:
            raise
        except Exception as exc:
            msg = f"Cannot load contacts: {exc}"
            raise SourceUnavailable(msg) from exc
