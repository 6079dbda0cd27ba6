"""Contact pipeline coordinator — connects source, search box and observers.

Orchestrates the full propagation flow:
    1. ChangeWatcher subscribes to the source and emits a startup trigger
       plus one trigger per burst of change notifications
    2. Each trigger runs one SnapshotLoader load in a worker thread;
       notifications that arrive during a load coalesce into a single
       follow-up load, so snapshots are never older than one load cycle
    3. The Debouncer settles keystrokes into queries
    4. The Combiner recomputes the FilteredView from the latest snapshot
       and the latest query whenever either changes
    5. Every view is published into a SharedResult, which replays the
       latest view to each observer and tears the whole chain down when
       the last observer leaves

One producer runs per active observer set: a single task holding an
``asyncio.TaskGroup`` with the query pump and the trigger pump, which
awaits its loads one at a time.
"""

from __future__ import annotations

import asyncio
import time
from contextlib import aclosing
from typing import TYPE_CHECKING

from rolodex._errors import PermissionRequired
from rolodex.config import RolodexConfig
from rolodex.reactive.broadcaster import SharedResult
from rolodex.reactive.combiner import Combiner
from rolodex.reactive.debouncer import Debouncer
from rolodex.reactive.loader import SnapshotLoader
from rolodex.reactive.watcher import ChangeWatcher

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

    from rolodex._types import PipelineState
    from rolodex.contacts.records import FilteredView
    from rolodex.contacts.source import DataSource
    from rolodex.observability.collector import StackCollector
    from rolodex.observability.events import ViewTrigger
    from rolodex.reactive.broadcaster import Emit


def _first_error(group: BaseExceptionGroup) -> BaseException:
    """Unwrap the first leaf exception of a (possibly nested) group."""
    error: BaseException = group
    while isinstance(error, BaseExceptionGroup):
        error = error.exceptions[0]
    return error


class ContactPipeline:
    """Searchable, self-refreshing contact list.

    Args:
        source: The external contact store.
        config: Pipeline configuration (debounce window, verbosity).
        collector: Optional event collector for observability.
        permission_granted: Initial state of the contact permission gate.

    """

    def __init__(
        self,
        source: DataSource,
        config: RolodexConfig | None = None,
        *,
        collector: StackCollector | None = None,
        permission_granted: bool = False,
    ) -> None:
        self._config = config if config is not None else RolodexConfig()
        self._collector = collector
        self._debouncer = Debouncer(self._config.debounce_ms)
        self._watcher = ChangeWatcher(source)
        self._loader = SnapshotLoader(source, collector)
        self._shared: SharedResult[FilteredView] = SharedResult(
            self._produce, name="contacts", collector=collector,
        )
        self._granted = permission_granted
        self._state: PipelineState = "idle"
        self._run: object | None = None

    @property
    def config(self) -> RolodexConfig:
        return self._config

    @property
    def state(self) -> PipelineState:
        """``idle``, ``loading`` (no view yet), ``ready`` or ``failed``."""
        return self._state

    @property
    def permission_granted(self) -> bool:
        return self._granted

    @property
    def loads_started(self) -> int:
        """Total loads started over the pipeline's lifetime."""
        return self._loader.generation

    @property
    def observer_count(self) -> int:
        return self._shared.subscriber_count

    @property
    def latest(self) -> FilteredView | None:
        """Latest shared view, or None when nothing is cached."""
        return self._shared.latest

    def submit_query(self, text: str | None) -> None:
        """Feed raw search text; it takes effect once typing pauses."""
        self._debouncer.submit(text)

    def notify_permission_state(self, granted: bool) -> None:
        """Open or close the permission gate.

        Closing the gate while observers are attached tears the pipeline
        down and ends their streams with ``PermissionRequired``.

        """
        self._granted = granted
        if not granted and self._shared.subscriber_count:
            self._shared.fail(PermissionRequired("Contact permission was revoked"))

    async def views(self) -> AsyncIterator[FilteredView]:
        """Yield the latest filtered view immediately, then every update.

        Raises:
            PermissionRequired: The permission gate is closed.
            SourceUnavailable: The source failed to subscribe or load.

        """
        if not self._granted:
            raise PermissionRequired("Contact permission has not been granted")
        async with aclosing(self._shared.subscribe()) as stream:
            async for view in stream:
                yield view

    async def join(self) -> None:
        """Wait until a torn-down producer has released its resources."""
        await self._shared.join()

    async def _produce(self, emit: Emit[FilteredView]) -> None:
        run = object()
        self._run = run
        self._state = "loading"
        combiner = Combiner()
        try:
            async with asyncio.TaskGroup() as group:
                group.create_task(self._pump_queries(combiner, emit))
                group.create_task(self._pump_triggers(combiner, emit))
        except ExceptionGroup as exc:
            if self._run is run:
                self._state = "failed"
            raise _first_error(exc) from None
        except asyncio.CancelledError:
            if self._run is run:
                self._state = "idle"
            raise

    async def _pump_queries(self, combiner: Combiner, emit: Emit[FilteredView]) -> None:
        async with aclosing(self._debouncer.settled()) as queries:
            async for query in queries:
                if self._collector is not None:
                    self._collector.record_query(query)
                self._recompute(emit, combiner, "query", lambda q=query: combiner.update_query(q))

    async def _pump_triggers(self, combiner: Combiner, emit: Emit[FilteredView]) -> None:
        async with aclosing(self._watcher.triggers()) as triggers:
            async for _ in triggers:
                await self._load(combiner, emit)

    async def _load(self, combiner: Combiner, emit: Emit[FilteredView]) -> None:
        snapshot = await self._loader.load()
        if snapshot is None:
            return
        self._recompute(emit, combiner, "snapshot", lambda: combiner.update_snapshot(snapshot))

    def _recompute(
        self,
        emit: Emit[FilteredView],
        combiner: Combiner,
        trigger: ViewTrigger,
        update: Callable[[], FilteredView | None],
    ) -> None:
        t0 = time.perf_counter()
        view = update()
        if view is None:
            return
        filter_ms = (time.perf_counter() - t0) * 1000
        self._state = "ready"
        if self._collector is not None:
            snapshot = combiner.snapshot or ()
            self._collector.record_view(
                view.query,
                snapshot_size=len(snapshot),
                result_size=len(view),
                trigger=trigger,
                filter_ms=filter_ms,
            )
        emit(view)
