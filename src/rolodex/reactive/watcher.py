"""Change watcher — turns source change callbacks into load triggers.

The source pushes notifications through a callback, possibly from another
thread.  The watcher bridges them onto the event loop through a
single-slot signal (an ``asyncio.Event``), so any number of notifications
arriving before the consumer asks for the next trigger collapse into one.

Activation yields a synthetic trigger first so the pipeline has data before
any real change happens.  Closing the iterator (or cancelling the task
driving it) cancels the source subscription exactly once.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from rolodex._errors import SourceUnavailable

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from rolodex.contacts.source import DataSource


class ChangeWatcher:
    """Coalescing trigger stream over a source's change notifications.

    Args:
        source: The data source to subscribe to.

    """

    def __init__(self, source: DataSource) -> None:
        self._source = source
        self._active = 0

    @property
    def is_active(self) -> bool:
        """Whether a source subscription is currently held."""
        return self._active > 0

    async def triggers(self) -> AsyncIterator[int]:
        """Yield ``0`` on activation, then one increasing number per change burst.

        Raises:
            SourceUnavailable: The source refused the change subscription.

        """
        loop = asyncio.get_running_loop()
        signal = asyncio.Event()

        def on_change() -> None:
            if loop.is_closed():
                return
            loop.call_soon_threadsafe(signal.set)

        try:
            subscription = self._source.subscribe_to_changes(on_change)
        except SourceUnavailable:
            raise
        except Exception as exc:
            msg = f"Cannot subscribe to contact changes: {exc}"
            raise SourceUnavailable(msg) from exc

        self._active += 1
        try:
            sequence = 0
            yield sequence
            while True:
                await signal.wait()
                signal.clear()
                sequence += 1
                yield sequence
        finally:
            self._active -= 1
            subscription.cancel()
