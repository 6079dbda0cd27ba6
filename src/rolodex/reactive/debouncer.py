"""Debouncer — turns bursts of keystrokes into settled queries.

``submit()`` is synchronous and conflating: only the latest value is kept.
``settled()`` is the consuming side.  It yields the last settled value at
once (``""`` before anything has settled), then one value per burst after
the quiet window has elapsed since the most recent submission.
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


class Debouncer:
    """Latest-value-wins debouncer for search text.

    Loop-confined: call ``submit()`` from the event loop thread.

    Args:
        quiet_ms: Inactivity window in milliseconds.

    """

    def __init__(self, quiet_ms: int = 1000) -> None:
        self._quiet_s = quiet_ms / 1000
        self._pending = ""
        self._dirty = False
        self._submitted_at = 0.0
        self._last_settled = ""
        self._wakeup: asyncio.Event | None = None

    @property
    def last_settled(self) -> str:
        """Most recently settled value ("" before the first settle)."""
        return self._last_settled

    @property
    def has_pending(self) -> bool:
        """Whether a submission is waiting for its quiet window."""
        return self._dirty

    def submit(self, value: str | None) -> None:
        """Replace the pending value and restart the quiet window."""
        self._pending = value or ""
        self._dirty = True
        self._submitted_at = time.monotonic()
        if self._wakeup is not None:
            self._wakeup.set()

    async def settled(self) -> AsyncIterator[str]:
        """Yield the current settled value, then each newly settled value."""
        wakeup = asyncio.Event()
        self._wakeup = wakeup
        try:
            yield self._last_settled
            while True:
                if not self._dirty:
                    wakeup.clear()
                    await wakeup.wait()
                await self._quiet_period(wakeup)
                self._dirty = False
                self._last_settled = self._pending
                yield self._last_settled
        finally:
            if self._wakeup is wakeup:
                self._wakeup = None

    async def _quiet_period(self, wakeup: asyncio.Event) -> None:
        """Wait until no submission has happened for the quiet window."""
        while True:
            remaining = self._submitted_at + self._quiet_s - time.monotonic()
            if remaining <= 0:
                return
            wakeup.clear()
            try:
                await asyncio.wait_for(wakeup.wait(), timeout=remaining)
            except TimeoutError:
                return
