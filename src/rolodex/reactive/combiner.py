"""Combiner — merges the latest snapshot with the latest settled query.

``filter_records`` is the pure filtering rule.  ``Combiner`` holds one
latest-value cell per input and recomputes the view whenever either side
is written (combine-latest).  Nothing is produced until both sides have
been seen at least once.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rolodex.contacts.records import FilteredView

if TYPE_CHECKING:
    from rolodex._types import Snapshot


def filter_records(snapshot: Snapshot, query: str) -> Snapshot:
    """Return the records whose name contains ``query``, in snapshot order.

    An empty query returns ``snapshot`` itself.

    """
    if not query:
        return snapshot
    needle = query.lower()
    return tuple(record for record in snapshot if needle in record.name.lower())


class Combiner:
    """Combine-latest over (snapshot, query).

    Loop-confined: both cells are written from the pipeline's event loop,
    so swapping a cell needs no lock.

    """

    __slots__ = ("_query", "_snapshot")

    def __init__(self) -> None:
        self._snapshot: Snapshot | None = None
        self._query: str | None = None

    @property
    def snapshot(self) -> Snapshot | None:
        return self._snapshot

    @property
    def query(self) -> str | None:
        return self._query

    def update_snapshot(self, snapshot: Snapshot) -> FilteredView | None:
        """Store a new snapshot and recompute."""
        self._snapshot = snapshot
        return self._compute()

    def update_query(self, query: str | None) -> FilteredView | None:
        """Store a new settled query and recompute."""
        self._query = query or ""
        return self._compute()

    def _compute(self) -> FilteredView | None:
        if self._snapshot is None or self._query is None:
            return None
        return FilteredView(filter_records(self._snapshot, self._query), self._query)
