"""Contact records and snapshots.

A ``Record`` is an immutable value object: a changed contact produces a new
Record, never a mutated one.  A snapshot is a plain tuple of Records in
source order, replaced wholesale on every load.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from rolodex._errors import MalformedRecord

if TYPE_CHECKING:
    from rolodex._types import RawContact, Snapshot

# Provider column aliases, checked in order.
_NAME_KEYS = ("name", "display_name")
_NUMBER_KEYS = ("number", "phone", "normalized_number")


@dataclass(frozen=True, slots=True)
class Record:
    """A single contact.

    Attributes:
        name: Display name, never empty.
        number: Phone number, if the contact has one.

    """

    name: str
    number: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            msg = f"Contact has no display name: {self.name!r}"
            raise MalformedRecord(msg)

    @classmethod
    def from_row(cls, row: RawContact) -> Record:
        """Build a Record from a provider row.

        Accepts an existing Record (returned as-is) or a mapping with
        ``name``/``display_name`` and ``number``/``phone`` keys.

        Raises:
            MalformedRecord: The row has no usable display name.

        """
        if isinstance(row, Record):
            return row
        if not isinstance(row, Mapping):
            msg = f"Unsupported contact row: {type(row).__name__}"
            raise MalformedRecord(msg)

        name = _first_value(row, _NAME_KEYS)
        number = _first_value(row, _NUMBER_KEYS)
        if name is None:
            msg = f"Contact row has no display name: {dict(row)!r}"
            raise MalformedRecord(msg)
        return cls(name=str(name), number=str(number) if number is not None else None)


@dataclass(frozen=True, slots=True)
class FilteredView:
    """The contacts visible for one settled query.

    Behaves as a read-only sequence of Records.  ``query`` is the settled
    query the view was computed with, which is also the highlighter input
    when rendering it.

    Attributes:
        records: Matching records, in snapshot order.
        query: Settled query ("" means unfiltered).

    """

    records: Snapshot
    query: str = ""

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records)

    def __getitem__(self, index: int) -> Record:
        return self.records[index]

    def __bool__(self) -> bool:
        return bool(self.records)


def build_snapshot(rows: Iterable[RawContact]) -> tuple[Snapshot, int]:
    """Convert raw provider rows into a snapshot.

    Rows without a display name are dropped, not surfaced.

    Returns:
        The snapshot in source order and the number of rows dropped.

    """
    records: list[Record] = []
    dropped = 0
    for row in rows:
        try:
            records.append(Record.from_row(row))
        except MalformedRecord:
            dropped += 1
    return tuple(records), dropped


def _first_value(row: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = row.get(key)
        if value is None or value == "":
            continue
        return value
    return None
