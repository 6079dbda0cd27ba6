"""Shared type definitions for rolodex."""

from collections.abc import Callable, Iterable, Mapping
from typing import TYPE_CHECKING, Any, Literal

if TYPE_CHECKING:
    from rolodex.contacts.records import Record

# Settled search text; "" means no filtering
type Query = str

# Immutable point-in-time copy of the contact set
type Snapshot = tuple[Record, ...]

# A raw row as handed out by a DataSource (Record or provider mapping)
type RawContact = Record | Mapping[str, Any]

type RawContacts = Iterable[RawContact]

# Change-notification callback registered with a DataSource
type ChangeCallback = Callable[[], None]

# Observable pipeline state
type PipelineState = Literal["idle", "loading", "ready", "failed"]
