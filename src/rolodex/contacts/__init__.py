"""Contact data — records, snapshots and the sources they come from."""

from rolodex.contacts.file_source import FileSource, parse_contacts
from rolodex.contacts.records import FilteredView, Record, build_snapshot
from rolodex.contacts.samples import SAMPLE_CONTACTS
from rolodex.contacts.source import CallbackSubscription, DataSource, MemorySource, Subscription

__all__ = [
    "SAMPLE_CONTACTS",
    "CallbackSubscription",
    "DataSource",
    "FileSource",
    "FilteredView",
    "MemorySource",
    "Record",
    "Subscription",
    "build_snapshot",
    "parse_contacts",
]
