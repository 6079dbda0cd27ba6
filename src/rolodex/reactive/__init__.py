"""Reactive layer — change propagation pipeline.

Connects source change notifications and search keystrokes to shared,
filtered contact views through debouncing, loading and combine-latest.
"""

from rolodex.reactive.broadcaster import SharedResult, Subscriber
from rolodex.reactive.combiner import Combiner, filter_records
from rolodex.reactive.debouncer import Debouncer
from rolodex.reactive.loader import SnapshotLoader
from rolodex.reactive.pipeline import ContactPipeline
from rolodex.reactive.watcher import ChangeWatcher

__all__ = [
    "ChangeWatcher",
    "Combiner",
    "ContactPipeline",
    "Debouncer",
    "SharedResult",
    "SnapshotLoader",
    "Subscriber",
    "filter_records",
]
