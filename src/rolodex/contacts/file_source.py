"""File-backed contact source.

Reads contacts from a JSON, YAML or CSV file and reports edits to that file
through ``watchfiles``.

The watcher runs watchfiles in a background thread per subscription and
invokes the change callback from that thread; the pipeline bridges it back
onto its event loop.
"""

from __future__ import annotations

import csv
import io
import json
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from rolodex._errors import SourceUnavailable
from rolodex.contacts.source import CallbackSubscription

if TYPE_CHECKING:
    from rolodex._types import ChangeCallback
    from rolodex.contacts.source import Subscription

_SUFFIXES = frozenset({".json", ".yaml", ".yml", ".csv"})


def parse_contacts(text: str, suffix: str) -> list[dict[str, Any]]:
    """Parse a contacts document into raw rows.

    JSON and YAML documents are either a list of objects or a mapping with a
    ``contacts`` list.  CSV files need a header row.

    Raises:
        SourceUnavailable: The document cannot be parsed or has the wrong shape.

    """
    suffix = suffix.lower()
    if suffix == ".csv":
        return [dict(row) for row in csv.DictReader(io.StringIO(text))]

    try:
        data = json.loads(text) if suffix == ".json" else yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        msg = f"Cannot parse contacts document: {exc}"
        raise SourceUnavailable(msg) from exc

    if data is None:
        return []
    if isinstance(data, dict):
        data = data.get("contacts", [])
    if not isinstance(data, list):
        msg = f"Expected a list of contacts, got {type(data).__name__}"
        raise SourceUnavailable(msg)
    return [row for row in data if isinstance(row, dict)]


class FileSource:
    """Contacts stored in a single file on disk.

    Args:
        path: Contacts file (``.json``, ``.yaml``, ``.yml`` or ``.csv``).
        debounce_ms: watchfiles debounce before a batch of changes is reported.
        step_ms: watchfiles polling step.

    """

    def __init__(self, path: Path, *, debounce_ms: int = 300, step_ms: int = 100) -> None:
        self._path = Path(path).resolve()
        if self._path.suffix.lower() not in _SUFFIXES:
            msg = f"Unsupported contacts file type: {self._path.name}"
            raise SourceUnavailable(msg)
        self._debounce_ms = debounce_ms
        self._step_ms = step_ms
        self._watch_error: Exception | None = None

    @property
    def path(self) -> Path:
        return self._path

    def load_all(self) -> list[dict[str, Any]]:
        """Read and parse the contacts file.

        Raises:
            SourceUnavailable: The file cannot be read or parsed, or the
                watcher for it has stopped.

        """
        error = self._watch_error
        if error is not None:
            msg = f"Stopped watching {self._path.parent}: {error}"
            raise SourceUnavailable(msg) from error
        try:
            text = self._path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            msg = f"Cannot read {self._path}: {exc}"
            raise SourceUnavailable(msg) from exc
        return parse_contacts(text, self._path.suffix)

    def subscribe_to_changes(self, on_change: ChangeCallback) -> Subscription:
        """Start a watcher thread for the contacts file.

        Cancelling the returned subscription stops the thread and waits for
        it to finish.  If watching fails, the error is kept and
        ``on_change`` fires, so the reload it triggers raises it.

        """
        directory = self._path.parent
        if not directory.is_dir():
            msg = f"Contacts directory does not exist: {directory}"
            raise SourceUnavailable(msg)

        self._watch_error = None
        stop_event = threading.Event()
        thread = threading.Thread(
            target=self._watch_loop,
            args=(on_change, stop_event),
            name=f"rolodex-watch-{self._path.name}",
            daemon=True,
        )

        def _stop() -> None:
            stop_event.set()
            thread.join(timeout=5.0)

        thread.start()
        return CallbackSubscription(_stop)

    def _watch_loop(self, on_change: ChangeCallback, stop_event: threading.Event) -> None:
        """Background thread: run watchfiles and report edits to the file."""
        from watchfiles import watch

        try:
            for raw_changes in watch(
                self._path.parent,
                stop_event=stop_event,
                debounce=self._debounce_ms,
                step=self._step_ms,
                recursive=False,
            ):
                if any(Path(path_str).resolve() == self._path for _, path_str in raw_changes):
                    on_change()
        except Exception as exc:
            if stop_event.is_set():
                return
            self._watch_error = exc
            on_change()
