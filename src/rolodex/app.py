"""Rolodex application — wires a source, a pipeline and the terminal.

The three public functions (search, watch, demo) are the primary entry
points and back the ``rolodex`` CLI.
"""

from __future__ import annotations

import asyncio
import sys
import threading
from contextlib import aclosing
from pathlib import Path
from typing import TYPE_CHECKING

from rolodex._errors import RolodexError
from rolodex.config_loader import load_config
from rolodex.contacts.file_source import FileSource
from rolodex.contacts.records import FilteredView, build_snapshot
from rolodex.contacts.samples import SAMPLE_CONTACTS
from rolodex.contacts.source import MemorySource
from rolodex.observability.collector import StackCollector
from rolodex.observability.log import EventLog
from rolodex.reactive.combiner import filter_records
from rolodex.reactive.pipeline import ContactPipeline
from rolodex.render import format_error, format_view, supports_color

if TYPE_CHECKING:
    from asyncio import AbstractEventLoop
    from typing import TextIO

    from rolodex.config import RolodexConfig
    from rolodex.contacts.source import DataSource


def _file_source(path: str | Path, config: RolodexConfig) -> FileSource:
    return FileSource(
        Path(path),
        debounce_ms=config.watch_debounce_ms,
        step_ms=config.watch_step_ms,
    )


def _collector(config: RolodexConfig) -> StackCollector:
    return StackCollector(EventLog(config.max_events), verbose=config.verbose)


def _start_reader(
    stdin: TextIO,
    loop: AbstractEventLoop,
    lines: asyncio.Queue[str | None],
) -> threading.Thread:
    """Read stdin in a daemon thread and push lines onto the loop's queue.

    ``None`` marks EOF.  The thread may still be blocked in ``readline``
    after the loop has closed; it is a daemon for that reason.

    """

    def _push(item: str | None) -> bool:
        try:
            loop.call_soon_threadsafe(lines.put_nowait, item)
        except RuntimeError:
            return False  # loop closed
        return True

    def _read() -> None:
        for line in iter(stdin.readline, ""):
            if not _push(line):
                return
        _push(None)

    thread = threading.Thread(target=_read, name="rolodex-stdin", daemon=True)
    thread.start()
    return thread


def search(path: str | Path, query: str, root: str | Path = ".", **kwargs: object) -> int:
    """Load a contacts file once, filter it and print the highlighted result.

    Args:
        path: Contacts file (JSON, YAML or CSV).
        query: Search text.
        root: Directory holding an optional rolodex.yaml / rolodex.toml.
        **kwargs: Override RolodexConfig fields.

    Returns:
        Process exit code.

    """
    config = load_config(Path(root), **kwargs)
    try:
        snapshot, _dropped = build_snapshot(_file_source(path, config).load_all())
    except RolodexError as exc:
        print(format_error(exc), file=sys.stderr)
        return 1

    view = FilteredView(filter_records(snapshot, query), query)
    print(format_view(view, color=supports_color()))
    return 0


def watch(path: str | Path | None = None, root: str | Path = ".", **kwargs: object) -> int:
    """Live search over a contacts file.

    Each line read from stdin replaces the search text; edits to the file
    reload the list.  Every new view is printed.

    Args:
        path: Contacts file; defaults to ``source`` from the config file.
        root: Directory holding an optional rolodex.yaml / rolodex.toml.
        **kwargs: Override RolodexConfig fields.

    Returns:
        Process exit code.

    """
    config = load_config(Path(root), **kwargs)
    target = path if path is not None else config.source
    if target is None:
        print("Error: no contacts file given and no 'source' configured", file=sys.stderr)
        return 2
    try:
        source = _file_source(target, config)
    except RolodexError as exc:
        print(format_error(exc), file=sys.stderr)
        return 1
    return asyncio.run(run_live(source, config))


def demo(root: str | Path = ".", **kwargs: object) -> int:
    """Live search over the built-in sample contacts."""
    config = load_config(Path(root), **kwargs)
    return asyncio.run(run_live(MemorySource(SAMPLE_CONTACTS), config))


async def run_live(
    source: DataSource,
    config: RolodexConfig,
    *,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> int:
    """Drive a pipeline from line-based input until EOF.

    After EOF the last submission is given one quiet window to settle
    before the pipeline is torn down.

    Returns:
        0 on a clean EOF, 1 if the pipeline failed.

    """
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout
    color = stdout is sys.stdout and supports_color()

    pipeline = ContactPipeline(source, config, collector=_collector(config))
    pipeline.notify_permission_state(True)

    lines: asyncio.Queue[str | None] = asyncio.Queue()
    _start_reader(stdin, asyncio.get_running_loop(), lines)

    async def read_queries() -> None:
        while True:
            line = await lines.get()
            if line is None:
                break
            pipeline.submit_query(line.rstrip("\r\n"))
        await asyncio.sleep(config.debounce_seconds + 0.1)

    async def print_views() -> None:
        async with aclosing(pipeline.views()) as views:
            async for view in views:
                header = f"--- {len(view)} contacts"
                if view.query:
                    header += f" matching {view.query!r}"
                print(header, file=stdout)
                print(format_view(view, color=color), file=stdout, flush=True)

    reader = asyncio.create_task(read_queries())
    printer = asyncio.create_task(print_views())
    try:
        await asyncio.wait({reader, printer}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        reader.cancel()
        printer.cancel()
        await asyncio.wait({reader, printer})
        await pipeline.join()

    if printer.cancelled():
        return 0
    error = printer.exception()
    if error is None:
        return 0
    if not isinstance(error, RolodexError):
        raise error
    print(format_error(error), file=sys.stderr)
    return 1
