"""Terminal rendering for filtered views.

Emphasis uses ANSI bold + color when stdout is a terminal.  Detects
``NO_COLOR`` / ``TERM`` for safe fallback to ``[brackets]``.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

from rolodex.highlighting import highlight

if TYPE_CHECKING:
    from rolodex.contacts.records import FilteredView, Record
    from rolodex.highlighting import HighlightSpan


# ---------------------------------------------------------------------------
# ANSI helpers: respect NO_COLOR (https://no-color.org)
# ---------------------------------------------------------------------------

def supports_color() -> bool:
    """Return True if stdout supports ANSI colors."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


_RESET = "\033[0m"
_BOLD = "\033[1m"
_DIM = "\033[2m"
_YELLOW = "\033[33m"
_RED = "\033[31m"


def format_spans(spans: tuple[HighlightSpan, ...], *, color: bool = False) -> str:
    """Render spans, emphasizing matched runs."""
    parts: list[str] = []
    for span in spans:
        if not span.emphasized:
            parts.append(span.text)
        elif color:
            parts.append(f"{_BOLD}{_YELLOW}{span.text}{_RESET}")
        else:
            parts.append(f"[{span.text}]")
    return "".join(parts)


def format_record(record: Record, query: str, *, color: bool = False) -> str:
    """One line per contact: highlighted name, then the number if present."""
    name = format_spans(highlight(record.name, query), color=color)
    if record.number is None:
        return name
    number = f"{_DIM}{record.number}{_RESET}" if color else record.number
    return f"{name}  {number}"


def format_view(view: FilteredView, *, color: bool = False) -> str:
    """Render a whole view; an empty view renders as ``Empty``."""
    if not view:
        return f"{_DIM}Empty{_RESET}" if color else "Empty"
    return "\n".join(format_record(record, view.query, color=color) for record in view)


def format_error(error: BaseException, *, color: bool = False) -> str:
    """Render a terminal pipeline error."""
    line = f"Error: {error}"
    return f"{_RED}{line}{_RESET}" if color else line
