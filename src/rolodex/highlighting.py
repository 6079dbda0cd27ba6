"""Highlighter — splits a contact name into plain and matched spans.

Pure and synchronous; callable independently of the pipeline.  Matches are
case-insensitive, non-overlapping and found left to right; matched text keeps
its original casing.  Concatenating the span texts always reproduces the
name exactly.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class HighlightSpan:
    """A run of name text.

    Attributes:
        text: The characters of this run, in original casing.
        emphasized: True when the run matches the query.

    """

    text: str
    emphasized: bool = False


def highlight(name: str, query: str | None) -> tuple[HighlightSpan, ...]:
    """Split ``name`` into spans around each occurrence of ``query``.

    An empty query returns the whole name as one plain span without
    searching: every position would match the empty string.

    Example::

        >>> highlight("Lily", "li")
        (HighlightSpan(text='Li', emphasized=True), HighlightSpan(text='ly', emphasized=False))

    """
    if not query:
        return (HighlightSpan(name),)

    spans: list[HighlightSpan] = []
    cursor = 0
    for match in re.finditer(re.escape(query), name, flags=re.IGNORECASE):
        start, end = match.span()
        if start > cursor:
            spans.append(HighlightSpan(name[cursor:start]))
        spans.append(HighlightSpan(name[start:end], emphasized=True))
        cursor = end
    if cursor < len(name) or not spans:
        spans.append(HighlightSpan(name[cursor:]))
    return tuple(spans)


def join_spans(spans: Iterable[HighlightSpan]) -> str:
    """Reassemble the original text from its spans."""
    return "".join(span.text for span in spans)
