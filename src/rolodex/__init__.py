"""Rolodex — a live, debounced contact search pipeline.

Watches a contact source for changes, settles keystrokes into queries,
filters the latest snapshot by the latest query and shares the result
with every observer.

Quick start::

    from rolodex import ContactPipeline, MemorySource, Record

    source = MemorySource([Record("Amber", "2"), Record("Simon", "1")])
    pipeline = ContactPipeline(source, permission_granted=True)

    async for view in pipeline.views():
        ...                         # FilteredView, replayed then live

    pipeline.submit_query("am")     # settles after the quiet window

Highlighting is independent of the pipeline::

    from rolodex import highlight
    highlight("Lily", "li")         # (Li*, ly)

"""

__version__ = "0.1.0"
__all__ = [
    "ContactPipeline",
    "DataSource",
    "FileSource",
    "FilteredView",
    "HighlightSpan",
    "MemorySource",
    "Record",
    "RolodexConfig",
    "RolodexError",
    "SourceUnavailable",
    "__version__",
    "highlight",
]

_LAZY: dict[str, str] = {
    "ContactPipeline": "rolodex.reactive.pipeline",
    "DataSource": "rolodex.contacts.source",
    "FileSource": "rolodex.contacts.file_source",
    "FilteredView": "rolodex.contacts.records",
    "HighlightSpan": "rolodex.highlighting",
    "MemorySource": "rolodex.contacts.source",
    "Record": "rolodex.contacts.records",
    "RolodexConfig": "rolodex.config",
    "RolodexError": "rolodex._errors",
    "SourceUnavailable": "rolodex._errors",
    "highlight": "rolodex.highlighting",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import rolodex`` fast while providing a clean top-level API.
    """
    module_name = _LAZY.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    from importlib import import_module

    return getattr(import_module(module_name), name)
