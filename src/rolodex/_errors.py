"""Rolodex error hierarchy.

All rolodex-specific errors inherit from RolodexError for easy catching.
"""


class RolodexError(Exception):
    """Base error for all rolodex operations."""


class ConfigError(RolodexError):
    """Invalid or missing configuration."""


class SourceUnavailable(RolodexError):
    """The contact source could not be subscribed to or loaded.

    Terminal for the current view stream; a fresh observer re-establishes
    the pipeline.
    """


class MalformedRecord(RolodexError):
    """A contact row without a usable display name (dropped at load time)."""


class PermissionRequired(RolodexError):
    """The contact permission gate is closed."""


class ReactiveError(RolodexError):
    """Error in the reactive pipeline (wiring, lifecycle misuse)."""
