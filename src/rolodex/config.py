"""Rolodex configuration.

RolodexConfig is the central configuration object, frozen after creation.
"""

from dataclasses import dataclass
from pathlib import Path

from rolodex._errors import ConfigError


@dataclass(frozen=True, slots=True)
class RolodexConfig:
    """Configuration for a contact search pipeline.

    Attributes:
        debounce_ms: Quiet window after the last keystroke before a query settles.
        watch_debounce_ms: watchfiles debounce for file-backed sources.
        watch_step_ms: watchfiles polling step for file-backed sources.
        max_events: Capacity of the observability event log.
        verbose: Print one-line pipeline summaries to stderr.
        source: Optional contacts file (JSON, YAML or CSV).
              Resolved to an absolute path on construction.

    """

    debounce_ms: int = 1000
    watch_debounce_ms: int = 300
    watch_step_ms: int = 100
    max_events: int = 10_000
    verbose: bool = False
    source: Path | None = None

    def __post_init__(self) -> None:
        for name in ("debounce_ms", "watch_debounce_ms", "watch_step_ms"):
            if getattr(self, name) < 0:
                msg = f"{name} must be >= 0, got {getattr(self, name)}"
                raise ConfigError(msg)
        if self.max_events <= 0:
            msg = f"max_events must be positive, got {self.max_events}"
            raise ConfigError(msg)
        if self.source is not None:
            source = Path(self.source)
            if not source.is_absolute():
                source = source.resolve()
            object.__setattr__(self, "source", source)

    @property
    def debounce_seconds(self) -> float:
        """Debounce quiet window in seconds."""
        return self.debounce_ms / 1000
