"""Load RolodexConfig from rolodex.yaml if present.

Merges file config with CLI kwargs. CLI overrides file.
"""

from __future__ import annotations

import tomllib
from pathlib import Path

import yaml

from rolodex.config import RolodexConfig

_KNOWN_KEYS = frozenset({
    "debounce_ms", "watch_debounce_ms", "watch_step_ms",
    "max_events", "verbose", "source",
})


def load_config(root: Path, **overrides: object) -> RolodexConfig:
    """Load RolodexConfig from root, optionally merging rolodex.yaml.

    Looks for rolodex.yaml, rolodex.yml, or rolodex.toml in root. If found,
    loads and merges with overrides. Overrides take precedence. A relative
    ``source`` from the file is resolved against root.
    """
    file_config = _read_rolodex_config(root)
    if "source" in file_config and file_config["source"] is not None:
        source = Path(str(file_config["source"]))
        file_config["source"] = source if source.is_absolute() else root / source
    merged = {**file_config, **{k: v for k, v in overrides.items() if v is not None}}
    if "source" in merged and not isinstance(merged["source"], Path):
        merged["source"] = Path(str(merged["source"]))
    return RolodexConfig(**merged)


def _read_rolodex_config(root: Path) -> dict[str, object]:
    """Read rolodex config from yaml/toml if present. Returns empty dict otherwise."""
    for name in ("rolodex.yaml", "rolodex.yml"):
        path = root / name
        if path.is_file():
            return _parse_yaml(path)
    toml_path = root / "rolodex.toml"
    if toml_path.is_file():
        return _parse_toml(toml_path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    """Parse YAML config. Returns empty dict on error."""
    try:
        data = yaml.safe_load(path.read_text()) or {}
    except (OSError, yaml.YAMLError):
        return {}
    if not isinstance(data, dict):
        return {}
    return _flatten_rolodex_section(data)


def _parse_toml(path: Path) -> dict[str, object]:
    """Parse TOML config. Returns empty dict on error."""
    try:
        data = tomllib.loads(path.read_text())
    except (OSError, tomllib.TOMLDecodeError):
        return {}
    return _flatten_rolodex_section(data)


def _flatten_rolodex_section(data: dict[str, object]) -> dict[str, object]:
    """Extract rolodex.* keys into top-level config."""
    result: dict[str, object] = {}
    section = data.get("rolodex")
    if isinstance(section, dict):
        for k, v in section.items():
            if k in _KNOWN_KEYS:
                result[k] = v
    for k, v in data.items():
        if k != "rolodex" and k in _KNOWN_KEYS:
            result[k] = v
    return result
