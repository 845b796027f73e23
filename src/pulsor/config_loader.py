"""Load PulsorConfig from pulsor.yaml if present.

Merges file config with keyword overrides. Overrides take precedence.
"""

from __future__ import annotations

import tomllib
from typing import TYPE_CHECKING

import yaml

from pulsor._errors import ConfigError
from pulsor.config import PulsorConfig

if TYPE_CHECKING:
    from pathlib import Path

_KNOWN_KEYS = frozenset({
    "prefix", "log_levels", "max_events", "fragment_base_url",
    "fragments_path", "templates_path", "fetch_timeout",
})


def load_config(root: Path, **overrides: object) -> PulsorConfig:
    """Load PulsorConfig from root, optionally merging pulsor.yaml.

    Looks for pulsor.yaml, pulsor.yml, or pulsor.toml in root. If found, loads
    and merges with overrides. Overrides take precedence.
    """
    file_config = _read_pulsor_config(root)
    merged = {**file_config, **overrides}
    if "log_levels" in merged and not isinstance(merged["log_levels"], frozenset):
        levels = merged["log_levels"]
        if isinstance(levels, str) or not hasattr(levels, "__iter__"):
            msg = f"log_levels must be a list of level names, got {levels!r}"
            raise ConfigError(msg)
        merged["log_levels"] = frozenset(str(level).strip().lower() for level in levels)
    try:
        return PulsorConfig(**merged)  # type: ignore[arg-type]
    except TypeError as exc:
        raise ConfigError(str(exc)) from exc


def _read_pulsor_config(root: Path) -> dict[str, object]:
    """Read pulsor config from yaml/toml if present. Returns empty dict otherwise."""
    for name in ("pulsor.yaml", "pulsor.yml"):
        path = root / name
        if path.is_file():
            return _parse_yaml(path)
    toml_path = root / "pulsor.toml"
    if toml_path.is_file():
        return _parse_toml(toml_path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    try:
        data = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as exc:
        msg = f"Malformed config file {path.name}: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(data, dict):
        msg = f"Config file {path.name} must contain a mapping"
        raise ConfigError(msg)
    return _flatten_pulsor_section(data)


def _parse_toml(path: Path) -> dict[str, object]:
    try:
        data = tomllib.loads(path.read_text())
    except tomllib.TOMLDecodeError as exc:
        msg = f"Malformed config file {path.name}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_pulsor_section(data)


def _flatten_pulsor_section(data: dict[str, object]) -> dict[str, object]:
    """Extract pulsor.* keys into top-level config."""
    result: dict[str, object] = {}
    for k, v in data.items():
        if k != "pulsor" and k in _KNOWN_KEYS:
            result[k] = v
    section = data.get("pulsor")
    if isinstance(section, dict):
        for k, v in section.items():
            if k in _KNOWN_KEYS:
                result[k] = v
    return result
