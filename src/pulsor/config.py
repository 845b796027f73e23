"""Pulsor configuration.

PulsorConfig is the central configuration object, frozen after creation.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from pulsor._errors import ConfigError
from pulsor._types import LOG_LEVELS


def _default_levels() -> frozenset[str]:
    return frozenset({"log", "info", "warn", "error"})


@dataclass(frozen=True, slots=True)
class PulsorConfig:
    """Configuration for a Pulsor registry and its collaborators.

    Attributes:
        prefix: Prefix prepended to every diagnostic line.
        log_levels: Enabled logger levels. ``debug`` is off by default.
        max_events: Capacity of the observability event log.
        fragment_base_url: Base URL the fragment loaders fetch from.
        fragments_path: URL path holding HTML fragments.
        templates_path: URL path holding HTML templates.
        fetch_timeout: Timeout in seconds for fragment requests.

    """

    prefix: str = "[Pulsor]"
    log_levels: frozenset[str] = field(default_factory=_default_levels)
    max_events: int = 10_000
    fragment_base_url: str = ""
    fragments_path: str = "/src/fragments/"
    templates_path: str = "/src/templates/"
    fetch_timeout: float = 10.0

    def __post_init__(self) -> None:
        for name in ("prefix", "fragment_base_url", "fragments_path", "templates_path"):
            value = getattr(self, name)
            if not isinstance(value, str):
                msg = f"{name} must be a string, got {type(value).__name__}"
                raise ConfigError(msg)
        if isinstance(self.max_events, bool) or not isinstance(self.max_events, int):
            msg = f"max_events must be an integer, got {type(self.max_events).__name__}"
            raise ConfigError(msg)
        if isinstance(self.fetch_timeout, bool) or not isinstance(self.fetch_timeout, int | float):
            msg = f"fetch_timeout must be a number, got {type(self.fetch_timeout).__name__}"
            raise ConfigError(msg)
        if isinstance(self.log_levels, str) or not isinstance(self.log_levels, Iterable):
            msg = f"log_levels must be a collection of level names, got {self.log_levels!r}"
            raise ConfigError(msg)
        if not isinstance(self.log_levels, frozenset):
            object.__setattr__(self, "log_levels", frozenset(self.log_levels))
        unknown = self.log_levels - set(LOG_LEVELS)
        if unknown:
            msg = f"Unknown log levels: {', '.join(sorted(map(str, unknown)))}"
            raise ConfigError(msg)
        if not self.prefix.strip():
            msg = "Prefix cannot be empty or contain only whitespace"
            raise ConfigError(msg)
        if self.max_events <= 0:
            msg = f"max_events must be positive, got {self.max_events}"
            raise ConfigError(msg)

    @property
    def services(self) -> dict[str, bool]:
        """Logger service map: every known level with its enabled state."""
        return {level: level in self.log_levels for level in LOG_LEVELS}
