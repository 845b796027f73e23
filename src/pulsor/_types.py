"""Shared type definitions for pulsor."""

from collections.abc import Callable
from typing import Any, Literal, Protocol

# Registry key identifying one pulser
type Alias = str

# Primary function invoked on pulse
type PulseFunc = Callable[..., Any]

# Function bound to an alias, receives the pulse arguments
type Callback = Callable[..., Any]

# Diagnostic levels understood by the logging capability
type LogLevel = Literal["log", "warn", "error", "info", "debug"]

LOG_LEVELS: tuple[str, ...] = ("log", "warn", "error", "info", "debug")


class Recorder(Protocol):
    """Logging capability injected into the registry.

    Diagnostics only. Implementations may drop every record.
    """

    def record(self, level: str, message: str) -> None: ...
