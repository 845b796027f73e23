"""Prefixed diagnostic logger.

Implements the ``record(level, message)`` capability the registry depends
on.  Each level can be switched on and off independently; enabled records
are written as plain lines to stderr and, when an ``EventLog`` is attached,
stored as ``LogRecorded`` events.
"""

from __future__ import annotations

import sys
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, TextIO

from pulsor._errors import ConfigError
from pulsor._types import LOG_LEVELS
from pulsor.observability.events import LogRecorded, now_ns

if TYPE_CHECKING:
    from pulsor.config import PulsorConfig
    from pulsor.observability.log import EventLog


class Logger:
    """Logger with a fixed prefix and per-level switches.

    Args:
        prefix: Prepended to every line as ``"<prefix>: "``.
        services: Initial level switches, e.g. ``{"debug": True}``.
        stream: Output stream.  Defaults to ``sys.stderr`` at write time.
        event_log: Optional event log that receives every enabled record.

    """

    __slots__ = ("_event_log", "_prefix", "_services", "_stream")

    def __init__(
        self,
        prefix: str = "[Pulsor]",
        services: Mapping[str, Any] | None = None,
        *,
        stream: TextIO | None = None,
        event_log: EventLog | None = None,
    ) -> None:
        trimmed = (prefix or "").strip()
        if not trimmed:
            msg = "Prefix cannot be empty or contain only whitespace"
            raise ConfigError(msg)
        self._prefix = trimmed
        self._services: dict[str, bool] = {
            "log": True,
            "info": True,
            "warn": True,
            "error": True,
            "debug": False,
        }
        self._stream = stream
        self._event_log = event_log
        if services is not None:
            self.services(services)

    @classmethod
    def silent(cls) -> Logger:
        """Return a logger with every level disabled."""
        return cls(services=dict.fromkeys(LOG_LEVELS, False))

    @classmethod
    def from_config(cls, config: PulsorConfig, *, event_log: EventLog | None = None) -> Logger:
        """Build a logger from a PulsorConfig."""
        return cls(config.prefix, config.services, event_log=event_log)

    @property
    def prefix(self) -> str:
        return self._prefix

    def enabled(self, level: str) -> bool:
        """True if records at ``level`` are emitted."""
        return self._services.get(level, False)

    def services(self, services: Mapping[str, Any]) -> None:
        """Switch levels on or off.

        Only known level names with boolean values are applied; other keys
        are ignored.

        Raises:
            ConfigError: If ``services`` is not a mapping.

        """
        if not isinstance(services, Mapping):
            msg = "Services must be a mapping of level name to bool"
            raise ConfigError(msg)
        for key, value in services.items():
            level = str(key).strip().lower()
            if level in self._services and isinstance(value, bool):
                self._services[level] = value

    def format(self, message: str) -> str:
        """Prefix a message."""
        return f"{self._prefix}: {message}"

    def record(self, level: str, message: str) -> None:
        """Emit ``message`` at ``level`` if that level is enabled.

        Raises:
            ConfigError: If ``level`` is not a known level name.

        """
        if level not in self._services:
            msg = f"Unknown log level {level!r}"
            raise ConfigError(msg)
        if not self._services[level]:
            return
        print(self.format(message), file=self._stream or sys.stderr)
        if self._event_log is not None:
            self._event_log.append(
                LogRecorded(level=level, message=message, timestamp_ns=now_ns())  # type: ignore[arg-type]
            )

    def log(self, message: str) -> None:
        self.record("log", message)

    def info(self, message: str) -> None:
        self.record("info", message)

    def warn(self, message: str) -> None:
        self.record("warn", message)

    def error(self, message: str) -> None:
        self.record("error", message)

    def debug(self, message: str) -> None:
        self.record("debug", message)
