"""Unified event model for registry observability.

Defines event types for the pulser lifecycle, callback binding, pulse
execution and diagnostic log records.

All events are frozen dataclasses with:
- ``timestamp_ns``: Monotonic nanosecond timestamp
- Descriptive fields for the specific event type

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass
from typing import Literal


# ---------------------------------------------------------------------------
# Lifecycle events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PulserCreated:
    """A pulser was registered (or replaced via override).

    Attributes:
        alias: Registered alias.
        execution_mode: Resolved mode, ``"sync"`` or ``"async"``.
        overridden: True if an existing entry was replaced.
        function_name: Name of the primary function.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    alias: str
    execution_mode: str
    overridden: bool
    function_name: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class PulserDestroyed:
    """A pulser was removed from the registry.

    Attributes:
        alias: Destroyed alias.
        callbacks_cleared: Number of callbacks dropped with the entry.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    alias: str
    callbacks_cleared: int
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Callback binding events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CallbackBound:
    """A callback was appended to an alias."""

    alias: str
    callback_name: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class CallbackUnbound:
    """One or more callbacks were removed from an alias.

    Attributes:
        alias: Alias the callbacks were removed from.
        callback_name: Name of the removed callback, or ``"*"`` for unbind-all.
        removed: Number of callbacks removed.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    alias: str
    callback_name: str
    removed: int
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Execution events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PulseCompleted:
    """A pulse finished its primary call and callback fan-out.

    Attributes:
        alias: Pulsed alias.
        execution_mode: ``"sync"`` or ``"async"``.
        callbacks_dispatched: Callbacks invoked during the pass.
        callbacks_failed: Callbacks that raised or rejected.
        duration_ms: Wall time from primary call to last callback settled.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    alias: str
    execution_mode: str
    callbacks_dispatched: int
    callbacks_failed: int
    duration_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class CallbackFailed:
    """A bound callback raised; the failure was contained."""

    alias: str
    callback_name: str
    error: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class LogRecorded:
    """A diagnostic line emitted by the logger."""

    level: Literal["log", "warn", "error", "info", "debug"]
    message: str
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

type PulsorEvent = (
    PulserCreated
    | PulserDestroyed
    | CallbackBound
    | CallbackUnbound
    | PulseCompleted
    | CallbackFailed
    | LogRecorded
)


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
