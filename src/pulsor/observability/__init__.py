"""Registry observability — structured events for the pulser lifecycle.

Aggregates events from:
- **Registry**: pulser creation, override and destruction
- **Handles**: callback binding, pulse completion, contained callback failures
- **Logger**: every enabled diagnostic line

All events are frozen dataclasses with nanosecond timestamps.

Quick Start:
    >>> from pulsor.observability import EventLog, PulseCollector
    >>> log = EventLog()
    >>> collector = PulseCollector(log)
    >>> # Pass to Registry(collector=collector)

"""

from pulsor.observability.collector import PulseCollector
from pulsor.observability.events import (
    CallbackBound,
    CallbackFailed,
    CallbackUnbound,
    LogRecorded,
    PulseCompleted,
    PulserCreated,
    PulserDestroyed,
    PulsorEvent,
    now_ns,
)
from pulsor.observability.log import EventLog

__all__ = [
    "CallbackBound",
    "CallbackFailed",
    "CallbackUnbound",
    "EventLog",
    "LogRecorded",
    "PulseCollector",
    "PulseCompleted",
    "PulserCreated",
    "PulserDestroyed",
    "PulsorEvent",
    "now_ns",
]
