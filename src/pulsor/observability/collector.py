"""Pulse collector — typed recording helpers over the event log.

The registry and its handles call into a collector at every lifecycle,
binding and execution step.  The collector turns those calls into frozen
events and stores them in an ``EventLog``.

Thread Safety:
    The collector delegates to ``EventLog`` which is internally locked.

"""

from __future__ import annotations

from pulsor.observability.events import (
    CallbackBound,
    CallbackFailed,
    CallbackUnbound,
    PulseCompleted,
    PulserCreated,
    PulserDestroyed,
    now_ns,
)
from pulsor.observability.log import EventLog


class PulseCollector:
    """Unified event collector for a registry.

    Args:
        log: The EventLog to store events in.

    """

    __slots__ = ("_log",)

    def __init__(self, log: EventLog | None = None) -> None:
        self._log = log if log is not None else EventLog()

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    # ----- Lifecycle -----

    def record_created(
        self,
        alias: str,
        execution_mode: str,
        *,
        overridden: bool = False,
        function_name: str = "anonymous",
    ) -> None:
        """Record a pulser registration."""
        self._log.append(
            PulserCreated(
                alias=alias,
                execution_mode=execution_mode,
                overridden=overridden,
                function_name=function_name,
                timestamp_ns=now_ns(),
            )
        )

    def record_destroyed(self, alias: str, *, callbacks_cleared: int = 0) -> None:
        """Record a pulser destruction."""
        self._log.append(
            PulserDestroyed(
                alias=alias,
                callbacks_cleared=callbacks_cleared,
                timestamp_ns=now_ns(),
            )
        )

    # ----- Binding -----

    def record_bound(self, alias: str, callback_name: str) -> None:
        """Record a callback bind."""
        self._log.append(
            CallbackBound(alias=alias, callback_name=callback_name, timestamp_ns=now_ns())
        )

    def record_unbound(self, alias: str, callback_name: str, *, removed: int = 1) -> None:
        """Record a callback unbind (``callback_name="*"`` for unbind-all)."""
        self._log.append(
            CallbackUnbound(
                alias=alias,
                callback_name=callback_name,
                removed=removed,
                timestamp_ns=now_ns(),
            )
        )

    # ----- Execution -----

    def record_pulse(
        self,
        alias: str,
        execution_mode: str,
        *,
        callbacks_dispatched: int = 0,
        callbacks_failed: int = 0,
        duration_ms: float = 0.0,
    ) -> None:
        """Record a completed pulse."""
        self._log.append(
            PulseCompleted(
                alias=alias,
                execution_mode=execution_mode,
                callbacks_dispatched=callbacks_dispatched,
                callbacks_failed=callbacks_failed,
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )

    def record_callback_failure(self, alias: str, callback_name: str, error: str) -> None:
        """Record a contained callback failure."""
        self._log.append(
            CallbackFailed(
                alias=alias,
                callback_name=callback_name,
                error=error,
                timestamp_ns=now_ns(),
            )
        )
