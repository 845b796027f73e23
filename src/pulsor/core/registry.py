"""Registry — single source of truth mapping alias to pulser entry.

The registry arbitrates registration and destruction.  It is an ordinary
owned object: construct one per application (or per test) and pass it to
collaborators explicitly.

Concurrency:
    Plain in-memory structures, no locking.  Safe under single-threaded
    cooperative scheduling (one event loop), which is the only model
    supported.

"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pulsor._errors import AlreadyExistsError, InvalidAliasError, NotFoundError
from pulsor.core.entry import (
    ExecutionMode,
    PulserEntry,
    coerce_primary,
    resolve_mode,
    validate_alias,
)
from pulsor.core.handle import PulserHandle
from pulsor.logger import Logger
from pulsor.observability.collector import PulseCollector
from pulsor.observability.log import EventLog

if TYPE_CHECKING:
    from collections.abc import Iterator

    from pulsor._types import Recorder
    from pulsor.config import PulsorConfig


@dataclass(frozen=True, slots=True)
class PulserInfo:
    """Read-only snapshot of one registration.

    Attributes:
        alias: Registered alias.
        execution_mode: ``ExecutionMode.SYNC`` or ``ExecutionMode.ASYNC``.
        callback_count: Callbacks bound at snapshot time.
        function_name: Primary function name, ``"anonymous"`` for lambdas.

    """

    alias: str
    execution_mode: ExecutionMode
    callback_count: int
    function_name: str

    @property
    def is_async(self) -> bool:
        return self.execution_mode is ExecutionMode.ASYNC


class Registry:
    """Maps aliases to pulser entries.

    Args:
        logger: Diagnostic capability with ``record(level, message)``.
            Defaults to a silent ``Logger``.
        collector: Optional structured event collector.

    """

    __slots__ = ("_background", "_collector", "_entries", "_logger")

    def __init__(
        self,
        *,
        logger: Recorder | None = None,
        collector: PulseCollector | None = None,
    ) -> None:
        self._entries: dict[str, PulserEntry] = {}
        self._logger: Recorder = logger if logger is not None else Logger.silent()
        self._collector = collector
        # Tasks for async callbacks bound to sync pulsers, held until done
        self._background: set[asyncio.Future[Any]] = set()

    @classmethod
    def from_config(cls, config: PulsorConfig) -> Registry:
        """Build a registry with a configured logger, event log and collector."""
        log = EventLog(max_events=config.max_events)
        return cls(
            logger=Logger.from_config(config, event_log=log),
            collector=PulseCollector(log),
        )

    @property
    def logger(self) -> Recorder:
        return self._logger

    @property
    def collector(self) -> PulseCollector | None:
        return self._collector

    # ----- Registration -----

    def create_pulser(
        self,
        alias: str,
        fn: Any,
        *,
        override: bool = False,
        execution_mode: ExecutionMode | str = ExecutionMode.AUTO,
    ) -> PulserHandle:
        """Register ``fn`` under ``alias`` and return a handle for it.

        ``None`` is accepted as ``fn`` and registered as a no-op.  With
        ``override=True`` an existing entry is replaced wholesale: its
        callbacks are not carried over.

        Raises:
            InvalidAliasError: Alias fails validation.
            InvalidFunctionError: ``fn`` is neither callable nor None.
            InvalidModeError: ``execution_mode`` is not a known mode.
            AlreadyExistsError: Alias is registered and override is False.

        """
        key = validate_alias(alias)
        function = coerce_primary(fn)
        overridden = key in self._entries
        if overridden and not override:
            msg = f"Pulser '{key}' already exists. Use override=True to replace it."
            raise AlreadyExistsError(msg, alias=key)

        mode = resolve_mode(function, execution_mode)
        entry = PulserEntry(alias=key, function=function, execution_mode=mode)
        self._entries[key] = entry

        if overridden:
            self._logger.record("log", f"Pulser '{key}' already exists. Overriding.")
        self._logger.record("log", f"Pulser '{key}' ({mode}) created.")
        if self._collector is not None:
            self._collector.record_created(
                key,
                str(mode),
                overridden=overridden,
                function_name=entry.function_name,
            )
        return PulserHandle(self, key)

    def destroy_pulser(self, alias: str) -> None:
        """Remove the entry for ``alias`` and clear its callbacks.

        Handles captured earlier keep their entry reference; pulsing them
        still runs the primary function, with no callbacks left.

        Raises:
            InvalidAliasError: Alias fails validation.
            NotFoundError: Alias is not registered.

        """
        key = validate_alias(alias)
        entry = self._entries.pop(key, None)
        if entry is None:
            msg = f"Pulser '{key}' does not exist."
            raise NotFoundError(msg, alias=key)
        cleared = entry.callbacks.clear()
        self._logger.record("log", f"Pulser '{key}' and all its callbacks have been destroyed.")
        if self._collector is not None:
            self._collector.record_destroyed(key, callbacks_cleared=cleared)

    def clear(self) -> int:
        """Destroy every pulser and return how many were removed."""
        aliases = list(self._entries)
        for key in aliases:
            self.destroy_pulser(key)
        return len(aliases)

    # ----- Introspection -----

    def exists(self, alias: object) -> bool:
        """True if ``alias`` is registered.  Never raises."""
        try:
            key = validate_alias(alias)
        except InvalidAliasError:
            return False
        return key in self._entries

    def aliases(self) -> list[str]:
        """Registered aliases in registration order."""
        return list(self._entries)

    def info(self, alias: object) -> PulserInfo | None:
        """Snapshot of one registration, or None.  Never raises."""
        try:
            key = validate_alias(alias)
        except InvalidAliasError:
            return None
        entry = self._entries.get(key)
        if entry is None:
            return None
        return PulserInfo(
            alias=key,
            execution_mode=entry.execution_mode,
            callback_count=len(entry.callbacks),
            function_name=entry.function_name,
        )

    def __contains__(self, alias: object) -> bool:
        return self.exists(alias)

    def __iter__(self) -> Iterator[str]:
        return iter(self.aliases())

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"<Registry pulsers={len(self._entries)}>"

    # ----- Handles -----

    def get_handle(self, alias: str) -> PulserHandle:
        """Return a handle for ``alias``.

        Raises:
            InvalidAliasError: Alias fails validation.
            NotFoundError: Alias is not registered.

        """
        return PulserHandle(self, alias)

    def pulse(self, alias: str, *args: Any, **kwargs: Any) -> Any:
        """Pulse ``alias`` once without keeping a handle."""
        return self.get_handle(alias).pulse(*args, **kwargs)

    def _lookup(self, key: str) -> PulserEntry:
        entry = self._entries.get(key)
        if entry is None:
            msg = f"Pulser '{key}' is not registered."
            raise NotFoundError(msg, alias=key)
        return entry
