"""Pulser handle — per-alias controller and execution engine.

A handle is a transient view over one registry entry.  It runs the pulse
protocol (primary function first, then callback fan-out) and manages the
entry's callback set.  Handles for the same alias share the same entry, so
a callback bound through one is visible through all of them.

Pulse protocol:
    Sync mode: call the primary; if it raised, propagate and skip
    callbacks.  Otherwise call each callback in bind order with the same
    arguments, containing and logging each failure, then return the
    primary's result.

    Async mode: await the primary; if it raised, propagate and skip
    callbacks.  Otherwise dispatch every callback in bind order, starting
    each coroutine eagerly up to its first await, await all of them
    concurrently, contain and log each failure, then return the
    primary's result.

"""

from __future__ import annotations

import asyncio
import functools
import inspect
import time
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from pulsor._errors import AlreadyBoundError, InvalidFunctionError, PulsorError
from pulsor.core.entry import ExecutionMode, callable_name, validate_alias, validate_function

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from pulsor._types import Callback
    from pulsor.core.entry import PulserEntry
    from pulsor.core.registry import Registry


class PulserHandle:
    """Controller bound to one registered alias.

    Args:
        registry: Registry the alias is resolved against.
        alias: Alias to resolve.  Trimmed before lookup.

    Raises:
        InvalidAliasError: Alias fails validation.
        NotFoundError: Alias is not registered.

    """

    __slots__ = ("_alias", "_entry", "_registry")

    def __init__(self, registry: Registry, alias: str) -> None:
        key = validate_alias(alias)
        self._entry: PulserEntry = registry._lookup(key)
        self._alias = key
        self._registry = registry

    @property
    def alias(self) -> str:
        return self._alias

    @property
    def execution_mode(self) -> ExecutionMode:
        return self._entry.execution_mode

    @property
    def is_async(self) -> bool:
        return self._entry.execution_mode is ExecutionMode.ASYNC

    @property
    def callback_count(self) -> int:
        return len(self._entry.callbacks)

    def __repr__(self) -> str:
        return (
            f"<PulserHandle alias={self._alias!r} mode={self._entry.execution_mode} "
            f"callbacks={len(self._entry.callbacks)}>"
        )

    # ----- Execution -----

    def pulse(self, *args: Any, **kwargs: Any) -> Any:
        """Run the primary function, then the bound callbacks.

        Returns the primary's result directly in sync mode, or an awaitable
        resolving to it in async mode.  Callbacks receive the same
        arguments as the primary, never its result.
        """
        if self._entry.execution_mode is ExecutionMode.ASYNC:
            return self._pulse_async(args, kwargs)
        return self._pulse_sync(args, kwargs)

    def as_callback(self) -> Callable[..., Any]:
        """Return ``pulse`` as a plain callable for event handlers and timers."""
        return self.pulse

    def _pulse_sync(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
        entry = self._entry
        start = time.perf_counter()
        result = entry.function(*args, **kwargs)

        dispatched = failed = 0
        for callback in entry.callbacks:
            dispatched += 1
            try:
                outcome = callback(*args, **kwargs)
            except Exception as exc:
                failed += 1
                self._contain(callback, exc)
                continue
            if inspect.isawaitable(outcome):
                self._detach(callback, outcome)

        self._record_pulse(dispatched, failed, start)
        return result

    async def _pulse_async(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
        entry = self._entry
        loop = asyncio.get_running_loop()
        start = time.perf_counter()
        result = entry.function(*args, **kwargs)
        if inspect.isawaitable(result):
            result = await result

        dispatched = failed = 0
        pending: list[tuple[Callback, Awaitable[Any]]] = []
        for callback in entry.callbacks:
            dispatched += 1
            try:
                outcome = callback(*args, **kwargs)
            except Exception as exc:
                failed += 1
                self._contain(callback, exc)
                continue
            # Run each coroutine up to its first await before visiting the next
            # callback, so unbinds it makes are seen by this pass.
            if inspect.iscoroutine(outcome):
                pending.append((callback, asyncio.eager_task_factory(loop, outcome)))
            elif inspect.isawaitable(outcome):
                pending.append((callback, outcome))

        if pending:
            settled = await asyncio.gather(*(aw for _, aw in pending), return_exceptions=True)
            for (callback, _), outcome in zip(pending, settled, strict=True):
                if isinstance(outcome, Exception):
                    failed += 1
                    self._contain(callback, outcome)
                elif isinstance(outcome, BaseException):
                    raise outcome

        self._record_pulse(dispatched, failed, start)
        return result

    def _contain(self, callback: Callback, exc: BaseException) -> None:
        name = callable_name(callback)
        mode = "Async" if self.is_async else "Sync"
        try:
            self._registry.logger.record(
                "warn", f"{mode} callback error in '{self._alias}' ({name}): {exc}"
            )
        except Exception:
            # A failing logger must not leak out of the containment site.
            pass
        collector = self._registry.collector
        if collector is not None:
            collector.record_callback_failure(self._alias, name, repr(exc))

    def _detach(self, callback: Callback, awaitable: Awaitable[Any]) -> None:
        """Schedule an awaitable returned by a callback of a sync pulser."""
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            self._registry.logger.record(
                "warn",
                f"Async callback {callable_name(callback)} on sync pulser "
                f"'{self._alias}' skipped: no running event loop.",
            )
            return
        task = asyncio.ensure_future(awaitable)
        background = self._registry._background
        background.add(task)
        task.add_done_callback(functools.partial(self._settle_detached, callback))

    def _settle_detached(self, callback: Callback, task: asyncio.Future[Any]) -> None:
        self._registry._background.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._contain(callback, exc)

    def _record_pulse(self, dispatched: int, failed: int, start: float) -> None:
        collector = self._registry.collector
        if collector is None:
            return
        collector.record_pulse(
            self._alias,
            str(self._entry.execution_mode),
            callbacks_dispatched=dispatched,
            callbacks_failed=failed,
            duration_ms=(time.perf_counter() - start) * 1000,
        )

    # ----- Callback management -----

    def bind(self, callback: Callback) -> PulserHandle:
        """Append ``callback`` to this alias.  Returns the handle for chaining.

        Raises:
            InvalidFunctionError: ``callback`` is not callable.
            AlreadyBoundError: This exact reference is already bound.

        """
        validate_function(callback, "Callback")
        if not self._entry.callbacks.add(callback):
            msg = f"Callback is already bound to '{self._alias}'."
            raise AlreadyBoundError(msg, alias=self._alias)
        name = callable_name(callback)
        self._registry.logger.record("log", f"Callback {name} added to '{self._alias}'.")
        collector = self._registry.collector
        if collector is not None:
            collector.record_bound(self._alias, name)
        return self

    def unbind(self, callback: Callback) -> bool:
        """Remove ``callback`` if bound.  Returns whether it was removed.

        Raises:
            InvalidFunctionError: ``callback`` is not callable.

        """
        validate_function(callback, "Callback")
        removed = self._entry.callbacks.discard(callback)
        if removed:
            name = callable_name(callback)
            self._registry.logger.record("log", f"Callback {name} removed from '{self._alias}'.")
            collector = self._registry.collector
            if collector is not None:
                collector.record_unbound(self._alias, name)
        return removed

    def bind_many(self, callbacks: Iterable[Callback]) -> PulserHandle:
        """Bind each callback in order.

        Not transactional: when the callback at index ``i`` fails, the ones
        before it stay bound.  The raised error has the same type as the
        underlying failure and carries ``index``.
        """
        for index, callback in enumerate(self._require_iterable(callbacks)):
            try:
                self.bind(callback)
            except PulsorError as exc:
                msg = f"Error binding callback at index {index} for '{self._alias}': {exc}"
                raise type(exc)(msg, alias=self._alias, index=index) from exc
        return self

    def unbind_many(self, callbacks: Iterable[Callback]) -> int:
        """Unbind each callback in order and return how many were removed."""
        return sum(1 for cb in self._require_iterable(callbacks) if self.unbind(cb))

    def unbind_all(self) -> int:
        """Remove every callback from this alias and return the count."""
        count = self._entry.callbacks.clear()
        if count:
            self._registry.logger.record(
                "log", f"All {count} callbacks removed from '{self._alias}'."
            )
            collector = self._registry.collector
            if collector is not None:
                collector.record_unbound(self._alias, "*", removed=count)
        return count

    def _require_iterable(self, callbacks: object) -> Iterable[Callback]:
        if isinstance(callbacks, (str, bytes)) or not isinstance(callbacks, Iterable):
            msg = (
                f"Expected a list of callbacks for '{self._alias}', "
                f"got {type(callbacks).__name__}."
            )
            raise InvalidFunctionError(msg, alias=self._alias)
        return callbacks
