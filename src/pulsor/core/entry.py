"""Pulser entries, execution modes and input validation."""

from __future__ import annotations

import functools
import inspect
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from pulsor._errors import InvalidAliasError, InvalidFunctionError, InvalidModeError
from pulsor.core.callbacks import CallbackSet

if TYPE_CHECKING:
    from pulsor._types import PulseFunc

MAX_ALIAS_LENGTH = 32


class ExecutionMode(StrEnum):
    """How a pulser runs its primary function and callback fan-out.

    ``AUTO`` is only accepted at registration; it resolves to ``SYNC`` or
    ``ASYNC`` from the function's declared nature.
    """

    SYNC = "sync"
    ASYNC = "async"
    AUTO = "auto"


def _noop(*args: Any, **kwargs: Any) -> None:
    return None


def validate_alias(alias: object) -> str:
    """Return the trimmed alias.

    Raises:
        InvalidAliasError: If the alias is not a string, is blank, or is
            longer than ``MAX_ALIAS_LENGTH`` after trimming.

    """
    if not isinstance(alias, str):
        msg = f"Alias must be a string, got {type(alias).__name__}"
        raise InvalidAliasError(msg)
    trimmed = alias.strip()
    if not trimmed or len(trimmed) > MAX_ALIAS_LENGTH:
        msg = f"Alias cannot be empty or longer than {MAX_ALIAS_LENGTH} characters"
        raise InvalidAliasError(msg)
    return trimmed


def validate_function(fn: object, kind: str = "Callback") -> PulseFunc:
    """Return ``fn`` if callable.

    Raises:
        InvalidFunctionError: If ``fn`` is not callable (``None`` included).

    """
    if not callable(fn):
        msg = f"{kind} must be callable, got {type(fn).__name__}"
        raise InvalidFunctionError(msg)
    return fn


def coerce_primary(fn: object) -> PulseFunc:
    """Validate a primary function, turning ``None`` into a no-op."""
    if fn is None:
        return _noop
    return validate_function(fn, "Pulser function")


def detect_mode(fn: PulseFunc) -> ExecutionMode:
    """Infer the execution mode from the function's declared nature.

    Coroutine functions and async generator functions are ``ASYNC``;
    everything else is ``SYNC``.  ``functools.partial`` wrappers and
    callable instances with an async ``__call__`` are looked through.
    """
    target: Any = fn
    while isinstance(target, functools.partial):
        target = target.func
    candidates = [target]
    if not (inspect.isfunction(target) or inspect.ismethod(target)):
        candidates.append(getattr(target, "__call__", None))
    for candidate in candidates:
        if candidate is None:
            continue
        if inspect.iscoroutinefunction(candidate) or inspect.isasyncgenfunction(candidate):
            return ExecutionMode.ASYNC
    return ExecutionMode.SYNC


def resolve_mode(fn: PulseFunc, requested: ExecutionMode | str) -> ExecutionMode:
    """Resolve a requested mode (possibly ``AUTO``) to ``SYNC`` or ``ASYNC``.

    Raises:
        InvalidModeError: ``requested`` is not a known mode.

    """
    try:
        mode = ExecutionMode(requested)
    except ValueError as exc:
        msg = f"Unknown execution mode {requested!r}, expected one of: sync, async, auto"
        raise InvalidModeError(msg) from exc
    if mode is ExecutionMode.AUTO:
        return detect_mode(fn)
    return mode


def callable_name(fn: object) -> str:
    """Best-effort display name for a callable."""
    target = fn
    while isinstance(target, functools.partial):
        target = target.func
    name = getattr(target, "__name__", None)
    if not name or name == "<lambda>":
        return "anonymous"
    return name


@dataclass(slots=True, eq=False)
class PulserEntry:
    """Registration record for one alias.

    The function and mode are fixed for the entry's lifetime; only the
    callback set is mutated, by handles.  Every handle for the alias shares
    this object.

    Attributes:
        alias: Registered alias.
        function: Primary function invoked on pulse.
        execution_mode: Resolved mode, never ``AUTO``.
        callbacks: Live, ordered callback set.

    """

    alias: str
    function: PulseFunc
    execution_mode: ExecutionMode
    callbacks: CallbackSet = field(default_factory=CallbackSet)

    @property
    def function_name(self) -> str:
        return callable_name(self.function)
