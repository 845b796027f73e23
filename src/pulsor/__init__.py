"""Pulsor — named-function registry with callback fan-out.

Register a function under a short alias, bind callbacks to it, and pulse
it from anywhere that holds the registry.  Callbacks receive the same
arguments as the primary function and run after it succeeds, in bind order.
A failing callback is logged and never affects the caller or its siblings.

Quick start::

    from pulsor import Registry

    registry = Registry()
    add = registry.create_pulser("add", lambda a, b: a + b)
    add.bind(lambda a, b: print("adding", a, b))
    add.pulse(5, 3)                   # -> 8

Async pulsers are detected automatically::

    async def load_user(user_id):
        return {"data": f"user-{user_id}"}

    users = registry.create_pulser("user:load", load_user)
    await users.pulse(123)            # -> {"data": "user-123"}

Any holder of the registry can reach an existing pulser::

    registry.get_handle("add").pulse(1, 2)

"""

# PEP 703: Declare this module as free-threading safe
_Py_mod_gil = 0

__version__ = "0.1.0-dev"
__all__ = [
    "AlreadyBoundError",
    "AlreadyExistsError",
    "ExecutionMode",
    "InvalidAliasError",
    "InvalidFunctionError",
    "InvalidModeError",
    "Logger",
    "NotFoundError",
    "PulserHandle",
    "PulserInfo",
    "PulsorConfig",
    "PulsorError",
    "Registry",
    "__version__",
    "load_config",
]

_ERRORS = frozenset({
    "AlreadyBoundError",
    "AlreadyExistsError",
    "InvalidAliasError",
    "InvalidFunctionError",
    "InvalidModeError",
    "NotFoundError",
    "PulsorError",
})

_CORE = frozenset({"ExecutionMode", "PulserHandle", "PulserInfo", "Registry"})


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import pulsor`` fast while providing a clean top-level API.
    """
    if name in _ERRORS:
        from pulsor import _errors

        return getattr(_errors, name)

    if name in _CORE:
        from pulsor import core

        return getattr(core, name)

    if name == "Logger":
        from pulsor.logger import Logger

        return Logger

    if name == "PulsorConfig":
        from pulsor.config import PulsorConfig

        return PulsorConfig

    if name == "load_config":
        from pulsor.config_loader import load_config

        return load_config

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
