"""Core — pulser registry and execution engine.

Maps aliases to a primary function plus an ordered callback set, and runs
the pulse protocol over them.
"""

from pulsor.core.callbacks import CallbackSet
from pulsor.core.entry import MAX_ALIAS_LENGTH, ExecutionMode, PulserEntry
from pulsor.core.handle import PulserHandle
from pulsor.core.registry import PulserInfo, Registry

__all__ = [
    "MAX_ALIAS_LENGTH",
    "CallbackSet",
    "ExecutionMode",
    "PulserEntry",
    "PulserHandle",
    "PulserInfo",
    "Registry",
]
