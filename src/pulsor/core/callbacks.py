"""Ordered, identity-keyed callback set with live iteration.

Callbacks are kept in bind order and compared by reference (``id()``), not
by equality: two bound methods produced from the same object are distinct
members, and so are two functions with identical bodies.

Iteration is live rather than a snapshot:

- removing a member that has not been visited yet skips it,
- removing the current or an already-visited member does not affect the
  pass in progress,
- members added during a pass are visited by that pass,
- ``clear()`` during a pass ends it.

Removals leave ``None`` tombstones so that in-progress passes keep their
position.  Tombstones are compacted once no pass is active.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

    from pulsor._types import Callback


class CallbackSet:
    """Insertion-ordered set of callables keyed by identity."""

    __slots__ = ("_active", "_index", "_slots", "_tombstones")

    def __init__(self) -> None:
        self._slots: list[Callback | None] = []
        # id(callback) -> position in _slots; _slots keeps the object alive
        self._index: dict[int, int] = {}
        self._active = 0
        self._tombstones = 0

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, callback: object) -> bool:
        return id(callback) in self._index

    def __iter__(self) -> Iterator[Callback]:
        self._active += 1
        try:
            i = 0
            while i < len(self._slots):
                callback = self._slots[i]
                i += 1
                if callback is not None:
                    yield callback
        finally:
            self._active -= 1
            self._compact()

    def add(self, callback: Callback) -> bool:
        """Append ``callback``.  Returns False if it is already a member."""
        key = id(callback)
        if key in self._index:
            return False
        self._index[key] = len(self._slots)
        self._slots.append(callback)
        return True

    def discard(self, callback: object) -> bool:
        """Remove ``callback`` if present.  Returns whether it was removed."""
        position = self._index.pop(id(callback), None)
        if position is None:
            return False
        self._slots[position] = None
        self._tombstones += 1
        self._compact()
        return True

    def clear(self) -> int:
        """Remove every member and return how many were removed."""
        count = len(self._index)
        for position in self._index.values():
            self._slots[position] = None
        self._index.clear()
        self._tombstones += count
        self._compact()
        return count

    def snapshot(self) -> tuple[Callback, ...]:
        """Current members in bind order, detached from later mutation."""
        return tuple(cb for cb in self._slots if cb is not None)

    def _compact(self) -> None:
        if self._active or not self._tombstones:
            return
        self._slots = [cb for cb in self._slots if cb is not None]
        self._index = {id(cb): i for i, cb in enumerate(self._slots)}
        self._tombstones = 0
