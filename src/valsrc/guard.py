from __future__ import annotations

import contextlib
import ctypes
from typing import Any, Hashable, Iterator

__all__ = ("CDATA", "CycleGuard", "identity")

# The bases of every ctypes instance. Their common base is not exposed by the
# ctypes module.
CDATA: tuple[type[Any], ...] = (
    ctypes._SimpleCData,
    ctypes.Structure,
    ctypes.Union,
    ctypes.Array,
    ctypes._Pointer,
)


def identity(v: Any) -> Hashable:
    """The identity of the object *v* refers to.

    ctypes hands out a fresh python object every time memory is read (e.g.
    ``ptr.contents``) so ctypes objects are identified by their address. A
    structure and its first field share an address, the type tells them apart.
    """
    if isinstance(v, CDATA):
        return (type(v), ctypes.addressof(v))
    return id(v)


class CycleGuard:
    """References being printed on the current path.

    A reference is only marked while its subtree is being printed: siblings
    sharing a reference are printed independently, an ancestor met again is a
    cycle.

    >>> guard = CycleGuard()
    >>> v = []
    >>> guard.enter(v)
    False
    >>> guard.enter(v)
    True
    >>> guard.leave(v)
    >>> guard.enter(v)
    False
    """

    __slots__ = ("_active",)

    # The values are kept alive while they are active so their `id` cannot be
    # reused.
    _active: dict[Hashable, Any]

    def __init__(self) -> None:
        self._active = {}

    def enter(self, v: Any) -> bool:
        """Mark *v* as active. Returns ``True`` if it already was."""
        key = identity(v)
        if key in self._active:
            return True
        self._active[key] = v
        return False

    def leave(self, v: Any) -> None:
        self._active.pop(identity(v), None)

    def __len__(self) -> int:
        return len(self._active)

    @contextlib.contextmanager
    def visiting(self, v: Any) -> Iterator[bool]:
        """Context manager version of :meth:`enter` and :meth:`leave`.

        Yields ``True`` if *v* is already being printed; in that case the
        marker of the outer visit is left in place.
        """
        if self.enter(v):
            yield True
            return
        try:
            yield False
        finally:
            self.leave(v)
