"""Growable array of atomic slots, organised as a tree of fixed-size segments."""

from __future__ import annotations

import operator
import threading
from typing import Generic, TypeVar

T = TypeVar("T")

SEGMENT_LOGSIZE = 10
SEGMENT_SIZE = 1 << SEGMENT_LOGSIZE
_MASK = SEGMENT_SIZE - 1


class AtomicRef(Generic[T]):
    """A reference that is read, written and compared-and-swapped atomically."""

    __slots__ = ("_value", "_lock")

    def __init__(self, value: T | None = None) -> None:
        self._value = value
        self._lock = threading.Lock()

    def load(self) -> T | None:
        """Return the current referent."""
        with self._lock:
            return self._value

    def store(self, value: T | None) -> None:
        """Replace the referent."""
        with self._lock:
            self._value = value

    def compare_exchange(self, current: T | None, new: T | None) -> bool:
        """Set ``new`` if the referent is ``current`` (by identity); return whether it was."""
        with self._lock:
            if self._value is not current:
                return False
            self._value = new
            return True

    def __repr__(self) -> str:
        return f"AtomicRef({self.load()!r})"


class _Segment:
    __slots__ = ("slots",)

    def __init__(self) -> None:
        self.slots: list[AtomicRef] = [AtomicRef() for _ in range(SEGMENT_SIZE)]


class _Root:
    __slots__ = ("height", "segment")

    def __init__(self, height: int, segment: _Segment) -> None:
        self.height = height
        self.segment = segment


def _height_for(index: int) -> int:
    height = 1
    while index >> (SEGMENT_LOGSIZE * height):
        height += 1
    return height


class GrowableArray(Generic[T]):
    """Unbounded array of :class:`AtomicRef` slots, allocated lazily.

    Internal segments hold child segments; the lowest segments hold the
    element slots.  Growing the tree moves the old root under slot 0 of a
    new, taller root, so existing slots keep their identity.
    """

    def __init__(self) -> None:
        self._root: AtomicRef[_Root] = AtomicRef()

    def _grown_root(self, height: int) -> _Root:
        while True:
            root = self._root.load()
            if root is None:
                self._root.compare_exchange(None, _Root(1, _Segment()))
                continue
            if root.height >= height:
                return root
            taller = _Segment()
            taller.slots[0].store(root.segment)
            self._root.compare_exchange(root, _Root(root.height + 1, taller))

    def get(self, index: int) -> AtomicRef[T]:
        """Return the slot at ``index``, allocating segments as needed."""
        index = operator.index(index)
        if index < 0:
            raise IndexError("index must be non-negative")
        root = self._grown_root(_height_for(index))
        segment = root.segment
        for level in range(root.height - 1, 0, -1):
            child = segment.slots[(index >> (SEGMENT_LOGSIZE * level)) & _MASK]
            nxt = child.load()
            if nxt is None:
                fresh = _Segment()
                nxt = fresh if child.compare_exchange(None, fresh) else child.load()
            segment = nxt
        return segment.slots[index & _MASK]