"""Atomically reference-counted shared ownership of a value."""

from __future__ import annotations

import copy
import threading
from typing import Any, Generic, TypeVar

T = TypeVar("T")

MAX_REFCOUNT = 2**63 - 1


class ArcNotUnique(ValueError):
    """Raised by :meth:`Arc.try_unwrap` when other handles share the value."""

    def __init__(self, arc: Arc[Any]) -> None:
        super().__init__("Arc is shared with other handles")
        self.arc = arc


class _ArcInner(Generic[T]):
    __slots__ = ("count", "data", "lock")

    def __init__(self, data: T) -> None:
        self.count = 1
        self.data = data
        self.lock = threading.Lock()


class ArcMut(Generic[T]):
    """Exclusive view into the value of a uniquely held :class:`Arc`."""

    __slots__ = ("_inner",)

    def __init__(self, inner: _ArcInner[T]) -> None:
        self._inner = inner

    @property
    def value(self) -> T:
        return self._inner.data

    @value.setter
    def value(self, new: T) -> None:
        self._inner.data = new


class Arc(Generic[T]):
    """A handle sharing one value with its clones, counting the live handles.

    When the last handle is dropped, the value is released.
    """

    __slots__ = ("_inner",)

    def __init__(self, data: T) -> None:
        self._inner: _ArcInner[T] | None = _ArcInner(data)

    @classmethod
    def _from_inner(cls, inner: _ArcInner[T]) -> Arc[T]:
        arc = cls.__new__(cls)
        arc._inner = inner
        return arc

    def _live(self) -> _ArcInner[T]:
        inner = self._inner
        if inner is None:
            raise RuntimeError("Arc has been dropped")
        return inner

    @property
    def value(self) -> T:
        """The shared value."""
        return self._live().data

    def count(self) -> int:
        """Return the number of live handles to this value."""
        inner = self._live()
        with inner.lock:
            return inner.count

    def clone(self) -> Arc[T]:
        """Return another handle to the same value, raising the count by one."""
        inner = self._live()
        with inner.lock:
            if inner.count >= MAX_REFCOUNT:
                raise OverflowError("too many Arc handles")
            inner.count += 1
        return Arc._from_inner(inner)

    def drop(self) -> None:
        """Release this handle; the value is released with the last handle."""
        inner = self._live()
        self._inner = None
        with inner.lock:
            inner.count -= 1
            if inner.count == 0:
                inner.data = None

    def ptr_eq(self, other: Arc[T]) -> bool:
        """Return whether both handles share the same allocation."""
        return self._live() is other._live()

    def get_mut(self) -> ArcMut[T] | None:
        """Return a mutable view if this is the only handle, else ``None``."""
        inner = self._live()
        with inner.lock:
            unique = inner.count == 1
        return ArcMut(inner) if unique else None

    def make_mut(self) -> ArcMut[T]:
        """Return a mutable view, first copying the value if it is shared."""
        inner = self._live()
        with inner.lock:
            if inner.count == 1:
                return ArcMut(inner)
            data = copy.deepcopy(inner.data)
            inner.count -= 1
        fresh = _ArcInner(data)
        self._inner = fresh
        return ArcMut(fresh)

    def try_unwrap(self) -> T:
        """Consume this handle and return its value if it is the only one.

        Raises :class:`ArcNotUnique`, holding this handle, otherwise.
        """
        inner = self._live()
        with inner.lock:
            if inner.count != 1:
                raise ArcNotUnique(self)
            inner.count = 0
            data = inner.data
            inner.data = None
        self._inner = None
        return data

    def __del__(self) -> None:
        inner = getattr(self, "_inner", None)
        if inner is not None:
            self._inner = None
            with inner.lock:
                inner.count -= 1
                if inner.count == 0:
                    inner.data = None

    def __repr__(self) -> str:
        if self._inner is None:
            return "Arc(<dropped>)"
        return f"Arc({self._inner.data!r})"

    def __str__(self) -> str:
        return str(self.value)