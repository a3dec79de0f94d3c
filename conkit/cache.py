"""Thread-safe cache that computes each key's value once."""

from __future__ import annotations

import threading
from typing import Callable, Generic, Hashable, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class _Slot(Generic[V]):
    __slots__ = ("ready", "value", "error")

    def __init__(self) -> None:
        self.ready = threading.Event()
        self.value: V | None = None
        self.error: BaseException | None = None


class Cache(Generic[K, V]):
    """Remembers the result for each key.

    Computations for different keys run concurrently; concurrent requests
    for the same key share a single computation.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._slots: dict[K, _Slot[V]] = {}

    def get_or_insert_with(self, key: K, f: Callable[[K], V]) -> V:
        """Return the cached value for ``key``, computing it with ``f(key)`` if needed."""
        with self._lock:
            slot = self._slots.get(key)
            owner = slot is None
            if owner:
                slot = self._slots[key] = _Slot()

        if owner:
            try:
                slot.value = f(key)
            except BaseException as exc:
                slot.error = exc
                with self._lock:
                    del self._slots[key]
                raise
            finally:
                slot.ready.set()
            return slot.value

        slot.ready.wait()
        if slot.error is not None:
            raise slot.error
        return slot.value