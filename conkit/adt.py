"""Interfaces for concurrent maps and sets."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Generic, TypeVar

K = TypeVar("K")
V = TypeVar("V")
T = TypeVar("T")


class ConcurrentMap(ABC, Generic[K, V]):
    """A key-value map that may be used from many threads at once."""

    @abstractmethod
    def lookup(self, key: K) -> V | None:
        """Return the value stored for ``key``, or ``None`` if it is absent."""

    @abstractmethod
    def insert(self, key: K, value: V) -> bool:
        """Insert a pair; return ``False`` and leave the map unchanged if ``key`` exists."""

    @abstractmethod
    def delete(self, key: K) -> V:
        """Remove ``key`` and return its value; raise ``KeyError`` if it is absent."""


class ConcurrentSet(ABC, Generic[T]):
    """A set that may be used from many threads at once."""

    @abstractmethod
    def contains(self, value: T) -> bool:
        """Return whether the set holds ``value``."""

    @abstractmethod
    def insert(self, value: T) -> bool:
        """Add ``value``; return whether it was newly inserted."""

    @abstractmethod
    def remove(self, value: T) -> bool:
        """Remove ``value``; return whether it was present."""


class SetAsMap(ConcurrentMap[T, tuple]):
    """View of a concurrent set as a map whose values are all ``()``."""

    def __init__(self, inner: ConcurrentSet[T]) -> None:
        self.inner = inner
        self._lock = threading.Lock()

    def lookup(self, key: T) -> tuple | None:
        return () if self.inner.contains(key) else None

    def insert(self, key: T, value: tuple = ()) -> bool:
        return self.inner.insert(key)

    def delete(self, key: T) -> tuple:
        if not self.inner.remove(key):
            raise KeyError(key)
        return ()