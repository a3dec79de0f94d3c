"""Lock-free stacks: Treiber's stack and an elimination-backoff wrapper."""

from __future__ import annotations

import random
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from conkit.growable_array import AtomicRef

T = TypeVar("T")

ELIM_SIZE = 16
ELIM_DELAY = 0.010


class Contended(Exception):
    """Raised by a single push or pop attempt that lost a race and should be retried."""


@dataclass(eq=False)
class Node(Generic[T]):
    """A stack entry, also used as the push request handed between threads."""

    data: T
    next: Node[T] | None = None


def _random_elim_index() -> int:
    return random.randrange(ELIM_SIZE)


class Stack(ABC, Generic[T]):
    """A concurrent stack built from single push and pop attempts."""

    @abstractmethod
    def try_push(self, node: Node[T]) -> None:
        """Try once to push ``node``; raise :class:`Contended` if the attempt failed."""

    @abstractmethod
    def try_pop(self) -> Node[T] | None:
        """Try once to pop; return the node, ``None`` if empty, or raise :class:`Contended`."""

    @abstractmethod
    def is_empty(self) -> bool:
        """Return whether the stack holds no values."""

    def push(self, value: T) -> None:
        """Push ``value``, retrying until it succeeds."""
        node = Node(value)
        while True:
            try:
                self.try_push(node)
                return
            except Contended:
                continue

    def pop(self) -> T:
        """Pop and return the top value; raise ``IndexError`` if the stack is empty."""
        while True:
            try:
                node = self.try_pop()
            except Contended:
                continue
            if node is None:
                raise IndexError("pop from empty stack")
            return node.data


class TreiberStack(Stack[T]):
    """Treiber's lock-free stack, usable by any number of producers and consumers."""

    def __init__(self) -> None:
        self._head: AtomicRef[Node[T]] = AtomicRef()

    def try_push(self, node: Node[T]) -> None:
        head = self._head.load()
        node.next = head
        if not self._head.compare_exchange(head, node):
            raise Contended

    def try_pop(self) -> Node[T] | None:
        head = self._head.load()
        if head is None:
            return None
        if not self._head.compare_exchange(head, head.next):
            raise Contended
        return head

    def is_empty(self) -> bool:
        return self._head.load() is None


class _Tag(Enum):
    PUSH = 1
    ACK = 3


@dataclass(frozen=True, eq=False)
class _Offer:
    tag: _Tag
    node: Node[Any]


class ElimStack(Stack[T]):
    """Stack that, under contention, lets a push and a pop meet in a side array and cancel out."""

    def __init__(self, inner: Stack[T] | None = None) -> None:
        self.inner: Stack[T] = inner if inner is not None else TreiberStack()
        self._slots: list[AtomicRef[_Offer]] = [AtomicRef() for _ in range(ELIM_SIZE)]

    def try_push(self, node: Node[T]) -> None:
        try:
            self.inner.try_push(node)
            return
        except Contended:
            pass

        slot = self._slots[_random_elim_index()]
        if slot.load() is not None:
            raise Contended
        offer = _Offer(_Tag.PUSH, node)
        if not slot.compare_exchange(None, offer):
            raise Contended

        time.sleep(ELIM_DELAY)

        if slot.compare_exchange(offer, None):
            # Nobody took the offer; withdraw it and let the caller retry.
            raise Contended
        # A popper acknowledged the offer: the value was handed over.
        slot.store(None)

    def try_pop(self) -> Node[T] | None:
        try:
            return self.inner.try_pop()
        except Contended:
            pass

        slot = self._slots[_random_elim_index()]
        offer = slot.load()
        if offer is None or offer.tag is not _Tag.PUSH:
            raise Contended
        if not slot.compare_exchange(offer, _Offer(_Tag.ACK, offer.node)):
            raise Contended
        return offer.node

    def is_empty(self) -> bool:
        return self.inner.is_empty()