"""Behaviour-oriented concurrency: run code once it owns a set of shared values."""

from __future__ import annotations

import threading
from collections import deque
from contextlib import ExitStack
from typing import Any, Callable, Generic, Iterable, Sequence, TypeVar

T = TypeVar("T")


class _Cown(Generic[T]):
    """Storage of a concurrently owned value.

    Behaviours receive these cells and read or update ``value`` directly.
    """

    __slots__ = ("value", "_lock", "_queue")

    def __init__(self, value: T) -> None:
        self.value = value
        self._lock = threading.Lock()
        self._queue: deque[_Behavior] = deque()

    def __repr__(self) -> str:
        return f"Cown({self.value!r})"


class CownPtr(Generic[T]):
    """Handle to a value that may only be touched inside a behaviour.

    Copies of the handle share the same value.
    """

    __slots__ = ("_inner",)

    def __init__(self, value: T) -> None:
        self._inner: _Cown[T] = _Cown(value)

    def __copy__(self) -> CownPtr[T]:
        other = CownPtr.__new__(CownPtr)
        other._inner = self._inner
        return other

    def __repr__(self) -> str:
        return f"CownPtr(at {id(self._inner):#x})"


class _Behavior:
    """A body waiting for exclusive access to every cown it requested."""

    def __init__(self, cowns: Sequence[_Cown], thunk: Callable[[list[_Cown]], Any]) -> None:
        self._cells = list(cowns)
        unique = {id(c): c for c in cowns}
        self._targets = [unique[k] for k in sorted(unique)]
        self._thunk = thunk
        self._lock = threading.Lock()
        # One extra count so that the body cannot start before scheduling has finished.
        self._count = len(self._targets) + 1

    def schedule(self) -> None:
        """Enqueue on every cown atomically (two-phase locking), then resolve."""
        with ExitStack() as stack:
            for cown in self._targets:
                stack.enter_context(cown._lock)
            heads = []
            for cown in self._targets:
                cown._queue.append(self)
                if cown._queue[0] is self:
                    heads.append(cown)
        for _ in heads:
            self._resolve_one()
        self._resolve_one()

    def _resolve_one(self) -> None:
        with self._lock:
            self._count -= 1
            ready = self._count == 0
        if ready:
            threading.Thread(target=self._run, name="boc-behavior").start()

    def _run(self) -> None:
        try:
            self._thunk(self._cells)
        finally:
            for cown in self._targets:
                with cown._lock:
                    cown._queue.popleft()
                    successor = cown._queue[0] if cown._queue else None
                if successor is not None:
                    successor._resolve_one()


def _cells_of(cowns: Iterable[CownPtr]) -> list[_Cown]:
    cells = []
    for cown in cowns:
        if not isinstance(cown, CownPtr):
            raise TypeError(f"expected CownPtr, got {type(cown).__name__}")
        cells.append(cown._inner)
    return cells


def run_when(cowns: Iterable[CownPtr], f: Callable[[list[_Cown]], Any]) -> None:
    """Schedule ``f`` to run with exclusive access to ``cowns``.

    ``f`` receives a list of cells, one per cown in the given order; each
    cell's ``value`` attribute may be read and assigned.
    """
    _Behavior(_cells_of(cowns), f).schedule()


def when(*cowns: CownPtr) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator form of :func:`run_when`; the body gets one cell per cown as arguments."""
    cells = _cells_of(cowns)

    def decorate(body: Callable[..., Any]) -> Callable[..., Any]:
        _Behavior(cells, lambda refs: body(*refs)).schedule()
        return body

    return decorate