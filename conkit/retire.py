"""Deferred reclamation of retired objects guarded by hazard pointers."""

from __future__ import annotations

import threading
import time
from typing import Any, Callable

from conkit.hazard import HAZARDS, HazardBag

THRESHOLD = 64

Free = Callable[[Any], object]


class RetiredSet:
    """Per-thread list of retired objects awaiting reclamation.

    An object is freed by calling its ``free`` callback once no hazard slot
    protects it any more.
    """

    THRESHOLD = THRESHOLD

    def __init__(self, hazards: HazardBag | None = None) -> None:
        self.hazards = hazards if hazards is not None else HAZARDS
        self._retired: list[tuple[Any, Free | None]] = []

    def __len__(self) -> int:
        return len(self._retired)

    def retire(self, pointer: Any, free: Free | None = None) -> None:
        """Retire ``pointer``, which must already be unreachable from shared state.

        Collection runs once ``THRESHOLD`` objects are waiting.
        """
        self._retired.append((pointer, free))
        if len(self._retired) >= self.THRESHOLD:
            self.collect()

    def collect(self) -> None:
        """Free every retired object that no hazard slot protects."""
        guarded = self.hazards.all_hazards()
        kept: list[tuple[Any, Free | None]] = []
        doomed: list[tuple[Any, Free | None]] = []
        for entry in self._retired:
            (kept if id(entry[0]) in guarded else doomed).append(entry)
        self._retired = kept
        for pointer, free in doomed:
            if free is not None:
                free(pointer)

    def drain(self) -> None:
        """Collect repeatedly until every retired object has been freed."""
        while self._retired:
            self.collect()
            if self._retired:
                time.sleep(0.001)


_local = threading.local()


def _thread_retired() -> RetiredSet:
    retired = getattr(_local, "retired", None)
    if retired is None:
        retired = _local.retired = RetiredSet(HAZARDS)
    return retired


def retire(pointer: Any, free: Free | None = None) -> None:
    """Retire ``pointer`` into the current thread's retired set."""
    _thread_retired().retire(pointer, free)


def collect() -> None:
    """Free the current thread's retired objects that no other thread protects."""
    _thread_retired().collect()