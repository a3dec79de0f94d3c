"""Hazard pointers: announce which objects a thread is about to read.

A "pointer" is any object.  A hazard slot keeps a reference to the protected
object, and :meth:`HazardBag.all_hazards` reports the identities (``id``) of
all protected objects, the machine representation used for reclamation checks.
"""

from __future__ import annotations

import threading
from typing import Any, TypeVar

from conkit.growable_array import AtomicRef

T = TypeVar("T")


class ValidationFailed(Exception):
    """Raised when the source no longer refers to the expected object."""

    def __init__(self, current: Any) -> None:
        super().__init__("source no longer holds the pointer")
        self.current = current


class _HazardSlot:
    __slots__ = ("active", "hazard")

    def __init__(self) -> None:
        self.active = True
        self.hazard: Any = None


class HazardBag:
    """Grow-only collection of hazard slots, recycled between shields."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._slots: list[_HazardSlot] = []

    def _acquire_slot(self) -> _HazardSlot:
        with self._lock:
            for slot in self._slots:
                if not slot.active:
                    slot.active = True
                    return slot
            slot = _HazardSlot()
            self._slots.append(slot)
            return slot

    def _release_slot(self, slot: _HazardSlot) -> None:
        slot.hazard = None
        with self._lock:
            slot.active = False

    def all_hazards(self) -> set[int]:
        """Return the identities of all currently protected objects."""
        with self._lock:
            slots = list(self._slots)
        return {id(hazard) for slot in slots if (hazard := slot.hazard) is not None}

    def __len__(self) -> int:
        """Number of slots ever allocated in this bag."""
        with self._lock:
            return len(self._slots)


HAZARDS = HazardBag()
"""Default global bag of hazard pointers."""


class Shield:
    """Ownership of one hazard slot, used to protect a single object at a time."""

    def __init__(self, hazards: HazardBag | None = None) -> None:
        self._bag = hazards if hazards is not None else HAZARDS
        self._slot: _HazardSlot | None = self._bag._acquire_slot()

    def _live(self) -> _HazardSlot:
        if self._slot is None:
            raise RuntimeError("shield has been released")
        return self._slot

    def set(self, pointer: Any) -> None:
        """Announce ``pointer`` as protected by this shield."""
        self._live().hazard = pointer

    def clear(self) -> None:
        """Stop protecting any object."""
        self.set(None)

    @staticmethod
    def validate(pointer: Any, src: AtomicRef[Any]) -> None:
        """Check that ``src`` still refers to ``pointer``; raise :class:`ValidationFailed` if not."""
        current = src.load()
        if current is not pointer:
            raise ValidationFailed(current)

    def try_protect(self, pointer: T, src: AtomicRef[T]) -> None:
        """Protect ``pointer`` read from ``src``; on failure clear and raise :class:`ValidationFailed`."""
        self.set(pointer)
        try:
            Shield.validate(pointer, src)
        except ValidationFailed:
            self.clear()
            raise

    def protect(self, src: AtomicRef[T]) -> T | None:
        """Read ``src`` and protect the result, retrying until the protection is validated."""
        pointer = src.load()
        while True:
            try:
                self.try_protect(pointer, src)
                return pointer
            except ValidationFailed as failure:
                pointer = failure.current

    def release(self) -> None:
        """Clear the slot and give it back to the bag."""
        slot = self._slot
        if slot is None:
            return
        self._slot = None
        self._bag._release_slot(slot)

    def __enter__(self) -> Shield:
        return self

    def __exit__(self, *args) -> None:
        self.release()

    def __del__(self) -> None:
        if getattr(self, "_slot", None) is not None:
            self.release()

    def __repr__(self) -> str:
        slot = self._slot
        if slot is None:
            return "Shield(<released>)"
        return f"Shield(slot at {id(slot):#x}, hazard={slot.hazard!r})"