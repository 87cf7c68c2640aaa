from __future__ import annotations

"""
Opaque image handles.

A handle is a non-zero integer packing (generation, slot index). Consuming a
handle frees its slot and bumps the slot generation, so a stale or doubled
handle no longer matches and is rejected instead of reaching a dead image.
"""
import logging
import threading
from typing import List, Optional

from hashimage.core.errors import InvalidHandleError

from .pixels import CanonicalImage

logger = logging.getLogger(__name__)

NULL_HANDLE = 0

_INDEX_BITS = 32
_INDEX_MASK = (1 << _INDEX_BITS) - 1
_MAX_GENERATION = (1 << 31) - 1  # keeps handles within a signed 64-bit slot


class _Slot:
    __slots__ = ("generation", "image")

    def __init__(self) -> None:
        self.generation = 1
        self.image: Optional[CanonicalImage] = None


class HandleRegistry:
    """Generation-checked slot map holding exactly one image per live handle."""

    def __init__(self) -> None:
        self._slots: List[_Slot] = []
        self._free: List[int] = []
        self._lock = threading.Lock()

    def wrap(self, image: CanonicalImage) -> int:
        """Take ownership of `image` and return its handle."""
        if image is None:
            raise InvalidHandleError("refusing to wrap a missing image")
        with self._lock:
            if self._free:
                index = self._free.pop()
                slot = self._slots[index]
            else:
                index = len(self._slots)
                slot = _Slot()
                self._slots.append(slot)
            slot.image = image
            return (slot.generation << _INDEX_BITS) | index

    def consume(self, handle: int) -> CanonicalImage:
        """Invalidate `handle` and hand its image back to the caller."""
        if not handle:
            raise InvalidHandleError("null handle")
        generation, index = int(handle) >> _INDEX_BITS, int(handle) & _INDEX_MASK
        with self._lock:
            if index >= len(self._slots):
                raise InvalidHandleError(f"unknown handle {handle:#x}")
            slot = self._slots[index]
            if slot.image is None or slot.generation != generation:
                raise InvalidHandleError(f"stale or consumed handle {handle:#x}")
            image, slot.image = slot.image, None
            slot.generation = slot.generation % _MAX_GENERATION + 1
            self._free.append(index)
        return image

    def __len__(self) -> int:
        with self._lock:
            return len(self._slots) - len(self._free)


_registry = HandleRegistry()


def wrap(image: CanonicalImage) -> int:
    return _registry.wrap(image)


def consume(handle: int) -> CanonicalImage:
    return _registry.consume(handle)


def live_handles() -> int:
    """Number of handles created and not yet consumed."""
    return len(_registry)
