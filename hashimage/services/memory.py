from __future__ import annotations

"""
Caller-memory bridge.

Caller memory arrives either as a raw address (int, ctypes pointer,
c_void_p / c_char_p) or as any object exposing the buffer protocol
(bytes, bytearray, memoryview, numpy arrays, ctypes arrays).

- Raw addresses are trusted for length: the caller upholds the size contract.
- Buffers are length-checked before any read or write.
"""
import ctypes
from typing import Any, Optional

import numpy as np

from hashimage.core.errors import InvalidBufferError

_POINTER_TYPES = (ctypes._Pointer, ctypes.c_void_p, ctypes.c_char_p)


def address_of(ref: Any) -> Optional[int]:
    """Raw address behind `ref`; None for buffer objects. Raises on null."""
    if isinstance(ref, bool):
        raise InvalidBufferError("bool is not a memory reference")
    if isinstance(ref, int):
        addr: Optional[int] = ref
    elif isinstance(ref, _POINTER_TYPES):
        addr = ctypes.cast(ref, ctypes.c_void_p).value
    else:
        return None
    if not addr:
        raise InvalidBufferError("null memory reference")
    return addr


def is_null(ref: Any) -> bool:
    """True for the sentinel destinations: None, 0, null ctypes pointers."""
    if ref is None:
        return True
    try:
        address_of(ref)
    except InvalidBufferError:
        return True
    return False


def _byte_view(ref: Any) -> memoryview:
    try:
        mv = memoryview(ref)
    except TypeError as e:
        raise InvalidBufferError(f"unsupported memory object: {type(ref).__name__}") from e
    if mv.format != "B" or mv.ndim != 1:
        try:
            mv = mv.cast("B")
        except TypeError as e:
            raise InvalidBufferError("buffer is not C-contiguous") from e
    return mv


def read_bytes(src: Any, length: int) -> np.ndarray:
    """
    Read-only uint8 view of exactly `length` bytes of caller memory.
    Never reads past `length`; a shorter buffer is rejected.
    """
    if src is None:
        raise InvalidBufferError("null source buffer")
    if length < 0:
        raise InvalidBufferError(f"negative length {length}")

    addr = address_of(src)
    if addr is not None:
        return np.frombuffer(ctypes.string_at(addr, length), dtype=np.uint8)

    mv = _byte_view(src)
    if mv.nbytes < length:
        raise InvalidBufferError(f"source holds {mv.nbytes} bytes, need {length}")
    if length == 0:
        return np.empty(0, dtype=np.uint8)
    out = np.frombuffer(mv[:length], dtype=np.uint8)
    out.flags.writeable = False
    return out


def write_bytes(dst: Any, payload: bytes, capacity: int) -> int:
    """
    Copy `payload` to the start of caller memory `dst` and return the count.
    `capacity` is the size the caller promised; buffers are checked against it.
    """
    if dst is None:
        raise InvalidBufferError("null destination")
    n = len(payload)
    if n > capacity:
        raise InvalidBufferError(f"payload of {n} bytes exceeds capacity {capacity}")

    addr = address_of(dst)
    if addr is not None:
        if n:
            ctypes.memmove(addr, payload, n)
        return n

    mv = _byte_view(dst)
    if mv.readonly:
        raise InvalidBufferError("destination buffer is read-only")
    if mv.nbytes < capacity:
        raise InvalidBufferError(f"destination holds {mv.nbytes} bytes, need {capacity}")
    mv[:n] = payload
    return n
