from __future__ import annotations

"""Bit-vector <-> packed byte buffers (MSB first)."""
import logging
from typing import Any, Optional

import numpy as np

from hashimage.core.config import settings
from hashimage.core.errors import HashImageError

from .memory import read_bytes, write_bytes

logger = logging.getLogger(__name__)


def alloc_size(hash_size: int) -> int:
    """Bytes needed for hash_size² bits: floor(n²/8) plus one for a partial byte."""
    bits = int(hash_size) * int(hash_size)
    n = bits // 8
    if bits % 8 != 0:
        n += 1
    return n


def pack_bits(bits: np.ndarray, hash_size: int, *, zero_fill: bool | None = None) -> bytes:
    """
    Pack `bits` MSB-first into at most alloc_size(hash_size) bytes.

    A bit-vector longer than hash_size² is clipped; a shorter one yields only
    the bytes it covers unless zero_fill pads the rest with zero bytes.
    """
    if zero_fill is None:
        zero_fill = settings.ZERO_FILL_TAIL
    size = alloc_size(hash_size)
    flat = np.asarray(bits, dtype=bool).ravel()[: int(hash_size) * int(hash_size)]
    data = np.packbits(flat, bitorder="big").tobytes()[:size]
    if len(data) < size:
        logger.debug("Bit-vector covers %d of %d bytes", len(data), size)
        if zero_fill:
            data += bytes(size - len(data))
    return data


def pack_into(bits: np.ndarray, destination: Any, hash_size: int) -> int:
    """Write the packed fingerprint into caller memory; returns bytes written."""
    return write_bytes(destination, pack_bits(bits, hash_size), alloc_size(hash_size))


def unpack_bits(packed: Any, hash_size: int) -> np.ndarray:
    """First hash_size² bits of a packed fingerprint, pad bits dropped."""
    raw = read_bytes(packed, alloc_size(hash_size))
    return np.unpackbits(raw, bitorder="big")[: int(hash_size) * int(hash_size)].astype(bool)


def hamming_distance(a: Any, b: Any, hash_size: int) -> Optional[int]:
    """Differing bits between two packed fingerprints of the same size; None if unreadable."""
    try:
        return int(np.count_nonzero(unpack_bits(a, hash_size) != unpack_bits(b, hash_size)))
    except HashImageError as e:
        logger.warning("Cannot compare fingerprints: %s", e)
        return None
