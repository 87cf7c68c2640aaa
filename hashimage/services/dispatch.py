from __future__ import annotations

"""Public algorithm selector -> hashing strategy, on a consumed handle."""
import logging
from enum import IntEnum

import numpy as np

from hashimage.core.config import settings
from hashimage.core.errors import HashComputationError
from hashimage.utils.profiling import profiled

from . import handles
from .hashing import HashAlgorithm, hash_image

logger = logging.getLogger(__name__)


class HashType(IntEnum):
    """Algorithm selectors as exchanged at the call boundary."""

    MEAN = 1
    GRADIENT = 2
    DOUBLE_GRADIENT = 3
    DCT = 4


_ALGORITHMS = {
    HashType.MEAN: HashAlgorithm.MEAN,
    HashType.GRADIENT: HashAlgorithm.GRADIENT,
    HashType.DOUBLE_GRADIENT: HashAlgorithm.DOUBLE_GRADIENT,
    HashType.DCT: HashAlgorithm.DCT,
}


def to_algorithm(selector: int) -> HashAlgorithm:
    try:
        return _ALGORITHMS[HashType(int(selector))]
    except ValueError:
        raise HashComputationError(f"unknown hash type {selector}") from None


@profiled("hashimage.compute_hash")
def compute_hash(handle: int, algorithm: int, hash_size: int) -> np.ndarray:
    """
    Consume `handle` and hash its image; returns hash_size² bits.

    The handle is gone once this returns or raises, whatever the outcome.
    """
    image = handles.consume(handle)
    try:
        strategy = to_algorithm(algorithm)
        if not 1 <= int(hash_size) <= settings.MAX_HASH_SIZE:
            raise HashComputationError(
                f"hash size {hash_size} outside 1..{settings.MAX_HASH_SIZE}"
            )
        bits = hash_image(image.pixels, int(hash_size), strategy)
        logger.debug(
            "Hashed %dx%d image with %s/%d", image.width, image.height, strategy.value, hash_size
        )
        return bits
    finally:
        del image
