from __future__ import annotations

"""
Perceptual hash primitives on canonical grayscale images.

Every strategy first shrinks the image with nearest-neighbour interpolation
and emits exactly size*size bits in row-major order:

- mean:            pixel >= mean of the size×size grid
- gradient:        pixel < right neighbour, on a (size+1)² grid
- double_gradient: checkerboard of horizontal / vertical comparisons, (size+1)² grid
- dct:             low-frequency DCT coefficient > mean, top-left of a (2·size)² DCT
"""
from enum import Enum

import cv2
import numpy as np

from hashimage.core.errors import HashComputationError
from hashimage.utils.cv_ops import dct2, resize_nearest


class HashAlgorithm(str, Enum):
    MEAN = "mean"
    GRADIENT = "gradient"
    DOUBLE_GRADIENT = "double_gradient"
    DCT = "dct"


def gray_resize_square(gray: np.ndarray, size: int) -> np.ndarray:
    return resize_nearest(gray, size, size)


def mean_hash(gray: np.ndarray, size: int) -> np.ndarray:
    small = gray_resize_square(gray, size).astype(np.float32)
    return (small >= small.mean()).ravel()


def gradient_hash(gray: np.ndarray, size: int) -> np.ndarray:
    small = gray_resize_square(gray, size + 1)[:size]
    return (small[:, :-1] < small[:, 1:]).ravel()


def double_gradient_hash(gray: np.ndarray, size: int) -> np.ndarray:
    small = gray_resize_square(gray, size + 1)
    horiz = small[:size, :size] < small[:size, 1:]
    vert = small[:size, :size] < small[1:, :size]
    rows, cols = np.indices((size, size))
    return np.where((rows + cols) % 2 == 0, horiz, vert).ravel()


def dct_hash(gray: np.ndarray, size: int) -> np.ndarray:
    coeffs = dct2(gray_resize_square(gray, 2 * size))
    block = coeffs[:size, :size]
    flat = block.ravel()
    # DC term dominates the mean; leave it out when there is anything else
    mean = flat[1:].mean() if flat.size > 1 else flat.mean()
    return flat > mean


_STRATEGIES = {
    HashAlgorithm.MEAN: mean_hash,
    HashAlgorithm.GRADIENT: gradient_hash,
    HashAlgorithm.DOUBLE_GRADIENT: double_gradient_hash,
    HashAlgorithm.DCT: dct_hash,
}


def hash_image(gray: np.ndarray, size: int, algorithm: HashAlgorithm) -> np.ndarray:
    """Bool bit-vector of exactly size*size entries."""
    if size < 1:
        raise HashComputationError(f"hash size must be positive, got {size}")
    if gray.size == 0:
        raise HashComputationError(f"cannot hash an empty {gray.shape[1]}x{gray.shape[0]} image")
    try:
        bits = _STRATEGIES[algorithm](gray, size)
    except cv2.error as e:
        raise HashComputationError(f"{algorithm.value} hash failed: {e}") from e
    return np.asarray(bits, dtype=bool)
