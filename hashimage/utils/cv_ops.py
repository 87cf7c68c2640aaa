from __future__ import annotations

"""Thin OpenCV wrappers that guarantee uint8/float32 C-contiguous inputs."""
import cv2
import numpy as np


def ensure_contiguous(a, dtype=None) -> np.ndarray:
    """Guarantee an np.ndarray of `dtype` with a C_CONTIGUOUS layout."""
    if a is None:
        raise ValueError("cv_ops: got None as image")

    arr = a if isinstance(a, np.ndarray) else np.asarray(a)
    if dtype is not None and arr.dtype != dtype:
        arr = arr.astype(dtype, copy=False)

    # OpenCV bindings may refuse read-only views of caller memory
    if not arr.flags.c_contiguous or not arr.flags.writeable:
        arr = np.array(arr, order="C", copy=True)
    return arr


def cvtColor(src, code) -> np.ndarray:
    src = ensure_contiguous(src, np.uint8)
    return cv2.cvtColor(src, code)


def resize_nearest(src, width: int, height: int) -> np.ndarray:
    """Nearest-neighbour resize to (width, height); deterministic and cheap."""
    src = ensure_contiguous(src, np.uint8)
    return cv2.resize(src, (int(width), int(height)), interpolation=cv2.INTER_NEAREST)


def dct2(src) -> np.ndarray:
    """2-D DCT-II on a float32 copy of `src` (even sides required by OpenCV)."""
    src = ensure_contiguous(src, np.float32)
    return cv2.dct(src)
