from __future__ import annotations

"""Raw pixel buffers -> canonical single-channel (luma) images."""
import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Optional

import cv2
import numpy as np

from hashimage.core.errors import HashImageError, UnsupportedFormatError
from hashimage.utils.cv_ops import cvtColor

from .memory import read_bytes

logger = logging.getLogger(__name__)


class PixelLayout(IntEnum):
    """Supported channel specs; the sign of the value encodes channel order."""

    GRAY = 1
    RGB = 3
    ARGB = -4

    @property
    def channels(self) -> int:
        return abs(int(self))


def decode_channel_spec(channel_spec: int) -> PixelLayout:
    """Signed channel count -> PixelLayout, or UnsupportedFormatError."""
    try:
        return PixelLayout(int(channel_spec))
    except ValueError:
        raise UnsupportedFormatError(
            f"unsupported channel spec {channel_spec}"
        ) from None


@dataclass(frozen=True, eq=False)
class CanonicalImage:
    """Immutable height×width uint8 intensity grid."""

    pixels: np.ndarray

    def __post_init__(self) -> None:
        if self.pixels.ndim != 2 or self.pixels.dtype != np.uint8:
            raise ValueError("canonical image must be a 2-D uint8 array")

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])


def argb_to_rgba(px: np.ndarray) -> np.ndarray:
    """Move the first channel of every pixel to the last position."""
    return np.roll(px, -1, axis=-1)


def required_length(width: int, height: int, layout: PixelLayout) -> int:
    return int(width) * int(height) * layout.channels


def to_canonical(data: np.ndarray, width: int, height: int, layout: PixelLayout) -> CanonicalImage:
    """Convert exactly required_length() bytes into a CanonicalImage (copying)."""
    if width < 0 or height < 0:
        raise UnsupportedFormatError(f"negative dimensions {width}x{height}")
    n = required_length(width, height, layout)
    if data.size < n:
        raise UnsupportedFormatError(f"got {data.size} bytes, need {n}")
    flat = data[:n]

    if layout is PixelLayout.GRAY or n == 0:
        # zero-area grids skip OpenCV, which rejects empty inputs
        gray = np.array(flat, dtype=np.uint8, copy=True).reshape(height, width)
        return CanonicalImage(gray)

    px = flat.reshape(height, width, layout.channels)
    if layout is PixelLayout.RGB:
        gray = cvtColor(px, cv2.COLOR_RGB2GRAY)
    else:
        gray = cvtColor(argb_to_rgba(px), cv2.COLOR_RGBA2GRAY)
    return CanonicalImage(gray)


def normalize(data: Any, width: int, height: int, channel_spec: int) -> Optional[CanonicalImage]:
    """
    Caller memory + (width, height, signed channel spec) -> CanonicalImage.

    Returns None for unsupported specs and unusable buffers; never raises
    for those. The input is only read for the duration of the call.
    """
    try:
        layout = decode_channel_spec(channel_spec)
        if width < 0 or height < 0:
            raise UnsupportedFormatError(f"negative dimensions {width}x{height}")
        raw = read_bytes(data, required_length(width, height, layout))
        return to_canonical(raw, width, height, layout)
    except HashImageError as e:
        logger.warning("Rejected pixel buffer (%dx%d, spec=%s): %s", width, height, channel_spec, e)
        return None
