"""
Perceptual image hashing behind a C-style call boundary.

Public API is exposed from .abi.
"""

from .abi import (
    create_hash,
    create_hash_image,
    export_table,
    get_hash_data_alloc_size,
    hash_pixels,
)
from .core.runtime import configure_logging, configure_opencv_threads
from .services.dispatch import HashType
from .services.packing import hamming_distance
from .services.pixels import PixelLayout

__all__ = [
    "create_hash_image",
    "create_hash",
    "get_hash_data_alloc_size",
    "hash_pixels",
    "export_table",
    "hamming_distance",
    "configure_logging",
    "configure_opencv_threads",
    "HashType",
    "PixelLayout",
]
