from __future__ import annotations

"""
C-style call boundary.

- create_hash_image(img_data, width, height, channels) -> handle (0 on failure)
- create_hash(hash_image, hash_type, hash_size, hash_data_out) -> 1 / 0
- get_hash_data_alloc_size(hash_size) -> bytes for the packed fingerprint

Nothing raised inside the library crosses this layer; failures become the
0 sentinel and a log line. Caller protocol: size the destination with
get_hash_data_alloc_size, create the image, hash it once, never reuse the
handle afterwards (it is invalid whether or not hashing succeeded).
"""
import ctypes
import logging
from typing import Any, Dict, Optional

from hashimage.core.config import settings
from hashimage.core.errors import HashImageError, InvalidHandleError
from hashimage.services import handles
from hashimage.services.dispatch import compute_hash
from hashimage.services.memory import is_null
from hashimage.services.packing import alloc_size, pack_into
from hashimage.services.pixels import normalize

logger = logging.getLogger(__name__)

_BOUNDARY_ERRORS = (HashImageError, TypeError, ValueError, OverflowError)


def create_hash_image(img_data: Any, width: int, height: int, channels: int) -> int:
    """Normalize caller pixels and return an owning handle, or 0."""
    try:
        image = normalize(img_data, int(width), int(height), int(channels))
        if image is None:
            return handles.NULL_HANDLE
        return handles.wrap(image)
    except _BOUNDARY_ERRORS as e:
        logger.warning("create_hash_image failed: %s", e)
        return handles.NULL_HANDLE


def create_hash(hash_image: int, hash_type: int, hash_size: int, hash_data_out: Any) -> int:
    """Consume `hash_image`, hash it, pack the bits into `hash_data_out`."""
    if not hash_image:
        logger.warning("create_hash called with a null handle")
        return 0
    try:
        if is_null(hash_data_out):
            # still release the image; the handle is spent either way
            handles.consume(int(hash_image))
            logger.warning("create_hash called with a null destination")
            return 0
        bits = compute_hash(int(hash_image), int(hash_type), int(hash_size))
        pack_into(bits, hash_data_out, int(hash_size))
        return 1
    except InvalidHandleError as e:
        logger.warning("create_hash rejected handle: %s", e)
        return 0
    except _BOUNDARY_ERRORS as e:
        logger.warning("create_hash failed: %s", e)
        return 0


def get_hash_data_alloc_size(hash_size: int) -> int:
    return alloc_size(hash_size)


def hash_pixels(
    img_data: Any, width: int, height: int, channels: int, hash_type: int, hash_size: int
) -> Optional[bytes]:
    """Whole caller protocol in one call; packed fingerprint or None."""
    if not 1 <= int(hash_size) <= settings.MAX_HASH_SIZE:
        logger.warning("hash_pixels: hash size %s outside 1..%d", hash_size, settings.MAX_HASH_SIZE)
        return None
    handle = create_hash_image(img_data, width, height, channels)
    if not handle:
        return None
    out = bytearray(get_hash_data_alloc_size(hash_size))
    if not create_hash(handle, hash_type, hash_size, out):
        return None
    return bytes(out)


# -------- C function pointers ----------
CREATE_HASH_IMAGE_FN = ctypes.CFUNCTYPE(
    ctypes.c_void_p, ctypes.c_void_p, ctypes.c_uint, ctypes.c_uint, ctypes.c_int
)
CREATE_HASH_FN = ctypes.CFUNCTYPE(
    ctypes.c_int, ctypes.c_void_p, ctypes.c_int, ctypes.c_uint, ctypes.c_void_p
)
GET_HASH_DATA_ALLOC_SIZE_FN = ctypes.CFUNCTYPE(ctypes.c_size_t, ctypes.c_uint)


def _c_create_hash_image(img_data, width, height, channels):
    # c_void_p arguments arrive as int, or None for NULL
    if not img_data:
        logger.warning("create_hash_image called with a null buffer")
        return None
    return create_hash_image(img_data, width, height, channels) or None


def _c_create_hash(hash_image, hash_type, hash_size, hash_data_out):
    return create_hash(hash_image or 0, hash_type, hash_size, hash_data_out or 0)


_EXPORTS: Dict[str, Any] = {}


def export_table() -> Dict[str, Any]:
    """
    CFUNCTYPE callables keyed by C symbol name. Their addresses
    (ctypes.cast(fn, ctypes.c_void_p).value) can be handed to a C host;
    the objects are cached here so they stay alive for the process lifetime.
    """
    if not _EXPORTS:
        _EXPORTS.update(
            create_hash_image=CREATE_HASH_IMAGE_FN(_c_create_hash_image),
            create_hash=CREATE_HASH_FN(_c_create_hash),
            get_hash_data_alloc_size=GET_HASH_DATA_ALLOC_SIZE_FN(get_hash_data_alloc_size),
        )
    return _EXPORTS


__all__ = [
    "create_hash_image",
    "create_hash",
    "get_hash_data_alloc_size",
    "hash_pixels",
    "export_table",
]
