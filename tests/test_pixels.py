"""Pixel normalization: channel specs, ARGB permutation, buffer bounds."""

import ctypes

import cv2
import numpy as np
import pytest

from hashimage.core.errors import UnsupportedFormatError
from hashimage.services.pixels import (
    CanonicalImage,
    PixelLayout,
    argb_to_rgba,
    decode_channel_spec,
    normalize,
)


@pytest.mark.parametrize("spec", [2, 4, 5, 0, -1, -3, 7])
def test_unsupported_channel_specs_rejected(spec: int):
    data = bytes(4 * 4 * max(1, abs(spec)))
    assert normalize(data, 4, 4, spec) is None


@pytest.mark.parametrize("spec", [1, 3, -4])
def test_supported_channel_specs_succeed(spec: int):
    img = normalize(bytes(5 * 3 * abs(spec)), 5, 3, spec)
    assert isinstance(img, CanonicalImage)
    assert (img.width, img.height) == (5, 3)
    assert img.pixels.dtype == np.uint8


def test_decode_channel_spec():
    assert decode_channel_spec(-4) is PixelLayout.ARGB
    assert PixelLayout.ARGB.channels == 4
    with pytest.raises(UnsupportedFormatError):
        decode_channel_spec(4)


def test_gray_passes_through():
    data = bytes(range(12))
    img = normalize(data, 4, 3, 1)
    assert img.pixels.tolist() == [[0, 1, 2, 3], [4, 5, 6, 7], [8, 9, 10, 11]]


def test_argb_alpha_does_not_leak_into_luma():
    expected = cv2.cvtColor(np.array([[[20, 30, 40]]], dtype=np.uint8), cv2.COLOR_RGB2GRAY)
    img = normalize(bytes([10, 20, 30, 40]), 1, 1, -4)
    assert img.pixels[0, 0] == expected[0, 0]
    opaque = normalize(bytes([255, 20, 30, 40]), 1, 1, -4)
    assert opaque.pixels[0, 0] == img.pixels[0, 0]


def test_argb_to_rgba_moves_first_channel_last():
    px = np.array([[[1, 2, 3, 4], [5, 6, 7, 8]]], dtype=np.uint8)
    assert argb_to_rgba(px).tolist() == [[[2, 3, 4, 1], [6, 7, 8, 5]]]


def test_rgb_matches_opencv_luma(rgb_16x12: bytes):
    img = normalize(rgb_16x12, 16, 12, 3)
    ref = cv2.cvtColor(np.frombuffer(rgb_16x12, np.uint8).reshape(12, 16, 3), cv2.COLOR_RGB2GRAY)
    assert np.array_equal(img.pixels, ref)


def test_short_buffer_rejected():
    assert normalize(bytes(11), 4, 3, 1) is None


def test_reads_only_required_prefix():
    data = bytes(range(6)) + b"\xff" * 100
    img = normalize(data, 3, 2, 1)
    assert img.pixels.max() == 5


def test_input_not_retained():
    data = bytearray(range(4))
    img = normalize(data, 2, 2, 1)
    data[0] = 200
    assert img.pixels[0, 0] == 0


def test_zero_area_image_is_accepted():
    img = normalize(b"", 0, 7, 3)
    assert (img.width, img.height) == (0, 7)


def test_null_buffer_rejected():
    assert normalize(None, 2, 2, 1) is None
    assert normalize(0, 2, 2, 1) is None


def test_raw_address_and_ctypes_pointer():
    buf = (ctypes.c_ubyte * 4)(9, 8, 7, 6)
    by_addr = normalize(ctypes.addressof(buf), 2, 2, 1)
    by_ptr = normalize(ctypes.cast(buf, ctypes.POINTER(ctypes.c_ubyte)), 2, 2, 1)
    assert by_addr.pixels.tolist() == [[9, 8], [7, 6]]
    assert np.array_equal(by_addr.pixels, by_ptr.pixels)


def test_numpy_array_input(argb_16x12: bytes):
    arr = np.frombuffer(argb_16x12, np.uint8).reshape(12, 16, 4).copy()
    assert np.array_equal(
        normalize(arr, 16, 12, -4).pixels, normalize(argb_16x12, 16, 12, -4).pixels
    )


def test_canonical_image_requires_2d_uint8():
    with pytest.raises(ValueError):
        CanonicalImage(np.zeros((2, 2, 3), dtype=np.uint8))
