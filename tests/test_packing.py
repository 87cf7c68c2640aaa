"""Packed fingerprint sizing and layout."""

import math

import numpy as np
import pytest

from hashimage.core.config import settings
from hashimage.services.packing import (
    alloc_size,
    hamming_distance,
    pack_bits,
    pack_into,
    unpack_bits,
)


@pytest.mark.parametrize("size,expected", [(0, 0), (1, 1), (2, 1), (3, 2), (8, 8), (9, 11), (16, 32)])
def test_alloc_size_examples(size: int, expected: int):
    assert alloc_size(size) == expected


def test_alloc_size_is_ceil_of_bits_over_eight():
    for n in range(0, 200):
        assert alloc_size(n) == math.ceil(n * n / 8)


def test_pack_bits_is_msb_first():
    bits = np.array([0, 1, 0, 1], dtype=bool)
    assert pack_bits(bits, 2) == bytes([0b0101_0000])


def test_pack_bits_crosses_byte_boundary_in_order():
    bits = np.zeros(9, dtype=bool)
    bits[0] = bits[8] = True
    assert pack_bits(bits, 3) == bytes([0b1000_0000, 0b1000_0000])


def test_pack_bits_clips_overlong_vector():
    bits = np.ones(32, dtype=bool)
    assert pack_bits(bits, 2) == bytes([0b1111_0000])


def test_short_vector_zero_filled():
    bits = np.ones(8, dtype=bool)
    assert pack_bits(bits, 4, zero_fill=True) == bytes([0xFF, 0x00])


def test_short_vector_without_zero_fill_copies_available_only():
    bits = np.ones(8, dtype=bool)
    assert pack_bits(bits, 4, zero_fill=False) == bytes([0xFF])


def test_zero_fill_follows_settings(monkeypatch):
    monkeypatch.setattr(settings, "ZERO_FILL_TAIL", False)
    assert pack_bits(np.ones(8, dtype=bool), 4) == bytes([0xFF])


def test_pack_into_leaves_bytes_past_alloc_size_alone():
    dest = bytearray(b"\xAA" * 4)
    written = pack_into(np.ones(4, dtype=bool), dest, 2)
    assert written == 1
    assert dest == bytearray([0xF0, 0xAA, 0xAA, 0xAA])


def test_pack_into_without_zero_fill_keeps_tail(monkeypatch):
    monkeypatch.setattr(settings, "ZERO_FILL_TAIL", False)
    dest = bytearray(b"\xAA" * 2)
    pack_into(np.ones(8, dtype=bool), dest, 4)
    assert dest == bytearray([0xFF, 0xAA])


def test_unpack_drops_pad_bits():
    bits = unpack_bits(bytes([0b1011_1111]), 2)
    assert bits.tolist() == [True, False, True, True]


def test_hamming_distance_ignores_pad_bits():
    a = bytes([0b1010_0000, 0x00])
    b = bytes([0b0110_0000, 0x7F])
    # 9 meaningful bits for size 3: bits 0 and 1 differ, byte 2's bit 0 is equal
    assert hamming_distance(a, b, 3) == 2


def test_hamming_distance_short_buffer():
    assert hamming_distance(b"\x00", b"\x00\x00", 3) is None
