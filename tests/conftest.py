"""Shared test fixtures."""

from pathlib import Path

import numpy as np
import pytest

from hashimage.core.config import settings


@pytest.fixture
def rng() -> np.random.Generator:
    """Deterministic generator for synthetic pixel data."""
    return np.random.default_rng(1234)


@pytest.fixture
def gray_2x2() -> bytes:
    """Two dark and two bright pixels, alternating along each row."""
    return bytes([0, 255, 0, 255])


@pytest.fixture
def rgb_16x12(rng: np.random.Generator) -> bytes:
    return rng.integers(0, 256, size=16 * 12 * 3, dtype=np.uint8).tobytes()


@pytest.fixture
def argb_16x12(rng: np.random.Generator) -> bytes:
    return rng.integers(0, 256, size=16 * 12 * 4, dtype=np.uint8).tobytes()


@pytest.fixture
def profile_on(monkeypatch):
    """Turn on the profiling decorator for one test."""
    monkeypatch.setattr(settings, "PROFILE", True)
    yield


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent
