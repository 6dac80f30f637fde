"""Pytest configuration.

The background runner tests use PySide6 through pytest-qt. Force the offscreen
platform before any Qt module is imported so the suite runs headless.
"""

from __future__ import annotations

import os

import numpy as np
import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from filterlab.core import PixelBuffer  # noqa: E402


@pytest.fixture
def random_image() -> PixelBuffer:
    """Small RGB image with reproducible noise."""
    rng = np.random.default_rng(1234)
    return PixelBuffer.from_array(rng.integers(0, 256, size=(5, 6, 3), dtype=np.uint8))


@pytest.fixture
def random_rgba_image() -> PixelBuffer:
    rng = np.random.default_rng(4321)
    return PixelBuffer.from_array(rng.integers(0, 256, size=(4, 5, 4), dtype=np.uint8))


@pytest.fixture
def grey_image():
    """Factory: grey RGB image from a (height, width) array of intensities."""

    def make(values) -> PixelBuffer:
        grey = np.asarray(values, dtype=np.uint8)
        return PixelBuffer.from_array(np.repeat(grey[:, :, np.newaxis], 3, axis=2))

    return make
