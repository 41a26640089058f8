"""
Test configuration and fixtures for vibrant color extraction tests.
"""
import io

import numpy as np
import pytest
from PIL import Image

from vibrant.utils.metrics import reset_metrics


def make_rgba(width, height, rgb=(0, 0, 0)):
    """Create an H×W×4 uint8 array filled with one opaque color."""
    arr = np.zeros((height, width, 4), dtype=np.uint8)
    arr[:, :, :3] = rgb
    arr[:, :, 3] = 255
    return arr


def make_checkerboard(width, height, first=(0, 0, 0), second=(255, 255, 255)):
    """Create a 1-pixel checkerboard alternating two colors."""
    arr = make_rgba(width, height, first)
    yy, xx = np.indices((height, width))
    arr[(xx + yy) % 2 == 1, :3] = second
    return arr


def encode_png(arr):
    """Encode an RGB or RGBA array as PNG bytes."""
    buf = io.BytesIO()
    Image.fromarray(arr).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def red_image():
    """10×10 all-red RGBA array."""
    return make_rgba(10, 10, (255, 0, 0))


@pytest.fixture
def primaries_image():
    """
    6×6 RGBA array where each pixel is exactly one tile of a 6×6 grid.

    Row 0 holds six saturated colors, every other pixel is white.
    """
    arr = make_rgba(6, 6, (255, 255, 255))
    colors = [
        (255, 0, 0),    # red
        (0, 255, 0),    # green
        (0, 0, 255),    # blue
        (255, 255, 0),  # yellow
        (0, 255, 255),  # cyan
        (255, 0, 255),  # magenta
    ]
    for x, rgb in enumerate(colors):
        arr[0, x, :3] = rgb
    return arr


@pytest.fixture(autouse=True)
def reset_metrics_fixture():
    """Reset metrics before each test."""
    reset_metrics()
