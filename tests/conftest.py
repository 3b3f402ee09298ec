# Test configuration and shared fixtures

import os

import numpy as np
import pytest
from PIL import Image

# Keep key derivation fast and output out of the working tree
os.environ.setdefault("STEGO_KDF_ITERATIONS", "1000")

from src.services.stego_codec.models.stego_models import PixelBuffer

TEST_ITERATIONS = 1000


def make_buffer(width, height, channels=3, seed=0):
    rng = np.random.default_rng(seed)
    data = rng.integers(0, 256, size=width * height * channels, dtype=np.uint8)
    return PixelBuffer(width=width, height=height, channels=channels, data=data.tobytes())


@pytest.fixture
def iterations():
    """KDF iteration count used throughout the tests."""
    return TEST_ITERATIONS


@pytest.fixture
def small_rgb():
    """10x10 RGB carrier: 300 usable bits, 28 payload bytes."""
    return make_buffer(10, 10, 3, seed=1)


@pytest.fixture
def rgb_buffer():
    return make_buffer(64, 48, 3, seed=2)


@pytest.fixture
def rgba_buffer():
    return make_buffer(40, 30, 4, seed=3)


@pytest.fixture
def rgb_image():
    """Random 64x64 RGB PIL image."""
    rng = np.random.default_rng(4)
    arr = rng.integers(0, 256, size=(64, 64, 3), dtype=np.uint8)
    return Image.fromarray(arr)


@pytest.fixture
def rgba_image():
    rng = np.random.default_rng(5)
    arr = rng.integers(0, 256, size=(32, 32, 4), dtype=np.uint8)
    return Image.fromarray(arr)


@pytest.fixture
def buffer_factory():
    """Build a random PixelBuffer of the given geometry."""
    return make_buffer
