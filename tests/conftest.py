import logging

import numpy as np
import pytest

from ascii_engine.models import PixelBuffer

BLACK = (0, 0, 0, 255)
WHITE = (255, 255, 255, 255)


def solid_buffer(width, height, rgba):
    return PixelBuffer(width, height, bytes(rgba) * (width * height))


def split_buffer(width, height, left=BLACK, right=WHITE):
    """Left half one colour, right half another."""
    arr = np.empty((height, width, 4), dtype=np.uint8)
    arr[:, : width // 2] = left
    arr[:, width // 2 :] = right
    return PixelBuffer.from_array(arr)


@pytest.fixture
def make_solid():
    return solid_buffer


@pytest.fixture
def make_split():
    return split_buffer


@pytest.fixture
def random_buffer():
    rng = np.random.default_rng(1234)
    return PixelBuffer.from_array(rng.integers(0, 256, size=(9, 13, 4), dtype=np.uint8))


@pytest.fixture(autouse=True)
def reset_package_logger():
    """CLI tests reconfigure the package logger; restore it afterwards."""
    logger = logging.getLogger("ascii_engine")
    handlers, level, propagate = logger.handlers[:], logger.level, logger.propagate
    yield
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate
