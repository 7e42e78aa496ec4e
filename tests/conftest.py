"""Shared test fixtures for diffable tests."""

import logging

import pytest
from PIL import Image


@pytest.fixture
def make_image():
    """
    Factory for small test images.

    ``pixels`` maps (x, y) to a pixel value; every other pixel keeps
    ``fill``.
    """
    def factory(mode, size, pixels=None, fill=0):
        img = Image.new(mode, size, fill)
        for xy, value in (pixels or {}).items():
            img.putpixel(xy, value)
        return img
    return factory


@pytest.fixture
def restore_logging():
    """Put the root logger back the way it was after a test reconfigures it."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
