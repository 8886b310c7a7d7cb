"""
Shared fixtures for Retouch Studio tests.

Provides solid and patterned source images, a fresh 800x600 editor, and a
pixel-reading helper. Qt runs on the offscreen platform.
"""
import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import numpy as np
import pytest
from PyQt6.QtCore import QPointF

from retouch_studio.logic.raster import image_from_array, new_image, read_pixels


def P(x, y):
    """Canvas point shorthand"""
    return QPointF(x, y)


def px(image, x, y):
    """RGBA tuple of one pixel"""
    return tuple(int(v) for v in read_pixels(image)[y, x])


def patterned_array(width, height):
    """Every pixel distinct enough to tell where a copy came from"""
    ys, xs = np.mgrid[0:height, 0:width]
    arr = np.empty((height, width, 4), dtype=np.uint8)
    arr[..., 0] = xs % 256
    arr[..., 1] = ys % 256
    arr[..., 2] = (xs * 7 + ys * 3) % 256
    arr[..., 3] = 255
    return arr


@pytest.fixture
def solid_image(qapp):
    """Factory: opaque single-colour image"""
    def make(width=800, height=600, color="#ffffff"):
        return new_image(width, height, color)
    return make


@pytest.fixture
def blank_image(qapp):
    """Factory: fully transparent image"""
    def make(width=200, height=200):
        return new_image(width, height)
    return make


@pytest.fixture
def patterned_image(qapp):
    def make(width=400, height=300):
        return image_from_array(patterned_array(width, height))
    return make


@pytest.fixture
def editor(solid_image):
    """Fresh editor on an 800x600 white image"""
    from retouch_studio.logic.editor import Editor
    return Editor(solid_image(800, 600, "#ffffff"))
