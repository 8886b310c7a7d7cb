"""Canvas-wide geometry: crop, rotate, flip. Each returns a new layer image."""

from PyQt6.QtCore import QRect
from PyQt6.QtGui import QImage, QTransform

from ..enums import FlipAxis
from .raster import ensure_format


def clamp_rect(rect, width: int, height: int) -> QRect:
    """Normalise a rectangle and clip it to the canvas"""
    return QRect(rect).normalized().intersected(QRect(0, 0, width, height))


def crop(image: QImage, rect: QRect) -> QImage:
    rect = clamp_rect(rect, image.width(), image.height())
    if rect.isEmpty():
        raise ValueError("Crop rectangle does not overlap the canvas")
    return image.copy(rect)


def rotate(image: QImage, degrees: int) -> QImage:
    """Rotate by a quarter turn; width and height swap"""
    if degrees not in (90, -90):
        raise ValueError(f"Only quarter turns are supported, got {degrees}")
    return ensure_format(image.transformed(QTransform().rotate(degrees)))


def flip(image: QImage, axis) -> QImage:
    axis = FlipAxis(axis)
    if axis == FlipAxis.HORIZONTAL:
        transform = QTransform().scale(-1, 1)
    else:
        transform = QTransform().scale(1, -1)
    return ensure_format(image.transformed(transform))
