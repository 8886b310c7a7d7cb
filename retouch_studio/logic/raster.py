"""
Raster helpers shared by the engine.

Layers store straight (non-premultiplied) RGBA8888 pixels so that numpy can
read and write them byte-for-byte in R, G, B, A order on any platform.

Views returned by ``pixels()`` alias the QImage buffer: fetch a fresh view
for every operation and never keep one around, because history snapshots
share buffers with live layers until the layer is written again.
"""

import os

import numpy as np
from PyQt6.QtCore import QByteArray, Qt
from PyQt6.QtGui import QColor, QImage, QPainter

LAYER_FORMAT = QImage.Format.Format_RGBA8888


class RenderSurfaceError(RuntimeError):
    """A pixel buffer or painter could not be created."""


def new_image(width: int, height: int, fill=None) -> QImage:
    """Create a layer-format image, transparent unless ``fill`` is given."""
    image = QImage(int(width), int(height), LAYER_FORMAT)
    if image.isNull():
        raise RenderSurfaceError(f"Cannot allocate {width}x{height} image")
    image.fill(QColor(fill) if fill is not None else Qt.GlobalColor.transparent)
    return image


def ensure_format(image: QImage) -> QImage:
    if image.isNull():
        raise RenderSurfaceError("Source image is empty")
    if image.format() == LAYER_FORMAT:
        return image.copy()
    return image.convertToFormat(LAYER_FORMAT)


def load_image(source) -> QImage:
    """Decode a QImage, a file path, or encoded bytes into a layer image."""
    if isinstance(source, QImage):
        return ensure_format(source)

    image = QImage()
    if isinstance(source, (bytes, bytearray)):
        image.loadFromData(QByteArray(bytes(source)))
    elif isinstance(source, (str, os.PathLike)):
        image.load(os.fspath(source))
    else:
        raise TypeError(f"Unsupported image source: {type(source).__name__}")

    if image.isNull():
        raise RenderSurfaceError(f"Could not decode source image: {source!r:.80}")
    return ensure_format(image)


def begin_painter(image: QImage) -> QPainter:
    painter = QPainter()
    if image.isNull() or not painter.begin(image):
        raise RenderSurfaceError("Cannot open a painter on the target image")
    return painter


def pixels(image: QImage) -> np.ndarray:
    """Writable (height, width, 4) uint8 view over a layer image."""
    if image.format() != LAYER_FORMAT:
        raise ValueError(f"Expected RGBA8888 image, got {image.format()}")
    h, w = image.height(), image.width()
    ptr = image.bits()  # non-const: detaches shared data
    if ptr is None:
        raise RenderSurfaceError("Image has no pixel buffer")
    ptr.setsize(image.sizeInBytes())
    return np.ndarray(shape=(h, w, 4), dtype=np.uint8, buffer=ptr,
                      strides=(image.bytesPerLine(), 4, 1))


def read_pixels(image: QImage) -> np.ndarray:
    """
    Detached copy of the pixels of any image. Reads through constBits(),
    so a buffer shared with history snapshots stays shared.
    """
    if image.format() != LAYER_FORMAT:
        image = image.convertToFormat(LAYER_FORMAT)
    ptr = image.constBits()
    if ptr is None:
        raise RenderSurfaceError("Image has no pixel buffer")
    ptr.setsize(image.sizeInBytes())
    view = np.ndarray(shape=(image.height(), image.width(), 4), dtype=np.uint8, buffer=ptr,
                      strides=(image.bytesPerLine(), 4, 1))
    return view.copy()


def image_from_array(array: np.ndarray) -> QImage:
    array = np.ascontiguousarray(array, dtype=np.uint8)
    h, w = array.shape[:2]
    image = QImage(array.tobytes(), w, h, w * 4, LAYER_FORMAT)
    return image.copy()  # own the buffer


def to_rgba(color) -> tuple:
    """Any QColor-compatible value -> (r, g, b, a) ints."""
    c = QColor(color)
    if not c.isValid():
        raise ValueError(f"Invalid color: {color!r}")
    return c.red(), c.green(), c.blue(), c.alpha()


def to_hex(r: int, g: int, b: int) -> str:
    return f"#{int(r):02x}{int(g):02x}{int(b):02x}"


def memory_size_mb(image: QImage) -> float:
    return image.sizeInBytes() / (1024 * 1024)
