"""
Layer compositing.

Blending is done by QPainter composition modes, which implement the W3C
separable blend formulas:
    normal    src over dst
    multiply  src * dst
    screen    1 - (1 - src)(1 - dst)
    overlay   multiply where dst < 0.5, screen otherwise
"""

import numpy as np
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QImage, QPainter

from ..config import BLEND_MODES, CHECKER_DARK, CHECKER_LIGHT, CHECKER_SIZE
from ..enums import BlendMode
from .raster import LAYER_FORMAT, begin_painter, image_from_array, to_rgba

COMPOSITE_FORMAT = QImage.Format.Format_ARGB32_Premultiplied


def blend_onto(target: QImage, source: QImage, opacity: float = 1.0,
               mode: BlendMode = BlendMode.NORMAL, painter: QPainter = None):
    """Draw ``source`` over ``target`` at ``opacity`` using ``mode``."""
    own_painter = painter is None
    if own_painter:
        painter = begin_painter(target)
    painter.setOpacity(max(0.0, min(1.0, opacity)))
    painter.setCompositionMode(BLEND_MODES.get(mode, QPainter.CompositionMode.CompositionMode_SourceOver))
    painter.drawImage(0, 0, source)
    if own_painter:
        painter.end()


def composite(layers, width: int, height: int) -> QImage:
    """
    Flatten ``layers`` (bottom to top) into one straight-alpha image.

    Invisible layers are skipped; every other layer is drawn at its opacity
    with its blend rule.
    """
    result = QImage(width, height, COMPOSITE_FORMAT)
    result.fill(Qt.GlobalColor.transparent)

    painter = begin_painter(result)
    for layer in layers:
        if not layer.visible:
            continue
        blend_onto(result, layer.image, layer.opacity, layer.blend_mode, painter=painter)
    painter.end()

    return result.convertToFormat(LAYER_FORMAT)


def make_checkerboard(width: int, height: int, size: int = CHECKER_SIZE) -> QImage:
    """Transparency backdrop: alternating squares, light at the origin."""
    ys, xs = np.indices((height, width))
    light = ((xs // size + ys // size) % 2) == 0

    board = np.empty((height, width, 4), dtype=np.uint8)
    board[light] = to_rgba(CHECKER_LIGHT)
    board[~light] = to_rgba(CHECKER_DARK)
    return image_from_array(board)
