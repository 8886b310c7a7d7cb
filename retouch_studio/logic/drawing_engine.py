"""
HANDLES PIXEL MANIPULATION ONLY.
- Brush / eraser dabs and strokes
- Flood filling (bucket)
- Local blur and clone stamping
- Shapes and text

Every function here is stateless: it takes the target image and the
settings it needs, mutates the image in place and reports whether anything
changed. Gesture bookkeeping lives in the tools.
"""

import logging
import math

import numpy as np
from PyQt6.QtCore import QPointF, QRectF, Qt
from PyQt6.QtGui import QBrush, QColor, QFont, QFontMetricsF, QPainter, QPen, QPolygonF

from ..config import ARROW_HEAD_MIN, BRUSH_SPACING, FILL_TOLERANCE, TEXT_LINE_HEIGHT
from ..enums import ShapeType
from .raster import begin_painter, pixels, to_hex, to_rgba

logger = logging.getLogger(__name__)


# --- BRUSH DABS ---
def dab_alpha(cx: float, cy: float, radius: float, hardness: float, width: int, height: int):
    """
    Coverage of one circular dab, clipped to the image.

    Pixel (x, y) is sampled at its centre (x + 0.5, y + 0.5). Coverage is 1
    inside ``radius * hardness / 100`` and falls off linearly to 0 at the
    radius, so hardness 100 gives a hard-edged disc.

    Returns:
        (x0, y0, alpha) with alpha a float32 array, or None when the dab
        misses the image entirely.
    """
    if radius <= 0:
        return None
    x0 = max(0, int(math.floor(cx - radius)))
    y0 = max(0, int(math.floor(cy - radius)))
    x1 = min(width, int(math.ceil(cx + radius)) + 1)
    y1 = min(height, int(math.ceil(cy + radius)) + 1)
    if x0 >= x1 or y0 >= y1:
        return None

    ys, xs = np.mgrid[y0:y1, x0:x1]
    dist = np.hypot(xs + 0.5 - cx, ys + 0.5 - cy).astype(np.float32)

    inner = radius * max(0.0, min(hardness, 100.0)) / 100.0
    if inner >= radius:
        alpha = (dist <= radius).astype(np.float32)
    else:
        alpha = np.clip((radius - dist) / (radius - inner), 0.0, 1.0).astype(np.float32)
    return x0, y0, alpha


def stamp_dab(target: np.ndarray, cx: float, cy: float, brush, erase: bool = False) -> bool:
    """Composite one dab into an (h, w, 4) RGBA view"""
    h, w = target.shape[:2]
    dab = dab_alpha(cx, cy, brush.radius, brush.hardness, w, h)
    if dab is None:
        return False
    x0, y0, alpha = dab
    src_a = alpha * (brush.opacity / 100.0)
    if not src_a.any():
        return False

    region = target[y0:y0 + alpha.shape[0], x0:x0 + alpha.shape[1]]
    dst = region.astype(np.float32)
    dst_a = dst[..., 3] / 255.0

    if erase:
        # destination-out: only alpha is reduced
        out_a = dst_a * (1.0 - src_a)
        region[..., 3] = np.rint(out_a * 255.0).astype(np.uint8)
        return True

    r, g, b, _ = to_rgba(brush.color)
    color = np.array([r, g, b], dtype=np.float32)

    # source-over with straight alpha
    out_a = src_a + dst_a * (1.0 - src_a)
    weight_dst = dst_a * (1.0 - src_a)
    safe = np.where(out_a > 0, out_a, 1.0)
    rgb = (color * src_a[..., None] + dst[..., :3] * weight_dst[..., None]) / safe[..., None]

    region[..., :3] = np.clip(np.rint(rgb), 0, 255).astype(np.uint8)
    region[..., 3] = np.clip(np.rint(out_a * 255.0), 0, 255).astype(np.uint8)
    return True


def stroke_points(start: QPointF, end: QPointF, size: float):
    """
    Sample points from ``start`` to ``end`` inclusive, spaced a quarter of
    the brush size apart so fast pointer moves leave no gaps.
    """
    dx, dy = end.x() - start.x(), end.y() - start.y()
    dist = math.hypot(dx, dy)
    steps = max(math.ceil(dist / (size * BRUSH_SPACING)), 1)
    return [QPointF(start.x() + dx * i / steps, start.y() + dy * i / steps) for i in range(steps + 1)]


# --- MAIN DRAWING LOOP ---
def draw_stroke(image, start: QPointF, end: QPointF, brush, erase: bool = False) -> bool:
    """Interpolate dabs along a segment. A zero-length segment stamps once."""
    target = pixels(image)
    changed = False
    for point in stroke_points(start, end, brush.size):
        changed |= stamp_dab(target, point.x(), point.y(), brush, erase)
    return changed


# --- FLOOD FILL ---
def _connected_region(match: np.ndarray, sx: int, sy: int) -> np.ndarray:
    """
    Scanline fill over a boolean match mask. Whole horizontal runs are
    claimed at once, so a pixel that is not yet filled always starts a
    fresh run.
    """
    h, w = match.shape
    filled = np.zeros_like(match)
    stack = [(sx, sy)]

    while stack:
        x, y = stack.pop()
        if filled[y, x] or not match[y, x]:
            continue

        row = match[y]
        # === Extend left and right === #
        left_run = row[:x + 1][::-1]
        left = x - (int(np.argmin(left_run)) if not left_run.all() else len(left_run)) + 1
        right_run = row[x:]
        right = x + (int(np.argmin(right_run)) if not right_run.all() else len(right_run)) - 1

        filled[y, left:right + 1] = True

        # === Seed the rows above and below === #
        for ny in (y - 1, y + 1):
            if not 0 <= ny < h:
                continue
            cand = match[ny, left:right + 1] & ~filled[ny, left:right + 1]
            if not cand.any():
                continue
            starts = np.flatnonzero(cand & ~np.concatenate(([False], cand[:-1])))
            stack.extend((left + int(s), ny) for s in starts)

    return filled


def flood_fill(image, x: float, y: float, color, tolerance: int = FILL_TOLERANCE) -> bool:
    """
    Fill the 4-connected region similar to the seed pixel with ``color``.

    A pixel matches when every channel (alpha included) is within
    ``tolerance`` of the seed. Filled pixels become fully opaque.
    """
    target = pixels(image)
    h, w = target.shape[:2]
    sx, sy = int(math.floor(x)), int(math.floor(y))
    if not (0 <= sx < w and 0 <= sy < h):
        return False

    fill = np.array(to_rgba(color)[:3] + (255,), dtype=np.uint8)
    seed = target[sy, sx].astype(np.int16)
    if np.array_equal(target[sy, sx], fill):
        return False

    match = np.all(np.abs(target.astype(np.int16) - seed) <= tolerance, axis=2)
    region = _connected_region(match, sx, sy)
    target[region] = fill
    logger.debug("Flood fill at (%d, %d): %d pixels, tolerance %d", sx, sy, int(region.sum()), tolerance)
    return True


# --- RETOUCH BRUSHES ---
def _square(cx: float, cy: float, size: int, width: int, height: int):
    half = size / 2
    x0 = max(0, int(math.floor(cx - half)))
    y0 = max(0, int(math.floor(cy - half)))
    x1 = min(width, int(math.floor(cx - half)) + int(size))
    y1 = min(height, int(math.floor(cy - half)) + int(size))
    return x0, y0, x1, y1


def blur_area(image, cx: float, cy: float, size: int, passes: int = 1) -> bool:
    """
    Box-blur (3x3 mean, RGB only) the ``size``-sided square around a point.
    The square is edge-padded, so nothing outside it is read.
    """
    target = pixels(image)
    h, w = target.shape[:2]
    x0, y0, x1, y1 = _square(cx, cy, size, w, h)
    if x1 - x0 < 2 or y1 - y0 < 2:
        return False

    region = target[y0:y1, x0:x1, :3].astype(np.float32)
    rh, rw = region.shape[:2]
    for _ in range(max(1, passes)):
        padded = np.pad(region, ((1, 1), (1, 1), (0, 0)), mode="edge")
        acc = np.zeros_like(region)
        for dy in range(3):
            for dx in range(3):
                acc += padded[dy:dy + rh, dx:dx + rw]
        region = acc / 9.0

    target[y0:y1, x0:x1, :3] = np.clip(np.rint(region), 0, 255).astype(np.uint8)
    return True


def clone_block(image, dest: QPointF, offset: QPointF, size: int) -> bool:
    """
    Copy the ``size`` x ``size`` block centred on ``dest - offset`` to
    ``dest``. The destination is clipped to the image; if any pixel of the
    source needed for it lies outside the image the whole sample is skipped.
    """
    target = pixels(image)
    h, w = target.shape[:2]
    size = max(1, int(size))

    dx0 = int(math.floor(dest.x() - size / 2))
    dy0 = int(math.floor(dest.y() - size / 2))
    ox, oy = int(round(offset.x())), int(round(offset.y()))

    # Clip the destination block
    cx0, cy0 = max(0, dx0), max(0, dy0)
    cx1, cy1 = min(w, dx0 + size), min(h, dy0 + size)
    if cx0 >= cx1 or cy0 >= cy1:
        return False

    sx0, sy0, sx1, sy1 = cx0 - ox, cy0 - oy, cx1 - ox, cy1 - oy
    if sx0 < 0 or sy0 < 0 or sx1 > w or sy1 > h:
        return False

    block = target[sy0:sy1, sx0:sx1].copy()
    target[cy0:cy1, cx0:cx1] = block
    return True


# --- SHAPES ---
def _shape_pen(settings) -> QPen:
    pen = QPen(QColor(settings.stroke_color), settings.stroke_width)
    pen.setCapStyle(Qt.PenCapStyle.RoundCap)
    pen.setJoinStyle(Qt.PenJoinStyle.RoundJoin)
    return pen


def paint_shape(painter: QPainter, start: QPointF, end: QPointF, settings):
    """Render a shape with an already-open painter (layer or preview)"""
    painter.save()
    painter.setRenderHint(QPainter.RenderHint.Antialiasing)
    painter.setPen(_shape_pen(settings))
    painter.setBrush(QBrush(QColor(settings.fill_color)) if settings.filled else Qt.BrushStyle.NoBrush)

    if settings.kind == ShapeType.RECTANGLE:
        painter.drawRect(QRectF(start, end).normalized())

    elif settings.kind == ShapeType.CIRCLE:
        center = QPointF((start.x() + end.x()) / 2, (start.y() + end.y()) / 2)
        rx, ry = abs(end.x() - start.x()) / 2, abs(end.y() - start.y()) / 2
        painter.drawEllipse(center, rx, ry)

    elif settings.kind == ShapeType.LINE:
        painter.drawLine(start, end)

    elif settings.kind == ShapeType.ARROW:
        painter.drawLine(start, end)
        head = max(settings.stroke_width * 4, ARROW_HEAD_MIN)
        angle = math.atan2(end.y() - start.y(), end.x() - start.x())
        tip = QPolygonF([
            end,
            QPointF(end.x() - head * math.cos(angle - math.pi / 6),
                    end.y() - head * math.sin(angle - math.pi / 6)),
            QPointF(end.x() - head * math.cos(angle + math.pi / 6),
                    end.y() - head * math.sin(angle + math.pi / 6)),
        ])
        painter.setBrush(QBrush(QColor(settings.stroke_color)))
        painter.drawPolygon(tip)

    painter.restore()


def draw_shape(image, start: QPointF, end: QPointF, settings) -> bool:
    painter = begin_painter(image)
    paint_shape(painter, start, end, settings)
    painter.end()
    return True


# --- TEXT ---
def make_font(settings) -> QFont:
    font = QFont(settings.font_family)
    font.setPixelSize(int(settings.font_size))
    font.setBold(settings.bold)
    font.setItalic(settings.italic)
    return font


def draw_text(image, pos: QPointF, settings) -> bool:
    """
    Stamp multi-line text. The top of the first line sits at ``pos``; the
    x coordinate is the left edge, centre or right edge per alignment.
    """
    if not settings.content:
        return False

    font = make_font(settings)
    metrics = QFontMetricsF(font)
    painter = begin_painter(image)
    painter.setRenderHint(QPainter.RenderHint.TextAntialiasing)
    painter.setFont(font)
    painter.setPen(QColor(settings.color))

    for i, line in enumerate(settings.content.split("\n")):
        advance = metrics.horizontalAdvance(line)
        x = pos.x()
        if settings.align == "center":
            x -= advance / 2
        elif settings.align == "right":
            x -= advance
        top = pos.y() + i * settings.font_size * TEXT_LINE_HEIGHT
        painter.drawText(QPointF(x, top + metrics.ascent()), line)

    painter.end()
    return True


# --- EYEDROPPER ---
def sample_color(image, x: float, y: float):
    """Hex colour of the pixel under (x, y), or None outside the image"""
    px, py = int(math.floor(x)), int(math.floor(y))
    if not (0 <= px < image.width() and 0 <= py < image.height()):
        return None
    c = image.pixelColor(px, py)
    return to_hex(c.red(), c.green(), c.blue())
