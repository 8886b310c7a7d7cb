"""
Viewport: zoom and pan as view-only state.

The canvas is drawn centred in the view, shifted by ``pan`` and scaled by
``zoom``. Nothing here ever touches layer pixels or stored coordinates.
"""

from PyQt6.QtCore import QPointF, QRectF, QSizeF

from ..config import FIT_MARGIN, ZOOM_MAX, ZOOM_MIN, ZOOM_STEP


def clamp_zoom(value: float) -> float:
    return max(ZOOM_MIN, min(float(value), ZOOM_MAX))


class Viewport:
    def __init__(self, canvas_width: int, canvas_height: int):
        self.canvas_size = QSizeF(canvas_width, canvas_height)
        self.view_size = QSizeF(canvas_width, canvas_height)
        self.zoom = 1.0
        self.pan = QPointF(0, 0)

    # === Zoom === #
    def set_zoom(self, value: float) -> float:
        self.zoom = clamp_zoom(value)
        return self.zoom

    def zoom_in(self, step: float = ZOOM_STEP) -> float:
        return self.set_zoom(round(self.zoom + step, 4))

    def zoom_out(self, step: float = ZOOM_STEP) -> float:
        return self.set_zoom(round(self.zoom - step, 4))

    def wheel(self, angle_delta_y: int) -> float:
        """One fixed increment per wheel event, direction from the delta sign"""
        if angle_delta_y > 0:
            return self.zoom_in()
        if angle_delta_y < 0:
            return self.zoom_out()
        return self.zoom

    def reset(self):
        self.zoom = 1.0
        self.pan = QPointF(0, 0)

    # === Pan === #
    def pan_by(self, dx: float, dy: float):
        self.pan = QPointF(self.pan.x() + dx, self.pan.y() + dy)

    # === Geometry === #
    def set_canvas_size(self, width: int, height: int):
        self.canvas_size = QSizeF(width, height)

    def set_view_size(self, width: int, height: int):
        self.view_size = QSizeF(width, height)

    def fit_to_window(self, margin: int = FIT_MARGIN) -> float:
        """Zoom so the whole canvas is visible (never above 100%); reset pan"""
        cw, ch = self.canvas_size.width(), self.canvas_size.height()
        avail_w = max(1.0, self.view_size.width() - 2 * margin)
        avail_h = max(1.0, self.view_size.height() - 2 * margin)
        self.pan = QPointF(0, 0)
        return self.set_zoom(min(avail_w / cw, avail_h / ch, 1.0))

    def display_rect(self) -> QRectF:
        """Where the canvas is rendered, in screen coordinates"""
        w = self.canvas_size.width() * self.zoom
        h = self.canvas_size.height() * self.zoom
        x = (self.view_size.width() - w) / 2 + self.pan.x()
        y = (self.view_size.height() - h) / 2 + self.pan.y()
        return QRectF(x, y, w, h)

    def map_to_canvas(self, screen_point) -> QPointF:
        """Screen position -> canvas pixel position"""
        rect = self.display_rect()
        sx = self.canvas_size.width() / rect.width()
        sy = self.canvas_size.height() / rect.height()
        return QPointF((screen_point.x() - rect.x()) * sx,
                       (screen_point.y() - rect.y()) * sy)

    def map_to_screen(self, canvas_point) -> QPointF:
        rect = self.display_rect()
        return QPointF(rect.x() + canvas_point.x() * self.zoom,
                       rect.y() + canvas_point.y() * self.zoom)
