import logging

from PyQt6.QtCore import QPointF, Qt
from PyQt6.QtGui import QColor, QPen

from ...enums import ToolType
from ..drawing_engine import clone_block, stroke_points
from .base import BaseTool

logger = logging.getLogger(__name__)


class CloneTool(BaseTool):
    """
    Alt+click picks the source. The first paint point of a stroke fixes
    ``offset = paint - source`` for the whole stroke, so every sample P is
    copied from P - offset.
    """

    tool_type = ToolType.CLONE
    label = "Clone"

    def __init__(self, editor):
        super().__init__(editor)
        self.source = None
        self.offset = None

    def mouse_press(self, pos, alt=False):
        if alt:
            self.source = QPointF(pos)
            logger.debug("Clone source set to (%.1f, %.1f)", pos.x(), pos.y())
            return False
        if self.source is None:
            return False

        self.offset = pos - self.source
        self.last_pos = pos
        clone_block(self.layer_image, pos, self.offset, self.editor.brush.size)
        return True

    def mouse_move(self, pos):
        if self.last_pos is None or self.offset is None:
            return
        image, size = self.layer_image, self.editor.brush.size
        for point in stroke_points(self.last_pos, pos, size)[1:]:
            clone_block(image, point, self.offset, size)
        self.last_pos = pos

    def mouse_release(self, pos):
        self.cancel()
        return True

    def cancel(self):
        super().cancel()
        self.offset = None

    def draw_overlay(self, painter, zoom):
        if self.source is None:
            return
        marker = self.source
        if self.offset is not None and self.last_pos is not None:
            marker = self.last_pos - self.offset  # follows the stroke

        r = 6 / zoom
        painter.save()
        painter.setPen(QPen(QColor(self.editor.theme["marquee_color"]), 0))
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.drawEllipse(marker, r, r)
        painter.drawLine(QPointF(marker.x() - r, marker.y()), QPointF(marker.x() + r, marker.y()))
        painter.drawLine(QPointF(marker.x(), marker.y() - r), QPointF(marker.x(), marker.y() + r))
        painter.restore()

    def get_cursor(self):
        return Qt.CursorShape.CrossCursor
