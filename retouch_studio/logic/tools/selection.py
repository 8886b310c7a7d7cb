from PyQt6.QtCore import QRect, QRectF, Qt
from PyQt6.QtGui import QColor, QPainterPath, QPen

from ...config import CROP_MIN_SIZE, DRAG_MIN_SIZE
from ...enums import GestureState, ToolType
from ..transforms import clamp_rect
from .base import BaseTool


class RectDragTool(BaseTool):
    """Shared drag-a-box gesture: start on press, live box on move"""

    gesture = GestureState.RECT_DRAGGING

    def __init__(self, editor):
        super().__init__(editor)
        self.start = None

    def mouse_press(self, pos, alt=False):
        self.start = pos
        self.last_pos = pos
        return True

    def mouse_move(self, pos):
        if self.start is not None:
            self.last_pos = pos

    def cancel(self):
        super().cancel()
        self.start = None

    def drag_rect(self) -> QRectF:
        if self.start is None or self.last_pos is None:
            return QRectF()
        return QRectF(self.start, self.last_pos).normalized()

    def pixel_rect(self) -> QRect:
        """Drag box in whole pixels, clipped to the canvas"""
        return clamp_rect(self.drag_rect().toAlignedRect(), self.editor.stack.width, self.editor.stack.height)

    def end_drag(self, pos):
        """Close the drag and return (float box, clipped pixel box)"""
        if pos is not None:
            self.last_pos = pos
        drag, rect = self.drag_rect(), self.pixel_rect()
        self.cancel()
        return drag, rect

    def get_cursor(self):
        return Qt.CursorShape.CrossCursor


class SelectionTool(RectDragTool):
    """Display-only marquee; other tools ignore it"""

    tool_type = ToolType.SELECTION
    label = "Selection"

    def mouse_release(self, pos):
        if self.start is None:
            return False
        drag, rect = self.end_drag(pos)

        if max(drag.width(), drag.height()) < DRAG_MIN_SIZE or rect.isEmpty():
            self.editor.selection = None
            return False
        self.editor.selection = rect
        return True

    def draw_overlay(self, painter, zoom):
        if self.start is None:
            return
        pen = QPen(QColor(self.editor.theme["marquee_color"]), 0, Qt.PenStyle.DashLine)
        painter.save()
        painter.setPen(pen)
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.drawRect(self.drag_rect())
        painter.restore()


class CropTool(RectDragTool):
    tool_type = ToolType.CROP
    label = "Crop"

    def mouse_release(self, pos):
        if self.start is None:
            return False
        _, rect = self.end_drag(pos)
        if rect.width() <= CROP_MIN_SIZE or rect.height() <= CROP_MIN_SIZE:
            return False
        return self.editor.apply_crop(rect)

    def draw_overlay(self, painter, zoom):
        if self.start is None:
            return
        rect = self.drag_rect()
        canvas = QRectF(0, 0, self.editor.stack.width, self.editor.stack.height)

        # Shade everything outside the crop box
        shade = QPainterPath()
        shade.addRect(canvas)
        inner = QPainterPath()
        inner.addRect(rect)
        painter.save()
        painter.fillPath(shade.subtracted(inner), QColor(self.editor.theme["crop_shade"]))
        painter.setPen(QPen(QColor(self.editor.theme["marquee_color"]), 0, Qt.PenStyle.DashLine))
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.drawRect(rect)
        painter.restore()
