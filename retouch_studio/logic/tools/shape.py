from PyQt6.QtCore import Qt

from ...config import DRAG_MIN_SIZE
from ...enums import ToolType
from ..drawing_engine import draw_shape, paint_shape
from ..raster import begin_painter, new_image
from .selection import RectDragTool


class ShapeTool(RectDragTool):
    """Live preview on a scratch surface, stamped into the layer on release"""

    tool_type = ToolType.SHAPE
    label = "Shape"

    def mouse_press(self, pos, alt=False):
        super().mouse_press(pos, alt)
        self.editor.preview = new_image(self.editor.stack.width, self.editor.stack.height)
        return True

    def mouse_move(self, pos):
        if self.start is None:
            return
        super().mouse_move(pos)
        preview = self.editor.preview
        if preview is None:
            return
        preview.fill(Qt.GlobalColor.transparent)
        painter = begin_painter(preview)
        paint_shape(painter, self.start, pos, self.editor.shape)
        painter.end()

    def mouse_release(self, pos):
        if self.start is None:
            return False
        start = self.start
        end = pos if pos is not None else self.last_pos
        self.cancel()

        dx, dy = abs(end.x() - start.x()), abs(end.y() - start.y())
        if max(dx, dy) < DRAG_MIN_SIZE:
            return False
        return draw_shape(self.layer_image, start, end, self.editor.shape)

    def cancel(self):
        super().cancel()
        self.editor.preview = None
