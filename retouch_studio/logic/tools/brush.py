from PyQt6.QtCore import Qt

from ...enums import ToolType
from ..drawing_engine import blur_area, draw_stroke, stroke_points
from .base import BaseTool


class BrushTool(BaseTool):
    def __init__(self, editor, is_eraser=False):
        super().__init__(editor)
        self.is_eraser = is_eraser
        self.tool_type = ToolType.ERASER if is_eraser else ToolType.BRUSH
        self.label = "Eraser" if is_eraser else "Brush"

    def mouse_press(self, pos, alt=False):
        self.last_pos = pos
        draw_stroke(self.layer_image, pos, pos, self.editor.brush, erase=self.is_eraser)
        return True

    def mouse_move(self, pos):
        if self.last_pos is None:
            return
        draw_stroke(self.layer_image, self.last_pos, pos, self.editor.brush, erase=self.is_eraser)
        self.last_pos = pos

    def mouse_release(self, pos):
        self.last_pos = None
        return True

    def get_cursor(self):
        return Qt.CursorShape.CrossCursor


class BlurBrushTool(BaseTool):
    """Softens detail under the pointer: two passes on click, one per move"""

    tool_type = ToolType.BLUR_BRUSH
    label = "Blur"

    def mouse_press(self, pos, alt=False):
        self.last_pos = pos
        blur_area(self.layer_image, pos.x(), pos.y(), self.editor.brush.size, passes=2)
        return True

    def mouse_move(self, pos):
        if self.last_pos is None:
            return
        image, size = self.layer_image, self.editor.brush.size
        for point in stroke_points(self.last_pos, pos, size)[1:]:
            blur_area(image, point.x(), point.y(), size, passes=1)
        self.last_pos = pos

    def mouse_release(self, pos):
        self.last_pos = None
        return True

    def get_cursor(self):
        return Qt.CursorShape.CrossCursor
