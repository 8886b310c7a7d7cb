from PyQt6.QtCore import Qt

from ...enums import GestureState, ToolType
from ..drawing_engine import sample_color
from .base import BaseTool


class EyedropperTool(BaseTool):
    """Picks the composited colour into the brush, then hands over to the brush"""

    tool_type = ToolType.EYEDROPPER
    label = "Eyedropper"
    gesture = GestureState.PLACING

    def mouse_press(self, pos, alt=False):
        color = sample_color(self.editor.stack.composite(), pos.x(), pos.y())
        if color is None:
            return False
        self.editor.brush.color = color
        self.editor.set_tool(ToolType.BRUSH)
        return False  # settings only, nothing to record

    def get_cursor(self):
        return Qt.CursorShape.CrossCursor
