from PyQt6.QtCore import Qt

from ...enums import GestureState, ToolType
from ..drawing_engine import draw_text
from .base import BaseTool


class TextTool(BaseTool):
    tool_type = ToolType.TEXT
    label = "Text"
    gesture = GestureState.PLACING

    def mouse_press(self, pos, alt=False):
        return draw_text(self.layer_image, pos, self.editor.text)

    def get_cursor(self):
        return Qt.CursorShape.IBeamCursor
