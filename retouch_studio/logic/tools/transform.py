from PyQt6.QtCore import Qt

from ...enums import ToolType
from .base import BaseTool


class MoveTool(BaseTool):
    """
    Pans the view. The canvas point grabbed on press stays under the
    pointer, so the delta is measured against that fixed anchor.
    """

    tool_type = ToolType.MOVE
    label = "Move"
    needs_layer = False

    def mouse_press(self, pos, alt=False):
        self.last_pos = pos
        return True

    def mouse_move(self, pos):
        if self.last_pos is None:
            return
        zoom = self.editor.viewport.zoom
        self.editor.viewport.pan_by((pos.x() - self.last_pos.x()) * zoom,
                                    (pos.y() - self.last_pos.y()) * zoom)

    def mouse_release(self, pos):
        self.last_pos = None
        return False  # view only

    def get_cursor(self):
        return Qt.CursorShape.OpenHandCursor
