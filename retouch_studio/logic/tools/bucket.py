from ...enums import GestureState, ToolType
from ..drawing_engine import flood_fill
from .base import BaseTool


class FillTool(BaseTool):
    tool_type = ToolType.FILL
    label = "Fill"
    gesture = GestureState.PLACING

    def mouse_press(self, pos, alt=False):
        return flood_fill(self.layer_image, pos.x(), pos.y(),
                          self.editor.brush.color, self.editor.fill_tolerance)
