from ...enums import ToolType
from .base import BaseTool
from .brush import BlurBrushTool, BrushTool
from .bucket import FillTool
from .clone import CloneTool
from .eyedropper import EyedropperTool
from .selection import CropTool, RectDragTool, SelectionTool
from .shape import ShapeTool
from .text import TextTool
from .transform import MoveTool


def create_tools(editor):
    """One instance of every tool, keyed by ToolType"""
    return {
        ToolType.MOVE: MoveTool(editor),
        ToolType.SELECTION: SelectionTool(editor),
        ToolType.CROP: CropTool(editor),
        ToolType.BRUSH: BrushTool(editor),
        ToolType.ERASER: BrushTool(editor, is_eraser=True),
        ToolType.FILL: FillTool(editor),
        ToolType.EYEDROPPER: EyedropperTool(editor),
        ToolType.TEXT: TextTool(editor),
        ToolType.SHAPE: ShapeTool(editor),
        ToolType.BLUR_BRUSH: BlurBrushTool(editor),
        ToolType.CLONE: CloneTool(editor),
    }


__all__ = [
    "BaseTool", "BlurBrushTool", "BrushTool", "CloneTool", "CropTool", "EyedropperTool",
    "FillTool", "MoveTool", "RectDragTool", "SelectionTool", "ShapeTool", "TextTool",
    "create_tools",
]
