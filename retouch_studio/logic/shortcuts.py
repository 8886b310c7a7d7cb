"""Keyboard shortcut resolution, independent of any widget."""

from ..config import TOOL_SHORTCUTS

UNDO = "undo"
REDO = "redo"
SAVE = "save"


def resolve_shortcut(key: str, ctrl: bool = False, shift: bool = False, text_focus: bool = False):
    """
    Map a key press to an editor action.

    Returns:
        "undo" / "redo" / "save", a ToolType, or None when the key is not
        bound or focus is inside a text-entry control.
    """
    if text_focus or not key:
        return None
    key = key.upper()

    if ctrl:
        if key == "Z":
            return REDO if shift else UNDO
        if key == "Y":
            return REDO
        if key == "S":
            return SAVE
        return None

    return TOOL_SHORTCUTS.get(key)
