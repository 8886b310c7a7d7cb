from ...enums import GestureState


class BaseTool:
    """
    One pointer-driven tool.

    ``gesture`` is the state the editor enters when ``mouse_press`` returns
    True. Continuous and rectangle tools then receive moves until
    ``mouse_release``, whose return value says whether the layer stack
    changed (and a history entry is due). One-shot tools (``PLACING``) do
    all their work in ``mouse_press`` and never open a gesture.
    """

    tool_type = None
    label = ""
    gesture = GestureState.DRAWING
    needs_layer = True      # refuse to start on a missing or locked layer

    def __init__(self, editor):
        self.editor = editor
        self.last_pos = None

    def mouse_press(self, pos, alt=False) -> bool: return False
    def mouse_move(self, pos): pass
    def mouse_release(self, pos) -> bool: return False

    def cancel(self):
        """Drop any gesture fields without touching pixels"""
        self.last_pos = None

    def draw_overlay(self, painter, zoom): pass

    # Optional: Tools can have their own cursor
    def get_cursor(self): return None

    # === Helpers === #
    @property
    def layer_image(self):
        return self.editor.stack.active_layer.image
