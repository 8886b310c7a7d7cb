"""
Editor: the object a host application constructs with a source image.

Owns the layer stack, history, viewport, tool settings and tool instances,
and routes pointer input through the active tool. All pixel work happens
synchronously on the calling (GUI) thread; only background removal and PNG
encoding await.

Pointer positions given to ``pointer_*`` are canvas pixel coordinates; a
widget maps screen positions with ``map_to_canvas`` first.
"""

import logging

from PyQt6.QtCore import QPointF, QRect, QRectF, Qt
from PyQt6.QtGui import QColor, QImage, QPen

from ..config import CROP_MIN_SIZE, FILTER_DEFAULT_INTENSITY, INITIAL_HISTORY_LABEL
from ..config_manager import CONFIG
from ..enums import FilterType, FlipAxis, GestureState, ToolType
from . import filters, transforms
from .compositor import make_checkerboard
from .history import HistoryManager
from .layer_stack import LayerStack
from .project import DEFAULT_NAME, EncodeError, ProjectManager
from .raster import begin_painter, ensure_format, load_image
from .segmentation import HeuristicSegmenter
from .settings import BrushSettings, ColorAdjustments, ShapeSettings, TextSettings
from .tools import create_tools
from .viewport import Viewport

logger = logging.getLogger(__name__)


class Editor:
    def __init__(self, source, segmenter=None, history_limit=None, config=None):
        """
        Args:
            source: QImage, file path or encoded image bytes
            segmenter: background-removal collaborator (defaults to the
                bundled heuristic)
            history_limit: overrides the configured undo depth
            config: configuration dict (defaults to the loaded CONFIG)
        """
        config = config or CONFIG
        settings = config["app_settings"]
        self.theme = config["theme"]
        self.fill_tolerance = int(settings.get("fill_tolerance", 32))

        image = load_image(source)
        self.stack = LayerStack.from_image(image)
        self.history = HistoryManager(history_limit or settings.get("history_limit", 50))
        self.viewport = Viewport(image.width(), image.height())
        self.backdrop = make_checkerboard(image.width(), image.height())

        # === Tool settings === #
        self.brush = BrushSettings()
        self.text = TextSettings()
        self.shape = ShapeSettings()
        self.adjustments = ColorAdjustments()

        # === Interaction state === #
        self.tools = create_tools(self)
        self.current_tool = ToolType.BRUSH
        self.gesture_state = GestureState.IDLE
        self._gesture_tool = None
        self.selection = None       # QRect, display only
        self.preview = None         # scratch surface for shape previews
        self.segmenter = segmenter or HeuristicSegmenter()
        self.busy = False           # background removal in flight

        self._listeners = []
        self.history.reset(INITIAL_HISTORY_LABEL, self.stack, self.selection)
        logger.info("Opened %dx%d image", image.width(), image.height())

    # === Queries === #
    @property
    def tool(self):
        return self.tools[self.current_tool]

    @property
    def width(self) -> int:
        return self.stack.width

    @property
    def height(self) -> int:
        return self.stack.height

    @property
    def active_layer(self):
        return self.stack.active_layer

    def _active_editable(self) -> bool:
        layer = self.stack.active_layer
        return layer is not None and layer.editable

    # === Change notification === #
    def add_listener(self, callback):
        self._listeners.append(callback)

    def remove_listener(self, callback):
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _changed(self):
        for callback in list(self._listeners):
            callback()

    def push_history(self, label):
        self.history.push(label, self.stack, self.selection)
        self._changed()

    # === Tools === #
    def set_tool(self, tool_type):
        tool_type = ToolType(tool_type)
        if self.gesture_state != GestureState.IDLE:
            self.pointer_leave()
        self.current_tool = tool_type
        logger.debug("Tool: %s", tool_type.value)
        self._changed()

    # === Pointer input === #
    def map_to_canvas(self, screen_point) -> QPointF:
        return self.viewport.map_to_canvas(screen_point)

    def pointer_down(self, pos, alt: bool = False) -> bool:
        """
        Start a gesture (or run a one-shot tool) at a canvas position.

        Returns:
            bool: True when a gesture opened or a one-shot tool changed pixels
        """
        if self.gesture_state != GestureState.IDLE or self.busy:
            logger.debug("Pointer down refused: gesture already open")
            return False

        tool = self.tool
        if tool.needs_layer and not self._active_editable():
            logger.debug("Pointer down ignored: active layer missing or locked")
            return False

        result = tool.mouse_press(QPointF(pos), alt=alt)

        if tool.gesture == GestureState.PLACING:
            if result:
                self.push_history(tool.label)
            else:
                self._changed()
            return result

        if result:
            self.gesture_state = tool.gesture
            self._gesture_tool = tool
        self._changed()
        return result

    def pointer_move(self, pos):
        if self.gesture_state == GestureState.IDLE:
            return
        self._gesture_tool.mouse_move(QPointF(pos))
        self._changed()

    def pointer_up(self, pos=None) -> bool:
        """Finish the open gesture; True when it produced a history entry"""
        if self.gesture_state == GestureState.IDLE:
            return False
        tool = self._gesture_tool
        self.gesture_state = GestureState.IDLE
        self._gesture_tool = None

        changed = tool.mouse_release(QPointF(pos) if pos is not None else None)
        if changed:
            self.push_history(tool.label)
        else:
            self._changed()
        return changed

    def pointer_leave(self) -> bool:
        return self.pointer_up(None)

    # === History === #
    def undo(self) -> bool:
        return self._step(self.history.undo)

    def redo(self) -> bool:
        return self._step(self.history.redo)

    def _step(self, move) -> bool:
        if self.gesture_state != GestureState.IDLE or self.busy:
            return False
        old_size = (self.width, self.height)
        entry = move(self.stack)
        if entry is None:
            return False
        self.selection = QRect(entry.selection) if entry.selection is not None else None
        if (self.width, self.height) != old_size:
            self._canvas_resized()
        self._changed()
        return True

    # === Layers === #
    def _structural(self, done, label) -> bool:
        if done:
            self.push_history(label)
        return bool(done)

    def add_layer(self, name=None):
        self.pointer_leave()
        layer = self.stack.add(name)
        self.push_history("Add layer")
        return layer

    def delete_layer(self, layer_id=None) -> bool:
        self.pointer_leave()
        return self._structural(self.stack.delete(layer_id), "Delete layer")

    def duplicate_layer(self, layer_id=None):
        self.pointer_leave()
        layer = self.stack.duplicate(layer_id)
        self.push_history("Duplicate layer")
        return layer

    def move_layer_up(self, layer_id=None) -> bool:
        self.pointer_leave()
        return self._structural(self.stack.move_up(layer_id), "Move layer up")

    def move_layer_down(self, layer_id=None) -> bool:
        self.pointer_leave()
        return self._structural(self.stack.move_down(layer_id), "Move layer down")

    def merge_down(self, layer_id=None) -> bool:
        self.pointer_leave()
        return self._structural(self.stack.merge_down(layer_id), "Merge down")

    def set_active_layer(self, layer_id) -> bool:
        ok = self.stack.set_active(layer_id)
        self._changed()
        return ok

    # Attributes are display state and are not recorded in history
    def set_layer_visibility(self, layer_id, visible):
        self.stack.set_visibility(layer_id, visible)
        self._changed()

    def set_layer_opacity(self, layer_id, opacity):
        self.stack.set_opacity(layer_id, opacity)
        self._changed()

    def set_layer_blend_mode(self, layer_id, mode):
        self.stack.set_blend_mode(layer_id, mode)
        self._changed()

    def set_layer_locked(self, layer_id, locked):
        self.stack.set_locked(layer_id, locked)
        self._changed()

    def rename_layer(self, layer_id, name):
        self.stack.rename(layer_id, name)
        self._changed()

    # === Filters & adjustments === #
    def apply_filter(self, kind, intensity=None, rng=None) -> bool:
        kind = FilterType(kind)
        self.pointer_leave()
        if not self._active_editable():
            return False
        if intensity is None:
            intensity = FILTER_DEFAULT_INTENSITY[kind]
        filters.apply_filter(self.stack.active_layer.image, kind, intensity, rng=rng)
        self.push_history(f"{kind.value.capitalize()} filter")
        return True

    def apply_adjustments(self, adjustments=None) -> bool:
        """Apply (and then reset) the adjustment sliders. Neutral values are a no-op."""
        adjustments = adjustments or self.adjustments
        self.pointer_leave()
        if not self._active_editable():
            return False
        changed = filters.apply_adjustments(self.stack.active_layer.image, adjustments)
        adjustments.reset()
        if changed:
            self.push_history("Color adjustments")
        else:
            self._changed()
        return changed

    # === Canvas geometry === #
    def _canvas_resized(self):
        self.viewport.set_canvas_size(self.width, self.height)
        self.viewport.fit_to_window()
        self.backdrop = make_checkerboard(self.width, self.height)
        logger.debug("Canvas is now %dx%d", self.width, self.height)

    def apply_crop(self, rect) -> bool:
        """Crop every layer to ``rect`` (clamped) without recording history"""
        rect = transforms.clamp_rect(rect, self.width, self.height)
        if rect.isEmpty():
            return False
        self.stack.transform_all(lambda image: transforms.crop(image, rect))
        self.selection = None
        self._canvas_resized()
        return True

    def crop(self, rect) -> bool:
        self.pointer_leave()
        rect = transforms.clamp_rect(rect, self.width, self.height)
        if rect.width() <= CROP_MIN_SIZE or rect.height() <= CROP_MIN_SIZE:
            return False
        return self._structural(self.apply_crop(rect), "Crop")

    def rotate(self, degrees: int) -> bool:
        self.pointer_leave()
        self.stack.transform_all(lambda image: transforms.rotate(image, degrees))
        self.selection = None
        self._canvas_resized()
        self.push_history("Rotate right" if degrees > 0 else "Rotate left")
        return True

    def flip(self, axis) -> bool:
        axis = FlipAxis(axis)
        self.pointer_leave()
        self.stack.transform_all(lambda image: transforms.flip(image, axis))
        self.selection = None
        self.push_history(f"Flip {axis.value}")
        return True

    # === Viewport === #
    def set_view_size(self, width, height):
        self.viewport.set_view_size(width, height)

    def fit_to_window(self) -> float:
        zoom = self.viewport.fit_to_window()
        self._changed()
        return zoom

    def wheel(self, angle_delta_y) -> float:
        zoom = self.viewport.wheel(angle_delta_y)
        self._changed()
        return zoom

    # === Background removal === #
    async def remove_background(self, on_progress=None) -> bool:
        """
        Replace the active layer with its segmented foreground.

        Refused while a gesture is open. Any failure of the segmenter is
        logged and leaves the layer untouched.
        """
        if self.gesture_state != GestureState.IDLE or self.busy:
            logger.debug("Background removal refused: editor busy")
            return False
        layer = self.stack.active_layer
        if layer is None or not layer.editable:
            return False

        self.busy = True
        try:
            result = await self.segmenter.segment(QImage(layer.image), on_progress)
            foreground = ensure_format(result.foreground)
            if foreground.size() != layer.image.size():
                raise ValueError(f"Segmenter returned {foreground.width()}x{foreground.height()}, "
                                 f"expected {layer.width}x{layer.height}")
        except Exception:
            logger.exception("Background removal failed")
            return False
        finally:
            self.busy = False

        if layer.id not in self.stack:
            logger.warning("Background removal finished after its layer was removed")
            return False

        layer.image = foreground
        self.push_history("Remove background")
        return True

    # === Output === #
    def flatten(self) -> QImage:
        return self.stack.composite()

    async def save(self, name: str = DEFAULT_NAME):
        """Flattened PNG as a SavedImage, or None (logged) when encoding fails"""
        self.pointer_leave()
        try:
            return await ProjectManager.save(self.flatten(), name)
        except EncodeError:
            logger.exception("Save failed: %s", name)
            return None

    def export(self, path) -> bool:
        self.pointer_leave()
        return ProjectManager.export(self.flatten(), path)

    def render_view(self) -> QImage:
        """Composite plus transient overlays; layer pixels are never touched"""
        view = self.flatten()
        painter = begin_painter(view)
        zoom = self.viewport.zoom

        if self.preview is not None:
            painter.drawImage(0, 0, self.preview)

        if self.selection is not None and self.gesture_state != GestureState.RECT_DRAGGING:
            painter.setPen(QPen(QColor(self.theme["marquee_color"]), 0, Qt.PenStyle.DashLine))
            painter.setBrush(Qt.BrushStyle.NoBrush)
            painter.drawRect(QRectF(self.selection))

        self.tool.draw_overlay(painter, zoom)
        painter.end()
        return view
