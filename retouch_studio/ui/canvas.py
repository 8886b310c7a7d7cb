import logging

from PyQt6.QtCore import QPointF, Qt, pyqtSignal
from PyQt6.QtGui import QColor, QPainter, QPen
from PyQt6.QtWidgets import (QAbstractSpinBox, QApplication, QComboBox, QLineEdit,
                             QPlainTextEdit, QTextEdit, QWidget)

from ..enums import ToolType
from ..logic.shortcuts import REDO, SAVE, UNDO, resolve_shortcut

logger = logging.getLogger(__name__)

TEXT_ENTRY_WIDGETS = (QLineEdit, QTextEdit, QPlainTextEdit, QAbstractSpinBox)


def is_text_entry(widget) -> bool:
    if widget is None:
        return False
    if isinstance(widget, QComboBox):
        return widget.isEditable()
    return isinstance(widget, TEXT_ENTRY_WIDGETS)


def key_letter(key: int) -> str:
    """Qt key code -> upper-case letter, or '' for anything else"""
    if Qt.Key.Key_A.value <= key <= Qt.Key.Key_Z.value:
        return chr(key)
    return ""


class Canvas(QWidget):
    """Displays the editor's view and feeds it pointer, wheel and key input"""

    save_requested = pyqtSignal()
    tool_changed = pyqtSignal(object)

    def __init__(self, editor, parent=None):
        super().__init__(parent)
        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setMinimumSize(200, 200)

        self.editor = editor
        self.editor.add_listener(self.update)

        # === View-only input state === #
        self.panning = False
        self.last_mouse_pos = QPointF()
        self.cursor_pos = QPointF()
        self.show_cursor_circle = False
        self._fitted = False

    # === PAINTING === #
    def paintEvent(self, event):
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor(self.editor.theme["canvas_bg"]))

        target = self.editor.viewport.display_rect()
        painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform, self.editor.viewport.zoom < 1.0)
        painter.drawImage(target, self.editor.backdrop)
        painter.drawImage(target, self.editor.render_view())

        # === Cursor Ghost === #
        if self.show_cursor_circle and self.editor.current_tool in (
                ToolType.BRUSH, ToolType.ERASER, ToolType.BLUR_BRUSH, ToolType.CLONE):
            center = self.editor.viewport.map_to_screen(self.cursor_pos)
            radius = self.editor.brush.radius * self.editor.viewport.zoom
            painter.setRenderHint(QPainter.RenderHint.Antialiasing)
            painter.setBrush(Qt.BrushStyle.NoBrush)
            painter.setPen(QPen(QColor(0, 0, 0, 150), 1))
            painter.drawEllipse(center, radius, radius)
            painter.setPen(QPen(QColor(255, 255, 255, 150), 1))
            painter.drawEllipse(center, max(0.0, radius - 1), max(0.0, radius - 1))
        painter.end()

    def resizeEvent(self, event):
        self.editor.set_view_size(self.width(), self.height())
        if not self._fitted:
            self.editor.fit_to_window()
            self._fitted = True
        super().resizeEvent(event)

    # === DELEGATED INPUT EVENTS === #
    def mousePressEvent(self, event):
        self.setFocus()
        if event.button() != Qt.MouseButton.LeftButton:
            return
        if event.modifiers() & Qt.KeyboardModifier.ShiftModifier:
            self.panning = True
            self.last_mouse_pos = event.position()
            return

        alt = bool(event.modifiers() & Qt.KeyboardModifier.AltModifier)
        self.editor.pointer_down(self.editor.map_to_canvas(event.position()), alt=alt)

    def mouseMoveEvent(self, event):
        self.cursor_pos = self.editor.map_to_canvas(event.position())
        self.show_cursor_circle = True

        if self.panning:
            delta = event.position() - self.last_mouse_pos
            self.editor.viewport.pan_by(delta.x(), delta.y())
            self.last_mouse_pos = event.position()
            self.update()
            return

        self.editor.pointer_move(self.cursor_pos)
        self.update()  # cursor ghost

    def mouseReleaseEvent(self, event):
        if self.panning:
            self.panning = False
            return
        if event.button() == Qt.MouseButton.LeftButton:
            self.editor.pointer_up(self.editor.map_to_canvas(event.position()))

    def leaveEvent(self, event):
        self.show_cursor_circle = False
        self.panning = False
        self.editor.pointer_leave()
        self.update()
        super().leaveEvent(event)

    def enterEvent(self, event):
        cursor = self.editor.tool.get_cursor()
        self.setCursor(cursor if cursor is not None else Qt.CursorShape.ArrowCursor)
        super().enterEvent(event)

    def wheelEvent(self, event):
        self.editor.wheel(event.angleDelta().y())
        event.accept()

    def keyPressEvent(self, event):
        modifiers = event.modifiers()
        action = resolve_shortcut(
            key_letter(event.key()),
            ctrl=bool(modifiers & Qt.KeyboardModifier.ControlModifier),
            shift=bool(modifiers & Qt.KeyboardModifier.ShiftModifier),
            text_focus=is_text_entry(QApplication.focusWidget()),
        )
        if action is None:
            super().keyPressEvent(event)
            return

        logger.debug("Shortcut -> %s", action)
        if action == UNDO:
            self.editor.undo()
        elif action == REDO:
            self.editor.redo()
        elif action == SAVE:
            self.save_requested.emit()
        else:
            self.set_tool(action)

    def set_tool(self, tool_type):
        self.editor.set_tool(tool_type)
        cursor = self.editor.tool.get_cursor()
        self.setCursor(cursor if cursor is not None else Qt.CursorShape.ArrowCursor)
        self.tool_changed.emit(self.editor.current_tool)
