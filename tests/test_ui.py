"""
Widget tests (pytest-qt).

Covers:
- Canvas key shortcuts and text-entry suppression
- Wheel zoom
- Layer panel mirrors the stack
- Diagnostics stats
- Main window wiring
"""
from PyQt6.QtCore import QPoint, QPointF, Qt
from PyQt6.QtGui import QWheelEvent
from PyQt6.QtWidgets import QComboBox, QLineEdit

from conftest import P
from retouch_studio.enums import ToolType
from retouch_studio.main import RetouchStudio, parse_args
from retouch_studio.ui.canvas import Canvas, is_text_entry, key_letter
from retouch_studio.ui.diagnostics import DiagnosticsPanel


def make_canvas(qtbot, editor):
    canvas = Canvas(editor)
    qtbot.addWidget(canvas)
    canvas.resize(400, 300)
    return canvas


def wheel_event(dy):
    return QWheelEvent(QPointF(10, 10), QPointF(10, 10), QPoint(0, 0), QPoint(0, dy),
                       Qt.MouseButton.NoButton, Qt.KeyboardModifier.NoModifier,
                       Qt.ScrollPhase.NoScrollPhase, False)


class TestCanvas:

    def test_tool_letter(self, qtbot, editor):
        canvas = make_canvas(qtbot, editor)
        with qtbot.waitSignal(canvas.tool_changed) as blocker:
            qtbot.keyClick(canvas, Qt.Key.Key_E)
        assert editor.current_tool is ToolType.ERASER
        assert blocker.args == [ToolType.ERASER]

    def test_ctrl_z_undoes(self, qtbot, editor):
        canvas = make_canvas(qtbot, editor)
        editor.pointer_down(P(10, 10))
        editor.pointer_up(P(10, 10))
        qtbot.keyClick(canvas, Qt.Key.Key_Z, Qt.KeyboardModifier.ControlModifier)
        assert editor.history.index == 0
        qtbot.keyClick(canvas, Qt.Key.Key_Y, Qt.KeyboardModifier.ControlModifier)
        assert editor.history.index == 1

    def test_ctrl_s_requests_save(self, qtbot, editor):
        canvas = make_canvas(qtbot, editor)
        with qtbot.waitSignal(canvas.save_requested):
            qtbot.keyClick(canvas, Qt.Key.Key_S, Qt.KeyboardModifier.ControlModifier)
        assert editor.current_tool is ToolType.BRUSH

    def test_wheel_zooms(self, qtbot, editor):
        canvas = make_canvas(qtbot, editor)
        zoom = editor.viewport.zoom
        canvas.wheelEvent(wheel_event(120))
        assert editor.viewport.zoom > zoom

    def test_resize_fits(self, qtbot, editor):
        canvas = make_canvas(qtbot, editor)
        canvas.show()
        qtbot.waitExposed(canvas)
        assert editor.viewport.zoom < 1.0


def test_text_entry_detection(qtbot):
    line = QLineEdit()
    combo = QComboBox()
    qtbot.addWidget(line)
    qtbot.addWidget(combo)
    assert is_text_entry(line)
    assert not is_text_entry(combo)
    combo.setEditable(True)
    assert is_text_entry(combo)
    assert not is_text_entry(None)


def test_key_letter():
    assert key_letter(Qt.Key.Key_B.value) == "B"
    assert key_letter(Qt.Key.Key_Escape.value) == ""


class TestPanels:

    def test_diagnostics(self, qtbot, editor):
        panel = DiagnosticsPanel(editor, interval_ms=60000)
        qtbot.addWidget(panel)
        editor.add_layer()
        stats = panel.refresh_diagnostics()
        assert stats["undo_count"] == 1
        assert stats["process_mb"] > 0
        assert "LAYERS: 2" in panel.lbl_layers.text()

    def test_main_window(self, qtbot, editor):
        window = RetouchStudio(editor)
        qtbot.addWidget(window)
        assert not window.act_undo.isEnabled()

        editor.add_layer()
        assert window.act_undo.isEnabled()
        assert window.layer_panel.layer_list.count() == 2
        assert window.layer_panel.layer_list.item(0).text() == "Layer 1"

        window.act_undo.trigger()
        assert window.layer_panel.layer_list.count() == 1
        assert window.act_redo.isEnabled()

    def test_tool_buttons_follow_shortcuts(self, qtbot, editor):
        window = RetouchStudio(editor)
        qtbot.addWidget(window)
        qtbot.keyClick(window.canvas, Qt.Key.Key_G)
        assert window.station.tool_buttons[ToolType.FILL].isChecked()


def test_parse_args():
    assert parse_args(["photo.png"]).image == "photo.png"
    assert parse_args([]).image is None
