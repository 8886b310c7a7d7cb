import asyncio
import logging

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QColor
from PyQt6.QtWidgets import (QApplication, QButtonGroup, QCheckBox, QColorDialog, QComboBox,
                             QDockWidget, QFrame, QGridLayout, QHBoxLayout, QLabel,
                             QPlainTextEdit, QPushButton, QScrollArea, QSlider, QSpinBox,
                             QVBoxLayout)

from ..config import ADJUSTMENT_RANGES, FILTER_DEFAULT_INTENSITY, PRESET_COLORS, TOOL_SHORTCUTS
from ..enums import FilterType, FlipAxis, ShapeType, ToolType

logger = logging.getLogger(__name__)

TOOL_LABELS = {
    ToolType.MOVE: "Move", ToolType.SELECTION: "Select", ToolType.CROP: "Crop",
    ToolType.BRUSH: "Brush", ToolType.ERASER: "Eraser", ToolType.FILL: "Fill",
    ToolType.EYEDROPPER: "Pick", ToolType.TEXT: "Text", ToolType.SHAPE: "Shape",
    ToolType.BLUR_BRUSH: "Blur", ToolType.CLONE: "Clone",
}


def section(text):
    label = QLabel(text)
    label.setObjectName("SectionLabel")
    return label


def slider(low, high, value):
    s = QSlider(Qt.Orientation.Horizontal)
    s.setRange(int(low), int(high))
    s.setValue(int(value))
    return s


class ToolStation(QDockWidget):
    def __init__(self, canvas_ref, parent=None):
        super().__init__("Tools", parent)
        self.canvas = canvas_ref
        self.editor = canvas_ref.editor

        # 1. Dock Config
        self.setAllowedAreas(Qt.DockWidgetArea.LeftDockWidgetArea | Qt.DockWidgetArea.RightDockWidgetArea)
        self.setFeatures(QDockWidget.DockWidgetFeature.DockWidgetMovable | QDockWidget.DockWidgetFeature.DockWidgetFloatable)

        # 2. Container
        self.container = QFrame()
        self.container.setObjectName("PanelContent")
        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setWidget(self.container)
        self.setWidget(scroll)

        # 3. Layout
        self.layout = QVBoxLayout(self.container)
        self.layout.setContentsMargins(10, 10, 10, 10)
        self.layout.setSpacing(8)
        self.layout.setAlignment(Qt.AlignmentFlag.AlignTop)

        # 4. Content
        self._build_tools()
        self._build_brush()
        self._build_text()
        self._build_shape()
        self._build_filters()
        self._build_adjustments()
        self._build_canvas_ops()
        self.layout.addStretch()

        self.canvas.tool_changed.connect(self.sync_tool)
        self.editor.add_listener(self.sync_tool)

    # === TOOLS === #
    def _build_tools(self):
        self.layout.addWidget(section("TOOLS"))
        grid = QGridLayout()
        self.tool_group = QButtonGroup(self)
        self.tool_group.setExclusive(True)
        self.tool_buttons = {}
        shortcuts = {tool: key for key, tool in TOOL_SHORTCUTS.items()}

        for i, tool in enumerate(TOOL_LABELS):
            btn = QPushButton(TOOL_LABELS[tool])
            btn.setCheckable(True)
            btn.setToolTip(f"{TOOL_LABELS[tool]} ({shortcuts.get(tool, '')})")
            btn.clicked.connect(lambda _, t=tool: self.set_tool(t))
            self.tool_group.addButton(btn)
            self.tool_buttons[tool] = btn
            grid.addWidget(btn, i // 3, i % 3)
        self.layout.addLayout(grid)
        self.sync_tool()

    def set_tool(self, tool_type):
        self.canvas.set_tool(tool_type)

    def sync_tool(self, *_):
        btn = self.tool_buttons.get(self.editor.current_tool)
        if btn is not None and not btn.isChecked():
            btn.setChecked(True)
        if hasattr(self, "btn_color"):
            self._paint_swatch()

    # === BRUSH === #
    def _build_brush(self):
        brush = self.editor.brush
        self.layout.addWidget(section("BRUSH"))

        self.slider_size = slider(1, 200, brush.size)
        self.slider_size.valueChanged.connect(lambda v: setattr(brush, "size", v))
        self.slider_opacity = slider(1, 100, brush.opacity)
        self.slider_opacity.valueChanged.connect(lambda v: setattr(brush, "opacity", v))
        self.slider_hardness = slider(0, 100, brush.hardness)
        self.slider_hardness.valueChanged.connect(lambda v: setattr(brush, "hardness", v))

        for name, widget in (("Size", self.slider_size), ("Opacity", self.slider_opacity),
                             ("Hardness", self.slider_hardness)):
            row = QHBoxLayout()
            row.addWidget(QLabel(name))
            row.addWidget(widget)
            self.layout.addLayout(row)

        self.btn_color = QPushButton("Color")
        self.btn_color.clicked.connect(self.pick_color)
        self.layout.addWidget(self.btn_color)

        swatches = QGridLayout()
        for i, color in enumerate(PRESET_COLORS):
            sw = QPushButton()
            sw.setFixedSize(22, 22)
            sw.setStyleSheet(f"background-color: {color}; border-radius: 4px;")
            sw.clicked.connect(lambda _, c=color: self.set_color(c))
            swatches.addWidget(sw, i // 5, i % 5)
        self.layout.addLayout(swatches)
        self._paint_swatch()

    def pick_color(self):
        color = QColorDialog.getColor(QColor(self.editor.brush.color), self, "Brush Color")
        if color.isValid():
            self.set_color(color.name())

    def set_color(self, color):
        self.editor.brush.color = color
        self._paint_swatch()

    def _paint_swatch(self):
        self.btn_color.setStyleSheet(f"border-left: 14px solid {self.editor.brush.color};")

    # === TEXT === #
    def _build_text(self):
        text = self.editor.text
        self.layout.addWidget(section("TEXT"))

        self.text_content = QPlainTextEdit(text.content)
        self.text_content.setFixedHeight(50)
        self.text_content.textChanged.connect(
            lambda: setattr(text, "content", self.text_content.toPlainText()))
        self.layout.addWidget(self.text_content)

        row = QHBoxLayout()
        self.spin_font = QSpinBox()
        self.spin_font.setRange(8, 200)
        self.spin_font.setValue(text.font_size)
        self.spin_font.valueChanged.connect(lambda v: setattr(text, "font_size", v))
        self.chk_bold = QCheckBox("B")
        self.chk_bold.toggled.connect(lambda v: setattr(text, "bold", v))
        self.chk_italic = QCheckBox("I")
        self.chk_italic.toggled.connect(lambda v: setattr(text, "italic", v))
        self.combo_align = QComboBox()
        self.combo_align.addItems(["left", "center", "right"])
        self.combo_align.currentTextChanged.connect(lambda v: setattr(text, "align", v))
        for w in (self.spin_font, self.chk_bold, self.chk_italic, self.combo_align):
            row.addWidget(w)
        self.layout.addLayout(row)

    # === SHAPE === #
    def _build_shape(self):
        shape = self.editor.shape
        self.layout.addWidget(section("SHAPE"))
        row = QHBoxLayout()

        self.combo_shape = QComboBox()
        for kind in ShapeType:
            self.combo_shape.addItem(kind.value.capitalize(), kind)
        self.combo_shape.currentIndexChanged.connect(
            lambda _: setattr(shape, "kind", self.combo_shape.currentData()))
        self.spin_stroke = QSpinBox()
        self.spin_stroke.setRange(1, 20)
        self.spin_stroke.setValue(shape.stroke_width)
        self.spin_stroke.valueChanged.connect(lambda v: setattr(shape, "stroke_width", v))
        self.chk_filled = QCheckBox("Fill")
        self.chk_filled.toggled.connect(lambda v: setattr(shape, "filled", v))

        for w in (self.combo_shape, self.spin_stroke, self.chk_filled):
            row.addWidget(w)
        self.layout.addLayout(row)

        btn_stroke = QPushButton("Use brush color")
        btn_stroke.clicked.connect(self._shape_from_brush)
        self.layout.addWidget(btn_stroke)

    def _shape_from_brush(self):
        self.editor.shape.stroke_color = self.editor.brush.color
        self.editor.shape.fill_color = self.editor.brush.color

    # === FILTERS === #
    def _build_filters(self):
        self.layout.addWidget(section("FILTERS"))
        self.combo_filter = QComboBox()
        for kind in FilterType:
            self.combo_filter.addItem(kind.value.capitalize(), kind)
        self.slider_intensity = slider(1, 100, FILTER_DEFAULT_INTENSITY[FilterType.BLUR])
        self.combo_filter.currentIndexChanged.connect(
            lambda _: self.slider_intensity.setValue(FILTER_DEFAULT_INTENSITY[self.combo_filter.currentData()]))

        btn = QPushButton("Apply filter")
        btn.clicked.connect(lambda: self.editor.apply_filter(
            self.combo_filter.currentData(), self.slider_intensity.value()))

        self.layout.addWidget(self.combo_filter)
        self.layout.addWidget(self.slider_intensity)
        self.layout.addWidget(btn)

    # === ADJUSTMENTS === #
    def _build_adjustments(self):
        self.layout.addWidget(section("ADJUSTMENTS"))
        self.adjust_sliders = {}
        for name, (low, high, neutral) in ADJUSTMENT_RANGES.items():
            s = slider(low, high, neutral)
            s.valueChanged.connect(lambda v, n=name: setattr(self.editor.adjustments, n, float(v)))
            row = QHBoxLayout()
            row.addWidget(QLabel(name.capitalize()))
            row.addWidget(s)
            self.layout.addLayout(row)
            self.adjust_sliders[name] = s

        btn = QPushButton("Apply adjustments")
        btn.clicked.connect(self.apply_adjustments)
        self.layout.addWidget(btn)

    def apply_adjustments(self):
        self.editor.apply_adjustments()
        # editor resets to neutral after applying
        for name, s in self.adjust_sliders.items():
            s.blockSignals(True)
            s.setValue(int(ADJUSTMENT_RANGES[name][2]))
            s.blockSignals(False)

    # === CANVAS === #
    def _build_canvas_ops(self):
        self.layout.addWidget(section("CANVAS"))
        grid = QGridLayout()
        ops = [
            ("⟲ 90°", lambda: self.editor.rotate(-90)),
            ("⟳ 90°", lambda: self.editor.rotate(90)),
            ("Flip H", lambda: self.editor.flip(FlipAxis.HORIZONTAL)),
            ("Flip V", lambda: self.editor.flip(FlipAxis.VERTICAL)),
            ("Zoom +", self.editor.viewport.zoom_in),
            ("Zoom −", self.editor.viewport.zoom_out),
            ("Fit", self.editor.fit_to_window),
        ]
        for i, (label, fn) in enumerate(ops):
            btn = QPushButton(label)
            btn.clicked.connect(lambda _, f=fn: (f(), self.canvas.update()))
            grid.addWidget(btn, i // 2, i % 2)
        self.layout.addLayout(grid)

        self.btn_remove_bg = QPushButton("Remove background")
        self.btn_remove_bg.clicked.connect(self.remove_background)
        self.layout.addWidget(self.btn_remove_bg)

    def remove_background(self):
        self.btn_remove_bg.setEnabled(False)
        QApplication.setOverrideCursor(Qt.CursorShape.WaitCursor)
        try:
            ok = asyncio.run(self.editor.remove_background())
        finally:
            QApplication.restoreOverrideCursor()
            self.btn_remove_bg.setEnabled(True)
        if not ok:
            logger.warning("Background was not removed")
