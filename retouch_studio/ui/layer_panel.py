from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (QCheckBox, QComboBox, QDockWidget, QFrame, QHBoxLayout, QLabel,
                             QListWidget, QListWidgetItem, QPushButton, QSlider, QVBoxLayout)

from ..enums import BlendMode

HANDLE_ROLE = Qt.ItemDataRole.UserRole


class LayerPanel(QDockWidget):
    """Layer list (top layer first) with structure buttons and attribute controls"""

    def __init__(self, canvas_ref, parent=None):
        super().__init__("Layers", parent)
        self.canvas = canvas_ref
        self.editor = canvas_ref.editor
        self._syncing = False

        # 1. Dock Config
        self.setAllowedAreas(Qt.DockWidgetArea.LeftDockWidgetArea | Qt.DockWidgetArea.RightDockWidgetArea)
        self.setFeatures(QDockWidget.DockWidgetFeature.DockWidgetMovable | QDockWidget.DockWidgetFeature.DockWidgetFloatable)

        # 2. Container
        self.container = QFrame()
        self.container.setObjectName("PanelContent")
        self.setWidget(self.container)

        # 3. Layout
        self.layout = QVBoxLayout(self.container)
        self.layout.setContentsMargins(10, 10, 10, 10)

        # 4. Attribute row
        attrs = QHBoxLayout()
        self.combo_blend = QComboBox()
        for mode in BlendMode:
            self.combo_blend.addItem(mode.value.capitalize(), mode)
        self.combo_blend.currentIndexChanged.connect(self._blend_changed)
        self.chk_lock = QCheckBox("Lock")
        self.chk_lock.toggled.connect(self._lock_changed)
        attrs.addWidget(self.combo_blend)
        attrs.addWidget(self.chk_lock)
        self.layout.addLayout(attrs)

        opacity_row = QHBoxLayout()
        opacity_row.addWidget(QLabel("Opacity"))
        self.slider_opacity = QSlider(Qt.Orientation.Horizontal)
        self.slider_opacity.setRange(0, 100)
        self.slider_opacity.valueChanged.connect(self._opacity_changed)
        opacity_row.addWidget(self.slider_opacity)
        self.layout.addLayout(opacity_row)

        # 5. Content
        self.layer_list = QListWidget()
        self.layer_list.currentItemChanged.connect(self._current_changed)
        self.layer_list.itemChanged.connect(self._item_changed)
        self.layout.addWidget(self.layer_list)

        # Button Row
        btn_layout = QHBoxLayout()
        buttons = [
            ("+", "Add layer", self.editor.add_layer),
            ("-", "Delete layer", self.editor.delete_layer),
            ("⧉", "Duplicate layer", self.editor.duplicate_layer),
            ("▲", "Move up", self.editor.move_layer_up),
            ("▼", "Move down", self.editor.move_layer_down),
            ("⤓", "Merge down", self.editor.merge_down),
        ]
        for text, tip, fn in buttons:
            btn = QPushButton(text)
            btn.setToolTip(tip)
            btn.clicked.connect(lambda _, f=fn: f())
            btn_layout.addWidget(btn)
        self.layout.addLayout(btn_layout)

        self.editor.history.add_listener(self.refresh)
        self.refresh()

    # === Sync from the editor === #
    def refresh(self):
        self._syncing = True
        try:
            self.layer_list.clear()
            for layer in reversed(self.editor.stack.layers):
                item = QListWidgetItem(layer.name)
                item.setData(HANDLE_ROLE, layer.id)
                item.setFlags(item.flags() | Qt.ItemFlag.ItemIsUserCheckable | Qt.ItemFlag.ItemIsEditable)
                item.setCheckState(Qt.CheckState.Checked if layer.visible else Qt.CheckState.Unchecked)
                self.layer_list.addItem(item)
                if layer.id == self.editor.stack.active_id:
                    self.layer_list.setCurrentItem(item)
            self._sync_attributes()
        finally:
            self._syncing = False

    def _sync_attributes(self):
        layer = self.editor.active_layer
        if layer is None:
            return
        self.combo_blend.setCurrentIndex(self.combo_blend.findData(layer.blend_mode))
        self.chk_lock.setChecked(layer.locked)
        self.slider_opacity.setValue(round(layer.opacity * 100))

    # === Push to the editor === #
    def _current_changed(self, current, _previous):
        if self._syncing or current is None:
            return
        self.editor.set_active_layer(current.data(HANDLE_ROLE))
        self._syncing = True
        self._sync_attributes()
        self._syncing = False

    def _item_changed(self, item):
        if self._syncing:
            return
        layer_id = item.data(HANDLE_ROLE)
        self.editor.set_layer_visibility(layer_id, item.checkState() == Qt.CheckState.Checked)
        if item.text() != self.editor.stack.get(layer_id).name:
            self.editor.rename_layer(layer_id, item.text())

    def _blend_changed(self, _index):
        if not self._syncing:
            self.editor.set_layer_blend_mode(None, self.combo_blend.currentData())

    def _lock_changed(self, locked):
        if not self._syncing:
            self.editor.set_layer_locked(None, locked)

    def _opacity_changed(self, value):
        if not self._syncing:
            self.editor.set_layer_opacity(None, value / 100)
