import os

import psutil
from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtWidgets import QDockWidget, QFrame, QLabel, QVBoxLayout


class DiagnosticsPanel(QDockWidget):
    """Process memory, layer memory and history depth, polled once a second"""

    def __init__(self, editor, parent=None, interval_ms=1000):
        super().__init__("System", parent)
        self.editor = editor
        self.process = psutil.Process(os.getpid())

        self.setAllowedAreas(Qt.DockWidgetArea.LeftDockWidgetArea | Qt.DockWidgetArea.RightDockWidgetArea)
        self.container = QFrame()
        self.container.setObjectName("PanelContent")
        self.setWidget(self.container)

        layout = QVBoxLayout(self.container)
        layout.setContentsMargins(10, 10, 10, 10)

        # --- DATA LABELS ---
        self.lbl_ram = QLabel("MEM: 0.0 MB")
        self.lbl_layers = QLabel("LAYERS: 0")
        self.lbl_undo = QLabel("STEPS: 0")
        self.lbl_snapshots = QLabel("HISTORY: 0.0 MB")
        for label in (self.lbl_ram, self.lbl_layers, self.lbl_undo, self.lbl_snapshots):
            layout.addWidget(label)

        # Timer setup
        self.timer = QTimer(self)
        self.timer.timeout.connect(self.refresh_diagnostics)
        self.timer.start(interval_ms)
        self.refresh_diagnostics()

    def refresh_diagnostics(self) -> dict:
        stats = self.editor.history.get_stats()
        mem_mb = self.process.memory_info().rss / (1024 * 1024)
        stack = self.editor.stack

        self.lbl_ram.setText(f"MEM: {mem_mb:.1f} MB")
        self.lbl_layers.setText(f"LAYERS: {len(stack)} ({stack.get_memory_size():.1f} MB)")
        self.lbl_undo.setText(f"STEPS: {stats['undo_count']} undo / {stats['redo_count']} redo")
        self.lbl_snapshots.setText(f"HISTORY: {stats['memory_mb']:.1f} MB")

        stats['process_mb'] = mem_mb
        return stats
