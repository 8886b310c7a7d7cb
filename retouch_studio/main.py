import argparse
import logging
import sys

from PyQt6.QtCore import QSize, Qt
from PyQt6.QtGui import QAction
from PyQt6.QtWidgets import QApplication, QFileDialog, QMainWindow, QMessageBox, QToolBar

from . import config_manager, styles
from .logic import Editor, RenderSurfaceError
from .ui.canvas import Canvas
from .ui.diagnostics import DiagnosticsPanel
from .ui.layer_panel import LayerPanel
from .ui.tool_station import ToolStation

logger = logging.getLogger(__name__)

IMAGE_FILTER = "Images (*.png *.jpg *.jpeg *.bmp *.webp)"


class RetouchStudio(QMainWindow):
    def __init__(self, editor, config=None):
        super().__init__()

        # 1. Config & Window Setup
        self.config = config or config_manager.CONFIG
        app_settings = self.config['app_settings']
        self.setWindowTitle(app_settings['title'])
        self.resize(app_settings['initial_width'], app_settings['initial_height'])
        self.setStyleSheet(styles.get_stylesheet(self.config['theme']))

        # 2. The Canvas
        self.editor = editor
        self.canvas = Canvas(editor, self)
        self.canvas.save_requested.connect(self.export_image)
        self.setCentralWidget(self.canvas)

        # 3. The Docks
        self.station = ToolStation(self.canvas, parent=self)
        self.addDockWidget(Qt.DockWidgetArea.LeftDockWidgetArea, self.station)

        self.layer_panel = LayerPanel(self.canvas, self)
        self.addDockWidget(Qt.DockWidgetArea.RightDockWidgetArea, self.layer_panel)

        self.diagnostics = DiagnosticsPanel(editor, self)
        self.addDockWidget(Qt.DockWidgetArea.RightDockWidgetArea, self.diagnostics)

        # 4. Menus & Actions
        self.setup_actions()
        self.setup_menubar()
        self.setup_toolbar()

    def setup_actions(self):
        """Define logic for menus and buttons"""
        self.act_export = QAction("Export…", self)
        self.act_export.triggered.connect(self.export_image)

        self.act_exit = QAction("Exit", self)
        self.act_exit.triggered.connect(self.close)

        self.act_undo = QAction("Undo", self)
        self.act_undo.triggered.connect(self.editor.undo)
        self.act_redo = QAction("Redo", self)
        self.act_redo.triggered.connect(self.editor.redo)

        self.act_fit = QAction("Fit to Window", self)
        self.act_fit.triggered.connect(self.editor.fit_to_window)

        self.editor.history.add_listener(self.sync_history_actions)
        self.sync_history_actions()

    def setup_menubar(self):
        """Create the top text menu"""
        menu = self.menuBar()

        file_menu = menu.addMenu("&File")
        file_menu.addAction(self.act_export)
        file_menu.addAction(self.act_exit)

        edit_menu = menu.addMenu("&Edit")
        edit_menu.addAction(self.act_undo)
        edit_menu.addAction(self.act_redo)

        view_menu = menu.addMenu("&View")
        view_menu.addAction(self.act_fit)

        # Window menu lets users bring back closed panels
        win_menu = menu.addMenu("&Window")
        win_menu.addAction(self.station.toggleViewAction())
        win_menu.addAction(self.layer_panel.toggleViewAction())
        win_menu.addAction(self.diagnostics.toggleViewAction())

    def setup_toolbar(self):
        """Create the icon bar"""
        toolbar = QToolBar("Main Toolbar")
        toolbar.setIconSize(QSize(16, 16))
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        toolbar.addAction(self.act_undo)
        toolbar.addAction(self.act_redo)
        toolbar.addAction(self.act_fit)
        toolbar.addAction(self.act_export)

    def sync_history_actions(self):
        self.act_undo.setEnabled(self.editor.history.can_undo())
        self.act_redo.setEnabled(self.editor.history.can_redo())

    def export_image(self):
        filename, _ = QFileDialog.getSaveFileName(self, "Export Image", "edited.png", IMAGE_FILTER)
        if not filename:
            return
        if not self.editor.export(filename):
            QMessageBox.warning(self, "Export", f"Could not write {filename}")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="retouch-studio", description="Layered photo retouching")
    parser.add_argument("image", nargs="?", help="image to open")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    level = config_manager.CONFIG['app_settings'].get('log_level', 'WARNING')
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.WARNING),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    app = QApplication(sys.argv[:1])

    path = args.image
    if not path:
        path, _ = QFileDialog.getOpenFileName(None, "Open Image", "", IMAGE_FILTER)
        if not path:
            return 0

    try:
        editor = Editor(path)
    except RenderSurfaceError as e:
        logger.error("Cannot open %s: %s", path, e)
        QMessageBox.critical(None, "Open Image", str(e))
        return 1

    window = RetouchStudio(editor)
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
