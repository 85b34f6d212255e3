import sys
import os
import logging

# PyQt5 import/s
from PyQt5 import QtWidgets
from PyQt5.QtWidgets import QMainWindow, QFileDialog, QInputDialog, QLabel
from PyQt5.QtCore import Qt
from PyQt5.QtGui import QPalette, QColor, QKeySequence

from .config import load_config
from .errors import ImageDecodeError, ExportRejectedError, UnsupportedFormatError
from .services.editor_session import EditorSession
from .services.image_decoder import decode_image
from .services.exporter import normalize_format
from .components.canvas_widget import CanvasWidget, QtFrameScheduler
from .utils.logger import loggerRaise, loggerWarn, set_main_window

logger = logging.getLogger(__name__)

IMAGE_FILTER = "Images (*.png *.jpg *.jpeg *.webp *.bmp *.gif)"
EXPORT_FILTER = "PNG (*.png);;JPEG (*.jpg *.jpeg);;WEBP (*.webp);;BMP (*.bmp);;SVG (*.svg)"


class MainWindow(QMainWindow):
    """Main editor window: one canvas, menus for overlay operations"""

    def __init__(self, config=None, parent=None):
        super().__init__(parent)
        self.config = config or load_config()
        self.session = EditorSession(self.config, scheduler=QtFrameScheduler())

        self.setWindowTitle("CodeCanvas")
        self.canvas = CanvasWidget(self.session, self)
        self.setCentralWidget(self.canvas)

        self._create_menu_bar()
        self._setup_status_bar()

        self.session.layers.subscribe(lambda event, overlay_id: self._update_actions())
        self.session.subscribe_selection(lambda selection: self._update_actions())
        self._update_actions()
        self._update_status()

        set_main_window(self)

    # ========================================
    # UI Setup
    # ========================================

    def _create_menu_bar(self):
        menubar = self.menuBar()

        file_menu = menubar.addMenu("&File")

        open_action = file_menu.addAction("&Open Base Image...")
        open_action.setShortcut(QKeySequence.Open)
        open_action.triggered.connect(lambda: self.open_base_image())

        export_action = file_menu.addAction("&Export...")
        export_action.setShortcut("Ctrl+E")
        export_action.triggered.connect(lambda: self.export_image())

        file_menu.addSeparator()

        exit_action = file_menu.addAction("E&xit")
        exit_action.setShortcut(QKeySequence.Quit)
        exit_action.triggered.connect(self.close)

        overlay_menu = menubar.addMenu("&Overlay")

        add_text_action = overlay_menu.addAction("Add &Text...")
        add_text_action.setShortcut("Ctrl+T")
        add_text_action.triggered.connect(lambda: self.add_text())

        add_image_action = overlay_menu.addAction("Add &Image...")
        add_image_action.setShortcut("Ctrl+I")
        add_image_action.triggered.connect(lambda: self.add_image())

        overlay_menu.addSeparator()

        self.delete_action = overlay_menu.addAction("&Delete Overlay")
        self.delete_action.setShortcut(QKeySequence.Delete)
        self.delete_action.triggered.connect(self.delete_selected)

        self.forward_action = overlay_menu.addAction("Bring &Forward")
        self.forward_action.setShortcut("Ctrl+]")
        self.forward_action.triggered.connect(self.bring_forward)

        self.backward_action = overlay_menu.addAction("Send &Backward")
        self.backward_action.setShortcut("Ctrl+[")
        self.backward_action.triggered.connect(self.send_backward)

    def _setup_status_bar(self):
        self.status_label = QLabel()
        self.statusBar().addWidget(self.status_label, 1)

    def _update_actions(self):
        has_selection = self.session.selection is not None
        self.delete_action.setEnabled(has_selection)
        self.forward_action.setEnabled(has_selection)
        self.backward_action.setEnabled(has_selection)

    def _update_status(self):
        if self.session.content_valid:
            self.status_label.setText(f"{len(self.session.layers)} overlay(s)")
        else:
            self.status_label.setText("Invalid content: no code image, overlays only")

    # ========================================
    # File Actions
    # ========================================

    def open_base_image(self, path=None):
        if not path:
            path, _ = QFileDialog.getOpenFileName(self, "Open Base Image", "", IMAGE_FILTER)
            if not path:
                return
        try:
            with open(path, 'rb') as f:
                decoded = decode_image(f.read())
        except (OSError, ImageDecodeError) as e:
            self.session.set_base_invalid()
            loggerWarn(f"Could not load {os.path.basename(path)}: {e}", "Open Base Image", self)
        else:
            self.session.set_base_raster(decoded.bitmap)
        self._update_status()
        self.canvas.update()

    def export_image(self, path=None, size=None):
        if not path:
            path, _ = QFileDialog.getSaveFileName(self, "Export", "", EXPORT_FILTER)
            if not path:
                return
        if size is None:
            size, ok = QInputDialog.getInt(self, "Export", "Size (px):",
                                           self.config.export_size, 1, 16384)
            if not ok:
                return

        ext = os.path.splitext(path)[1] or self.config.export_format
        try:
            fmt = normalize_format(ext)
            data = self.session.render_export(size, fmt)
        except (ExportRejectedError, UnsupportedFormatError) as e:
            loggerWarn(str(e), "Export", self)
            return

        try:
            with open(path, 'wb') as f:
                f.write(data)
        except OSError as e:
            loggerRaise(e, f"Could not write {path}")
        logger.info("Exported %s (%d bytes)", path, len(data))
        self.statusBar().showMessage(f"Exported {os.path.basename(path)}", 3000)

    # ========================================
    # Overlay Actions
    # ========================================

    def add_text(self, text=None):
        if text is None:
            text, ok = QInputDialog.getText(self, "Add Text", "Text:")
            if not ok:
                return
        self.session.add_text_overlay(text)
        self._update_status()

    def add_image(self, path=None):
        if not path:
            path, _ = QFileDialog.getOpenFileName(self, "Add Image", "", IMAGE_FILTER)
            if not path:
                return
        try:
            with open(path, 'rb') as f:
                self.session.add_image_overlay(f.read(), name=os.path.basename(path))
        except (OSError, ImageDecodeError) as e:
            loggerWarn(f"Could not add {os.path.basename(path)}: {e}", "Add Image", self)
            return
        self._update_status()

    def delete_selected(self):
        selection = self.session.selection
        if selection is None:
            return
        self.session.delete_overlay(selection.overlay_id)
        self._update_status()

    def bring_forward(self):
        if self.session.selection is not None:
            self.session.bring_forward(self.session.selection.overlay_id)

    def send_backward(self):
        if self.session.selection is not None:
            self.session.send_backward(self.session.selection.overlay_id)


def main():
    """Main entry point for the CodeCanvas editor"""
    logging.basicConfig(
        level=logging.WARNING,  # Only show warnings and errors
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    app = QtWidgets.QApplication(sys.argv)

    # Use Fusion style with dark palette
    app.setStyle("Fusion")

    dark_palette = QPalette()
    dark_palette.setColor(QPalette.Window, QColor(53, 53, 53))
    dark_palette.setColor(QPalette.WindowText, Qt.white)
    dark_palette.setColor(QPalette.Base, QColor(25, 25, 25))
    dark_palette.setColor(QPalette.AlternateBase, QColor(53, 53, 53))
    dark_palette.setColor(QPalette.Text, Qt.white)
    dark_palette.setColor(QPalette.Button, QColor(53, 53, 53))
    dark_palette.setColor(QPalette.ButtonText, Qt.white)
    dark_palette.setColor(QPalette.Highlight, QColor(42, 130, 218))
    dark_palette.setColor(QPalette.HighlightedText, Qt.black)
    app.setPalette(dark_palette)

    window = MainWindow()
    window.show()
    return app.exec_()


if __name__ == "__main__":
    sys.exit(main())
