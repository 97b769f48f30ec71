"""Main image viewer application window.

This module provides the ImageViewer class, the single window that shows
the current image of a ViewSession.

Features:
- Opening images (dialog, command line, drag and drop, clipboard paste)
- Cyclic navigation through the images of the folder
- Stepwise zoom with keyboard shortcuts and Ctrl+mouse wheel
- Color correction (gamma, contrast, brightness), channel toggles, invert
- Quarter-turn rotation
- Save-as with format options, copy to clipboard, image information
- Title bar showing index, filename and magnification
"""

import logging
import tempfile
from pathlib import Path
from typing import Optional

from PySide6.QtWidgets import (
    QMainWindow,
    QScrollArea,
    QStatusBar,
    QLabel,
    QFileDialog,
    QMessageBox,
)
from PySide6.QtGui import QGuiApplication
from PySide6.QtCore import Qt, Signal

from ...core.constants import SUPPORTED_EXTENSIONS
from ...core.image_collection import SortKey
from ...core.image_io import (
    PlainOptions,
    default_save_options,
    get_image_info,
    is_image_file,
    numpy_to_qimage,
    save_image,
)
from ...core.session import ViewSession
from ...core.settings import AppSettings, save_settings
from ..widgets import ImageLabel
from ..dialogs import HelpDialog, InfoDialog, SaveOptionsDialog

from .menu_builder import create_menus
from .zoom_manager import ZoomManager
from .color_manager import ColorManager
from .status_updater import StatusUpdater

logger = logging.getLogger(__name__)

IMAGE_FILTER = "Images ({})".format(" ".join(f"*.{ext}" for ext in SUPPORTED_EXTENSIONS))
CLIPBOARD_FILE_NAME = "iview_clipboard.png"


class ImageViewer(QMainWindow):
    """Main application window for image viewing.

    Keyboard Shortcuts:
        - O / R / S: Open / reopen / save as
        - N / B: Next / previous image
        - +, -: Zoom in / out
        - C: Color correction dialog
        - I: Image information
        - Ctrl+R / Ctrl+G / Ctrl+B: Toggle red / green / blue
        - Ctrl+I: Invert
        - Ctrl+Right / Ctrl+Up / Ctrl+Left / Ctrl+Down: Rotate 90 / 180 / 270 / reset
        - Alt+C / Alt+V: Copy / paste image
        - ESC: Close dialogs, or the viewer when none is open

    Mouse Controls:
        - Ctrl + Mouse wheel: Zoom in/out anchored at the cursor

    Attributes:
        session: ViewSession holding all image, color and layout state
        settings_path: Where settings are saved on close (None: default location)
    """

    scale_changed = Signal()

    def __init__(self, settings: Optional[AppSettings] = None, settings_path=None):
        super().__init__()
        self.setWindowTitle("IView")
        self.resize(800, 600)

        self.session = ViewSession(settings)
        self.settings_path = settings_path

        self.scroll_area = QScrollArea()
        self.scroll_area.setWidgetResizable(False)
        self.scroll_area.setAlignment(Qt.AlignCenter)
        self.image_label = ImageLabel(self, self)
        self.scroll_area.setWidget(self.image_label)
        self.setCentralWidget(self.scroll_area)

        self.status = QStatusBar()
        self.setStatusBar(self.status)
        self.status_image = QLabel()
        self.status_color = QLabel()
        self.status_scale = QLabel()
        self.status.addPermanentWidget(self.status_image, 2)
        self.status.addPermanentWidget(self.status_color, 4)
        self.status.addPermanentWidget(self.status_scale, 1)

        self.help_dialog = HelpDialog(self)
        self._info_dialog = None

        # Initialize managers
        self.zoom_manager = ZoomManager(self)
        self.color_manager = ColorManager(self)
        self.status_updater = StatusUpdater(self)
        self.scale_changed.connect(self.update_status)

        create_menus(self)
        self.setAcceptDrops(True)

    # Delegate zoom methods to zoom_manager
    def zoom_step(self, amount: float):
        self.zoom_manager.zoom_step(amount)

    def zoom_at(self, amount: float, pointer):
        self.zoom_manager.zoom_at(amount, pointer)

    def show_color_dialog(self):
        self.color_manager.show_color_dialog()

    def update_status(self):
        self.status_updater.update_status()

    def set_center(self, center: bool):
        self.session.set_center(center)

    # ------------------------ loading ------------------------
    def open_file_dialog(self):
        """Open file dialog to load an image file."""
        start = self.session.settings.last_folder
        path, _ = QFileDialog.getOpenFileName(self, "Open image", str(start) if start else "", IMAGE_FILTER)
        if path:
            self.open_path(path)

    def open_path(self, path, list_directory: bool = True) -> bool:
        """Open ``path`` as the displayed image.

        Args:
            path: Image file
            list_directory: Make its folder the navigation collection

        Returns:
            True if the image was loaded.
        """
        try:
            buf = self.session.open(path) if list_directory else self.session.load(path)
        except RuntimeError as e:
            self._show_load_error(str(path), str(e))
            return False
        self._show_loaded(buf)
        return True

    def reopen(self):
        """Reload the displayed file (fits again only with "Refit at reopen")."""
        try:
            buf = self.session.reopen()
        except RuntimeError as e:
            self._show_load_error(str(self.session.path), str(e))
            return
        self._show_loaded(buf)

    def next_image(self):
        self._step(1)

    def prev_image(self):
        self._step(-1)

    def _step(self, direction: int):
        try:
            buf = self.session.step(direction)
        except RuntimeError as e:
            self._show_load_error(str(self.session.navigator.current_path), str(e))
            return
        self._show_loaded(buf)

    def _show_loaded(self, buf):
        if buf is None:
            return
        self.refresh_display()
        self.color_manager.sync_dialog()
        self.zoom_manager.layout_pass()
        self.update_status()

    def _show_load_error(self, path: str, error_msg: str = ""):
        logger.error("Failed to load %s: %s", path, error_msg)
        QMessageBox.warning(self, "Load error", f"Cannot open image:\n{path}\n\n{error_msg}")

    def refresh_display(self):
        """Upload the session's display buffer to the label."""
        if not self.session.has_image:
            self.image_label.clear()
            return
        self.image_label.set_image(numpy_to_qimage(self.session.display), self.session.magnification)

    def set_sort_key(self, key: SortKey):
        self.session.set_sort_key(key)
        self.update_status()

    # ------------------------ drag and drop ------------------------
    def dragEnterEvent(self, e):
        if e.mimeData().hasUrls():
            e.acceptProposedAction()

    def dropEvent(self, e):
        files = [u.toLocalFile() for u in e.mimeData().urls()]
        image_files = [f for f in files if is_image_file(f)]
        if image_files:
            self.open_path(image_files[0])

    # ------------------------ clipboard ------------------------
    def copy_to_clipboard(self):
        """Copy the displayed (corrected, rotated) image to the clipboard."""
        if not self.session.has_image:
            return
        QGuiApplication.clipboard().setImage(numpy_to_qimage(self.session.display))
        self.status.showMessage("Image copied to clipboard", 2000)

    def paste_from_clipboard(self) -> bool:
        """Show the clipboard image, stored as a temporary PNG file.

        Returns:
            True if the clipboard held an image.
        """
        qimg = QGuiApplication.clipboard().image()
        if qimg.isNull():
            self.status.showMessage("No image on the clipboard", 2000)
            return False
        target = Path(tempfile.gettempdir()) / CLIPBOARD_FILE_NAME
        if not qimg.save(str(target), "PNG"):
            logger.error("Cannot write clipboard image to %s", target)
            return False
        return self.open_path(target, list_directory=False)

    # ------------------------ save / info ------------------------
    def save_as(self):
        """Re-encode the displayed file under a new name and format."""
        if self.session.path is None:
            return
        start = str(self.session.path.with_suffix(".jpg"))
        target, _ = QFileDialog.getSaveFileName(self, "Save as", start, IMAGE_FILTER)
        if not target:
            return
        options = default_save_options(target)
        if not isinstance(options, PlainOptions):
            dialog = SaveOptionsDialog(options, self)
            if not dialog.exec():
                return
            options = dialog.options()
        try:
            save_image(self.session.path, target, options)
        except (OSError, ValueError) as e:
            logger.error("Failed to save %s: %s", target, e)
            QMessageBox.warning(self, "Save error", f"Cannot save image:\n{target}\n\n{e}")
            return
        self.status.showMessage(f"Saved {target}", 3000)

    def show_info_dialog(self):
        if self.session.path is None:
            return
        w, h = self.session.image_size
        info = get_image_info(self.session.path, (int(w), int(h)), self.session.exif_tags)
        if self._info_dialog is not None:
            self._info_dialog.close()
        self._info_dialog = InfoDialog(info, self)
        self._info_dialog.show()

    # ------------------------ events ------------------------
    def _visible_dialogs(self):
        dialogs = (self.help_dialog, self._info_dialog, self.color_manager.color_dialog)
        return [d for d in dialogs if d is not None and d.isVisible()]

    def keyPressEvent(self, e):
        """Handle key press events (ESC closes dialogs, then the viewer)."""
        if e.key() == Qt.Key_Escape:
            dialogs = self._visible_dialogs()
            if dialogs:
                for d in dialogs:
                    d.close()
            else:
                self.close()
            return

        super().keyPressEvent(e)

    def closeEvent(self, event):
        """Save settings and close all child dialogs."""
        save_settings(self.session.snapshot_settings(), self.settings_path)
        for d in self._visible_dialogs():
            d.close()
        event.accept()
