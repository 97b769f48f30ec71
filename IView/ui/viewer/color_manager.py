"""Color correction, channel and rotation commands for ImageViewer.

This module forwards user edits to the session and keeps the color
dialog in sync with the current ColorSettings.
"""

import logging

from ..dialogs import ColorDialog
from ...core.color_lut import Rotation

logger = logging.getLogger(__name__)


class ColorManager:
    """Manages color correction operations.

    Every command mutates the session's ColorSettings, re-renders the
    display buffer and runs a layout pass (rotation may re-arm the fit).
    """

    def __init__(self, viewer):
        """Initialize color manager.

        Args:
            viewer: ImageViewer instance
        """
        self.viewer = viewer
        self.color_dialog = None

    @property
    def session(self):
        return self.viewer.session

    def _rendered(self, buf):
        if buf is None:
            return
        self.viewer.refresh_display()
        self.viewer.zoom_manager.layout_pass()
        self.viewer.update_status()

    # ------------------------ channels / invert ------------------------
    def toggle_channel(self, channel: str):
        self._rendered(self.session.toggle_channel(channel))

    def toggle_invert(self):
        self._rendered(self.session.toggle_invert())

    # ------------------------ rotation ------------------------
    def rotate(self, degrees: int):
        self._rendered(self.session.rotate_by(Rotation.from_degrees(degrees)))

    def reset_rotation(self):
        self._rendered(self.session.reset_rotation())

    # ------------------------ continuous values ------------------------
    def show_color_dialog(self):
        """Show the color correction dialog, creating it on first use."""
        if not self.session.has_image:
            return
        cs = self.session.color_settings
        if self.color_dialog is None:
            self.color_dialog = ColorDialog(self.viewer, cs.gamma, cs.contrast, cs.brightness)
            self.color_dialog.values_changed.connect(self.on_values_changed)
        else:
            self.color_dialog.set_values(cs.gamma, cs.contrast, cs.brightness)

        if self.color_dialog.isVisible():
            self.color_dialog.raise_()
            self.color_dialog.activateWindow()
            return
        self.color_dialog.show()

    def on_values_changed(self, gamma: float, contrast: float, brightness: float):
        logger.debug("Color values: gamma=%.2f contrast=%.2f brightness=%.2f", gamma, contrast, brightness)
        self._rendered(self.session.set_color_values(gamma, contrast, brightness))

    def sync_dialog(self):
        """Push the session's values into the dialog (after a load reset them)."""
        if self.color_dialog is not None:
            cs = self.session.color_settings
            self.color_dialog.set_values(cs.gamma, cs.contrast, cs.brightness)
