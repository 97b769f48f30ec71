"""Title and status bar update logic for ImageViewer.

This module handles:
- Window title (collection index, file name, magnification)
- Image size and position in the collection
- Color correction state (gamma, contrast, brightness, channels, invert, rotation)
"""


class StatusUpdater:
    """Manages title and status bar updates for the image viewer."""

    def __init__(self, viewer):
        """Initialize status updater.

        Args:
            viewer: ImageViewer instance
        """
        self.viewer = viewer

    def update_status(self):
        """Update title bar and status widgets from the session."""
        session = self.viewer.session
        self.viewer.setWindowTitle(session.title())

        if not session.has_image:
            self.viewer.status_image.setText("")
            self.viewer.status_color.setText("")
            self.viewer.status_scale.setText("")
            return

        w, h = session.image_size
        count = len(session.navigator)
        position = f"[{session.navigator.index + 1}/{count}]  " if count else ""
        self.viewer.status_image.setText(f"{position}{int(w)} x {int(h)}")
        self.viewer.status_scale.setText(f"Zoom: {session.magnification:.2f}x")
        self.update_color_status()

    def update_color_status(self):
        """Show the active color settings; empty when color correction is off."""
        session = self.viewer.session
        if not session.lut_engine.active:
            self.viewer.status_color.setText("")
            return
        cs = session.color_settings
        channels = "".join(c for c, shown in zip("RGB", cs.channel_mask) if shown) or "-"
        parts = [f"Gamma: {cs.gamma:.2f}", f"Contrast: {cs.contrast:.2f}", f"Brightness: {cs.brightness:.2f}",
                 f"Ch: {channels}"]
        if cs.invert:
            parts.append("Inverted")
        if cs.rotation.degrees:
            parts.append(f"Rot: {cs.rotation.degrees}°")
        self.viewer.status_color.setText(", ".join(parts))
