"""Scaled image display widget."""

from PySide6.QtGui import QPixmap, QPainter, QImage, QWheelEvent
from PySide6.QtCore import Qt, QSize
from PySide6.QtWidgets import QWidget


class ImageLabel(QWidget):
    """Paints the display buffer at the current magnification.

    Ctrl + mouse wheel is forwarded to the viewer as a zoom step anchored at
    the cursor; plain wheel events scroll the surrounding scroll area.

    Attributes:
        viewer: Parent ImageViewer instance
        scale: Current magnification
    """

    def __init__(self, viewer, parent=None):
        super().__init__(parent)
        self.viewer = viewer
        self.scale = 1.0
        self._pixmap = QPixmap()
        self.setMouseTracking(True)

    @property
    def showing(self) -> bool:
        return not self._pixmap.isNull()

    def set_image(self, qimg: QImage, scale: float = 1.0):
        """Set the image to display at ``scale``."""
        self._pixmap = QPixmap.fromImage(qimg)
        self.set_scale(scale)

    def set_scale(self, scale: float):
        self.scale = scale
        self.setFixedSize(self.sizeHint())
        self.update()

    def clear(self):
        self._pixmap = QPixmap()
        self.setFixedSize(QSize(0, 0))
        self.update()

    def sizeHint(self) -> QSize:
        if self._pixmap.isNull():
            return QSize(0, 0)
        return QSize(int(round(self._pixmap.width() * self.scale)), int(round(self._pixmap.height() * self.scale)))

    def paintEvent(self, event):
        if self._pixmap.isNull():
            return
        painter = QPainter(self)
        painter.setRenderHint(QPainter.SmoothPixmapTransform, self.scale < 1.0)
        painter.scale(self.scale, self.scale)
        painter.drawPixmap(0, 0, self._pixmap)
        painter.end()

    def wheelEvent(self, event: QWheelEvent):
        """Zoom one step per wheel notch while Ctrl is held."""
        if not self.showing or not (event.modifiers() & Qt.ControlModifier):
            # If Ctrl is not pressed, let the scroll area handle scrolling
            event.ignore()
            return

        angle_delta = event.angleDelta().y()
        if angle_delta == 0:
            event.ignore()
            return

        # Pointer in viewport coordinates
        viewport = self.viewer.scroll_area.viewport()
        pos = viewport.mapFromGlobal(event.globalPosition().toPoint())
        self.viewer.zoom_at(angle_delta / 120.0, (pos.x(), pos.y()))
        event.accept()
