"""Zoom and viewport management for ImageViewer.

This module bridges the Qt window and the viewport layout engine:
- Measuring the monitor and window chrome for the engine
- Running the per-load layout pass (one-shot fit)
- Keyboard and Ctrl+wheel zoom steps
- Applying layout results (label scale, window size/position, scroll offset)
"""

import logging

from PySide6.QtCore import QTimer

from ...core.viewport import LayoutResult, Vec2

logger = logging.getLogger(__name__)


class ZoomManager:
    """Applies the session's layout results to the viewer window.

    The engine owns all layout arithmetic; this class only translates Qt
    geometry into engine inputs and engine results into Qt calls.
    """

    def __init__(self, viewer):
        """Initialize zoom manager.

        Args:
            viewer: ImageViewer instance
        """
        self.viewer = viewer
        self._applying = False

        scroll_area = self.viewer.scroll_area
        scroll_area.horizontalScrollBar().valueChanged.connect(self._on_scrolled)
        scroll_area.verticalScrollBar().valueChanged.connect(self._on_scrolled)

    @property
    def session(self):
        return self.viewer.session

    def _bars_height(self) -> int:
        """Height of the menu and status bars, which are chrome for the engine."""
        return self.viewer.menuBar().sizeHint().height() + self.viewer.statusBar().sizeHint().height()

    def _available_geometry(self):
        screen = self.viewer.screen()
        return screen.availableGeometry() if screen is not None else None

    def viewport_size(self) -> Vec2:
        viewport = self.viewer.scroll_area.viewport()
        return Vec2(float(viewport.width()), float(viewport.height()))

    def measure_host(self):
        """Report monitor, outer and inner window size to the layout engine."""
        avail = self._available_geometry()
        if avail is None:
            return
        outer = self.viewer.frameGeometry()
        inner = self.viewer.geometry()
        self.session.viewport.measure_host(
            Vec2(float(avail.width()), float(avail.height())),
            Vec2(float(outer.width()), float(outer.height())),
            Vec2(float(inner.width()), float(inner.height() - self._bars_height())),
        )

    def layout_pass(self):
        """Fit the image if a fit is armed, otherwise re-apply the current layout."""
        if not self.session.has_image:
            return
        if self.session.fit_pending:
            self.measure_host()
        result = self.session.layout_pass()
        if result is None:
            result = self.session.current_layout()
        self.apply(result)

    def zoom_step(self, amount: float):
        """Keyboard zoom anchored at the viewport center."""
        if not self.session.has_image:
            return
        self.apply(self.session.zoom_step(amount, None, self.viewport_size()))

    def zoom_at(self, amount: float, pointer):
        """Wheel zoom keeping the content point under ``pointer`` fixed.

        Args:
            amount: Wheel notches (positive zooms in)
            pointer: (x, y) cursor position in viewport coordinates
        """
        if not self.session.has_image:
            return
        self.apply(self.session.zoom_step(amount, Vec2(float(pointer[0]), float(pointer[1])), self.viewport_size()))

    def apply(self, result: LayoutResult):
        """Apply a layout result to the label, the window and the scroll bars."""
        if result is None:
            return
        self._applying = True
        try:
            self.viewer.image_label.set_scale(result.magnification)

            if result.window_size is not None:
                self.viewer.resize(int(round(result.window_size.x)),
                                   int(round(result.window_size.y)) + self._bars_height())
            if result.window_position is not None:
                avail = self._available_geometry()
                ox, oy = (avail.x(), avail.y()) if avail is not None else (0, 0)
                self.viewer.move(ox + int(round(result.window_position.x)), oy + int(round(result.window_position.y)))

            self._set_scroll(result.offset)
        finally:
            self._applying = False
        # Scroll ranges follow the label size only after the layout settles
        QTimer.singleShot(0, lambda: self._set_scroll(result.offset))
        logger.debug("Applied layout: %s", result)
        self.viewer.scale_changed.emit()

    def _set_scroll(self, offset: Vec2):
        was_applying = self._applying
        self._applying = True
        try:
            scroll_area = self.viewer.scroll_area
            scroll_area.horizontalScrollBar().setValue(int(round(offset.x)))
            scroll_area.verticalScrollBar().setValue(int(round(offset.y)))
        finally:
            self._applying = was_applying

    def _on_scrolled(self, _value):
        if self._applying:
            return
        scroll_area = self.viewer.scroll_area
        self.session.viewport.scrolled(
            Vec2(float(scroll_area.horizontalScrollBar().value()), float(scroll_area.verticalScrollBar().value()))
        )
