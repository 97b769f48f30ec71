"""Magnification, window geometry and scroll offset computation (Qt-independent).

This module handles the layout arithmetic of the viewer:
- Fitting a freshly loaded image into the usable display area
- Discrete zoom steps that keep the point under the cursor (or the viewport
  center) fixed on screen
- Re-laying out after rotation without changing magnification
- Clamping scroll offsets to the scaled content

The engine never talks to a window system. The host reports its geometry
(``measure_host``, ``scrolled``) and applies the returned ``LayoutResult``.
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple, Optional

from .constants import (
    CENTER_POSITION_OFFSET,
    CHROME_MARGIN,
    MAX_MAGNIFICATION,
    MIN_MAGNIFICATION,
    TITLE_ALLOWANCE,
    TOP_LEFT_POSITION,
    ZOOM_STEP,
)

logger = logging.getLogger(__name__)

# Guards floor() against products like 0.35 * 20 = 6.999999999999999
_QUANTIZE_EPS = 1e-9


class Vec2(NamedTuple):
    """2D size, position or offset in logical pixels."""

    x: float
    y: float


class FitState(Enum):
    """Whether the next layout pass has to fit the image."""

    NEVER_FIT = "never_fit"  # nothing fitted yet, host metrics may be unknown
    NEEDS_FIT = "needs_fit"  # fit once on the next layout pass
    STABLE = "stable"  # already fitted for the current load


@dataclass
class ViewportState:
    """Layout state of the single view session.

    Attributes:
        magnification: Displayed size / native size, within [0.1, 10.0]
        offset: Scroll offset of the content
        image_size: Native pixel size of the (rotated) image
        display_area: Usable display area (monitor size minus window frame)
        frame: Non-content window chrome size
        fit_state: One-shot fit flag
    """

    magnification: float = 1.0
    offset: Vec2 = Vec2(0.0, 0.0)
    image_size: Vec2 = Vec2(800.0, 600.0)
    display_area: Vec2 = Vec2(0.0, 0.0)
    frame: Vec2 = Vec2(0.0, 0.0)
    fit_state: FitState = FitState.NEVER_FIT


@dataclass(frozen=True)
class LayoutResult:
    """Commands for the host after a layout trigger.

    Attributes:
        magnification: New magnification
        offset: Scroll offset to apply to the content
        content_size: Visible content size (scaled image capped at the usable area)
        window_size: Inner window size to request, None if unchanged
        window_position: Outer window position to request, None if unchanged
    """

    magnification: float
    offset: Vec2
    content_size: Vec2
    window_size: Optional[Vec2] = None
    window_position: Optional[Vec2] = None


def clamp_magnification(value: float) -> float:
    """Clamp to the magnification range; a non-finite value becomes 1.0."""
    if not math.isfinite(value):
        return 1.0
    return min(max(float(value), MIN_MAGNIFICATION), MAX_MAGNIFICATION)


def quantize_fit(raw: float) -> float:
    """Snap a fit magnification: below 1.0 down to 0.05 steps, else to the nearest 0.5."""
    if raw < 1.0:
        q = math.floor(raw * 20.0 + _QUANTIZE_EPS) / 20.0
    else:
        q = math.floor(raw * 2.0 + 0.5) / 2.0
    return clamp_magnification(q)


def quantize_zoom(value: float) -> float:
    """Round to the nearest 0.01 step."""
    return math.floor(value * 100.0 + 0.5) / 100.0


def zoom_step_size(magnification: float, amount: float) -> float:
    """Scale a zoom step with the current magnification (x2 from 1.0, x4 from 4.0)."""
    if magnification >= 1.0:
        amount *= 2.0
    if magnification >= 4.0:
        amount *= 2.0
    return amount


def anchored_offset(offset: Vec2, pointer: Vec2, zoom: float) -> Vec2:
    """Return the scroll offset that keeps the content point under ``pointer`` fixed.

    ``(offset + pointer) * zoom - pointer`` where ``zoom`` is new/old magnification.
    """
    return Vec2((offset.x + pointer.x) * zoom - pointer.x, (offset.y + pointer.y) * zoom - pointer.y)


def _clamp(value: float, lo: float, hi: float) -> float:
    return min(max(value, lo), hi)


@dataclass
class ViewportLayoutEngine:
    """Computes window size, window position, magnification and scroll offset.

    Triggers:
        A. ``fit`` (image load or explicit fit request, via ``layout_pass``)
        B. ``zoom_step`` (keyboard +/- or Ctrl+wheel)
        C. ``rotate`` (rotation; channel/visibility changes need no layout)
    """

    state: ViewportState = field(default_factory=ViewportState)
    center: bool = True

    # ------------------------ host geometry ------------------------
    def measure_host(self, monitor_size: Vec2, outer_size: Vec2, inner_size: Vec2) -> None:
        """Record the window chrome and the usable display area.

        Args:
            monitor_size: Size of the display the window lives on
            outer_size: Window size including frame and title bar
            inner_size: Client area size
        """
        frame = Vec2(outer_size[0] - inner_size[0], outer_size[1] - inner_size[1] + TITLE_ALLOWANCE)
        self.state.frame = frame
        self.state.display_area = Vec2(monitor_size[0] - frame.x, monitor_size[1] - frame.y)
        logger.debug("Host measured: frame=%s display_area=%s", frame, self.state.display_area)

    def set_display_area(self, display_area: Vec2) -> None:
        self.state.display_area = Vec2(*display_area)

    def scrolled(self, offset: Vec2) -> None:
        """Record a scroll offset reported by the host (user scrolling)."""
        self.state.offset = Vec2(*offset)

    # ------------------------ derived geometry ------------------------
    def _usable(self) -> Vec2:
        area = self.state.display_area
        return Vec2(max(area.x - CHROME_MARGIN[0], 1.0), max(area.y - CHROME_MARGIN[1], 1.0))

    def _image_size(self) -> Vec2:
        w, h = self.state.image_size
        return Vec2(max(float(w), 1.0), max(float(h), 1.0))

    def scaled_size(self, magnification: Optional[float] = None) -> Vec2:
        m = self.state.magnification if magnification is None else magnification
        img = self._image_size()
        return Vec2(img.x * m, img.y * m)

    def content_size(self, magnification: Optional[float] = None) -> Vec2:
        scaled = self.scaled_size(magnification)
        usable = self._usable()
        return Vec2(min(scaled.x, usable.x), min(scaled.y, usable.y))

    def window_size(self, content: Vec2) -> Vec2:
        return Vec2(content.x + CHROME_MARGIN[0], content.y + CHROME_MARGIN[1])

    def window_position(self, content: Vec2) -> Vec2:
        if self.center:
            area = self.state.display_area
            return Vec2(
                (area.x - content.x) / 2.0 - CENTER_POSITION_OFFSET[0],
                (area.y - content.y) / 2.0 - CENTER_POSITION_OFFSET[1],
            )
        return Vec2(*TOP_LEFT_POSITION)

    def clamp_offset(self, offset: Vec2, magnification: Optional[float] = None) -> Vec2:
        """Clamp ``offset`` to the scrollable range of the scaled content.

        An axis whose scaled content fits in the usable display area has no
        meaningful scroll position and is reset to 0.
        """
        scaled = self.scaled_size(magnification)
        content = self.content_size(magnification)
        area = self.state.display_area
        x = _clamp(offset[0], 0.0, scaled.x - content.x) if scaled.x > area.x else 0.0
        y = _clamp(offset[1], 0.0, scaled.y - content.y) if scaled.y > area.y else 0.0
        return Vec2(x, y)

    # ------------------------ image lifecycle ------------------------
    def load_image(self, image_size: Vec2, reopen: bool = False, fit_on_open: bool = True,
                   refit_on_reopen: bool = False) -> bool:
        """Register a newly decoded image and arm the one-shot fit if due.

        Returns:
            True if the next layout pass will fit the image.
        """
        self.state.image_size = Vec2(*image_size)
        if fit_on_open and (refit_on_reopen or not reopen):
            self.request_fit()
            return True
        return False

    def request_fit(self) -> None:
        self.state.fit_state = FitState.NEEDS_FIT

    def layout_pass(self) -> Optional[LayoutResult]:
        """Run the per-frame layout; fits once when never fitted or after a load armed it."""
        if self.state.fit_state == FitState.STABLE:
            return None
        return self.fit()

    # ------------------------ Trigger A: fit ------------------------
    def fit(self) -> LayoutResult:
        """Fit the image into the usable display area.

        Returns:
            LayoutResult with window size and position commands.
        """
        usable = self._usable()
        img = self._image_size()
        raw = min(usable.x / img.x, usable.y / img.y)
        magnification = quantize_fit(raw)

        content = self.content_size(magnification)
        offset = self.clamp_offset(self.state.offset, magnification)

        self.state.magnification = magnification
        self.state.offset = offset
        self.state.fit_state = FitState.STABLE
        logger.debug("Fit %s into %s: raw=%.4f -> %.2f", tuple(img), tuple(usable), raw, magnification)
        return LayoutResult(
            magnification=magnification,
            offset=offset,
            content_size=content,
            window_size=self.window_size(content),
            window_position=self.window_position(content),
        )

    # ------------------------ Trigger B: zoom step ------------------------
    def zoom_step(self, amount: float, pointer: Optional[Vec2] = None,
                  viewport_size: Optional[Vec2] = None) -> Optional[LayoutResult]:
        """Change magnification by one discrete step.

        Args:
            amount: Step count; positive zooms in (keyboard uses +/-1, wheel its notches)
            pointer: Cursor position in viewport coordinates (wheel zoom); None
                anchors at the viewport center (keyboard zoom)
            viewport_size: Visible viewport size; defaults to the content size

        Returns:
            LayoutResult, or None if the magnification did not change.
        """
        if amount == 0:
            return None
        old = self.state.magnification
        step = zoom_step_size(old, float(amount))
        new = quantize_zoom(clamp_magnification(old * 1.0 + ZOOM_STEP * step))
        if new == old:
            return None

        zoom = new / old
        old_scaled = self.scaled_size(old)
        if pointer is None:
            inside = viewport_size if viewport_size is not None else self.content_size(old)
            pointer = Vec2(inside[0] / 2.0, inside[1] / 2.0)
        pointer = Vec2(_clamp(pointer[0], 0.0, old_scaled.x), _clamp(pointer[1], 0.0, old_scaled.y))

        offset = self.clamp_offset(anchored_offset(self.state.offset, pointer, zoom), new)
        content = self.content_size(new)

        self.state.magnification = new
        self.state.offset = offset
        logger.debug("Zoom %.2f -> %.2f at %s, offset %s", old, new, tuple(pointer), tuple(offset))
        return LayoutResult(
            magnification=new,
            offset=offset,
            content_size=content,
            window_size=self.window_size(content),
            window_position=self.window_position(content),
        )

    # ------------------------ Trigger C: rotation ------------------------
    def rotate(self, image_size: Vec2, flips_aspect: bool, refit: bool = False) -> Optional[LayoutResult]:
        """Re-layout after a rotation.

        Args:
            image_size: Native size of the rotated image
            flips_aspect: Whether width and height swapped
            refit: Fit the image on the next layout pass instead of keeping
                the magnification

        Returns:
            LayoutResult without window commands, or None when a fit was
            armed (the next ``layout_pass`` produces the result).
        """
        self.state.image_size = Vec2(*image_size)
        if flips_aspect and refit:
            self.request_fit()
            return None
        return self.current_layout()

    def current_layout(self) -> LayoutResult:
        """Re-clamp the offset and describe the layout at the current magnification."""
        offset = self.clamp_offset(self.state.offset)
        self.state.offset = offset
        return LayoutResult(
            magnification=self.state.magnification,
            offset=offset,
            content_size=self.content_size(),
        )
