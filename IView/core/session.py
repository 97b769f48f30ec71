"""The single mutable view session.

``ViewSession`` ties the three core components together around one current
image: the navigator picks the path, the decoder produces pixels, the LUT
engine corrects them and the viewport engine lays them out. The window only
forwards events to it and presents what it produces.
"""

import logging
from dataclasses import replace
from pathlib import Path
from typing import Callable, Optional, Union

import cv2
import numpy as np

from .color_lut import ColorLutEngine, ColorSettings, Rotation
from .image_collection import ImageCollectionNavigator, SortKey
from .image_io import exif_orientation, load_image, read_exif_tags, rotate_image
from .settings import AppSettings
from .viewport import FitState, LayoutResult, Vec2, ViewportLayoutEngine, clamp_magnification

logger = logging.getLogger(__name__)

Decoder = Callable[[Path], tuple]


def as_rgba(arr: np.ndarray) -> np.ndarray:
    """Expand a decoded gray or RGB uint8 buffer to RGBA.

    Raises:
        ValueError: If the buffer is not uint8 gray, RGB or RGBA.
    """
    if arr.dtype != np.uint8:
        raise ValueError(f"Expected uint8 pixels, got {arr.dtype}")
    if arr.ndim == 2:
        return cv2.cvtColor(arr, cv2.COLOR_GRAY2RGBA)
    if arr.ndim == 3 and arr.shape[2] == 3:
        return cv2.cvtColor(arr, cv2.COLOR_RGB2RGBA)
    if arr.ndim == 3 and arr.shape[2] == 4:
        return arr
    raise ValueError(f"Unsupported pixel buffer shape: {arr.shape}")


def decode_with_orientation(path: Path) -> tuple:
    """Default decoder: RGBA pixels with EXIF orientation applied, plus the EXIF tags."""
    tags = read_exif_tags(path)
    arr = load_image(path)
    return rotate_image(arr, exif_orientation(tags)), tags


class RequestTracker:
    """Last-request-wins bookkeeping for work that may finish out of order.

    Each request takes a token; a result is only applied if its token is
    still the latest one issued.
    """

    def __init__(self):
        self._latest = 0

    def issue(self) -> int:
        self._latest += 1
        return self._latest

    def is_current(self, token: int) -> bool:
        return token == self._latest


class ViewSession:
    """State and operations of the one displayed image.

    Attributes:
        settings: User preferences (ColorSettings live in ``settings.color_settings``)
        navigator: Collection of sibling images
        viewport: Layout engine
        lut_engine: Lookup table cache
        path: Path of the displayed image
        original: Decoded RGBA pixels with EXIF orientation applied
        display: Rotated and corrected pixels handed to the renderer
        exif_tags: EXIF tags of the displayed file
    """

    def __init__(self, settings: Optional[AppSettings] = None, decoder: Optional[Decoder] = None):
        self.settings = settings if settings is not None else AppSettings()
        self.decoder = decoder if decoder is not None else decode_with_orientation
        self.navigator = ImageCollectionNavigator(self.settings.sort_key)
        self.viewport = ViewportLayoutEngine(center=self.settings.center)
        self.viewport.state.magnification = clamp_magnification(self.settings.magnify)
        self.lut_engine = ColorLutEngine()
        self.requests = RequestTracker()

        self.path: Optional[Path] = None
        self.original: Optional[np.ndarray] = None
        self.display: Optional[np.ndarray] = None
        self.exif_tags: dict = {}

    # ------------------------ properties ------------------------
    @property
    def color_settings(self) -> ColorSettings:
        return self.settings.color_settings

    @color_settings.setter
    def color_settings(self, value: ColorSettings) -> None:
        self.settings.color_settings = value

    @property
    def has_image(self) -> bool:
        return self.display is not None

    @property
    def image_size(self) -> Vec2:
        return self.viewport.state.image_size

    @property
    def magnification(self) -> float:
        return self.viewport.state.magnification

    # ------------------------ loading ------------------------
    def open(self, path: Union[str, Path]) -> Optional[np.ndarray]:
        """Open ``path`` as a new image, listing its directory if it changed."""
        return self.load(path, list_directory=True)

    def load(self, path: Union[str, Path], reopen: bool = False, list_directory: bool = False) -> Optional[np.ndarray]:
        """Decode ``path`` and make it the displayed image.

        Args:
            path: Image file
            reopen: Re-reading the same image (fit only if ``refit_reopen``)
            list_directory: Also update the collection (rescans on directory change)

        Returns:
            The display buffer, or None if a newer load superseded this one.

        Raises:
            RuntimeError: If the file cannot be decoded.
            ValueError: If the decoder returns an unsupported pixel buffer.
        """
        path = Path(path)
        token = self.requests.issue()
        arr, tags = self.decoder(path)
        arr = as_rgba(arr)
        if list_directory:
            self.navigator.open(path)
        return self.commit_load(token, path, arr, tags, reopen)

    def commit_load(self, token: int, path: Path, arr: np.ndarray, tags: dict, reopen: bool = False) -> Optional[np.ndarray]:
        """Apply a decoded image as one replacement of the session image state."""
        if not self.requests.is_current(token):
            logger.debug("Discarding stale load of %s", path)
            return None
        arr = as_rgba(arr)
        self.path = Path(path)
        self.original = arr
        self.exif_tags = tags or {}
        logger.info("Loaded %s (%dx%d)", path, arr.shape[1], arr.shape[0])

        display = self.render(coloring=False)
        self.viewport.load_image(
            self.image_size,
            reopen=reopen,
            fit_on_open=self.settings.fit_open,
            refit_on_reopen=self.settings.refit_reopen,
        )
        return display

    def reopen(self) -> Optional[np.ndarray]:
        if self.path is None:
            return None
        return self.load(self.path, reopen=True)

    def step(self, direction: int) -> Optional[np.ndarray]:
        """Show the next (``direction > 0``) or previous image of the collection."""
        path = self.navigator.step(direction)
        if path is None:
            return None
        return self.load(path)

    def set_sort_key(self, key: SortKey) -> None:
        self.settings.sort_key = SortKey(key)
        self.navigator.set_sort_key(key)

    # ------------------------ rendering ------------------------
    def render(self, coloring: bool = True, new_rotate: bool = False) -> Optional[np.ndarray]:
        """Rebuild the display buffer from the decoded image.

        Args:
            coloring: Keep color correction active (rebuild the LUT). When
                False the LUT is dropped and the color settings reset.
            new_rotate: A rotation swapped width and height; re-arm the fit.

        Returns:
            The display buffer, or None if no image is loaded.
        """
        if self.original is None:
            return None
        if coloring:
            self.lut_engine.lut_for(self.color_settings)
        else:
            self.lut_engine.discard()
            self.color_settings = ColorSettings()

        buf = rotate_image(self.original, self.color_settings.rotation)
        buf = np.array(buf, dtype=np.uint8, copy=True)
        self.lut_engine.correct(buf)

        h, w = buf.shape[:2]
        self.viewport.rotate(Vec2(float(w), float(h)), flips_aspect=new_rotate, refit=new_rotate)
        self.display = buf
        return buf

    def _edit_color(self, new_rotate: bool = False, **changes) -> Optional[np.ndarray]:
        self.color_settings = replace(self.color_settings, **changes)
        return self.render(coloring=True, new_rotate=new_rotate)

    def toggle_channel(self, channel: str) -> Optional[np.ndarray]:
        """Toggle visibility of channel ``'r'``, ``'g'`` or ``'b'``."""
        attr = f"show_{channel.lower()}"
        if attr not in ("show_r", "show_g", "show_b"):
            raise ValueError(f"Unknown channel: {channel!r}")
        return self._edit_color(**{attr: not getattr(self.color_settings, attr)})

    def toggle_invert(self) -> Optional[np.ndarray]:
        return self._edit_color(invert=not self.color_settings.invert)

    def set_color_values(self, gamma: float, contrast: float, brightness: float) -> Optional[np.ndarray]:
        return self._edit_color(gamma=gamma, contrast=contrast, brightness=brightness)

    def rotate_by(self, delta: Rotation) -> Optional[np.ndarray]:
        delta = Rotation(delta)
        return self._edit_color(new_rotate=delta.flips_aspect, rotation=self.color_settings.rotation.add(delta))

    def reset_rotation(self) -> Optional[np.ndarray]:
        flips = self.color_settings.rotation.flips_aspect
        return self._edit_color(new_rotate=flips, rotation=Rotation.ROTATE_0)

    # ------------------------ layout ------------------------
    def layout_pass(self) -> Optional[LayoutResult]:
        return self.viewport.layout_pass()

    def current_layout(self) -> LayoutResult:
        return self.viewport.current_layout()

    def zoom_step(self, amount: float, pointer: Optional[Vec2] = None,
                  viewport_size: Optional[Vec2] = None) -> Optional[LayoutResult]:
        return self.viewport.zoom_step(amount, pointer, viewport_size)

    def set_center(self, center: bool) -> None:
        self.settings.center = center
        self.viewport.center = center

    @property
    def fit_pending(self) -> bool:
        return self.viewport.state.fit_state != FitState.STABLE

    # ------------------------ persistence helpers ------------------------
    def snapshot_settings(self) -> AppSettings:
        """Return the settings to persist (current folder and magnification)."""
        self.settings.magnify = self.magnification
        folder = self.navigator.collection.directory
        if folder is not None:
            self.settings.last_folder = folder
        return self.settings

    def title(self) -> str:
        if self.path is None:
            return "IView"
        return f"IView - {self.navigator.index}. {self.path.name}  {self.magnification:g}"
