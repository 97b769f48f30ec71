"""Color correction lookup tables (Qt-independent).

This module provides the per-channel color curve used by the viewer:

- ``ColorSettings``: the scalar settings edited by the user (value object)
- ``build_lut``: derive a 3x256 table from the settings
- ``apply_lut``: rewrite the RGB channels of an 8-bit buffer in place
- ``ColorLutEngine``: keeps the table of the currently displayed image

Curve, evaluated for every input level ``i`` with ``v = i / 255``::

    invert      i -> 255 - i
    brightness  v = v + brightness
    contrast    v = factor * (v - 0.5) + 0.5,
                factor = 1.015 * (contrast + 1) / (1.015 - contrast)
    gamma       v = v ** (1 / gamma)
    output      trunc(clamp(v, 0, 1) * 255), 0 for hidden channels
"""

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

import numpy as np

from .constants import CONTRAST_RANGE, MIN_GAMMA

logger = logging.getLogger(__name__)

# Absorbs float rounding noise before truncation (v * 255 may land at i - 1e-13)
_TRUNCATE_EPS = 1e-6


class Rotation(IntEnum):
    """Clockwise display rotation in quarter turns."""

    ROTATE_0 = 0
    ROTATE_90 = 1
    ROTATE_180 = 2
    ROTATE_270 = 3

    @property
    def degrees(self) -> int:
        return int(self) * 90

    @property
    def flips_aspect(self) -> bool:
        """True when width and height swap (90 and 270 degrees)."""
        return self in (Rotation.ROTATE_90, Rotation.ROTATE_270)

    def add(self, other: "Rotation") -> "Rotation":
        return Rotation((int(self) + int(other)) % 4)

    @classmethod
    def from_degrees(cls, degrees: int) -> "Rotation":
        return cls((int(degrees) // 90) % 4)


@dataclass(frozen=True)
class ColorSettings:
    """User color correction settings.

    Attributes:
        gamma: Gamma exponent denominator, strictly positive (practically 0.1-3.0)
        contrast: Contrast in [-1, 1)
        brightness: Additive brightness (practically -1..1)
        show_r, show_g, show_b: Channel visibility flags
        invert: Invert input levels before the curve
        rotation: Display rotation
    """

    gamma: float = 1.0
    contrast: float = 0.0
    brightness: float = 0.0
    show_r: bool = True
    show_g: bool = True
    show_b: bool = True
    invert: bool = False
    rotation: Rotation = Rotation.ROTATE_0

    @property
    def channel_mask(self) -> tuple[bool, bool, bool]:
        return (self.show_r, self.show_g, self.show_b)


def contrast_factor(contrast: float) -> float:
    """Return the slope of the contrast curve.

    Diverges steeply towards ``contrast = 1`` (slope ~135 at 1.0) and flattens
    to 0 at ``contrast = -1``. Input is clamped to [-1, 1] so the pole at
    1.015 is never reached.
    """
    c = min(max(float(contrast), CONTRAST_RANGE[0]), CONTRAST_RANGE[1])
    return (1.015 * (c + 1.0)) / (1.015 - c)


def build_lut(settings: ColorSettings) -> np.ndarray:
    """Build the per-channel lookup table for ``settings``.

    Args:
        settings: Color correction settings

    Returns:
        uint8 array of shape (3, 256); row 0 is red, 1 green, 2 blue.
    """
    levels = np.arange(256, dtype=np.float64)
    if settings.invert:
        levels = 255.0 - levels
    v = levels / 255.0

    v = v + settings.brightness
    v = contrast_factor(settings.contrast) * (v - 0.5) + 0.5

    gamma = max(float(settings.gamma), MIN_GAMMA)
    v = np.power(np.clip(v, 0.0, 1.0), 1.0 / gamma)

    curve = np.floor(np.clip(v, 0.0, 1.0) * 255.0 + _TRUNCATE_EPS)
    curve = np.clip(curve, 0, 255).astype(np.uint8)

    lut = np.empty((3, 256), dtype=np.uint8)
    for channel, shown in enumerate(settings.channel_mask):
        lut[channel] = curve if shown else 0
    return lut


def apply_lut(buffer: np.ndarray, lut: np.ndarray) -> np.ndarray:
    """Substitute the RGB channels of ``buffer`` through ``lut`` in place.

    The alpha channel (if any) is left untouched.

    Args:
        buffer: uint8 array of shape (H, W, 3) or (H, W, 4)
        lut: uint8 array of shape (3, 256)

    Returns:
        The same ``buffer`` object, for chaining.

    Raises:
        ValueError: If the buffer is not an 8-bit RGB/RGBA array.
    """
    if buffer.dtype != np.uint8 or buffer.ndim != 3 or buffer.shape[2] not in (3, 4):
        raise ValueError(f"Expected uint8 (H, W, 3|4) buffer, got {buffer.dtype} {buffer.shape}")
    if lut.shape != (3, 256):
        raise ValueError(f"Expected (3, 256) lookup table, got {lut.shape}")
    for channel in range(3):
        buffer[..., channel] = lut[channel][buffer[..., channel]]
    return buffer


class ColorLutEngine:
    """Keeps the lookup table of the currently displayed image.

    The table is rebuilt as a whole whenever the settings differ from the ones
    it was built for, and dropped when color correction is switched off.
    """

    def __init__(self):
        self._settings: Optional[ColorSettings] = None
        self._lut: Optional[np.ndarray] = None

    @property
    def lut(self) -> Optional[np.ndarray]:
        return self._lut

    @property
    def active(self) -> bool:
        return self._lut is not None

    def lut_for(self, settings: ColorSettings) -> np.ndarray:
        if self._lut is None or settings != self._settings:
            lut = build_lut(settings)
            self._settings, self._lut = settings, lut
            logger.debug("Rebuilt color LUT for %s", settings)
        return self._lut

    def discard(self) -> None:
        self._settings = None
        self._lut = None

    def correct(self, buffer: np.ndarray) -> np.ndarray:
        """Apply the cached table to ``buffer`` in place (no-op when inactive)."""
        if self._lut is None:
            return buffer
        return apply_lut(buffer, self._lut)
