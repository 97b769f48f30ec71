"""Image I/O utilities for loading, converting and saving images.

This module provides functions for:
- Loading images from files into 8-bit RGBA arrays (OpenCV)
- Reading EXIF orientation and descriptive tags (exifread)
- Rotating image arrays by quarter turns
- Converting NumPy arrays to QImage for Qt display
- Re-encoding an image file with format-specific save options (Pillow)

Loading raises on undecodable files; metadata helpers never raise.
"""

import logging
import time
from contextlib import redirect_stderr, redirect_stdout
from dataclasses import dataclass
from io import StringIO
from pathlib import Path
from typing import Dict, Optional, Union

import cv2
import exifread
import numpy as np
from PIL import Image
from PySide6.QtGui import QImage

from .color_lut import Rotation
from .constants import SUPPORTED_EXTENSIONS

logger = logging.getLogger(__name__)

# EXIF orientation values that are plain rotations
_EXIF_ORIENTATION_ROTATION = {
    1: Rotation.ROTATE_0,
    3: Rotation.ROTATE_180,
    6: Rotation.ROTATE_90,
    8: Rotation.ROTATE_270,
}

_CV2_ROTATE_CODES = {
    Rotation.ROTATE_90: cv2.ROTATE_90_CLOCKWISE,
    Rotation.ROTATE_180: cv2.ROTATE_180,
    Rotation.ROTATE_270: cv2.ROTATE_90_COUNTERCLOCKWISE,
}


def numpy_to_qimage(arr: np.ndarray) -> QImage:
    """Convert a NumPy image array to a Qt QImage suitable for display.

    The returned QImage is a copy, detached from the NumPy buffer.

    Supported input shapes:
      - (H, W) -> 8-bit grayscale
      - (H, W, 3) -> RGB (8-bit per channel)
      - (H, W, 4) -> RGBA (8-bit per channel)

    Args:
        arr: uint8 image array. ``None`` yields an empty QImage.

    Raises:
        ValueError: If the array shape is not supported.
    """
    if arr is None:
        return QImage()
    a = np.ascontiguousarray(arr, dtype=np.uint8)
    if a.ndim == 2:
        h, w = a.shape
        return QImage(a.data, w, h, w, QImage.Format_Grayscale8).copy()
    if a.ndim == 3 and a.shape[2] == 3:
        h, w, _ = a.shape
        return QImage(a.data, w, h, 3 * w, QImage.Format_RGB888).copy()
    if a.ndim == 3 and a.shape[2] == 4:
        h, w, _ = a.shape
        return QImage(a.data, w, h, 4 * w, QImage.Format_RGBA8888).copy()
    raise ValueError(f"Unsupported array shape: {a.shape}")


def cv2_imread_unicode(path: str):
    data = np.fromfile(path, dtype=np.uint8)
    return cv2.imdecode(data, cv2.IMREAD_UNCHANGED)


def to_rgba8(img: np.ndarray) -> np.ndarray:
    """Convert an OpenCV-decoded array (gray, BGR, BGRA; 8 or 16 bit) to RGBA uint8."""
    if img.dtype == np.uint16:
        img = (img >> 8).astype(np.uint8)
    elif img.dtype != np.uint8:
        img = np.clip(img, 0, 255).astype(np.uint8)

    if img.ndim == 2:
        return cv2.cvtColor(img, cv2.COLOR_GRAY2RGBA)
    if img.shape[2] == 1:
        return cv2.cvtColor(img[:, :, 0], cv2.COLOR_GRAY2RGBA)
    if img.shape[2] == 3:
        return cv2.cvtColor(img, cv2.COLOR_BGR2RGBA)
    if img.shape[2] == 4:
        return cv2.cvtColor(img, cv2.COLOR_BGRA2RGBA)
    raise RuntimeError(f"Unsupported channel count: {img.shape[2]}")


def load_image(path: Union[str, Path]) -> np.ndarray:
    """Load an image file into an (H, W, 4) uint8 RGBA array.

    GIF files are read with Pillow (first frame); all other supported
    formats with OpenCV.

    Args:
        path: Path to the image file (str or pathlib.Path).

    Raises:
        RuntimeError: If the file cannot be decoded.
    """
    path_str = str(path)
    if Path(path_str).suffix.lower() == ".gif":
        try:
            with Image.open(path_str) as im:
                return np.array(im.convert("RGBA"))
        except (OSError, ValueError) as e:
            raise RuntimeError(f"Cannot open image: {path_str} ({e})") from e

    try:
        img = cv2_imread_unicode(path_str)
    except OSError as e:
        raise RuntimeError(f"Cannot open image: {path_str} ({e})") from e
    if img is None:
        raise RuntimeError(f"Cannot open image: {path_str}")
    return to_rgba8(img)


def is_image_file(path: Union[str, Path]) -> bool:
    """Return True if the given path has a supported image file suffix.

    Relies solely on the filename suffix (case-insensitive).
    """
    return Path(path).suffix.lower().lstrip(".") in SUPPORTED_EXTENSIONS


def rotate_image(arr: np.ndarray, rotation: Rotation) -> np.ndarray:
    """Return ``arr`` rotated clockwise by ``rotation`` (a new array unless 0)."""
    rotation = Rotation(rotation)
    if rotation == Rotation.ROTATE_0:
        return arr
    return cv2.rotate(arr, _CV2_ROTATE_CODES[rotation])


def read_exif_tags(path: Union[str, Path]) -> dict:
    """Return the exifread tag dictionary of ``path`` (empty on any failure)."""
    try:
        with open(path, "rb") as f:
            # Suppress exifread's debug messages
            with redirect_stdout(StringIO()), redirect_stderr(StringIO()):
                return exifread.process_file(f, details=False)
    except Exception as e:
        logger.debug("No EXIF for %s: %s", path, e)
        return {}


def exif_orientation(tags: dict) -> Rotation:
    """Map the EXIF orientation tag to a rotation (mirrored variants are ignored)."""
    tag = tags.get("Image Orientation")
    if tag is None:
        return Rotation.ROTATE_0
    try:
        value = int(tag.values[0])
    except (AttributeError, IndexError, TypeError, ValueError):
        return Rotation.ROTATE_0
    return _EXIF_ORIENTATION_ROTATION.get(value, Rotation.ROTATE_0)


def _ratio_to_float(r) -> float:
    if hasattr(r, "num") and hasattr(r, "den"):
        return float(r.num) / float(r.den) if r.den else 0.0
    return float(r)


def gps_to_decimal(values) -> Optional[float]:
    """Convert [degrees, minutes, seconds] rationals to decimal degrees."""
    try:
        if len(values) < 3:
            return None
        deg, minutes, sec = (_ratio_to_float(v) for v in values[:3])
    except (TypeError, ValueError, ZeroDivisionError):
        return None
    return deg + minutes / 60.0 + sec / 3600.0


def format_byte_count(n: int) -> str:
    """Group thousands with spaces: 1234567 -> '1 234 567'."""
    return f"{n:,}".replace(",", " ")


def get_image_info(path: Union[str, Path], image_size: Optional[tuple[int, int]] = None,
                   tags: Optional[dict] = None) -> Dict[str, str]:
    """Return human-readable information about an image file.

    Keys (present when available): ``Name``, ``Size``, ``FileSize``,
    ``FileTime``, ``Created``, ``Machine``, ``GeoLocation``, ``Map``.

    Args:
        path: Image file path
        image_size: (width, height) of the displayed image
        tags: Pre-read exifread tags; read from ``path`` when omitted
    """
    p = Path(path)
    info: Dict[str, str] = {"Name": p.name}
    if image_size is not None:
        info["Size"] = f"{image_size[0]} x {image_size[1]} pixel"

    try:
        st = p.stat()
        info["FileSize"] = f"{format_byte_count(st.st_size)} Byte"
        info["FileTime"] = time.strftime("%Y-%m-%d %H:%M:%S", time.gmtime(st.st_ctime))
    except OSError:
        pass

    if tags is None:
        tags = read_exif_tags(p)
    if "EXIF DateTimeOriginal" in tags:
        info["Created"] = str(tags["EXIF DateTimeOriginal"])
    if "Image Model" in tags:
        info["Machine"] = str(tags["Image Model"]).strip()

    lat_tag = tags.get("GPS GPSLatitude")
    lon_tag = tags.get("GPS GPSLongitude")
    lat = gps_to_decimal(lat_tag.values) if lat_tag is not None else None
    lon = gps_to_decimal(lon_tag.values) if lon_tag is not None else None
    if lat is not None and lon is not None:
        if "S" in str(tags.get("GPS GPSLatitudeRef", "")):
            lat = -lat
        if "W" in str(tags.get("GPS GPSLongitudeRef", "")):
            lon = -lon
        info["GeoLocation"] = f"{lat:.6f}, {lon:.6f}"
        info["Map"] = f"https://www.google.com/maps/place/{lat:.6f},{lon:.6f}"
    return info


# ------------------------ save-as ------------------------
@dataclass(frozen=True)
class JpegOptions:
    quality: int = 85


@dataclass(frozen=True)
class WebpOptions:
    quality: int = 85
    lossless: bool = False


@dataclass(frozen=True)
class PlainOptions:
    """Formats without tunable options (png, tif, gif, bmp)."""


SaveOptions = Union[JpegOptions, WebpOptions, PlainOptions]


def default_save_options(path: Union[str, Path]) -> SaveOptions:
    """Return the option variant matching the target file extension."""
    ext = Path(path).suffix.lower()
    if ext in (".jpg", ".jpeg"):
        return JpegOptions()
    if ext == ".webp":
        return WebpOptions()
    return PlainOptions()


def save_image(source: Union[str, Path], target: Union[str, Path], options: SaveOptions) -> None:
    """Re-encode the image file ``source`` as ``target``.

    Raises:
        OSError: If reading or writing fails.
        ValueError: If the target format is unknown to Pillow.
    """
    with Image.open(source) as im:
        im.load()
        if isinstance(options, JpegOptions):
            img = im.convert("RGB")
            img.save(target, format="JPEG", quality=int(options.quality))
        elif isinstance(options, WebpOptions):
            img = im.convert("RGBA") if "A" in im.getbands() else im.convert("RGB")
            if options.lossless:
                img.save(target, format="WEBP", lossless=True)
            else:
                img.save(target, format="WEBP", quality=int(options.quality))
        else:
            img = im
            if Path(target).suffix.lower() == ".bmp" and im.mode not in ("1", "L", "P", "RGB"):
                img = im.convert("RGB")
            img.save(target)
    logger.info("Saved %s as %s", source, target)
