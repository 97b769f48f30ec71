"""UI-independent core: color lookup tables, image collection, viewport layout."""

from .color_lut import ColorLutEngine, ColorSettings, Rotation, build_lut, apply_lut
from .image_collection import ImageCollectionNavigator, SortKey
from .viewport import ViewportLayoutEngine, LayoutResult, Vec2
from .session import ViewSession
from .settings import AppSettings, load_settings, save_settings
from .image_io import numpy_to_qimage, load_image, is_image_file, get_image_info

__all__ = [
    "ColorLutEngine",
    "ColorSettings",
    "Rotation",
    "build_lut",
    "apply_lut",
    "ImageCollectionNavigator",
    "SortKey",
    "ViewportLayoutEngine",
    "LayoutResult",
    "Vec2",
    "ViewSession",
    "AppSettings",
    "load_settings",
    "save_settings",
    "numpy_to_qimage",
    "load_image",
    "is_image_file",
    "get_image_info",
]
