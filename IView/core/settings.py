"""Persisted application settings.

Settings are stored as a flat JSON document::

    {
      "gamma": 1.0, "contrast": 0.0, "brightness": 0.0,
      "show_r": true, "show_g": true, "show_b": true,
      "invert": false, "rotation": 0,
      "sort": "name", "last_folder": null, "magnify": 1.0,
      "refit_reopen": false, "center": true, "fit_open": true
    }

A missing or unreadable document falls back to the defaults; keys that are
absent take their default value.
"""

import json
import math
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

from PySide6.QtCore import QStandardPaths

from .color_lut import ColorSettings, Rotation
from .image_collection import SortKey

logger = logging.getLogger(__name__)

SETTINGS_FILE_NAME = "settings.json"


@dataclass
class AppSettings:
    """User preferences restored at startup and saved on exit."""

    color_settings: ColorSettings = field(default_factory=ColorSettings)
    sort_key: SortKey = SortKey.NAME
    last_folder: Optional[Path] = None
    magnify: float = 1.0
    refit_reopen: bool = False
    center: bool = True
    fit_open: bool = True

    def to_dict(self) -> Dict[str, Any]:
        cs = self.color_settings
        return {
            "gamma": cs.gamma,
            "contrast": cs.contrast,
            "brightness": cs.brightness,
            "show_r": cs.show_r,
            "show_g": cs.show_g,
            "show_b": cs.show_b,
            "invert": cs.invert,
            "rotation": cs.rotation.degrees,
            "sort": self.sort_key.value,
            "last_folder": str(self.last_folder) if self.last_folder is not None else None,
            "magnify": self.magnify,
            "refit_reopen": self.refit_reopen,
            "center": self.center,
            "fit_open": self.fit_open,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppSettings":
        """Build settings from a flat document.

        Raises:
            TypeError, ValueError: If a present value has the wrong type.
        """
        if not isinstance(data, dict):
            raise TypeError(f"Settings document must be an object, got {type(data).__name__}")
        d = cls()
        dc = d.color_settings
        color = ColorSettings(
            gamma=_number(data, "gamma", dc.gamma),
            contrast=_number(data, "contrast", dc.contrast),
            brightness=_number(data, "brightness", dc.brightness),
            show_r=_flag(data, "show_r", dc.show_r),
            show_g=_flag(data, "show_g", dc.show_g),
            show_b=_flag(data, "show_b", dc.show_b),
            invert=_flag(data, "invert", dc.invert),
            rotation=Rotation.from_degrees(int(_number(data, "rotation", dc.rotation.degrees))),
        )
        last_folder = data.get("last_folder")
        if last_folder is not None and not isinstance(last_folder, str):
            raise TypeError("last_folder must be a string or null")
        return cls(
            color_settings=color,
            sort_key=SortKey(data.get("sort", d.sort_key.value)),
            last_folder=Path(last_folder) if last_folder else None,
            magnify=_number(data, "magnify", d.magnify),
            refit_reopen=_flag(data, "refit_reopen", d.refit_reopen),
            center=_flag(data, "center", d.center),
            fit_open=_flag(data, "fit_open", d.fit_open),
        )


def _number(data: Dict[str, Any], key: str, default: float) -> float:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{key} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ValueError(f"{key} must be finite, got {value!r}")
    return float(value)


def _flag(data: Dict[str, Any], key: str, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise TypeError(f"{key} must be a boolean, got {value!r}")
    return value


def default_settings_path() -> Path:
    """Return the settings file path in the per-user config directory."""
    location = QStandardPaths.writableLocation(QStandardPaths.AppConfigLocation)
    if not location:
        return Path(SETTINGS_FILE_NAME)
    return Path(location) / SETTINGS_FILE_NAME


def load_settings(path: Optional[Union[str, Path]] = None) -> AppSettings:
    """Load settings, substituting defaults when the document is missing or corrupt."""
    path = Path(path) if path is not None else default_settings_path()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return AppSettings.from_dict(data)
    except FileNotFoundError:
        logger.info("No settings at %s, using defaults", path)
    except (OSError, ValueError, TypeError) as e:
        logger.warning("Ignoring unreadable settings %s: %s", path, e)
    return AppSettings()


def save_settings(settings: AppSettings, path: Optional[Union[str, Path]] = None) -> bool:
    """Write settings as pretty-printed JSON.

    Returns:
        True on success. Failures are logged, not raised.
    """
    path = Path(path) if path is not None else default_settings_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        content = json.dumps(settings.to_dict(), ensure_ascii=False, indent=2)
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        logger.warning("Cannot save settings to %s: %s", path, e)
        return False
    logger.debug("Saved settings to %s", path)
    return True
