"""Tests for settings persistence."""

import json
import sys
from pathlib import Path

# Add parent directory to path to import IView module
sys.path.insert(0, str(Path(__file__).parent.parent))

from IView.core.color_lut import ColorSettings, Rotation
from IView.core.image_collection import SortKey
from IView.core.settings import AppSettings, load_settings, save_settings


def test_defaults():
    s = AppSettings()
    assert s.color_settings == ColorSettings()
    assert s.sort_key == SortKey.NAME
    assert s.last_folder is None
    assert s.magnify == 1.0
    assert s.center and s.fit_open and not s.refit_reopen


def test_save_and_load(tmp_path):
    path = tmp_path / "cfg" / "settings.json"
    original = AppSettings(
        color_settings=ColorSettings(gamma=1.8, contrast=-0.2, brightness=0.1, show_g=False, invert=True,
                                     rotation=Rotation.ROTATE_270),
        sort_key=SortKey.DATE,
        last_folder=tmp_path,
        magnify=0.35,
        refit_reopen=True,
        center=False,
        fit_open=False,
    )
    assert save_settings(original, path)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["rotation"] == 270
    assert data["sort"] == "date"

    assert load_settings(path) == original


def test_missing_file_gives_defaults(tmp_path):
    assert load_settings(tmp_path / "none.json") == AppSettings()


def test_corrupt_file_gives_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_settings(path) == AppSettings()


def test_wrong_types_give_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"gamma": "bright", "center": False}), encoding="utf-8")
    assert load_settings(path) == AppSettings()

    path.write_text(json.dumps([1, 2, 3]), encoding="utf-8")
    assert load_settings(path) == AppSettings()

    path.write_text(json.dumps({"sort": "color"}), encoding="utf-8")
    assert load_settings(path) == AppSettings()


def test_missing_keys_take_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"gamma": 2, "center": False}), encoding="utf-8")
    s = load_settings(path)
    assert s.color_settings.gamma == 2.0
    assert not s.center
    assert s.fit_open
    assert s.color_settings.contrast == 0.0


def test_unwritable_location_reports_failure(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    assert not save_settings(AppSettings(), blocker / "settings.json")


def test_non_finite_numbers_give_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text('{"magnify": NaN, "fit_open": false}', encoding="utf-8")
    assert load_settings(path) == AppSettings()

    path.write_text('{"gamma": Infinity}', encoding="utf-8")
    assert load_settings(path) == AppSettings()
