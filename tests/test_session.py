"""Tests for the view session (load, navigation, color and rotation commands)."""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add parent directory to path to import IView module
sys.path.insert(0, str(Path(__file__).parent.parent))

from IView.core.color_lut import ColorSettings, Rotation
from IView.core.image_collection import SortKey
from IView.core.session import RequestTracker, ViewSession
from IView.core.settings import AppSettings
from IView.core.viewport import Vec2


class FakeDecoder:
    """Returns a flat 6x4 RGBA image for any path and records the calls."""

    def __init__(self, fail=()):
        self.calls = []
        self.fail = set(fail)

    def __call__(self, path):
        self.calls.append(Path(path).name)
        if Path(path).name in self.fail:
            raise RuntimeError(f"Cannot open image: {path}")
        arr = np.full((4, 6, 4), 100, dtype=np.uint8)
        arr[..., 3] = 255
        return arr, {}


@pytest.fixture
def folder(tmp_path):
    for name in ("a.png", "b.png", "c.png"):
        (tmp_path / name).write_bytes(b"x")
    return tmp_path


@pytest.fixture
def session():
    s = ViewSession(AppSettings(), decoder=FakeDecoder())
    s.viewport.set_display_area(Vec2(1200.0, 800.0))
    return s


def test_request_tracker_last_wins():
    tracker = RequestTracker()
    first = tracker.issue()
    second = tracker.issue()
    assert not tracker.is_current(first)
    assert tracker.is_current(second)


def test_open_loads_and_arms_fit(session, folder):
    buf = session.open(folder / "a.png")
    assert buf.shape == (4, 6, 4)
    assert session.image_size == (6.0, 4.0)
    assert session.fit_pending
    assert session.title() == "IView - 0. a.png  1"

    result = session.layout_pass()
    assert result is not None
    assert not session.fit_pending


def test_step_cycles_through_folder(session, folder):
    session.open(folder / "c.png")
    session.step(1)
    assert session.path.name == "a.png"
    session.step(-1)
    assert session.path.name == "c.png"
    assert session.navigator.scan_count == 1


def test_load_resets_color_settings(session, folder):
    session.open(folder / "a.png")
    session.toggle_invert()
    assert session.lut_engine.active
    session.step(1)
    assert session.color_settings == ColorSettings()
    assert not session.lut_engine.active


def test_toggle_channel_zeroes_channel(session, folder):
    session.open(folder / "a.png")
    buf = session.toggle_channel("r")
    assert not buf[..., 0].any()
    assert (buf[..., 1] == 100).all()
    assert (buf[..., 3] == 255).all()
    # the decoded pixels stay untouched
    assert (session.original[..., 0] == 100).all()

    buf = session.toggle_channel("R")
    assert (buf[..., 0] == 100).all()


def test_unknown_channel_is_rejected(session, folder):
    session.open(folder / "a.png")
    with pytest.raises(ValueError):
        session.toggle_channel("x")


def test_invert_and_color_values(session, folder):
    session.open(folder / "a.png")
    assert (session.toggle_invert()[..., 0] == 155).all()
    session.toggle_invert()
    buf = session.set_color_values(1.0, 0.0, 1.0)
    assert (buf[..., :3] == 255).all()


def test_quarter_turn_transposes_and_refits(session, folder):
    session.open(folder / "a.png")
    session.layout_pass()

    buf = session.rotate_by(Rotation.ROTATE_90)
    assert buf.shape == (6, 4, 4)
    assert session.image_size == (4.0, 6.0)
    assert session.fit_pending
    session.layout_pass()

    session.rotate_by(Rotation.ROTATE_180)
    assert session.color_settings.rotation == Rotation.ROTATE_270
    assert not session.fit_pending

    buf = session.reset_rotation()
    assert buf.shape == (4, 6, 4)
    assert session.fit_pending


def test_failed_decode_keeps_previous_image(folder):
    s = ViewSession(AppSettings(), decoder=FakeDecoder(fail={"b.png"}))
    s.open(folder / "a.png")
    with pytest.raises(RuntimeError):
        s.step(1)
    assert s.path.name == "a.png"
    assert s.has_image


def test_stale_load_is_discarded(session, folder):
    arr, tags = session.decoder(folder / "a.png")
    stale = session.requests.issue()
    session.load(folder / "b.png")
    assert session.commit_load(stale, folder / "a.png", arr, tags) is None
    assert session.path.name == "b.png"


def test_reopen_keeps_magnification(session, folder):
    session.open(folder / "a.png")
    session.layout_pass()
    session.zoom_step(-1)
    magnification = session.magnification

    session.reopen()
    assert session.layout_pass() is None
    assert session.magnification == magnification

    session.settings.refit_reopen = True
    session.reopen()
    assert session.fit_pending


def test_sort_key_and_snapshot(session, folder):
    session.open(folder / "b.png")
    session.set_sort_key(SortKey.SIZE)
    assert session.settings.sort_key == SortKey.SIZE
    assert session.navigator.current_path.name == "b.png"

    session.viewport.state.magnification = 2.5
    snap = session.snapshot_settings()
    assert snap.magnify == 2.5
    assert snap.last_folder == folder.resolve()


def test_magnify_setting_restored():
    s = ViewSession(AppSettings(magnify=42.0), decoder=FakeDecoder())
    assert s.magnification == 10.0


class RgbDecoder:
    def __call__(self, path):
        arr = np.zeros((2, 3, 3), dtype=np.uint8)
        arr[..., 0] = 200
        return arr, {}


def test_rgb_decoder_output_keeps_channel_order(folder):
    s = ViewSession(AppSettings(), decoder=RgbDecoder())
    buf = s.open(folder / "a.png")
    assert buf.shape == (2, 3, 4)
    assert tuple(buf[0, 0]) == (200, 0, 0, 255)


def test_unsupported_decoder_output_is_rejected(folder):
    s = ViewSession(AppSettings(), decoder=lambda path: (np.zeros((2, 2, 2), dtype=np.uint8), {}))
    with pytest.raises(ValueError):
        s.open(folder / "a.png")
    assert s.path is None
    assert not s.has_image


def test_failed_open_keeps_previous_collection(folder, tmp_path_factory):
    other = tmp_path_factory.mktemp("other")
    (other / "x.png").write_bytes(b"x")
    s = ViewSession(AppSettings(), decoder=FakeDecoder(fail={"x.png"}))
    s.open(folder / "b.png")

    with pytest.raises(RuntimeError):
        s.open(other / "x.png")
    assert s.path.name == "b.png"
    assert s.navigator.current_path.name == "b.png"
    assert s.title() == "IView - 1. b.png  1"
    assert s.snapshot_settings().last_folder == folder.resolve()
