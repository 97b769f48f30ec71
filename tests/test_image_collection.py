"""Tests for the sibling image collection and cyclic navigation."""

import os
import sys
from pathlib import Path

# Add parent directory to path to import IView module
sys.path.insert(0, str(Path(__file__).parent.parent))

from IView.core.image_collection import (
    Collection,
    ImageCollectionNavigator,
    SortKey,
    advance,
    is_supported,
    locate,
    scan,
    sort_collection,
)


def _touch(folder: Path, name: str, size: int = 1, mtime: float = None) -> Path:
    p = folder / name
    p.write_bytes(b"x" * size)
    if mtime is not None:
        os.utime(p, (mtime, mtime))
    return p


def _names(collection: Collection):
    return [e.name for e in collection.entries]


def test_is_supported_ignores_case():
    assert is_supported("photo.JPG")
    assert is_supported(Path("a/b/c.webp"))
    assert not is_supported("notes.txt")
    assert not is_supported("noext")


def test_scan_lists_only_images_non_recursively(tmp_path):
    _touch(tmp_path, "a.png")
    _touch(tmp_path, "b.JPEG")
    _touch(tmp_path, "readme.txt")
    (tmp_path / "sub").mkdir()
    _touch(tmp_path / "sub", "nested.png")
    (tmp_path / "folder.png").mkdir()

    collection = scan(tmp_path)
    assert sorted(_names(collection)) == ["a.png", "b.JPEG"]
    assert collection.index == 0


def test_scan_missing_directory_is_empty(tmp_path):
    collection = scan(tmp_path / "missing")
    assert collection.is_empty()
    assert collection.current is None
    assert scan(None).is_empty()


def test_sort_by_name_extension_size_and_date(tmp_path):
    _touch(tmp_path, "c.bmp", size=30, mtime=1_000_000)
    _touch(tmp_path, "a.png", size=10, mtime=3_000_000)
    _touch(tmp_path, "b.jpg", size=20, mtime=2_000_000)
    collection = scan(tmp_path)

    sort_collection(collection, SortKey.NAME)
    assert _names(collection) == ["a.png", "b.jpg", "c.bmp"]
    sort_collection(collection, SortKey.EXTENSION)
    assert _names(collection) == ["c.bmp", "b.jpg", "a.png"]
    sort_collection(collection, SortKey.SIZE)
    assert _names(collection) == ["a.png", "b.jpg", "c.bmp"]
    sort_collection(collection, SortKey.DATE)
    assert _names(collection) == ["c.bmp", "b.jpg", "a.png"]


def test_sort_is_stable_for_ties(tmp_path):
    for name in ("d.png", "a.png", "c.png", "b.png"):
        _touch(tmp_path, name, size=5)
    collection = scan(tmp_path)
    sort_collection(collection, SortKey.NAME)
    sort_collection(collection, SortKey.SIZE)
    assert _names(collection) == ["a.png", "b.png", "c.png", "d.png"]


def test_locate_finds_every_listed_path(tmp_path):
    for name in ("x.png", "y.png", "z.png"):
        _touch(tmp_path, name)
    collection = scan(tmp_path)
    for i, entry in enumerate(collection.entries):
        assert locate(collection, entry.path) == i
    assert locate(collection, tmp_path / "missing.png") is None


def test_advance_wraps_both_ways():
    collection = Collection(entries=[object()] * 3)
    assert advance(collection, 2, 1) == 0
    assert advance(collection, 0, -1) == 2
    assert advance(collection, 1, 1) == 2
    assert advance(Collection(), 5, 1) == 5


def test_navigator_opens_and_cycles(tmp_path):
    for name in ("a.png", "b.png", "c.png"):
        _touch(tmp_path, name)
    nav = ImageCollectionNavigator()

    assert nav.open(tmp_path / "b.png") == 1
    assert nav.step(1).name == "c.png"
    assert nav.step(1).name == "a.png"
    assert nav.step(-1).name == "c.png"
    assert nav.index == 2


def test_navigator_full_cycle_returns_to_start(tmp_path):
    for name in ("a.png", "b.png", "c.png", "d.png"):
        _touch(tmp_path, name)
    nav = ImageCollectionNavigator()
    nav.open(tmp_path / "c.png")
    start = nav.index
    for _ in range(len(nav)):
        nav.step(1)
    assert nav.index == start


def test_navigator_rescans_only_on_directory_change(tmp_path):
    first = tmp_path / "first"
    second = tmp_path / "second"
    first.mkdir()
    second.mkdir()
    _touch(first, "a.png")
    _touch(first, "b.png")
    _touch(second, "c.png")
    (first / "sub").mkdir()

    nav = ImageCollectionNavigator()
    nav.open(first / "a.png")
    assert nav.scan_count == 1

    # Same directory through another relative route
    assert nav.open(first / "sub" / ".." / "b.png") == 1
    assert nav.scan_count == 1

    nav.open(second / "c.png")
    assert nav.scan_count == 2
    assert len(nav) == 1


def test_navigator_unreadable_directory_is_empty(tmp_path):
    nav = ImageCollectionNavigator()
    assert nav.open(tmp_path / "missing" / "a.png") is None
    assert len(nav) == 0
    assert nav.step(1) is None
    assert nav.index == 0


def test_set_sort_key_keeps_current_image(tmp_path):
    _touch(tmp_path, "a.png", size=30)
    _touch(tmp_path, "b.png", size=10)
    _touch(tmp_path, "c.png", size=20)
    nav = ImageCollectionNavigator(SortKey.NAME)
    nav.open(tmp_path / "a.png")
    assert nav.index == 0

    nav.set_sort_key(SortKey.SIZE)
    assert nav.index == 2
    assert nav.current_path.name == "a.png"
    assert nav.scan_count == 1


def test_sort_by_date_keeps_order_of_equal_times(tmp_path):
    for name in ("b.png", "a.png", "c.png"):
        _touch(tmp_path, name, mtime=1_500_000)
    _touch(tmp_path, "old.png", mtime=1_000)
    collection = scan(tmp_path)
    sort_collection(collection, SortKey.NAME)
    sort_collection(collection, SortKey.DATE)
    assert _names(collection) == ["old.png", "a.png", "b.png", "c.png"]
