"""Tests for image loading, EXIF handling and save-as."""

import sys
from pathlib import Path

import cv2
import numpy as np
import pytest
from PIL import Image

# Add parent directory to path to import IView module
sys.path.insert(0, str(Path(__file__).parent.parent))

from IView.core.color_lut import Rotation
from IView.core.image_io import (
    JpegOptions,
    PlainOptions,
    WebpOptions,
    default_save_options,
    exif_orientation,
    format_byte_count,
    get_image_info,
    gps_to_decimal,
    is_image_file,
    load_image,
    numpy_to_qimage,
    read_exif_tags,
    rotate_image,
    save_image,
)
from IView.core.session import decode_with_orientation


class FakeTag:
    """Stand-in for an exifread IfdTag."""

    def __init__(self, values, printable=None):
        self.values = values
        self.printable = printable if printable is not None else str(values)

    def __str__(self):
        return self.printable


class FakeRatio:
    def __init__(self, num, den):
        self.num = num
        self.den = den


def test_load_color_png_as_rgba(tmp_path):
    bgr = np.zeros((3, 5, 3), dtype=np.uint8)
    bgr[..., 0] = 255  # blue in OpenCV order
    path = tmp_path / "blue.png"
    assert cv2.imwrite(str(path), bgr)

    arr = load_image(path)
    assert arr.shape == (3, 5, 4)
    assert arr.dtype == np.uint8
    assert tuple(arr[0, 0]) == (0, 0, 255, 255)


def test_load_gray_and_16bit_png(tmp_path):
    gray = np.full((2, 2), 77, dtype=np.uint8)
    cv2.imwrite(str(tmp_path / "gray.png"), gray)
    assert tuple(load_image(tmp_path / "gray.png")[1, 1]) == (77, 77, 77, 255)

    deep = np.full((2, 2, 3), 0x1234, dtype=np.uint16)
    cv2.imwrite(str(tmp_path / "deep.png"), deep)
    assert tuple(load_image(tmp_path / "deep.png")[0, 0]) == (0x12, 0x12, 0x12, 255)


def test_load_gif_with_pillow(tmp_path):
    path = tmp_path / "anim.gif"
    Image.new("RGB", (4, 3), (255, 0, 0)).save(path)
    arr = load_image(path)
    assert arr.shape == (3, 4, 4)
    assert tuple(arr[0, 0]) == (255, 0, 0, 255)


def test_load_failures_raise_runtime_error(tmp_path):
    broken = tmp_path / "broken.jpg"
    broken.write_bytes(b"not an image")
    with pytest.raises(RuntimeError):
        load_image(broken)
    with pytest.raises(RuntimeError):
        load_image(tmp_path / "missing.png")


def test_is_image_file():
    assert is_image_file("a.TIF")
    assert not is_image_file("a.exr")


def test_rotate_image_clockwise():
    arr = np.zeros((2, 3), dtype=np.uint8)
    arr[0, 0] = 9
    rotated = rotate_image(arr, Rotation.ROTATE_90)
    assert rotated.shape == (3, 2)
    assert rotated[0, 1] == 9
    assert rotate_image(arr, Rotation.ROTATE_180)[1, 2] == 9
    assert rotate_image(arr, Rotation.ROTATE_270)[2, 0] == 9
    assert rotate_image(arr, Rotation.ROTATE_0) is arr


def test_exif_orientation_mapping():
    assert exif_orientation({}) == Rotation.ROTATE_0
    assert exif_orientation({"Image Orientation": FakeTag([6])}) == Rotation.ROTATE_90
    assert exif_orientation({"Image Orientation": FakeTag([3])}) == Rotation.ROTATE_180
    assert exif_orientation({"Image Orientation": FakeTag([8])}) == Rotation.ROTATE_270
    # mirrored variants are shown unrotated
    assert exif_orientation({"Image Orientation": FakeTag([5])}) == Rotation.ROTATE_0
    assert exif_orientation({"Image Orientation": FakeTag([])}) == Rotation.ROTATE_0


def test_decode_applies_exif_orientation(tmp_path):
    path = tmp_path / "portrait.jpg"
    exif = Image.Exif()
    exif[0x0112] = 6
    Image.new("RGB", (8, 4), (0, 128, 0)).save(path, exif=exif)

    arr, tags = decode_with_orientation(path)
    assert exif_orientation(tags) == Rotation.ROTATE_90
    assert arr.shape[:2] == (8, 4)


def test_read_exif_tags_without_exif(tmp_path):
    path = tmp_path / "plain.png"
    cv2.imwrite(str(path), np.zeros((2, 2, 3), dtype=np.uint8))
    assert exif_orientation(read_exif_tags(path)) == Rotation.ROTATE_0
    assert read_exif_tags(tmp_path / "missing.jpg") == {}


def test_gps_to_decimal():
    values = [FakeRatio(47, 1), FakeRatio(30, 1), FakeRatio(36, 1)]
    assert gps_to_decimal(values) == pytest.approx(47.51)
    assert gps_to_decimal([FakeRatio(1, 1)]) is None


def test_format_byte_count():
    assert format_byte_count(1234567) == "1 234 567"
    assert format_byte_count(12) == "12"


def test_get_image_info(tmp_path):
    path = tmp_path / "photo.jpg"
    path.write_bytes(b"x" * 2048)
    tags = {
        "EXIF DateTimeOriginal": FakeTag(None, "2021:07:01 10:20:30"),
        "Image Model": FakeTag(None, "Camera X "),
        "GPS GPSLatitude": FakeTag([FakeRatio(47, 1), FakeRatio(30, 1), FakeRatio(0, 1)]),
        "GPS GPSLatitudeRef": FakeTag(None, "N"),
        "GPS GPSLongitude": FakeTag([FakeRatio(19, 1), FakeRatio(3, 1), FakeRatio(0, 1)]),
        "GPS GPSLongitudeRef": FakeTag(None, "W"),
    }
    info = get_image_info(path, (640, 480), tags)
    assert info["Name"] == "photo.jpg"
    assert info["Size"] == "640 x 480 pixel"
    assert info["FileSize"] == "2 048 Byte"
    assert info["Created"] == "2021:07:01 10:20:30"
    assert info["Machine"] == "Camera X"
    assert info["GeoLocation"] == "47.500000, -19.050000"
    assert info["Map"].endswith("47.500000,-19.050000")


def test_get_image_info_without_exif(tmp_path):
    path = tmp_path / "plain.png"
    path.write_bytes(b"x")
    info = get_image_info(path, tags={})
    assert "GeoLocation" not in info
    assert "Size" not in info


def test_default_save_options():
    assert default_save_options("a.JPG") == JpegOptions(quality=85)
    assert default_save_options("a.webp") == WebpOptions(quality=85, lossless=False)
    assert default_save_options("a.png") == PlainOptions()


def test_save_as_jpeg_and_webp(tmp_path):
    source = tmp_path / "src.png"
    Image.new("RGBA", (6, 4), (10, 200, 30, 255)).save(source)

    save_image(source, tmp_path / "out.jpg", JpegOptions(quality=50))
    with Image.open(tmp_path / "out.jpg") as im:
        assert im.format == "JPEG"
        assert im.size == (6, 4)

    save_image(source, tmp_path / "out.webp", WebpOptions(lossless=True))
    with Image.open(tmp_path / "out.webp") as im:
        assert im.format == "WEBP"
        assert im.convert("RGB").getpixel((0, 0)) == (10, 200, 30)

    save_image(source, tmp_path / "out.bmp", PlainOptions())
    with Image.open(tmp_path / "out.bmp") as im:
        assert im.format == "BMP"


def test_numpy_to_qimage_copies():
    arr = np.zeros((3, 5, 4), dtype=np.uint8)
    qimg = numpy_to_qimage(arr)
    assert (qimg.width(), qimg.height()) == (5, 3)
    arr[...] = 255
    assert qimg.pixelColor(0, 0).red() == 0
    with pytest.raises(ValueError):
        numpy_to_qimage(np.zeros((2, 2, 2), dtype=np.uint8))
