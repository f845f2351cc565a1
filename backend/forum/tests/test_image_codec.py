"""Tests for format-dispatched decode/encode."""

import pytest
from PIL import Image

from forum.core.errors import DecodeError, StorageError
from forum.services import image_codec
from forum.tests.conftest import make_image_bytes


@pytest.mark.parametrize(
    "fmt,mime",
    [("JPEG", "image/jpeg"), ("PNG", "image/png"), ("GIF", "image/gif")],
)
def test_decode_supported_formats(tmp_path, fmt, mime):
    path = tmp_path / "img"
    path.write_bytes(make_image_bytes(fmt, (12, 7)))
    img = image_codec.decode(path, mime)
    assert img.size == (12, 7)


def test_decode_garbage_raises_decode_error(tmp_path):
    path = tmp_path / "img.png"
    path.write_bytes(b"not an image")
    with pytest.raises(DecodeError):
        image_codec.decode(path, "image/png")


def test_decode_truncated_png_raises_decode_error(tmp_path):
    path = tmp_path / "img.png"
    path.write_bytes(make_image_bytes("PNG", (64, 64))[:60])
    with pytest.raises(DecodeError):
        image_codec.decode(path, "image/png")


def test_decode_does_not_accept_other_formats(tmp_path):
    path = tmp_path / "img.jpg"
    path.write_bytes(make_image_bytes("PNG"))
    with pytest.raises(DecodeError):
        image_codec.decode(path, "image/jpeg")


def test_decode_missing_file_is_oserror(tmp_path):
    with pytest.raises(FileNotFoundError):
        image_codec.decode(tmp_path / "missing.png", "image/png")


@pytest.mark.parametrize(
    "fmt,mime",
    [("JPEG", "image/jpeg"), ("PNG", "image/png"), ("GIF", "image/gif")],
)
def test_encode_writes_declared_format(tmp_path, fmt, mime):
    path = tmp_path / "thumb"
    image_codec.encode(Image.new("RGBA", (150, 150), (10, 20, 30, 255)), path, mime)
    with Image.open(path) as written:
        assert written.format == fmt
        assert written.size == (150, 150)


def test_encode_png_keeps_alpha(tmp_path):
    path = tmp_path / "thumb.png"
    image_codec.encode(Image.new("RGBA", (4, 4), (1, 2, 3, 0)), path, "image/png")
    with Image.open(path) as written:
        assert written.getpixel((0, 0)) == (1, 2, 3, 0)


def test_encode_into_existing_file_raises_storage_error(tmp_path):
    path = tmp_path / "thumb.png"
    path.write_bytes(b"taken")
    with pytest.raises(StorageError):
        image_codec.encode(Image.new("RGBA", (4, 4)), path, "image/png")
    assert path.read_bytes() == b"taken"


def test_unknown_mime_is_rejected(tmp_path):
    with pytest.raises(ValueError):
        image_codec.decode(tmp_path / "x", "image/webp")
