"""Decode/encode for the three supported raster formats, keyed by MIME type."""

from pathlib import Path

from PIL import Image, UnidentifiedImageError

from forum.core.errors import DecodeError, StorageError

PIL_FORMATS: dict[str, str] = {
    "image/jpeg": "JPEG",
    "image/png": "PNG",
    "image/gif": "GIF",
}

DEFAULT_JPEG_QUALITY = 80

# What Pillow raises for bytes that are not a valid image of the requested format
_DECODE_ERRORS = (
    UnidentifiedImageError,
    Image.DecompressionBombError,
    OSError,
    EOFError,
    SyntaxError,
    ValueError,
)


def _pil_format(mime_type: str) -> str:
    try:
        return PIL_FORMATS[mime_type]
    except KeyError:
        raise ValueError(f"Unsupported image type: {mime_type}") from None


def decode(path: Path, mime_type: str) -> Image.Image:
    """Open *path* as *mime_type* and load its pixels.

    The declared type is trusted; Pillow may not fall back to another format.
    Raises DecodeError if the bytes do not parse. Failing to open the file at
    all is an OSError and is left to the caller.
    """
    fmt = _pil_format(mime_type)
    with open(path, "rb") as fh:
        try:
            with Image.open(fh, formats=[fmt]) as img:
                img.load()
                # GIFs decode to their first frame
                return img.copy()
        except _DECODE_ERRORS as exc:
            raise DecodeError() from exc


def encode(img: Image.Image, path: Path, mime_type: str, jpeg_quality: int = DEFAULT_JPEG_QUALITY) -> None:
    """Write *img* to a new file at *path*. Raises StorageError on failure.

    JPEG uses a fixed quality, PNG is lossless, GIF gets Pillow's default
    palette conversion. JPEG and GIF drop the alpha channel.
    """
    fmt = _pil_format(mime_type)
    options: dict = {}
    if fmt in ("JPEG", "GIF") and img.mode != "RGB":
        img = img.convert("RGB")
    if fmt == "JPEG":
        options["quality"] = jpeg_quality
    try:
        with open(path, "xb") as fh:
            img.save(fh, fmt, **options)
    except (OSError, ValueError) as exc:
        raise StorageError() from exc
