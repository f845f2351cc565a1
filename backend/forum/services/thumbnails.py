"""
Fixed-size letterboxed thumbnails.

The source is scaled to fit inside the target box with its aspect ratio kept,
resampled nearest-neighbour with truncating integer arithmetic, and centred on
a white canvas of exactly the target size.
"""

from PIL import Image

DEFAULT_SIZE = (150, 150)
BACKGROUND = (255, 255, 255, 255)


def fit_dimensions(src_width: int, src_height: int, width: int, height: int) -> tuple[int, int]:
    """Largest (w, h) with the source aspect ratio that fits in width x height."""
    if src_width * height > src_height * width:
        return width, src_height * width // src_width
    return src_width * height // src_height, height


def resize_nearest(src: Image.Image, width: int, height: int) -> Image.Image:
    """Nearest-neighbour resample of *src* to width x height.

    Destination pixel (x, y) samples source pixel
    (x * src_width // width, y * src_height // height).
    """
    src = src.convert("RGBA")
    dst = Image.new("RGBA", (width, height))
    if width == 0 or height == 0:
        return dst

    src_width, src_height = src.size
    src_px = src.load()
    dst_px = dst.load()
    for y in range(height):
        sy = y * src_height // height
        for x in range(width):
            dst_px[x, y] = src_px[x * src_width // width, sy]
    return dst


def create_thumbnail(src: Image.Image, width: int = DEFAULT_SIZE[0], height: int = DEFAULT_SIZE[1]) -> Image.Image:
    """Return a new width x height RGBA image holding *src* letterboxed on white."""
    canvas = Image.new("RGBA", (width, height), BACKGROUND)

    scaled_width, scaled_height = fit_dimensions(src.width, src.height, width, height)
    if scaled_width == 0 or scaled_height == 0:
        # Extreme aspect ratios scale one side to nothing
        return canvas

    resized = resize_nearest(src, scaled_width, scaled_height)
    offset = ((width - scaled_width) // 2, (height - scaled_height) // 2)
    # Plain paste without a mask copies pixels as-is, alpha included
    canvas.paste(resized, offset)
    return canvas
