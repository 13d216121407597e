"""
Compositor for console front-end preview images.

Scales a source image to fit the artwork region and draws it onto a fixed
640x480 transparent canvas:

                                 640px
    +-------------------------------------------------------------+
    |   (15,65)                         | GAME LIST               |
    |     +-----------------------+     |                         |
    |     |                       |     |                         |
    |     |      320 x 350        |     |                         |  480px
    |     |                       |     |                         |
    |     +-----------------------+     |                         |
    +-------------------------------------------------------------+
"""
import math
from typing import NamedTuple

from PIL import Image

from artgen_errors import InvalidSource

ARTWORK_X = 15
ARTWORK_Y = 65
ARTWORK_MAX_W = 320
ARTWORK_MAX_H = 350

SCREEN_W = 640
SCREEN_H = 480

# Catmull-Rom cubic
RESAMPLE_FILTER = Image.BICUBIC


class Geometry(NamedTuple):
    scaled_w: int
    scaled_h: int
    pos_x: int
    pos_y: int


def compute_geometry(orig_w: int, orig_h: int) -> Geometry:
    """
    Compute the scale-to-fit size and centred position inside the artwork region.

    Width is fitted first; if the resulting height overflows the region the
    height is clamped instead and the width derived from it.

    Raises:
        InvalidSource: if either dimension is not positive
    """
    if orig_w <= 0 or orig_h <= 0:
        raise InvalidSource(f"Source image has invalid size {orig_w}x{orig_h}")

    ratio = orig_w / orig_h
    w = float(ARTWORK_MAX_W)
    h = w / ratio
    if h > ARTWORK_MAX_H:
        h = float(ARTWORK_MAX_H)
        w = ARTWORK_MAX_H * ratio

    # Very wide or tall sources still get at least one pixel
    scaled_w = max(1, round(w))
    scaled_h = max(1, round(h))

    # Centre on the rounded size so both margins differ by at most 1px
    pos_x = ARTWORK_X + math.floor((ARTWORK_MAX_W - scaled_w) / 2)
    pos_y = ARTWORK_Y + math.floor((ARTWORK_MAX_H - scaled_h) / 2)
    return Geometry(scaled_w, scaled_h, pos_x, pos_y)


def new_canvas() -> Image.Image:
    return Image.new("RGBA", (SCREEN_W, SCREEN_H), (0, 0, 0, 0))


def scale_image(img: Image.Image, w: int, h: int) -> Image.Image:
    # convert() always returns a new image, so the source is never touched
    return img.convert("RGBA").resize((w, h), RESAMPLE_FILTER)


def compose(source: Image.Image) -> Image.Image:
    """
    Render a source image onto a fresh canvas.

    Args:
        source: Decoded artwork; left untouched

    Returns:
        640x480 RGBA canvas with the scaled artwork composited source-over
    """
    orig_w, orig_h = source.size
    geo = compute_geometry(orig_w, orig_h)

    scaled = scale_image(source, geo.scaled_w, geo.scaled_h)

    canvas = new_canvas()
    canvas.alpha_composite(scaled, dest=(geo.pos_x, geo.pos_y))
    return canvas
