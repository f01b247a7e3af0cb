from __future__ import annotations

from PIL import Image

from ..protocol import DEFAULT_GEOMETRY, PrintGeometry, build_job


# 16-bit samples; the high byte is the 8-bit gray value
DEEP_MODES = ("I", "I;16", "I;16L", "I;16B", "I;16N", "F")


def _has_alpha(img: Image.Image) -> bool:
    return img.mode in ("RGBA", "LA", "PA", "RGBa", "La") or "transparency" in img.info


def _reduce_depth(img: Image.Image) -> Image.Image:
    if img.mode != "F":
        img = img.convert("I")
    return img.point(lambda v: v * (1 / 256)).convert("L")


def normalize_image(img: Image.Image) -> Image.Image:
    """Reduce any mode to RGB or L.

    Alpha is treated as premultiplied: transparent areas end up black, as the
    label agents this replaces have always printed them.
    """
    if img.mode in DEEP_MODES:
        return _reduce_depth(img)
    if _has_alpha(img):
        rgba = img.convert("RGBA")
        background = Image.new("RGBA", rgba.size, (0, 0, 0, 255))
        return Image.alpha_composite(background, rgba).convert("RGB")
    if img.mode not in ("RGB", "L"):
        return img.convert("RGB")
    return img


def resample(img: Image.Image, geometry: PrintGeometry = DEFAULT_GEOMETRY) -> Image.Image:
    """Stretch the image to the label geometry with bicubic interpolation.

    The aspect ratio is not preserved; callers crop beforehand if they care.
    """
    if img.width <= 0 or img.height <= 0 or geometry.width <= 0 or geometry.height <= 0:
        return Image.new("L", (0, 0))
    img = normalize_image(img)
    if img.size == (geometry.width, geometry.height):
        return img
    return img.resize((geometry.width, geometry.height), Image.BICUBIC)


def to_gray(img: Image.Image) -> Image.Image:
    if img.mode == "L":
        return img
    return normalize_image(img).convert("L")


def rasterize(img: Image.Image, geometry: PrintGeometry = DEFAULT_GEOMETRY) -> bytes:
    """Convert an image into a complete GS v 0 command buffer for the label."""
    gray = to_gray(resample(img, geometry))
    pixels = gray.load() if gray.width and gray.height else None
    return build_job(lambda x, y: pixels[x, y], gray.width, gray.height, geometry)
