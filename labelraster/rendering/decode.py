from __future__ import annotations

import io
import struct

from PIL import Image, ImageOps, UnidentifiedImageError

from ..errors import DecodeError


def decode_image(data: bytes) -> Image.Image:
    """Decode an image container (PNG, JPEG, GIF, BMP...) held in memory."""
    if not data:
        raise DecodeError("Empty image payload")
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            img = ImageOps.exif_transpose(img)
            return img.copy()
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        OSError,
        SyntaxError,
        EOFError,
        ValueError,
        struct.error,
    ) as exc:
        raise DecodeError(f"Invalid image format: {exc}") from exc


def load_image(path: str) -> Image.Image:
    with open(path, "rb") as handle:
        return decode_image(handle.read())
