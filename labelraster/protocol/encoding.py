from __future__ import annotations

from typing import Callable, List, Sequence

from .types import PrintGeometry

GrayLookup = Callable[[int, int], int]


def threshold_row(values: Sequence[int], threshold: int) -> List[int]:
    """Map gray values to 1 (black) / 0 (white)."""
    return [1 if value < threshold else 0 for value in values]


def pack_line(line: Sequence[int], width: int) -> bytes:
    """Pack a 1-bit line MSB first into ceil(width / 8) bytes.

    Positions past the end of ``line`` are left white.
    """
    out = bytearray()
    for i in range(0, width, 8):
        value = 0
        for bit in range(8):
            x = i + bit
            if x < len(line) and line[x]:
                value |= 1 << (7 - bit)
        out.append(value)
    return bytes(out)


def pack_raster(gray: GrayLookup, image_width: int, image_height: int, geometry: PrintGeometry) -> bytes:
    """Threshold and pack every row of an image into raster payload bytes.

    ``gray(x, y)`` is only called for columns inside ``image_width``; the
    remaining columns up to the working width are padding and stay 0.
    """
    working_width = image_width + geometry.margin
    out = bytearray()
    for y in range(image_height):
        values = [gray(x, y) for x in range(image_width)]
        out += pack_line(threshold_row(values, geometry.threshold), working_width)
    return bytes(out)
