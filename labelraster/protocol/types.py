from __future__ import annotations

from dataclasses import dataclass

# 48 x 24 mm label at 203 dpi
PRINTABLE_WIDTH = 384
PRINTABLE_HEIGHT = 192
# Extra columns appended to every raster row. The target firmware misaligns
# the image without them; keep the value unchanged.
WIDTH_MARGIN = 125
GRAY_THRESHOLD = 128


@dataclass(frozen=True)
class PrintGeometry:
    """Fixed label geometry the rasterizer resamples every image to."""

    width: int = PRINTABLE_WIDTH
    height: int = PRINTABLE_HEIGHT
    margin: int = WIDTH_MARGIN
    threshold: int = GRAY_THRESHOLD

    @property
    def working_width(self) -> int:
        return self.width + self.margin

    @property
    def width_bytes(self) -> int:
        return (self.working_width + 7) // 8

    @property
    def payload_size(self) -> int:
        return self.width_bytes * self.height


@dataclass(frozen=True)
class RasterJob:
    """Header fields and payload recovered from a command buffer."""

    width_bytes: int
    height: int
    payload: bytes

    def row(self, y: int) -> bytes:
        start = y * self.width_bytes
        return self.payload[start : start + self.width_bytes]


DEFAULT_GEOMETRY = PrintGeometry()
