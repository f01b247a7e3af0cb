from __future__ import annotations

from .commands import line_feed_cmd, raster_header_cmd, reset_cmd
from .encoding import GrayLookup, pack_raster
from .types import PrintGeometry, RasterJob

TRAILER_FEEDS = 2
# ESC @ followed by GS v 0 m xL xH yL yH
HEADER_SIZE = 10


def build_job(gray: GrayLookup, image_width: int, image_height: int, geometry: PrintGeometry) -> bytes:
    """Build a full raster command buffer: reset, header, payload, feeds."""
    working_width = image_width + geometry.margin
    width_bytes = (working_width + 7) // 8
    job = bytearray()
    job += reset_cmd()
    job += raster_header_cmd(width_bytes, image_height)
    job += pack_raster(gray, image_width, image_height, geometry)
    job += line_feed_cmd(TRAILER_FEEDS)
    return bytes(job)


def parse_raster_job(data: bytes) -> RasterJob:
    """Split a command buffer produced by :func:`build_job` into its parts."""
    if len(data) < HEADER_SIZE:
        raise ValueError("Truncated raster header")
    if data[:2] != reset_cmd():
        raise ValueError("Missing printer reset command")
    if data[2:6] != raster_header_cmd(0, 0)[:4]:
        raise ValueError("Missing GS v 0 raster header")
    width_bytes = data[6] | (data[7] << 8)
    height = data[8] | (data[9] << 8)
    end = HEADER_SIZE + width_bytes * height
    if len(data) < end:
        raise ValueError(
            f"Payload truncated: expected {width_bytes * height} bytes, got {len(data) - HEADER_SIZE}"
        )
    if data[end:] != line_feed_cmd(TRAILER_FEEDS):
        raise ValueError("Missing line feed trailer")
    return RasterJob(width_bytes=width_bytes, height=height, payload=bytes(data[HEADER_SIZE:end]))
