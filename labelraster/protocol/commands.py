from __future__ import annotations

ESC = 0x1B
GS = 0x1D
LF = 0x0A


def reset_cmd() -> bytes:
    """Build the ESC @ printer initialization command."""
    return bytes([ESC, 0x40])


def raster_header_cmd(width_bytes: int, height: int) -> bytes:
    """Build the GS v 0 raster bit image header (normal density)."""
    return bytes(
        [
            GS,
            0x76,
            0x30,
            0x00,
            width_bytes & 0xFF,
            (width_bytes >> 8) & 0xFF,
            height & 0xFF,
            (height >> 8) & 0xFF,
        ]
    )


def line_feed_cmd(count: int = 1) -> bytes:
    """Build ``count`` line feeds to push the last rows past the head."""
    return bytes([LF] * max(0, count))
