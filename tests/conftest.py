import io

import pytest
from PIL import Image


def png_bytes(img: Image.Image) -> bytes:
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def black_png() -> bytes:
    return png_bytes(Image.new("RGB", (384, 192), (0, 0, 0)))


@pytest.fixture
def white_png() -> bytes:
    return png_bytes(Image.new("RGB", (1, 1), (255, 255, 255)))


def png_chunk_offsets(data: bytes, chunk_type: bytes) -> list:
    offsets = []
    pos = 8
    while pos + 8 <= len(data):
        length = int.from_bytes(data[pos : pos + 4], "big")
        if data[pos + 4 : pos + 8] == chunk_type:
            offsets.append(pos)
        pos += 12 + length
    return offsets


@pytest.fixture
def corrupt_png() -> bytes:
    """PNG whose second IDAT chunk has a garbage chunk type."""
    data = png_bytes(Image.effect_noise((512, 512), 100))
    second = png_chunk_offsets(data, b"IDAT")[1]
    return data[: second + 4] + b"n\xb7;'" + data[second + 8 :]
