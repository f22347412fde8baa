"""Shared pytest fixtures and image helpers for the QR pipeline tests."""

from __future__ import annotations

import io

import pytest
from PIL import Image

GRAY = (128, 128, 128, 255)
RED = (255, 0, 0, 255)


def png_bytes(img: Image.Image) -> bytes:
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def solid(size: tuple[int, int], color: tuple[int, ...], mode: str = "RGBA") -> Image.Image:
    return Image.new(mode, size, color)


def open_png(data: bytes) -> Image.Image:
    img = Image.open(io.BytesIO(data))
    img.load()
    return img


@pytest.fixture
def gray_base() -> bytes:
    """256x256 opaque gray canvas encoded as PNG."""
    return png_bytes(solid((256, 256), GRAY))


@pytest.fixture
def red_overlay() -> bytes:
    """100x100 fully opaque red square encoded as PNG."""
    return png_bytes(solid((100, 100), RED))


@pytest.fixture
def jpeg_overlay() -> bytes:
    buf = io.BytesIO()
    solid((40, 40), (255, 0, 0), mode="RGB").save(buf, format="JPEG")
    return buf.getvalue()


@pytest.fixture
def gradient() -> Image.Image:
    """Non-uniform RGBA image so resampling has something to filter."""
    img = Image.new("RGBA", (90, 60))
    img.putdata([(x * 2, y * 4, (x + y) % 256, 255) for y in range(60) for x in range(90)])
    return img
