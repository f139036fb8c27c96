import io

import numpy as np
import pytest
from PIL import Image


def encode_image(image: Image.Image, fmt: str) -> bytes:
    buf = io.BytesIO()
    image.save(buf, format=fmt)
    return buf.getvalue()


def checkerboard(size: int = 200, square: int = 20) -> Image.Image:
    """Black/white checkerboard with broad intensity spread."""
    rows = np.arange(size) // square
    grid = (rows[:, None] + rows[None, :]) % 2
    return Image.fromarray((grid * 255).astype(np.uint8)).convert("RGB")


def solid(size: tuple[int, int] = (200, 200), color: tuple[int, int, int] = (90, 140, 60)) -> Image.Image:
    return Image.new("RGB", size, color)


@pytest.fixture()
def checkerboard_jpeg_bytes() -> bytes:
    """A 200x200 JPEG with high intensity variance."""
    return encode_image(checkerboard(), "JPEG")


@pytest.fixture()
def checkerboard_png_bytes() -> bytes:
    return encode_image(checkerboard(), "PNG")


@pytest.fixture()
def solid_png_bytes() -> bytes:
    """A 200x200 single-colour PNG (zero variance)."""
    return encode_image(solid(), "PNG")


@pytest.fixture()
def small_png_bytes() -> bytes:
    """A 50x50 PNG, below the minimum dimension."""
    return encode_image(checkerboard(size=50, square=5), "PNG")


@pytest.fixture()
def gif_bytes() -> bytes:
    """A 200x200 GIF, a decodable but unsupported format."""
    return encode_image(checkerboard().convert("P"), "GIF")


@pytest.fixture()
def make_image_bytes():
    """Factory: make_image_bytes(fmt="PNG", size=200, pattern="checkerboard")."""

    def _make(fmt: str = "PNG", size: int = 200, pattern: str = "checkerboard") -> bytes:
        image = checkerboard(size=size, square=max(1, size // 10))
        if pattern == "solid":
            image = solid((size, size))
        return encode_image(image, fmt)

    return _make
