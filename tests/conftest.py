import sys
from pathlib import Path

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Make the sources importable without an editable install.
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from photoFilter.core.image import Image, Orientation  # noqa: E402


def _gradient_pixels(width: int = 6, height: int = 5) -> np.ndarray:
    """Return a deterministic opaque 8-bit RGBA test pattern."""

    ys, xs = np.mgrid[0:height, 0:width]
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[..., 0] = (xs * 255) // max(1, width - 1)
    pixels[..., 1] = (ys * 255) // max(1, height - 1)
    pixels[..., 2] = ((xs + ys) * 40) % 256
    pixels[..., 3] = 255
    return pixels


@pytest.fixture
def gradient_image() -> Image:
    return Image.from_array(_gradient_pixels(), scale=2.0, orientation=Orientation.RIGHT)


@pytest.fixture
def white_image() -> Image:
    return Image.from_array(np.full((4, 4, 4), 255, dtype=np.uint8))
