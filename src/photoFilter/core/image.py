"""Immutable image container passed into and out of the filter engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any

import numpy as np

from .filters.utils import normalise_pixels


class Orientation(IntEnum):
    """EXIF orientation values describing how the pixels should be displayed."""

    UP = 1
    UP_MIRRORED = 2
    DOWN = 3
    DOWN_MIRRORED = 4
    LEFT_MIRRORED = 5
    RIGHT = 6
    RIGHT_MIRRORED = 7
    LEFT = 8

    @classmethod
    def from_exif(cls, value: Any) -> "Orientation":
        """Return the orientation for an EXIF tag *value*, defaulting to ``UP``."""

        try:
            return cls(int(value))
        except (TypeError, ValueError):
            return cls.UP


@dataclass(frozen=True, eq=False)
class Image:
    """Pixel buffer plus the display metadata the engine must carry through.

    ``pixels`` is stored as handed over by the caller.  Validation happens when
    the engine converts the image into a graph source so that malformed input
    surfaces as :class:`~photoFilter.errors.DecodeError` instead of failing at
    construction time.  Images produced by the engine hold a read-only
    ``float32`` RGBA array with straight (non-premultiplied) alpha.
    """

    pixels: np.ndarray
    scale: float = 1.0
    orientation: Orientation = Orientation.UP

    @classmethod
    def from_array(
        cls,
        array: Any,
        *,
        scale: float = 1.0,
        orientation: Orientation = Orientation.UP,
    ) -> "Image":
        """Wrap a copy of *array* so later caller mutations cannot leak in."""

        pixels = np.array(array, copy=True)
        pixels.setflags(write=False)
        return cls(pixels=pixels, scale=float(scale), orientation=Orientation(orientation))

    @property
    def width(self) -> int:
        shape = np.shape(self.pixels)
        return int(shape[1]) if len(shape) >= 2 else 0

    @property
    def height(self) -> int:
        shape = np.shape(self.pixels)
        return int(shape[0]) if len(shape) >= 1 else 0

    @property
    def size(self) -> tuple[int, int]:
        """Return ``(width, height)`` in pixels."""

        return self.width, self.height

    def to_float_rgba(self) -> np.ndarray:
        """Return the pixels as a fresh ``float32`` RGBA array in ``[0, 1]``."""

        return normalise_pixels(self.pixels)

    def to_uint8_rgba(self) -> np.ndarray:
        """Return the pixels quantised to 8-bit RGBA for display or export."""

        rgba = np.clip(self.to_float_rgba(), 0.0, 1.0)
        return np.rint(rgba * np.float32(255.0)).astype(np.uint8)


__all__ = ["Image", "Orientation"]
