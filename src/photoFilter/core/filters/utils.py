"""Pixel buffer normalisation shared by the graph source and the executors.

Callers hand the engine whatever their decoder produced: 8-bit or 16-bit
integers, floats, gray, gray+alpha, RGB or RGBA.  Every executor downstream
works on one layout only, a C-contiguous ``float32`` array shaped
``(height, width, 4)`` with straight alpha in ``[0, 1]``.  The helpers here
perform that conversion once and reject anything that cannot be interpreted.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from ...errors import DecodeError

_INTEGER_RANGES = {
    np.dtype(np.uint8): 255.0,
    np.dtype(np.uint16): 65535.0,
}


def normalise_pixels(pixels: Any) -> np.ndarray:
    """Return *pixels* as a new ``float32`` RGBA array.

    Raises :class:`DecodeError` when the buffer has no usable shape, an
    unsupported sample type, a zero extent or non-finite samples.
    """

    try:
        array = np.asarray(pixels)
    except (TypeError, ValueError) as exc:
        raise DecodeError(f"Pixel buffer is not array-like: {exc}") from exc

    if array.ndim == 2:
        array = array[:, :, np.newaxis]
    if array.ndim != 3:
        raise DecodeError(f"Expected a (height, width, channels) buffer, got shape {array.shape}")

    height, width, channels = array.shape
    if height <= 0 or width <= 0:
        raise DecodeError(f"Pixel buffer has zero extent ({width}x{height})")

    samples = _to_unit_float(array)

    if channels == 1:
        rgb = np.repeat(samples, 3, axis=2)
        alpha = np.ones((height, width, 1), dtype=np.float32)
    elif channels == 2:
        rgb = np.repeat(samples[:, :, :1], 3, axis=2)
        alpha = samples[:, :, 1:2]
    elif channels == 3:
        rgb = samples
        alpha = np.ones((height, width, 1), dtype=np.float32)
    elif channels == 4:
        rgb = samples[:, :, :3]
        alpha = samples[:, :, 3:4]
    else:
        raise DecodeError(f"Unsupported channel count: {channels}")

    rgba = np.concatenate((rgb, alpha), axis=2)
    if not np.isfinite(rgba).all():
        raise DecodeError("Pixel buffer contains NaN or infinite samples")
    return np.ascontiguousarray(rgba, dtype=np.float32)


def _to_unit_float(array: np.ndarray) -> np.ndarray:
    """Map integer samples onto ``[0, 1]``; pass floating samples through."""

    full_scale = _INTEGER_RANGES.get(array.dtype)
    if full_scale is not None:
        return array.astype(np.float32) / np.float32(full_scale)
    if np.issubdtype(array.dtype, np.floating):
        return array.astype(np.float32, copy=True)
    raise DecodeError(f"Unsupported pixel sample type: {array.dtype}")


def luminance(rgb: np.ndarray) -> np.ndarray:
    """Return Rec. 709 luma for an ``(..., 3)`` array."""

    return (
        rgb[..., 0] * np.float32(0.2126)
        + rgb[..., 1] * np.float32(0.7152)
        + rgb[..., 2] * np.float32(0.0722)
    ).astype(np.float32, copy=False)
