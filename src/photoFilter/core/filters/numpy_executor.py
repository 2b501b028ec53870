"""NumPy vectorised executors for matrix, blur and compositing nodes.

Every function returns a new array and treats its inputs as read-only.  The
arrays follow the layout produced by :func:`.utils.normalise_pixels`.
"""

from __future__ import annotations

import math
from typing import Optional

import numpy as np

from ... import config
from .utils import luminance

SEPIA_TINT = np.array((1.0, 0.890, 0.694), dtype=np.float32)
"""Row sums of the classic sepia matrix normalised to the red channel."""


def apply_color_matrix(pixels: np.ndarray, matrix: np.ndarray, bias: np.ndarray) -> np.ndarray:
    """Return ``matrix @ pixel + bias`` for every RGBA pixel."""

    result = pixels @ matrix.T.astype(np.float32, copy=False)
    result += bias.astype(np.float32, copy=False)
    return result.astype(np.float32, copy=False)


def apply_sepia_tone(pixels: np.ndarray, intensity: float) -> np.ndarray:
    """Mix each pixel with its sepia tone by *intensity*."""

    rgb = pixels[..., :3]
    tone = luminance(rgb)[..., np.newaxis] * SEPIA_TINT
    output = np.empty_like(pixels)
    output[..., :3] = rgb + (tone - rgb) * np.float32(intensity)
    output[..., 3] = pixels[..., 3]
    return output


def _gaussian_kernel(sigma: float, max_radius: Optional[int] = None) -> np.ndarray:
    """Return a normalised 1-D gaussian kernel covering three sigmas.

    *max_radius* truncates the kernel; taps beyond the image would only
    sample replicated edge pixels.
    """

    if math.isfinite(sigma):
        radius = max(1, int(math.ceil(3.0 * sigma)))
    else:
        radius = max_radius if max_radius is not None else 1
    if max_radius is not None:
        radius = max(1, min(radius, int(max_radius)))
    offsets = np.arange(-radius, radius + 1, dtype=np.float64)
    weights = np.exp(-0.5 * (offsets / sigma) ** 2)
    weights /= weights.sum()
    return weights.astype(np.float32)


def gaussian_blur(channels: np.ndarray, sigma: float) -> np.ndarray:
    """Blur the first two axes of *channels* with a separable gaussian.

    Borders are extended by edge replication so the output keeps the input's
    extent.  A vanishing *sigma* returns an unblurred copy.  The kernel
    never reaches further than the larger image dimension, which bounds the
    cost of very wide blurs.
    """

    sigma = abs(float(sigma))
    if sigma < 1e-6:
        return np.array(channels, dtype=np.float32, copy=True)

    height, width = channels.shape[:2]
    kernel = _gaussian_kernel(sigma, max_radius=max(height, width))
    radius = kernel.size // 2
    extra_axes = [(0, 0)] * (channels.ndim - 2)

    padded = np.pad(channels, [(radius, radius), (0, 0)] + extra_axes, mode="edge")
    vertical = np.zeros_like(channels, dtype=np.float32)
    for index, weight in enumerate(kernel):
        vertical += padded[index : index + height] * weight

    padded = np.pad(vertical, [(0, 0), (radius, radius)] + extra_axes, mode="edge")
    blurred = np.zeros_like(channels, dtype=np.float32)
    for index, weight in enumerate(kernel):
        blurred += padded[:, index : index + width] * weight
    return blurred


def apply_bloom(pixels: np.ndarray, intensity: float, radius: float) -> np.ndarray:
    """Screen a gaussian glow of radius *radius* over the image by *intensity*."""

    rgb = pixels[..., :3]
    glow = gaussian_blur(rgb, radius)
    strength = np.float32(intensity)
    output = np.empty_like(pixels)
    output[..., :3] = 1.0 - (1.0 - rgb) * (1.0 - glow * strength)
    output[..., 3] = pixels[..., 3]
    return output


def apply_sharpen_luminance(
    pixels: np.ndarray,
    sharpness: float,
    radius: float = config.SHARPEN_RADIUS,
) -> np.ndarray:
    """Add *sharpness* times the luminance detail back onto every channel."""

    rgb = pixels[..., :3]
    luma = luminance(rgb)
    detail = luma - gaussian_blur(luma, radius)
    output = np.empty_like(pixels)
    output[..., :3] = rgb + detail[..., np.newaxis] * np.float32(sharpness)
    output[..., 3] = pixels[..., 3]
    return output


def composite_source_over(foreground: np.ndarray, background: np.ndarray) -> np.ndarray:
    """Composite *foreground* over *background* with straight alpha.

    For an opaque background the colour result reduces to
    ``fa * fg + (1 - fa) * bg``, which is what intensity blending relies on.
    """

    fa = foreground[..., 3:4]
    ba = background[..., 3:4]
    out_alpha = fa + ba * (1.0 - fa)
    premultiplied = foreground[..., :3] * fa + background[..., :3] * ba * (1.0 - fa)

    output = np.zeros_like(foreground, dtype=np.float32)
    visible = np.abs(out_alpha) > config.BLEND_EPSILON
    safe_alpha = np.where(visible, out_alpha, 1.0)
    output[..., :3] = np.where(visible, premultiplied / safe_alpha, 0.0)
    output[..., 3:4] = out_alpha
    return output
