"""Tunable constants for the filter engine and the preview glue."""

from __future__ import annotations

BLOOM_RADIUS_SCALE = 10.0
"""Bloom kernel radius in pixels at intensity ``1.0``."""

SHARPEN_SCALE = 2.0
"""Multiplier mapping slider intensity onto the luminance sharpness control."""

SHARPEN_RADIUS = 1.69
"""Blur radius (gaussian sigma) used to extract luminance detail."""

DEFAULT_INTENSITY = 1.0
"""Intensity the preview controller starts with."""

MAX_RENDER_PIXELS = 200_000_000
"""Upper bound on the number of pixels a single render may allocate."""

PREVIEW_THREAD_COUNT = 1
"""Worker threads used by the preview controller's private thread pool."""

BLEND_EPSILON = 1e-6
"""Alpha values below this are treated as fully transparent when compositing."""
