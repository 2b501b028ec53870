"""Pixel kernels evaluated by the render context.

This package keeps the maths apart from the graph that schedules it:
- algorithms: pure per-pixel functions and the fixed photo effect presets
- executors: Numba JIT kernels and NumPy vectorised paths
- utils: pixel buffer normalisation shared by every executor
"""

from __future__ import annotations

from .algorithms import PhotoEffect
from .utils import normalise_pixels

__all__ = ["PhotoEffect", "normalise_pixels"]
