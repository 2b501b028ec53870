"""Apply stylistic filters to photos at an adjustable intensity."""

from __future__ import annotations

from .core.catalog import FilterCatalog, FilterClass, FilterKind
from .core.engine import FilterEngine
from .core.image import Image, Orientation
from .core.render_context import CancellationToken, RenderContext
from .errors import (
    DecodeError,
    GraphError,
    PhotoFilterError,
    RenderCancelledError,
    RenderError,
)

__all__ = [
    "CancellationToken",
    "DecodeError",
    "FilterCatalog",
    "FilterClass",
    "FilterEngine",
    "FilterKind",
    "GraphError",
    "Image",
    "Orientation",
    "PhotoFilterError",
    "RenderCancelledError",
    "RenderContext",
    "RenderError",
]
