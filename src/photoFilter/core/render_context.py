"""Rendering backend that materialises pixel graphs into concrete buffers."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .. import config
from ..errors import GraphError, RenderCancelledError, RenderError
from .graph import PixelNode

_LOGGER = logging.getLogger(__name__)


class CancellationToken:
    """Cooperative cancellation flag shared between a caller and a render.

    The render checks the token between graph nodes.  A node that is already
    running always completes; the next check then abandons the render.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        """Raise :class:`RenderCancelledError` once :meth:`cancel` was called."""

        if self._event.is_set():
            raise RenderCancelledError("Render was cancelled")


@dataclass(frozen=True)
class RenderContext:
    """Explicit handle to the pixel backend.

    The context stores configuration only.  Every :meth:`render` call keeps its
    intermediate buffers in local variables, so a single context may be shared
    by any number of threads rendering independent graphs.
    """

    clip_output: bool = True
    """Clip rendered samples to ``[0, 1]`` before handing them out."""

    max_pixels: int = config.MAX_RENDER_PIXELS

    def render(self, node: PixelNode, *, cancel: Optional[CancellationToken] = None) -> np.ndarray:
        """Evaluate *node* and return a read-only ``float32`` RGBA buffer.

        The buffer covers the node's natural extent.  Raises
        :class:`RenderError` when the extent is empty, unbounded or too large,
        or when a kernel fails; :class:`RenderCancelledError` when *cancel*
        fires before the graph is complete.
        """

        extent = node.extent
        if extent.is_empty or not extent.is_finite:
            raise RenderError(f"Graph has no renderable extent: {extent}")
        width = int(extent.width)
        height = int(extent.height)
        if width * height > self.max_pixels:
            raise RenderError(
                f"Graph extent {width}x{height} exceeds the {self.max_pixels} pixel limit"
            )

        cache: dict[int, np.ndarray] = {}
        result = self._evaluate(node, cache, cancel)

        if result.shape != (height, width, 4):
            raise RenderError(
                f"Backend produced a {result.shape} buffer for a {width}x{height} extent"
            )
        if not np.isfinite(result).all():
            raise RenderError("Backend produced non-finite samples")

        output = np.clip(result, 0.0, 1.0) if self.clip_output else np.array(result, copy=True)
        output = output.astype(np.float32, copy=False)
        output.setflags(write=False)
        return output

    def _evaluate(
        self,
        node: PixelNode,
        cache: dict[int, np.ndarray],
        cancel: Optional[CancellationToken],
    ) -> np.ndarray:
        """Evaluate *node* after its inputs, reusing buffers of shared nodes."""

        key = id(node)
        cached = cache.get(key)
        if cached is not None:
            return cached

        inputs = [self._evaluate(upstream, cache, cancel) for upstream in node.inputs]
        if cancel is not None:
            cancel.raise_if_cancelled()

        try:
            pixels = node.evaluate(inputs)
        except (GraphError, ValueError, FloatingPointError, MemoryError) as exc:
            _LOGGER.debug("Node %s failed to evaluate", type(node).__name__, exc_info=True)
            raise RenderError(f"{type(node).__name__} failed: {exc}") from exc

        cache[key] = pixels
        return pixels


__all__ = ["CancellationToken", "RenderContext"]
