"""Apply a filter kind at an intensity and render the result.

Filters come in two flavours.  Parametric filters (sepia, bloom, sharpen) take
the intensity as their own control.  Binary filters produce a single fixed
look, so the engine realises intensity by compositing the filtered image over
the original with its alpha rewritten to the intensity.  Both paths are built
as a lazy pixel graph and rendered once through the injected
:class:`~photoFilter.core.render_context.RenderContext`.
"""

from __future__ import annotations

import logging
from typing import Callable, Mapping, Optional

from .. import config
from ..errors import DecodeError, GraphError, RenderCancelledError, RenderError
from .catalog import FilterCatalog, FilterClass, FilterKind
from .filters import algorithms
from .graph import (
    BloomNode,
    ColorMatrixNode,
    PhotoEffectNode,
    PixelNode,
    SepiaToneNode,
    SharpenLuminanceNode,
    SourceOverNode,
    source_from_image,
)
from .image import Image
from .render_context import CancellationToken, RenderContext

_LOGGER = logging.getLogger(__name__)

NodeBuilder = Callable[[PixelNode, float], PixelNode]


def _build_sepia(source: PixelNode, intensity: float) -> PixelNode:
    return SepiaToneNode(source, intensity=intensity)


def _build_bloom(source: PixelNode, intensity: float) -> PixelNode:
    # The radius grows with intensity so the slider widens the glow as well
    # as strengthening it.
    return BloomNode(source, intensity=intensity, radius=config.BLOOM_RADIUS_SCALE * intensity)


def _build_sharpen(source: PixelNode, intensity: float) -> PixelNode:
    return SharpenLuminanceNode(source, sharpness=config.SHARPEN_SCALE * intensity)


def _photo_effect(effect: algorithms.PhotoEffect) -> NodeBuilder:
    def build(source: PixelNode, intensity: float) -> PixelNode:
        return PhotoEffectNode(source, effect)

    return build


_DISPATCH: Mapping[FilterKind, Optional[NodeBuilder]] = {
    FilterKind.NONE: None,
    FilterKind.SEPIA: _build_sepia,
    FilterKind.NOIR: _photo_effect(algorithms.NOIR),
    FilterKind.VINTAGE: _photo_effect(algorithms.VINTAGE),
    FilterKind.CHROME: _photo_effect(algorithms.CHROME),
    FilterKind.FADE: _photo_effect(algorithms.FADE),
    FilterKind.INSTANT: _photo_effect(algorithms.INSTANT),
    FilterKind.PROCESS: _photo_effect(algorithms.PROCESS),
    FilterKind.TRANSFER: _photo_effect(algorithms.TRANSFER),
    FilterKind.BLOOM: _build_bloom,
    FilterKind.SHARPEN: _build_sharpen,
}

if set(_DISPATCH) != set(FilterKind):  # pragma: no cover - guards future edits
    missing = sorted(kind.value for kind in set(FilterKind) - set(_DISPATCH))
    raise RuntimeError(f"Filter kinds without an engine builder: {', '.join(missing)}")


class FilterEngine:
    """Stateless filter application over an injected render context.

    The engine keeps no per-call state, so one instance (and its context) can
    serve concurrent :meth:`apply` calls on independent images.

    Intensity is passed through unclamped unless *clamp_intensity* is set.
    Values outside ``[0, 1]`` then extrapolate the native controls and the
    blend; the context clips the rendered samples to ``[0, 1]``.
    """

    def __init__(
        self,
        context: RenderContext | None = None,
        *,
        clamp_intensity: bool = False,
    ) -> None:
        self._context = context if context is not None else RenderContext()
        self._clamp_intensity = bool(clamp_intensity)

    @property
    def context(self) -> RenderContext:
        return self._context

    @staticmethod
    def filter_class(kind: FilterKind) -> FilterClass:
        return FilterCatalog.filter_class(kind)

    def build_graph(self, image: Image, kind: FilterKind, intensity: float) -> PixelNode:
        """Return the unrendered pixel graph for applying *kind* to *image*.

        Raises :class:`DecodeError` when *image* cannot become a graph source.
        """

        graph, _ = self._compose(image, kind, intensity)
        return graph

    def _compose(
        self, image: Image, kind: FilterKind, intensity: float
    ) -> tuple[PixelNode, Optional[PixelNode]]:
        """Return the graph to render and, for blends, the unblended filter node."""

        source = source_from_image(image)
        builder = _DISPATCH[kind]
        if builder is None:
            return source, None

        intensity = self._resolve_intensity(intensity)
        filtered = builder(source, intensity)
        if self.filter_class(kind) is not FilterClass.BINARY or not intensity < 1.0:
            return filtered, None

        try:
            blended = SourceOverNode(ColorMatrixNode.constant_alpha(filtered, intensity), source)
        except GraphError:
            _LOGGER.debug("Blend composite unavailable for %s; using full strength", kind.value)
            return filtered, None
        return blended, filtered

    def render(
        self,
        image: Image,
        kind: FilterKind,
        intensity: float,
        *,
        cancel: CancellationToken | None = None,
    ) -> Image:
        """Apply *kind* to *image* and return the rendered result.

        Unlike :meth:`apply` this raises :class:`DecodeError`,
        :class:`RenderError` or :class:`~photoFilter.errors.RenderCancelledError`
        so callers can tell failures apart.
        """

        if kind is FilterKind.NONE:
            return image

        graph, unblended = self._compose(image, kind, intensity)
        try:
            pixels = self._context.render(graph, cancel=cancel)
        except RenderCancelledError:
            raise
        except RenderError as exc:
            if unblended is None:
                raise
            # A failed blend still yields the filter at full strength.
            _LOGGER.debug("Blend for %s failed (%s); rendering full strength", kind.value, exc)
            pixels = self._context.render(unblended, cancel=cancel)
        # Rendering drops the display metadata, so it is copied back from the input.
        return Image(pixels=pixels, scale=image.scale, orientation=image.orientation)

    def apply(
        self,
        image: Image,
        kind: FilterKind,
        intensity: float,
        *,
        cancel: CancellationToken | None = None,
    ) -> Image | None:
        """Return *image* filtered with *kind* at *intensity*, or ``None``.

        ``None`` signals that the input could not be decoded or the graph could
        not be rendered.  The caller keeps showing its previous image.
        """

        try:
            return self.render(image, kind, intensity, cancel=cancel)
        except (DecodeError, RenderError) as exc:
            _LOGGER.debug("Filter %s produced no result: %s", kind.value, exc)
            return None

    def _resolve_intensity(self, intensity: float) -> float:
        value = float(intensity)
        if self._clamp_intensity:
            return max(0.0, min(1.0, value))
        return value


__all__ = ["FilterEngine"]
