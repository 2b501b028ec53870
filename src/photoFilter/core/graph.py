"""Lazy pixel graph describing a filter application.

Nodes only carry parameters and references to their inputs.  Nothing touches
pixels until :meth:`photoFilter.core.render_context.RenderContext.render`
walks the graph, which lets the engine describe blending as just another node
instead of running its own per-pixel loop.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from .. import config
from ..errors import GraphError
from .filters import jit_executor, numpy_executor
from .filters.algorithms import PhotoEffect
from .filters.utils import normalise_pixels
from .image import Image


@dataclass(frozen=True)
class Extent:
    """Axis aligned rectangle in working-space pixel coordinates."""

    x: float
    y: float
    width: float
    height: float

    @property
    def is_empty(self) -> bool:
        return not (self.width > 0 and self.height > 0)

    @property
    def is_finite(self) -> bool:
        return all(math.isfinite(value) for value in (self.x, self.y, self.width, self.height))

    def union(self, other: "Extent") -> "Extent":
        """Return the smallest extent covering both rectangles."""

        left = min(self.x, other.x)
        top = min(self.y, other.y)
        right = max(self.x + self.width, other.x + other.width)
        bottom = max(self.y + self.height, other.y + other.height)
        return Extent(left, top, right - left, bottom - top)


class PixelNode(ABC):
    """A node in the pixel graph."""

    @property
    @abstractmethod
    def extent(self) -> Extent:
        """Region of the plane this node produces pixels for."""

    @property
    def inputs(self) -> tuple["PixelNode", ...]:
        return ()

    @abstractmethod
    def evaluate(self, inputs: Sequence[np.ndarray]) -> np.ndarray:
        """Return this node's pixels given its already-evaluated *inputs*."""

    def walk(self):
        """Yield this node and every upstream node, depth first."""

        yield self
        for node in self.inputs:
            yield from node.walk()


@dataclass(frozen=True, eq=False)
class SourceNode(PixelNode):
    """Leaf node holding the normalised input pixels."""

    pixels: np.ndarray

    @property
    def extent(self) -> Extent:
        height, width = self.pixels.shape[:2]
        return Extent(0.0, 0.0, float(width), float(height))

    def evaluate(self, inputs: Sequence[np.ndarray]) -> np.ndarray:
        return self.pixels


@dataclass(frozen=True, eq=False)
class _UnaryNode(PixelNode):
    source: PixelNode

    @property
    def extent(self) -> Extent:
        return self.source.extent

    @property
    def inputs(self) -> tuple[PixelNode, ...]:
        return (self.source,)


@dataclass(frozen=True, eq=False)
class ColorMatrixNode(_UnaryNode):
    """Multiply every RGBA pixel by a 4x4 matrix and add a bias vector."""

    matrix: np.ndarray = field(default_factory=lambda: np.identity(4, dtype=np.float32))
    bias: np.ndarray = field(default_factory=lambda: np.zeros(4, dtype=np.float32))

    @classmethod
    def constant_alpha(cls, source: PixelNode, alpha: float) -> "ColorMatrixNode":
        """Return a node replacing the alpha channel of *source* with *alpha*.

        The colour rows stay the identity so RGB passes through unchanged.
        """

        matrix = np.identity(4, dtype=np.float32)
        matrix[3, 3] = 0.0
        bias = np.array((0.0, 0.0, 0.0, alpha), dtype=np.float32)
        return cls(source, matrix, bias)

    def evaluate(self, inputs: Sequence[np.ndarray]) -> np.ndarray:
        return numpy_executor.apply_color_matrix(inputs[0], self.matrix, self.bias)


@dataclass(frozen=True, eq=False)
class SepiaToneNode(_UnaryNode):
    intensity: float = 1.0

    def evaluate(self, inputs: Sequence[np.ndarray]) -> np.ndarray:
        return numpy_executor.apply_sepia_tone(inputs[0], self.intensity)


@dataclass(frozen=True, eq=False)
class PhotoEffectNode(_UnaryNode):
    """Apply one of the fixed film looks; it has no adjustable parameter."""

    effect: PhotoEffect

    def evaluate(self, inputs: Sequence[np.ndarray]) -> np.ndarray:
        return jit_executor.apply_photo_effect(inputs[0], self.effect)


@dataclass(frozen=True, eq=False)
class BloomNode(_UnaryNode):
    """Soft glow whose strength and kernel radius are both adjustable.

    The glow is clamped to the input extent so the output keeps the source
    dimensions.
    """

    intensity: float = 0.5
    radius: float = 10.0

    def evaluate(self, inputs: Sequence[np.ndarray]) -> np.ndarray:
        return numpy_executor.apply_bloom(inputs[0], self.intensity, self.radius)


@dataclass(frozen=True, eq=False)
class SharpenLuminanceNode(_UnaryNode):
    sharpness: float = 0.4
    radius: float = config.SHARPEN_RADIUS

    def evaluate(self, inputs: Sequence[np.ndarray]) -> np.ndarray:
        return numpy_executor.apply_sharpen_luminance(inputs[0], self.sharpness, self.radius)


@dataclass(frozen=True, eq=False)
class SourceOverNode(PixelNode):
    """Straight-alpha source-over composite of *foreground* onto *background*."""

    foreground: PixelNode
    background: PixelNode

    def __post_init__(self) -> None:
        for role, node in (("foreground", self.foreground), ("background", self.background)):
            extent = node.extent
            if extent.is_empty or not extent.is_finite:
                raise GraphError(f"Cannot composite a {role} with extent {extent}")

    @property
    def extent(self) -> Extent:
        return self.foreground.extent.union(self.background.extent)

    @property
    def inputs(self) -> tuple[PixelNode, ...]:
        return (self.foreground, self.background)

    def evaluate(self, inputs: Sequence[np.ndarray]) -> np.ndarray:
        target = self.extent
        foreground = _place(inputs[0], self.foreground.extent, target)
        background = _place(inputs[1], self.background.extent, target)
        return numpy_executor.composite_source_over(foreground, background)


def _place(pixels: np.ndarray, extent: Extent, target: Extent) -> np.ndarray:
    """Return *pixels* positioned inside *target*, padding with transparency."""

    if extent == target:
        return pixels
    canvas = np.zeros((int(target.height), int(target.width), 4), dtype=np.float32)
    left = int(extent.x - target.x)
    top = int(extent.y - target.y)
    height, width = pixels.shape[:2]
    canvas[top : top + height, left : left + width] = pixels
    return canvas


def source_from_image(image: Image) -> SourceNode:
    """Return a graph source for *image*.

    Raises :class:`~photoFilter.errors.DecodeError` when the pixels cannot be
    interpreted.  The source array is marked read-only so no node can modify
    it in place.
    """

    pixels = normalise_pixels(image.pixels)
    pixels.setflags(write=False)
    return SourceNode(pixels)


__all__ = [
    "BloomNode",
    "ColorMatrixNode",
    "Extent",
    "PhotoEffectNode",
    "PixelNode",
    "SepiaToneNode",
    "SharpenLuminanceNode",
    "SourceNode",
    "SourceOverNode",
    "source_from_image",
]
