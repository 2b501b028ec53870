"""Exception hierarchy shared by the filter engine and its glue code."""

from __future__ import annotations


class PhotoFilterError(Exception):
    """Base class for every error raised by :mod:`photoFilter`."""


class DecodeError(PhotoFilterError):
    """The input image cannot be interpreted as a pixel graph source."""


class RenderError(PhotoFilterError):
    """The backend could not materialise a transform graph into pixels."""


class RenderCancelledError(RenderError):
    """A render was abandoned because its cancellation token fired."""


class GraphError(PhotoFilterError):
    """A graph node could not be constructed from its inputs."""


__all__ = [
    "DecodeError",
    "GraphError",
    "PhotoFilterError",
    "RenderCancelledError",
    "RenderError",
]
