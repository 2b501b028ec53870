"""Filter kinds offered to the user and their display labels."""

from __future__ import annotations

from enum import Enum, auto
from typing import Mapping


class FilterKind(Enum):
    """Closed set of stylistic filters, including the identity ``NONE``."""

    NONE = "none"
    SEPIA = "sepia"
    NOIR = "noir"
    VINTAGE = "vintage"
    CHROME = "chrome"
    FADE = "fade"
    INSTANT = "instant"
    PROCESS = "process"
    TRANSFER = "transfer"
    BLOOM = "bloom"
    SHARPEN = "sharpen"


class FilterClass(Enum):
    """How a filter kind realises intensity."""

    IDENTITY = auto()
    """Always returns the input untouched."""

    PARAMETRIC = auto()
    """Intensity feeds the effect's own continuous control."""

    BINARY = auto()
    """Fixed effect; intensity is applied by blending with the original."""


_DISPLAY_NAMES: Mapping[FilterKind, str] = {
    FilterKind.NONE: "None",
    FilterKind.SEPIA: "Sepia",
    FilterKind.NOIR: "Noir",
    FilterKind.VINTAGE: "Vintage",
    FilterKind.CHROME: "Chrome",
    FilterKind.FADE: "Fade",
    FilterKind.INSTANT: "Instant",
    FilterKind.PROCESS: "Process",
    FilterKind.TRANSFER: "Transfer",
    FilterKind.BLOOM: "Bloom",
    FilterKind.SHARPEN: "Sharpen",
}

_PARAMETRIC_KINDS = frozenset({FilterKind.SEPIA, FilterKind.BLOOM, FilterKind.SHARPEN})


class FilterCatalog:
    """Read-only description of the supported filters for selection UIs."""

    @staticmethod
    def all_kinds() -> tuple[FilterKind, ...]:
        """Return every kind in the stable order used by the filter strip."""

        return tuple(FilterKind)

    @staticmethod
    def display_name(kind: FilterKind) -> str:
        return _DISPLAY_NAMES[kind]

    @staticmethod
    def filter_class(kind: FilterKind) -> FilterClass:
        """Return whether *kind* is the identity, parametric or binary."""

        if kind is FilterKind.NONE:
            return FilterClass.IDENTITY
        if kind in _PARAMETRIC_KINDS:
            return FilterClass.PARAMETRIC
        return FilterClass.BINARY

    @staticmethod
    def from_identifier(identifier: str) -> FilterKind:
        """Return the kind whose stable identifier is *identifier*.

        Raises :class:`ValueError` for unknown identifiers so persisted edit
        state that references a removed filter is caught by the caller.
        """

        try:
            return FilterKind(identifier.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown filter identifier: {identifier!r}") from None


if set(_DISPLAY_NAMES) != set(FilterKind):  # pragma: no cover - guards future edits
    missing = sorted(kind.value for kind in set(FilterKind) - set(_DISPLAY_NAMES))
    raise RuntimeError(f"Filter kinds without display names: {', '.join(missing)}")


__all__ = ["FilterCatalog", "FilterClass", "FilterKind"]
