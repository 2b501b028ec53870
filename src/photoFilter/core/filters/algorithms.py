"""Pure per-pixel maths for the fixed photo effects.

The functions operate on plain floats so they can be compiled by Numba inside
:mod:`.jit_executor` and called directly from tests without any array setup.
"""

from __future__ import annotations

from dataclasses import dataclass

from numba import jit


@dataclass(frozen=True)
class PhotoEffect:
    """Parameters describing one fixed film look.

    ``contrast`` is the strength of a smoothstep S-curve in ``[-1, 1]``,
    ``lift`` raises the black level, ``gamma`` bends the midtones and
    ``gain`` tints the result per channel after tone mapping.
    """

    name: str
    saturation: float = 1.0
    contrast: float = 0.0
    gamma: float = 1.0
    lift: float = 0.0
    gain: tuple[float, float, float] = (1.0, 1.0, 1.0)
    monochrome: bool = False


NOIR = PhotoEffect("noir", contrast=0.6, gamma=1.1, monochrome=True)
VINTAGE = PhotoEffect(
    "vintage", saturation=0.75, contrast=0.25, gamma=1.05, lift=0.08, gain=(1.08, 0.98, 0.82)
)
CHROME = PhotoEffect("chrome", saturation=1.3, contrast=0.35, gamma=0.95, gain=(1.02, 1.0, 1.03))
FADE = PhotoEffect("fade", saturation=0.65, contrast=-0.3, lift=0.12, gain=(1.0, 0.98, 0.96))
INSTANT = PhotoEffect(
    "instant", saturation=0.85, contrast=0.1, gamma=0.95, lift=0.06, gain=(1.06, 1.0, 0.88)
)
PROCESS = PhotoEffect("process", saturation=0.9, contrast=0.2, lift=0.03, gain=(0.94, 1.0, 1.08))
TRANSFER = PhotoEffect("transfer", saturation=1.1, contrast=0.3, gamma=1.05, gain=(1.08, 1.0, 0.86))


@jit(nopython=True, cache=True)
def _clamp01(value: float) -> float:
    if value < 0.0:
        return 0.0
    if value > 1.0:
        return 1.0
    return value


@jit(nopython=True, cache=True)
def _luma(r: float, g: float, b: float) -> float:
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


@jit(nopython=True, cache=True)
def _tone_curve(value: float, contrast: float, gamma: float, lift: float) -> float:
    """Apply gamma, the S-curve and the black lift to a single channel."""

    v = _clamp01(value)
    if gamma != 1.0 and v > 0.0:
        v = v ** gamma
    s = v * v * (3.0 - 2.0 * v)
    v = v + (s - v) * contrast
    v = lift + v * (1.0 - lift)
    return _clamp01(v)


@jit(nopython=True, cache=True)
def _apply_photo_effect(
    r: float,
    g: float,
    b: float,
    saturation: float,
    contrast: float,
    gamma: float,
    lift: float,
    gain_r: float,
    gain_g: float,
    gain_b: float,
    monochrome: bool,
) -> tuple[float, float, float]:
    """Return the ``(r, g, b)`` triple after applying one photo effect."""

    luma = _luma(r, g, b)
    if monochrome:
        r = luma
        g = luma
        b = luma
    else:
        r = luma + (r - luma) * saturation
        g = luma + (g - luma) * saturation
        b = luma + (b - luma) * saturation

    r = _tone_curve(r, contrast, gamma, lift) * gain_r
    g = _tone_curve(g, contrast, gamma, lift) * gain_g
    b = _tone_curve(b, contrast, gamma, lift) * gain_b
    return _clamp01(r), _clamp01(g), _clamp01(b)
