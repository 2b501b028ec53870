"""Tests for the pixel kernels behind the graph nodes."""

import numpy as np
import pytest

from photoFilter.core.filters import algorithms, jit_executor, numpy_executor
from photoFilter.core.filters.utils import luminance, normalise_pixels
from photoFilter.errors import DecodeError


def _random_rgba(seed: int = 7, shape=(4, 5)) -> np.ndarray:
    rng = np.random.default_rng(seed)
    pixels = rng.random(shape + (4,), dtype=np.float32)
    pixels[..., 3] = 1.0
    return pixels


def test_tone_curve_is_identity_without_adjustments():
    for value in (0.0, 0.25, 0.5, 1.0):
        assert algorithms._tone_curve(value, 0.0, 1.0, 0.0) == pytest.approx(value)


def test_tone_curve_lift_raises_black():
    assert algorithms._tone_curve(0.0, 0.0, 1.0, 0.12) == pytest.approx(0.12)


def test_fade_lifts_black_pixels():
    r, g, b = algorithms._apply_photo_effect(
        0.0,
        0.0,
        0.0,
        algorithms.FADE.saturation,
        algorithms.FADE.contrast,
        algorithms.FADE.gamma,
        algorithms.FADE.lift,
        *algorithms.FADE.gain,
        algorithms.FADE.monochrome,
    )

    assert r == pytest.approx(0.12)
    assert g == pytest.approx(0.12 * 0.98)
    assert b == pytest.approx(0.12 * 0.96)


def test_noir_kernel_outputs_gray_and_keeps_alpha():
    pixels = _random_rgba()
    pixels[..., 3] = 0.5

    result = jit_executor.apply_photo_effect(pixels, algorithms.NOIR)

    np.testing.assert_allclose(result[..., 0], result[..., 1], atol=1e-6)
    np.testing.assert_allclose(result[..., 1], result[..., 2], atol=1e-6)
    np.testing.assert_allclose(result[..., 3], 0.5)


@pytest.mark.parametrize(
    "effect",
    [
        algorithms.NOIR,
        algorithms.VINTAGE,
        algorithms.CHROME,
        algorithms.FADE,
        algorithms.INSTANT,
        algorithms.PROCESS,
        algorithms.TRANSFER,
    ],
    ids=lambda effect: effect.name,
)
def test_photo_effects_stay_in_range_and_leave_input_alone(effect):
    pixels = _random_rgba()
    before = pixels.copy()

    result = jit_executor.apply_photo_effect(pixels, effect)

    assert result.dtype == np.float32
    assert result.min() >= 0.0 and result.max() <= 1.0
    np.testing.assert_array_equal(pixels, before)


def test_color_matrix_applies_rows_and_bias():
    pixels = np.array([[[0.1, 0.2, 0.3, 1.0]]], dtype=np.float32)
    matrix = np.identity(4, dtype=np.float32)
    matrix[0] = (0.0, 1.0, 0.0, 0.0)
    bias = np.array((0.0, 0.0, 0.5, 0.0), dtype=np.float32)

    result = numpy_executor.apply_color_matrix(pixels, matrix, bias)

    np.testing.assert_allclose(result[0, 0], (0.2, 0.2, 0.8, 1.0), atol=1e-6)


def test_sepia_tone_at_zero_is_identity():
    pixels = _random_rgba()

    np.testing.assert_allclose(numpy_executor.apply_sepia_tone(pixels, 0.0), pixels)


def test_sepia_tone_at_one_is_tinted_luma():
    pixels = _random_rgba()
    expected = luminance(pixels[..., :3])[..., np.newaxis] * numpy_executor.SEPIA_TINT

    result = numpy_executor.apply_sepia_tone(pixels, 1.0)

    np.testing.assert_allclose(result[..., :3], expected, atol=1e-6)


def test_gaussian_blur_keeps_constant_images():
    flat = np.full((6, 7, 3), 0.4, dtype=np.float32)

    np.testing.assert_allclose(numpy_executor.gaussian_blur(flat, 2.5), flat, atol=1e-6)


def test_gaussian_blur_with_zero_sigma_copies():
    pixels = _random_rgba()[..., :3]

    blurred = numpy_executor.gaussian_blur(pixels, 0.0)

    np.testing.assert_array_equal(blurred, pixels)
    assert blurred is not pixels


def test_gaussian_blur_spreads_an_impulse_and_preserves_energy():
    impulse = np.zeros((11, 11), dtype=np.float32)
    impulse[5, 5] = 1.0

    blurred = numpy_executor.gaussian_blur(impulse, 1.5)

    assert blurred[5, 5] < 1.0
    assert blurred[5, 6] > 0.0
    assert blurred.sum() == pytest.approx(1.0, abs=1e-4)


def test_bloom_at_zero_intensity_is_identity():
    pixels = _random_rgba()

    np.testing.assert_allclose(numpy_executor.apply_bloom(pixels, 0.0, 10.0), pixels, atol=1e-6)


def test_sharpen_leaves_flat_regions_alone():
    flat = np.full((5, 5, 4), 0.3, dtype=np.float32)
    flat[..., 3] = 1.0

    result = numpy_executor.apply_sharpen_luminance(flat, 2.0)

    np.testing.assert_allclose(result, flat, atol=1e-5)


def test_sharpen_increases_edge_contrast():
    edge = np.zeros((5, 6, 4), dtype=np.float32)
    edge[:, 3:, :3] = 1.0
    edge[..., 3] = 1.0

    result = numpy_executor.apply_sharpen_luminance(edge, 1.0)

    assert result[2, 2, 0] < 0.0
    assert result[2, 3, 0] > 1.0


def test_composite_source_over_is_a_lerp_on_opaque_background():
    foreground = np.array([[[1.0, 0.5, 0.0, 0.25]]], dtype=np.float32)
    background = np.array([[[0.0, 0.5, 1.0, 1.0]]], dtype=np.float32)

    result = numpy_executor.composite_source_over(foreground, background)

    np.testing.assert_allclose(result[0, 0], (0.25, 0.5, 0.75, 1.0), atol=1e-6)


def test_composite_of_two_transparent_pixels_is_transparent_black():
    clear = np.zeros((1, 1, 4), dtype=np.float32)

    result = numpy_executor.composite_source_over(clear, clear)

    np.testing.assert_array_equal(result, clear)


# ---------------------------------------------------------------------------
# normalise_pixels
# ---------------------------------------------------------------------------
def test_normalise_scales_integer_samples():
    eight = np.array([[[0, 51, 255, 255]]], dtype=np.uint8)
    sixteen = np.array([[[0, 65535, 0, 65535]]], dtype=np.uint16)

    np.testing.assert_allclose(normalise_pixels(eight)[0, 0], (0.0, 0.2, 1.0, 1.0), atol=1e-6)
    np.testing.assert_allclose(normalise_pixels(sixteen)[0, 0], (0.0, 1.0, 0.0, 1.0))


@pytest.mark.parametrize(
    ("pixels", "expected"),
    [
        (np.full((1, 1), 0.5, dtype=np.float32), (0.5, 0.5, 0.5, 1.0)),
        (np.array([[[0.5, 0.25]]], dtype=np.float32), (0.5, 0.5, 0.5, 0.25)),
        (np.array([[[0.1, 0.2, 0.3]]], dtype=np.float64), (0.1, 0.2, 0.3, 1.0)),
    ],
    ids=["gray", "gray-alpha", "rgb"],
)
def test_normalise_expands_channels(pixels, expected):
    result = normalise_pixels(pixels)

    assert result.shape == (1, 1, 4)
    assert result.dtype == np.float32
    np.testing.assert_allclose(result[0, 0], expected, atol=1e-6)


def test_normalise_returns_a_copy():
    pixels = np.zeros((2, 2, 4), dtype=np.float32)

    result = normalise_pixels(pixels)
    result[...] = 1.0

    assert pixels.max() == 0.0


@pytest.mark.parametrize(
    "pixels",
    [
        np.zeros((2, 2, 2, 2), dtype=np.float32),
        np.zeros((0, 3, 4), dtype=np.uint8),
        np.zeros((2, 2, 7), dtype=np.uint8),
        np.zeros((2, 2, 4), dtype=np.int32),
        np.array([[[np.inf, 0.0, 0.0, 1.0]]], dtype=np.float32),
        object(),
    ],
    ids=["4d", "empty", "seven-channels", "int32", "inf", "object"],
)
def test_normalise_rejects_malformed_buffers(pixels):
    with pytest.raises(DecodeError):
        normalise_pixels(pixels)


def test_gaussian_kernel_is_truncated_to_the_image():
    assert numpy_executor._gaussian_kernel(1000.0, max_radius=5).size == 11
    assert numpy_executor._gaussian_kernel(float("inf"), max_radius=3).size == 7
    assert numpy_executor._gaussian_kernel(2.0).size == 13


def test_very_wide_blur_keeps_shape_and_constant_images():
    flat = np.full((4, 6, 3), 0.6, dtype=np.float32)

    blurred = numpy_executor.gaussian_blur(flat, 1.0e4)

    assert blurred.shape == flat.shape
    np.testing.assert_allclose(blurred, flat, atol=1e-5)


def test_bloom_with_huge_radius_stays_bounded():
    pixels = _random_rgba(shape=(8, 8))

    result = numpy_executor.apply_bloom(pixels, 1.0, 1.0e4)

    assert result.shape == pixels.shape
    assert np.isfinite(result).all()
    assert np.all(result[..., :3] >= pixels[..., :3] - 1e-6)
