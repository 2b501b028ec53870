import numpy as np
import pytest
from PIL import Image as PILImage

from photoFilter.core.catalog import FilterKind
from photoFilter.core.engine import FilterEngine
from photoFilter.core.image import Image, Orientation
from photoFilter.errors import DecodeError
from photoFilter.utils.image_io import load_image, save_image


def test_png_round_trip_keeps_pixels_and_orientation(tmp_path, gradient_image):
    path = save_image(gradient_image, tmp_path / "out.png")

    loaded = load_image(path, scale=2.0)

    np.testing.assert_array_equal(loaded.pixels, gradient_image.to_uint8_rgba())
    assert loaded.orientation is Orientation.RIGHT
    assert loaded.scale == 2.0
    assert not loaded.pixels.flags.writeable


def test_jpeg_export_drops_alpha_and_keeps_orientation(tmp_path):
    pixels = np.full((8, 8, 4), 128, dtype=np.uint8)
    pixels[..., 3] = 40
    image = Image.from_array(pixels, orientation=Orientation.LEFT)

    path = save_image(image, tmp_path / "out.jpg", quality=90)

    with PILImage.open(path) as handle:
        assert handle.format == "JPEG"
        assert handle.mode == "RGB"
    loaded = load_image(path)
    assert loaded.orientation is Orientation.LEFT
    assert np.all(loaded.pixels[..., 3] == 255)


def test_explicit_format_overrides_suffix(tmp_path, gradient_image):
    path = save_image(gradient_image, tmp_path / "out.bin", format="png")

    with PILImage.open(path) as handle:
        assert handle.format == "PNG"


def test_rendered_images_can_be_exported(tmp_path, gradient_image):
    rendered = FilterEngine().apply(gradient_image, FilterKind.VINTAGE, 0.6)

    path = save_image(rendered, tmp_path / "vintage.png")
    loaded = load_image(path)

    assert loaded.size == gradient_image.size
    np.testing.assert_array_equal(loaded.pixels, rendered.to_uint8_rgba())


def test_missing_orientation_defaults_to_up(tmp_path):
    path = tmp_path / "plain.png"
    PILImage.new("RGB", (3, 2), (10, 20, 30)).save(path)

    loaded = load_image(path)

    assert loaded.orientation is Orientation.UP
    assert loaded.pixels.shape == (2, 3, 4)
    np.testing.assert_array_equal(loaded.pixels[0, 0], (10, 20, 30, 255))


def test_non_image_file_is_a_decode_error(tmp_path):
    path = tmp_path / "notes.png"
    path.write_text("definitely not a png")

    with pytest.raises(DecodeError):
        load_image(path)


def test_missing_file_raises_file_not_found(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_image(tmp_path / "missing.png")


def test_save_leaves_no_temporary_file(tmp_path, gradient_image):
    save_image(gradient_image, tmp_path / "nested" / "out.png")

    assert sorted(p.name for p in (tmp_path / "nested").iterdir()) == ["out.png"]


def test_from_exif_falls_back_to_up():
    assert Orientation.from_exif(6) is Orientation.RIGHT
    assert Orientation.from_exif(42) is Orientation.UP
    assert Orientation.from_exif(None) is Orientation.UP


@pytest.mark.parametrize("alias", ["jpg", "JPG", ".jpeg"])
def test_format_aliases_resolve_to_jpeg(tmp_path, gradient_image, alias):
    path = save_image(gradient_image, tmp_path / "export.out", format=alias, quality=80)

    with PILImage.open(path) as handle:
        assert handle.format == "JPEG"
        assert handle.mode == "RGB"
    assert load_image(path).orientation is Orientation.RIGHT


def test_unknown_format_is_rejected_before_writing(tmp_path, gradient_image):
    with pytest.raises(ValueError):
        save_image(gradient_image, tmp_path / "export.out", format="polaroid")

    assert list(tmp_path.iterdir()) == []
