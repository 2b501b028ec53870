"""Decode photos from disk into engine images and export rendered results."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

import numpy as np
from PIL import Image as PILImage
from PIL import UnidentifiedImageError

from ..core.image import Image, Orientation
from ..errors import DecodeError

_LOGGER = logging.getLogger(__name__)

_EXIF_ORIENTATION_TAG = 0x0112

_OPAQUE_FORMATS = {"JPEG", "BMP"}


def load_image(path: str | Path, *, scale: float = 1.0) -> Image:
    """Load *path* as an RGBA :class:`Image`.

    The EXIF orientation is recorded on the returned image instead of being
    baked into the pixels, matching how camera bitmaps arrive from the
    platform picker.

    Raises
    ------
    FileNotFoundError
        If *path* does not point at a file.
    DecodeError
        If Pillow cannot identify or decode the file.
    """

    source = Path(path)
    if not source.is_file():
        raise FileNotFoundError(f"Image file not found: {source}")

    try:
        with PILImage.open(source) as handle:
            orientation = Orientation.from_exif(handle.getexif().get(_EXIF_ORIENTATION_TAG, 1))
            rgba = handle.convert("RGBA")
            pixels = np.asarray(rgba, dtype=np.uint8)
    except UnidentifiedImageError as exc:
        raise DecodeError(f"File is not a supported image: {source}") from exc
    except OSError as exc:
        # Truncated or corrupt payloads surface as ``OSError`` from the decoder.
        raise DecodeError(f"Failed to decode {source}: {exc}") from exc

    _LOGGER.debug(
        "Loaded %s (%dx%d, orientation %s)",
        source,
        pixels.shape[1],
        pixels.shape[0],
        orientation.name,
    )
    return Image.from_array(pixels, scale=scale, orientation=orientation)


def _resolve_format(destination: Path, format: Optional[str]) -> str:
    """Return Pillow's format name for *format* or, failing that, the suffix.

    Explicit names go through the extension table too, so ``"jpg"`` and
    ``"tif"`` resolve to ``JPEG`` and ``TIFF``.
    """

    extensions = PILImage.registered_extensions()
    if format:
        key = format.lower()
        if not key.startswith("."):
            key = "." + key
        image_format = extensions.get(key, format.upper())
    else:
        image_format = extensions.get(destination.suffix.lower(), "PNG")
    if image_format not in PILImage.SAVE:
        raise ValueError(f"Unsupported export format: {format or destination.suffix!r}")
    return image_format


def save_image(
    image: Image,
    path: str | Path,
    *,
    format: Optional[str] = None,
    quality: int = 95,
) -> Path:
    """Write *image* to *path* and return the destination.

    The orientation tag is written to the EXIF block so viewers display the
    export the same way as the source.  Formats without an alpha channel
    receive the RGB channels only.  The file is written to a temporary
    sibling first and swapped into place once complete.
    """

    destination = Path(path)
    image_format = _resolve_format(destination, format)

    pil_image = PILImage.fromarray(image.to_uint8_rgba())
    if image_format in _OPAQUE_FORMATS:
        pil_image = pil_image.convert("RGB")

    exif = PILImage.Exif()
    exif[_EXIF_ORIENTATION_TAG] = int(image.orientation)

    save_kwargs: dict[str, object] = {"format": image_format, "exif": exif.tobytes()}
    if image_format == "JPEG":
        save_kwargs["quality"] = int(quality)

    destination.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = destination.with_suffix(destination.suffix + ".tmp")
    try:
        with tmp_path.open("wb") as handle:
            pil_image.save(handle, **save_kwargs)
            handle.flush()
            os.fsync(handle.fileno())
        tmp_path.replace(destination)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    return destination


__all__ = ["load_image", "save_image"]
