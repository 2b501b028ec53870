"""Conversions between Qt images and engine images.

Qt keeps the display scale as ``devicePixelRatio`` on the ``QImage`` itself,
so it maps directly onto :attr:`Image.scale`.  Qt has no notion of the EXIF
orientation tag; callers pass it explicitly and keep it alongside the
``QImage`` they display.
"""

from __future__ import annotations

import numpy as np
from PySide6.QtGui import QImage

from ..errors import DecodeError
from .image import Image, Orientation


def _resolve_pixel_buffer(image: QImage) -> tuple[memoryview, object]:
    """Return a read-only 1-D :class:`memoryview` over *image*'s pixels.

    PySide exposes ``constBits()`` as a ready-to-use ``memoryview`` while PyQt
    returns a ``sip.voidptr`` that needs ``setsize`` first.  The tuple's second
    element keeps the Qt wrapper alive for as long as the view is in use.
    """

    expected_size = image.bytesPerLine() * image.height()
    buffer = image.constBits()
    guard: object = buffer

    if isinstance(buffer, memoryview):
        view = buffer
    else:
        try:
            view = memoryview(buffer)
        except TypeError:
            if hasattr(buffer, "setsize"):
                buffer.setsize(expected_size)
                view = memoryview(buffer)
            else:
                raise DecodeError("Unsupported QImage.constBits() buffer wrapper") from None

    view = view.cast("B") if view.format != "B" or view.ndim != 1 else view
    if len(view) < expected_size:
        raise DecodeError("QImage pixel buffer is smaller than expected")
    return view[:expected_size], guard


def image_from_qimage(qimage: QImage, orientation: Orientation = Orientation.UP) -> Image:
    """Copy *qimage* into an 8-bit RGBA :class:`Image`.

    Raises :class:`DecodeError` for null images or unreadable buffers.
    """

    if qimage.isNull():
        raise DecodeError("QImage is null")

    converted = qimage.convertToFormat(QImage.Format.Format_RGBA8888)
    if converted.isNull():
        raise DecodeError(f"Cannot convert QImage format {qimage.format()} to RGBA8888")

    width = converted.width()
    height = converted.height()
    bytes_per_line = converted.bytesPerLine()

    view, guard = _resolve_pixel_buffer(converted)
    _ = guard  # Keep the Qt buffer alive while NumPy copies it.
    rows = np.frombuffer(view, dtype=np.uint8).reshape((height, bytes_per_line))
    pixels = rows[:, : width * 4].reshape((height, width, 4))

    return Image.from_array(
        pixels,
        scale=float(converted.devicePixelRatio()),
        orientation=orientation,
    )


def qimage_from_image(image: Image) -> QImage:
    """Return a detached ``QImage`` holding *image*'s pixels and scale."""

    rgba = np.ascontiguousarray(image.to_uint8_rgba())
    height, width = rgba.shape[:2]
    data = rgba.tobytes()
    # The constructor borrows ``data`` without owning it; ``copy`` detaches the pixels.
    qimage = QImage(data, width, height, width * 4, QImage.Format.Format_RGBA8888)
    qimage = qimage.copy()
    qimage.setDevicePixelRatio(float(image.scale))
    return qimage


__all__ = ["image_from_qimage", "qimage_from_image"]
