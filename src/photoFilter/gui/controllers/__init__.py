"""Controllers coordinating filter previews."""

from .filter_preview_controller import FilterPreviewController

__all__ = ["FilterPreviewController"]
