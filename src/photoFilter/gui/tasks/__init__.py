"""Background worker helpers for GUI tasks."""

from .filter_render_worker import FilterRenderRequest, FilterRenderSignals, FilterRenderWorker

__all__ = ["FilterRenderRequest", "FilterRenderSignals", "FilterRenderWorker"]
