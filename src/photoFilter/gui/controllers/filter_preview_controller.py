"""Controller that keeps a filter preview in sync with the editor controls."""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QObject, QThreadPool, Signal, Slot

from ... import config
from ...core.catalog import FilterKind
from ...core.engine import FilterEngine
from ...core.image import Image
from ...core.render_context import CancellationToken
from ...utils.logging import get_logger
from ..tasks.filter_render_worker import FilterRenderRequest, FilterRenderWorker

logger = get_logger(__name__)


class FilterPreviewController(QObject):
    """Render the selected filter whenever the source, kind or intensity changes.

    Slider drags produce a burst of requests.  Each new request cancels the
    token of the one before it and bumps the generation counter, so only the
    newest render reaches :attr:`previewReady`.  A failed render leaves the
    last good preview in place and reports the reason via
    :attr:`previewFailed`.
    """

    previewReady = Signal(object)
    """Emitted with the freshly rendered :class:`Image`."""

    previewFailed = Signal(str)
    """Emitted when the newest request could not be rendered."""

    def __init__(
        self,
        engine: FilterEngine | None = None,
        *,
        thread_pool: QThreadPool | None = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._engine = engine if engine is not None else FilterEngine()
        if thread_pool is None:
            thread_pool = QThreadPool(self)
            thread_pool.setMaxThreadCount(config.PREVIEW_THREAD_COUNT)
        self._pool = thread_pool
        self._source: Image | None = None
        self._kind = FilterKind.NONE
        self._intensity = config.DEFAULT_INTENSITY
        self._generation = 0
        self._cancel: CancellationToken | None = None
        self._preview: Image | None = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    @property
    def filter_kind(self) -> FilterKind:
        return self._kind

    @property
    def intensity(self) -> float:
        return self._intensity

    @property
    def generation(self) -> int:
        """Identifier of the most recent render request."""

        return self._generation

    def current_preview(self) -> Image | None:
        """Return the last successfully rendered image, if any."""

        return self._preview

    def set_source(self, image: Image | None) -> None:
        """Replace the source photo and re-render the current filter."""

        self._source = image
        self._preview = image
        self.request_render()

    def set_filter(self, kind: FilterKind) -> None:
        if kind is self._kind:
            return
        self._kind = kind
        self.request_render()

    def set_intensity(self, intensity: float) -> None:
        value = float(intensity)
        if value == self._intensity:
            return
        self._intensity = value
        self.request_render()

    def request_render(self) -> None:
        """Schedule a render for the current state, superseding older ones."""

        self._cancel_pending()
        self._generation += 1
        source = self._source
        if source is None:
            return

        if self._kind is FilterKind.NONE:
            # The identity filter needs no backend work.
            self._preview = source
            self.previewReady.emit(source)
            return

        token = CancellationToken()
        self._cancel = token
        request = FilterRenderRequest(source, self._kind, self._intensity, self._generation)
        worker = FilterRenderWorker(self._engine, request, token)
        worker.signals.ready.connect(self._handle_ready)
        worker.signals.failed.connect(self._handle_failed)
        self._pool.start(worker)

    def wait_for_done(self, msecs: int = -1) -> bool:
        """Block until queued renders finish; return ``False`` on timeout."""

        return self._pool.waitForDone(msecs)

    def shutdown(self) -> None:
        """Cancel outstanding work and wait for running workers to exit."""

        self._cancel_pending()
        self._pool.clear()
        self._pool.waitForDone()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _cancel_pending(self) -> None:
        if self._cancel is not None:
            self._cancel.cancel()
            self._cancel = None

    @Slot(object, int)
    def _handle_ready(self, image: Image, generation: int) -> None:
        if generation != self._generation:
            return
        self._cancel = None
        self._preview = image
        self.previewReady.emit(image)

    @Slot(int, str)
    def _handle_failed(self, generation: int, message: str) -> None:
        if generation != self._generation:
            return
        self._cancel = None
        logger.warning("Filter preview failed for %s: %s", self._kind.value, message)
        self.previewFailed.emit(message)


__all__ = ["FilterPreviewController"]
