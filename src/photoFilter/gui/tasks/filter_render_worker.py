"""Worker that renders a filter preview on a background thread."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from PySide6.QtCore import QObject, QRunnable, Signal

from ...core.catalog import FilterKind
from ...core.engine import FilterEngine
from ...core.image import Image
from ...core.render_context import CancellationToken
from ...errors import DecodeError, RenderCancelledError, RenderError

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilterRenderRequest:
    """Everything a worker needs to render one preview frame."""

    image: Image
    kind: FilterKind
    intensity: float
    generation: int


class FilterRenderSignals(QObject):
    """Signals emitted by :class:`FilterRenderWorker`."""

    ready = Signal(object, int)
    """Delivered with the rendered :class:`Image` and the request generation."""

    failed = Signal(int, str)
    """Emitted when the image could not be decoded or rendered."""

    finished = Signal(int)
    """Emitted once the worker has completed, even on failure or cancellation."""

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)


class FilterRenderWorker(QRunnable):
    """Apply a filter through ``FilterEngine.render`` off the GUI thread."""

    def __init__(
        self,
        engine: FilterEngine,
        request: FilterRenderRequest,
        cancel: CancellationToken,
    ) -> None:
        super().__init__()
        self.setAutoDelete(True)
        self._engine = engine
        self._request = request
        self._cancel = cancel
        self.signals = FilterRenderSignals()

    @property
    def request(self) -> FilterRenderRequest:
        return self._request

    @property
    def cancel_token(self) -> CancellationToken:
        return self._cancel

    def run(self) -> None:  # type: ignore[override]
        """Render the request and report the outcome unless it was superseded."""

        generation = self._request.generation
        try:
            if self._cancel.cancelled:
                return
            result = self._engine.render(
                self._request.image,
                self._request.kind,
                self._request.intensity,
                cancel=self._cancel,
            )
            if not self._cancel.cancelled:
                self.signals.ready.emit(result, generation)
        except RenderCancelledError:
            _LOGGER.debug("Preview generation %d superseded", generation)
        except (DecodeError, RenderError) as exc:
            self.signals.failed.emit(generation, str(exc))
        except Exception as exc:  # pragma: no cover - defensive logging path
            _LOGGER.exception("Unexpected failure while rendering filter preview")
            self.signals.failed.emit(generation, str(exc))
        finally:
            self.signals.finished.emit(generation)


__all__ = ["FilterRenderRequest", "FilterRenderSignals", "FilterRenderWorker"]
