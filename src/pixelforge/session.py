"""
Process-wide render session: the two entry points the editor calls.

    session = RenderSession()
    session.initialize()                # once, before any sync
    result = session.sync_graph(text)   # per user sync action
    if result.ok:
        show(result.pixels)

Every sync is independent. Results of overlapping syncs may complete
out of submission order; callers that care should discard results of
superseded requests.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

from pixelforge.config import PixelForgeConfig
from pixelforge.core.errors import BackendUnavailable, PixelForgeError
from pixelforge.core.evaluator import Evaluator
from pixelforge.core.graph import Graph
from pixelforge.core.protocol import deserialize
from pixelforge.core.rasterizer import Rasterizer
from pixelforge.gpu import GPUBackend, create_backend

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncResult:
    """
    Response to one sync request: pixels or an error, never both.

    Attributes:
        pixels: width * height * 4 bytes, RGBA8, row-major
        error: Reason no pixels were produced
    """

    pixels: bytes | None = None
    error: PixelForgeError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class RenderSession:
    """
    Owns the rendering backend and serves sync requests.

    Attributes:
        config: Session settings
    """

    def __init__(
        self,
        config: PixelForgeConfig | None = None,
        backend: GPUBackend | None = None,
    ) -> None:
        """
        Args:
            config: Session settings (defaults to PixelForgeConfig())
            backend: Pre-built backend; otherwise created from config on
                initialize()
        """
        self.config = config or PixelForgeConfig()
        self._backend = backend
        self._evaluator = Evaluator()
        # Backend contexts are not thread-safe
        self._lock = threading.Lock()

    @property
    def backend(self) -> GPUBackend | None:
        return self._backend

    @property
    def is_initialized(self) -> bool:
        return self._backend is not None and self._backend.is_initialized

    def initialize(self) -> str:
        """
        Prepare the rendering backend. Idempotent.

        Returns:
            Description of the device in use

        Raises:
            BackendUnavailable: If the backend cannot be created
        """
        with self._lock:
            if self._backend is None:
                self._backend = create_backend(self.config.backend)
            if not self._backend.is_initialized:
                try:
                    self._backend.initialize()
                except BackendUnavailable:
                    raise
                except Exception as exc:
                    raise BackendUnavailable(
                        f"Failed to initialize {self._backend.name} backend: {exc}"
                    ) from exc
            return self._backend.device_info

    def shutdown(self) -> None:
        """Release the backend. A later initialize() starts it again."""
        with self._lock:
            if self._backend is not None:
                self._backend.shutdown()

    def render(self, graph: Graph) -> bytes:
        """
        Evaluate and rasterize a graph.

        Raises:
            BackendUnavailable: If initialize() has not succeeded
            ValidationError, EvaluationError: From evaluation
        """
        if not self.is_initialized:
            raise BackendUnavailable("Rendering backend not initialized; call initialize() first")

        value = self._evaluator.evaluate(graph)

        with self._lock:
            rasterizer = Rasterizer(self._backend, self.config.width, self.config.height)
            return rasterizer.rasterize(value)

    def sync_graph(self, graph_json: str | bytes) -> SyncResult:
        """
        Serve one editor sync request.

        Args:
            graph_json: Serialized graph description

        Returns:
            SyncResult with the pixel buffer, or the error that prevented it
        """
        try:
            graph = deserialize(graph_json)
            logger.debug("Received graph with %d nodes", len(graph))
            pixels = self.render(graph)
        except PixelForgeError as exc:
            logger.warning("Sync rejected: %s", exc)
            return SyncResult(error=exc)

        return SyncResult(pixels=pixels)
