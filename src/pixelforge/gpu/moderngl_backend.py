"""ModernGL (OpenGL 3.3+) backend implementation.

Runs against a headless standalone context by default, or against the
current OpenGL context of a host application.
"""

from __future__ import annotations

import logging

import moderngl

from pixelforge.core.errors import BackendUnavailable
from pixelforge.gpu.backend import GPUBackend, TextureFormat
from pixelforge.gpu.texture import Texture

logger = logging.getLogger(__name__)


class ModernGLBackend(GPUBackend):
    """OpenGL backend via ModernGL."""

    name = "moderngl"

    # Map TextureFormat to ModernGL dtype strings
    DTYPE_MAP = {
        TextureFormat.RGBA8: "f1",
        TextureFormat.RGBA32F: "f4",
    }

    REQUIRED_VERSION = 330

    def __init__(self, standalone: bool = True):
        """Initialize ModernGL backend.

        Args:
            standalone: If True, create a standalone (headless) context.
                       If False, use the current OpenGL context.
        """
        self._standalone = standalone
        self._ctx: moderngl.Context | None = None
        self._initialized = False

    def initialize(self) -> None:
        """Initialize the OpenGL context."""
        if self._initialized:
            return

        try:
            if self._standalone:
                self._ctx = moderngl.create_standalone_context(require=self.REQUIRED_VERSION)
            else:
                self._ctx = moderngl.create_context(require=self.REQUIRED_VERSION)
        except Exception as exc:
            raise BackendUnavailable(f"Failed to create OpenGL context: {exc}") from exc

        self._initialized = True
        logger.info("Initialized OpenGL on: %s", self.device_info)

    def shutdown(self) -> None:
        """Release all OpenGL resources."""
        if not self._initialized:
            return

        # Release context (if standalone)
        if self._standalone and self._ctx:
            self._ctx.release()

        self._ctx = None
        self._initialized = False
        logger.info("OpenGL backend shut down")

    @property
    def is_initialized(self) -> bool:
        """Return True if context is initialized."""
        return self._initialized

    @property
    def ctx(self) -> moderngl.Context:
        """Return the ModernGL context."""
        self.require_initialized()
        return self._ctx

    @property
    def device_info(self) -> str:
        if not self._initialized:
            return self.name
        info = self._ctx.info
        return f"{info.get('GL_RENDERER', 'unknown')} (OpenGL {self._ctx.version_code})"

    def create_texture(
        self,
        width: int,
        height: int,
        format: TextureFormat = TextureFormat.RGBA8,
    ) -> Texture:
        """Create an OpenGL texture."""
        if format not in self.DTYPE_MAP:
            raise ValueError(f"Unsupported texture format: {format}")

        mgl_texture = self.ctx.texture(
            (width, height),
            format.channels,
            dtype=self.DTYPE_MAP[format],
        )
        mgl_texture.filter = (moderngl.NEAREST, moderngl.NEAREST)
        mgl_texture.repeat_x = False
        mgl_texture.repeat_y = False

        return Texture(width=width, height=height, format=format, handle=mgl_texture)

    def destroy_texture(self, texture: Texture) -> None:
        """Destroy an OpenGL texture."""
        if texture.handle:
            texture.handle.release()

    def sync(self) -> None:
        """Wait for all OpenGL operations to complete."""
        self.ctx.finish()
