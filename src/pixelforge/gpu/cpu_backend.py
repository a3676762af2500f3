"""Host-memory backend.

Textures are numpy arrays. Used where no OpenGL device is available
(headless servers, tests) and as the default backend.
"""

from __future__ import annotations

import logging

import numpy as np

from pixelforge.gpu.backend import GPUBackend, TextureFormat
from pixelforge.gpu.texture import Texture

logger = logging.getLogger(__name__)


class ArrayHandle:
    """Texture storage backed by a numpy array.

    Mirrors the small part of moderngl.Texture that Texture relies on.
    """

    def __init__(self, width: int, height: int, format: TextureFormat):
        self.data = np.zeros((height, width, format.channels), dtype=format.dtype)
        self.released = False

    def write(self, data: bytes) -> None:
        if len(data) != self.data.nbytes:
            raise ValueError(
                f"Write of {len(data)} bytes doesn't match texture size {self.data.nbytes}"
            )
        self.data = np.frombuffer(data, dtype=self.data.dtype).reshape(self.data.shape).copy()

    def read(self) -> bytes:
        return self.data.tobytes()

    def release(self) -> None:
        self.released = True


class CPUBackend(GPUBackend):
    """Backend that renders into host memory."""

    name = "cpu"

    def __init__(self) -> None:
        self._initialized = False
        self._live_textures = 0

    def initialize(self) -> None:
        if self._initialized:
            return
        self._initialized = True
        logger.info("Initialized CPU backend")

    def shutdown(self) -> None:
        if not self._initialized:
            return
        self._initialized = False
        logger.info("CPU backend shut down")

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def live_textures(self) -> int:
        """Number of textures created and not yet destroyed."""
        return self._live_textures

    def create_texture(
        self,
        width: int,
        height: int,
        format: TextureFormat = TextureFormat.RGBA8,
    ) -> Texture:
        self.require_initialized()
        self._live_textures += 1
        return Texture(
            width=width,
            height=height,
            format=format,
            handle=ArrayHandle(width, height, format),
        )

    def destroy_texture(self, texture: Texture) -> None:
        if not texture.handle.released:
            texture.handle.release()
            self._live_textures -= 1

    def sync(self) -> None:
        """Host memory writes are synchronous."""
