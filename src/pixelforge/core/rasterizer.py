"""
Rasterizer: expand a color into a fixed-size RGBA8 pixel buffer.

Layout: row-major, top row first, 4 bytes per pixel (R, G, B, A),
stride = width * 4.
"""

from __future__ import annotations

import logging

import numpy as np

from pixelforge.core.data_types import RGBA
from pixelforge.gpu.backend import GPUBackend, TextureFormat

logger = logging.getLogger(__name__)

CANONICAL_WIDTH = 256
CANONICAL_HEIGHT = 256
BYTES_PER_PIXEL = 4


def buffer_size(width: int = CANONICAL_WIDTH, height: int = CANONICAL_HEIGHT) -> int:
    """Byte length of a raster of the given size."""
    return width * height * BYTES_PER_PIXEL


def _check_size(width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        raise ValueError(f"Raster size must be positive, got {width}x{height}")


def rasterize(
    value: RGBA,
    width: int = CANONICAL_WIDTH,
    height: int = CANONICAL_HEIGHT,
) -> bytes:
    """
    Fill a buffer with a uniform color in host memory.

    Args:
        value: Color for every pixel
        width: Raster width in pixels
        height: Raster height in pixels

    Returns:
        width * height * 4 bytes
    """
    _check_size(width, height)
    pixels = np.empty((height, width, BYTES_PER_PIXEL), dtype=np.uint8)
    pixels[...] = value.to_array()
    return pixels.tobytes()


class Rasterizer:
    """
    Produces pixel buffers through a rendering backend.

    The backend's texture is cleared to the color and read back, so the
    bytes match rasterize() exactly.

    Attributes:
        backend: Initialized rendering backend
        width: Raster width in pixels
        height: Raster height in pixels
    """

    def __init__(
        self,
        backend: GPUBackend,
        width: int = CANONICAL_WIDTH,
        height: int = CANONICAL_HEIGHT,
    ) -> None:
        _check_size(width, height)
        self.backend = backend
        self.width = width
        self.height = height

    @property
    def buffer_size(self) -> int:
        return buffer_size(self.width, self.height)

    def rasterize(self, value: RGBA) -> bytes:
        """
        Render a uniform color.

        Raises:
            BackendUnavailable: If the backend is not initialized
        """
        self.backend.require_initialized()

        texture = self.backend.create_texture(self.width, self.height, TextureFormat.RGBA8)
        try:
            texture.clear(value.to_array())
            self.backend.sync()
            data = texture.read_bytes()
        finally:
            self.backend.destroy_texture(texture)

        logger.debug("Rasterized %r to %dx%d on %s", value, self.width, self.height, self.backend.name)
        return data
