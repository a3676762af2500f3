"""Abstract rendering backend interface.

This module defines the abstract interface for rendering backends,
allowing the rasterizer to target an OpenGL device or plain host memory
through a unified interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING

import numpy as np

from pixelforge.core.errors import BackendUnavailable

if TYPE_CHECKING:
    from pixelforge.gpu.texture import Texture


class TextureFormat(Enum):
    """Texture formats: (channels, numpy dtype, bytes per channel)."""

    RGBA8 = (4, np.uint8, 1)      # Four channel 8-bit unorm (readback format)
    RGBA32F = (4, np.float32, 4)  # Four channel float32

    @property
    def channels(self) -> int:
        return self.value[0]

    @property
    def dtype(self) -> type:
        return self.value[1]

    @property
    def bytes_per_pixel(self) -> int:
        return self.value[0] * self.value[2]


class GPUBackend(ABC):
    """Abstract rendering backend interface.

    The backend is created and initialized once per process, before any
    evaluation, and shared by every request afterwards.
    """

    name: str = "abstract"

    @abstractmethod
    def initialize(self) -> None:
        """Initialize the device context.

        Must be called before any other operations. Calling it again on
        an initialized backend does nothing.
        """

    @abstractmethod
    def shutdown(self) -> None:
        """Shutdown and release all device resources."""

    @property
    @abstractmethod
    def is_initialized(self) -> bool:
        """Return True if the context is initialized."""

    @property
    def device_info(self) -> str:
        """Human-readable description of the device in use."""
        return self.name

    @abstractmethod
    def create_texture(
        self,
        width: int,
        height: int,
        format: TextureFormat = TextureFormat.RGBA8,
    ) -> Texture:
        """Create a texture.

        Args:
            width: Texture width in pixels
            height: Texture height in pixels
            format: Pixel format

        Returns:
            Texture handle
        """

    @abstractmethod
    def destroy_texture(self, texture: Texture) -> None:
        """Destroy a texture and free its memory."""

    @abstractmethod
    def sync(self) -> None:
        """Wait for all pending device operations to complete."""

    def require_initialized(self) -> None:
        """Raise BackendUnavailable unless the context is ready."""
        if not self.is_initialized:
            raise BackendUnavailable(f"{self.name} backend not initialized")
