"""Texture wrapper.

Provides a unified interface for textures across backends. Handles
only need ``write(bytes)``, ``read() -> bytes`` and ``release()``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Sequence

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from pixelforge.gpu.backend import TextureFormat


@dataclass
class Texture:
    """Texture wrapper.

    Attributes:
        width: Texture width in pixels
        height: Texture height in pixels
        format: Texture format enum
        handle: Backend-specific texture handle
    """

    width: int
    height: int
    format: TextureFormat
    handle: Any = field(repr=False)

    # Metadata for tracking (optional)
    name: str = ""

    @property
    def channels(self) -> int:
        return self.format.channels

    @property
    def nbytes(self) -> int:
        return self.width * self.height * self.format.bytes_per_pixel

    def upload(self, data: NDArray) -> None:
        """Upload host data to the texture.

        Args:
            data: Array with shape (H, W, C), in the texture's dtype.
                  Rows are top to bottom.
        """
        if data.shape != (self.height, self.width, self.channels):
            raise ValueError(
                f"Data shape {data.shape} doesn't match texture "
                f"({self.height}, {self.width}, {self.channels})"
            )

        data = np.ascontiguousarray(data, dtype=self.format.dtype)
        self.handle.write(data.tobytes())

    def read_bytes(self) -> bytes:
        """Read the raw texture contents, row-major, top row first."""
        raw = bytes(self.handle.read())
        if len(raw) != self.nbytes:
            raise RuntimeError(
                f"Texture readback returned {len(raw)} bytes, expected {self.nbytes}"
            )
        return raw

    def download(self) -> NDArray:
        """Download the texture to host memory.

        Returns:
            Array with shape (H, W, C) in the texture's dtype
        """
        data = np.frombuffer(self.read_bytes(), dtype=self.format.dtype)
        return data.reshape(self.height, self.width, self.channels)

    def clear(self, value: Sequence[float | int]) -> None:
        """Fill the texture with a solid color.

        Args:
            value: One value per channel, in the texture's dtype range
        """
        clear_data = np.empty((self.height, self.width, self.channels), dtype=self.format.dtype)
        clear_data[...] = np.asarray(value[: self.channels], dtype=self.format.dtype)
        self.upload(clear_data)

    @property
    def size(self) -> tuple[int, int]:
        """Return (width, height) tuple."""
        return (self.width, self.height)

    @property
    def shape(self) -> tuple[int, int, int]:
        """Return (height, width, channels) tuple (NumPy convention)."""
        return (self.height, self.width, self.channels)
