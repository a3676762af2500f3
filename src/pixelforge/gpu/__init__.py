"""Rendering backends.

The rasterizer writes its pixel buffer through one of these backends:
ModernGL (OpenGL) or plain host memory.
"""

from pixelforge.gpu.backend import GPUBackend, TextureFormat
from pixelforge.gpu.cpu_backend import CPUBackend
from pixelforge.gpu.texture import Texture

__all__ = [
    # Backend
    "GPUBackend",
    "TextureFormat",
    "CPUBackend",
    # Texture
    "Texture",
    "create_backend",
    "BACKEND_TYPES",
]

BACKEND_TYPES = ("cpu", "moderngl")


def create_backend(backend_type: str = "cpu") -> GPUBackend:
    """Create a rendering backend (not yet initialized).

    Args:
        backend_type: Backend type ("cpu" or "moderngl")

    Returns:
        Backend instance
    """
    if backend_type == "moderngl":
        from pixelforge.gpu.moderngl_backend import ModernGLBackend
        return ModernGLBackend(standalone=True)
    elif backend_type == "cpu":
        return CPUBackend()
    else:
        raise ValueError(f"Unknown backend type: {backend_type}")
