"""PixelForge: compositing graph evaluation engine."""

__version__ = "0.1.0"

from pixelforge.session import RenderSession, SyncResult

__all__ = ["RenderSession", "SyncResult", "__version__"]
