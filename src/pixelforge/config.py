"""
Runtime configuration.

Settings come from keyword arguments or PIXELFORGE_* environment
variables.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping

from pixelforge.core.rasterizer import CANONICAL_HEIGHT, CANONICAL_WIDTH
from pixelforge.gpu import BACKEND_TYPES

ENV_PREFIX = "PIXELFORGE_"


@dataclass(frozen=True)
class PixelForgeConfig:
    """
    Session settings.

    Attributes:
        backend: Rendering backend ("cpu" or "moderngl")
        width: Raster width in pixels
        height: Raster height in pixels
        log_level: Level name for configure_logging()
    """

    backend: str = "cpu"
    width: int = CANONICAL_WIDTH
    height: int = CANONICAL_HEIGHT
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if self.backend not in BACKEND_TYPES:
            raise ValueError(
                f"Unknown backend {self.backend!r}, expected one of {BACKEND_TYPES}"
            )
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Raster size must be positive, got {self.width}x{self.height}")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Unknown log level {self.log_level!r}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> PixelForgeConfig:
        """
        Build a config from PIXELFORGE_* environment variables.

        Unset variables keep their defaults.
        """
        if environ is None:
            environ = os.environ

        kwargs: dict[str, object] = {}
        if f"{ENV_PREFIX}BACKEND" in environ:
            kwargs["backend"] = environ[f"{ENV_PREFIX}BACKEND"].strip().lower()
        for key in ("width", "height"):
            raw = environ.get(f"{ENV_PREFIX}{key.upper()}")
            if raw is not None:
                try:
                    kwargs[key] = int(raw)
                except ValueError as exc:
                    raise ValueError(f"{ENV_PREFIX}{key.upper()} must be an integer") from exc
        if f"{ENV_PREFIX}LOG_LEVEL" in environ:
            kwargs["log_level"] = environ[f"{ENV_PREFIX}LOG_LEVEL"].strip()

        return cls(**kwargs)


def configure_logging(level: str | int = "WARNING") -> None:
    """Attach a stream handler to the package logger (for host applications)."""
    logger = logging.getLogger("pixelforge")
    if isinstance(level, str):
        level = level.upper()
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
        )
        logger.addHandler(handler)
