"""
Core data types for PixelForge.

Provides the RGBA value that flows along graph edges, plus the
rounding and clamping helpers shared by kernels and the rasterizer.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator

import numpy as np
from numpy.typing import NDArray


CHANNEL_MIN = 0
CHANNEL_MAX = 255


def round_half_away(value: float) -> int:
    """
    Round to the nearest integer, ties away from zero.

    Python's built-in round() uses banker's rounding, which would turn
    127.5 into 128 but 126.5 into 126. Channel math must be symmetric.
    """
    if value >= 0:
        return int(math.floor(value + 0.5))
    return -int(math.floor(-value + 0.5))


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


def to_channel(value: float) -> int:
    """Convert a number to a valid 8-bit channel (clamped, rounded)."""
    return int(clamp(round_half_away(value), CHANNEL_MIN, CHANNEL_MAX))


def to_alpha(value: float) -> float:
    """Convert a number to a valid alpha in [0, 1]."""
    return float(clamp(float(value), 0.0, 1.0))


@dataclass(frozen=True)
class RGBA:
    """
    An immutable color value.

    Attributes:
        r: Red channel, 0-255
        g: Green channel, 0-255
        b: Blue channel, 0-255
        a: Alpha, float in [0, 1]
    """

    r: int = 0
    g: int = 0
    b: int = 0
    a: float = 1.0

    def __post_init__(self) -> None:
        """Validate channel ranges."""
        for name in ("r", "g", "b"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise TypeError(f"Channel {name} must be an integer, got {value!r}")
            if not CHANNEL_MIN <= value <= CHANNEL_MAX:
                raise ValueError(f"Channel {name} out of range [0, 255]: {value}")
            object.__setattr__(self, name, int(value))

        if not 0.0 <= float(self.a) <= 1.0:
            raise ValueError(f"Alpha out of range [0, 1]: {self.a}")
        object.__setattr__(self, "a", float(self.a))

    @classmethod
    def black(cls) -> RGBA:
        """Opaque black, the default for unconnected color inputs."""
        return cls(0, 0, 0, 1.0)

    @classmethod
    def from_floats(cls, r: float, g: float, b: float, a: float = 1.0) -> RGBA:
        """Create from arbitrary numbers, clamping and rounding as needed."""
        return cls(to_channel(r), to_channel(g), to_channel(b), to_alpha(a))

    @property
    def alpha_byte(self) -> int:
        """Alpha scaled to an 8-bit channel."""
        return to_channel(self.a * CHANNEL_MAX)

    def to_bytes(self) -> bytes:
        """Pack as four bytes (R, G, B, A)."""
        return bytes((self.r, self.g, self.b, self.alpha_byte))

    def to_array(self) -> NDArray[np.uint8]:
        """Pack as a uint8 array of shape (4,)."""
        return np.frombuffer(self.to_bytes(), dtype=np.uint8).copy()

    def to_normalized(self) -> tuple[float, float, float, float]:
        """Channels as floats in [0, 1] (GPU clear color convention)."""
        return (
            self.r / CHANNEL_MAX,
            self.g / CHANNEL_MAX,
            self.b / CHANNEL_MAX,
            self.a,
        )

    def lerp(self, other: RGBA, t: float) -> RGBA:
        """
        Linear interpolation toward another color.

        Color channels are rounded half away from zero; alpha stays a
        float. t is clamped to [0, 1] before use.
        """
        t = clamp(float(t), 0.0, 1.0)
        s = 1.0 - t
        return RGBA(
            r=to_channel(self.r * s + other.r * t),
            g=to_channel(self.g * s + other.g * t),
            b=to_channel(self.b * s + other.b * t),
            a=to_alpha(self.a * s + other.a * t),
        )

    def __iter__(self) -> Iterator[float]:
        return iter((self.r, self.g, self.b, self.a))

    def __repr__(self) -> str:
        return f"RGBA({self.r}, {self.g}, {self.b}, {self.a:g})"
