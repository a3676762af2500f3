"""
Editor <-> evaluator synchronization protocol.

Requests carry the graph as JSON text ({"nodes": [...], "edges": [...]}).
Responses are the raw rasterizer buffer with no framing; the editor
knows the fixed size and RGBA8 layout.
"""

from __future__ import annotations

import json

import numpy as np
from numpy.typing import NDArray

from pixelforge.core.errors import ParseError
from pixelforge.core.graph import Graph
from pixelforge.core.rasterizer import BYTES_PER_PIXEL, CANONICAL_HEIGHT, CANONICAL_WIDTH


def serialize(graph: Graph) -> str:
    """Encode a graph as wire JSON text."""
    return json.dumps(graph.to_dict())


def deserialize(text: str | bytes) -> Graph:
    """
    Decode wire JSON text into a graph.

    Raises:
        ParseError: If the text is not JSON or does not describe a graph
    """
    try:
        data = json.loads(text)
    except (ValueError, TypeError, RecursionError) as exc:
        # ValueError covers JSONDecodeError and UnicodeDecodeError
        raise ParseError(f"malformed JSON: {exc}") from exc

    return Graph.from_dict(data)


def encode_image(pixels: NDArray[np.uint8]) -> bytes:
    """
    Pack an (H, W, 4) uint8 array into the response byte layout.

    Raises:
        ValueError: If the array is not (H, W, 4) uint8
    """
    if pixels.ndim != 3 or pixels.shape[2] != BYTES_PER_PIXEL:
        raise ValueError(f"Expected (H, W, 4) array, got shape {pixels.shape}")
    if pixels.dtype != np.uint8:
        raise ValueError(f"Expected uint8 pixels, got {pixels.dtype}")
    return np.ascontiguousarray(pixels).tobytes()


def decode_image(
    data: bytes,
    width: int = CANONICAL_WIDTH,
    height: int = CANONICAL_HEIGHT,
) -> NDArray[np.uint8]:
    """
    Interpret a response buffer as an (H, W, 4) uint8 array.

    Raises:
        ValueError: If the byte length does not match the size
    """
    expected = width * height * BYTES_PER_PIXEL
    if len(data) != expected:
        raise ValueError(f"Expected {expected} bytes for {width}x{height}, got {len(data)}")
    return np.frombuffer(data, dtype=np.uint8).reshape(height, width, BYTES_PER_PIXEL)
