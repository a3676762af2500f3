"""Core graph model and evaluation components."""

from pixelforge.core.data_types import RGBA, round_half_away
from pixelforge.core.errors import (
    BackendUnavailable,
    EvaluationError,
    EvaluationErrorKind,
    GraphIssue,
    IssueKind,
    ParseError,
    PixelForgeError,
    ValidationError,
)
from pixelforge.core.port import PortDirection, PortSpec, PortType
from pixelforge.core.node import Node, NodeKind
from pixelforge.core.registry import KernelRegistry, register_kernel
from pixelforge.core.kernels import ColorSourceKernel, Kernel, MixKernel, OutputKernel
from pixelforge.core.graph import Edge, Graph
from pixelforge.core.validation import GraphModel, validate
from pixelforge.core.evaluator import EvaluationResult, Evaluator, evaluate
from pixelforge.core.rasterizer import Rasterizer, rasterize
from pixelforge.core.protocol import decode_image, deserialize, encode_image, serialize

__all__ = [
    "RGBA",
    "round_half_away",
    "BackendUnavailable",
    "EvaluationError",
    "EvaluationErrorKind",
    "GraphIssue",
    "IssueKind",
    "ParseError",
    "PixelForgeError",
    "ValidationError",
    "PortDirection",
    "PortSpec",
    "PortType",
    "Node",
    "NodeKind",
    "KernelRegistry",
    "register_kernel",
    "Kernel",
    "ColorSourceKernel",
    "MixKernel",
    "OutputKernel",
    "Edge",
    "Graph",
    "GraphModel",
    "validate",
    "EvaluationResult",
    "Evaluator",
    "evaluate",
    "Rasterizer",
    "rasterize",
    "decode_image",
    "deserialize",
    "encode_image",
    "serialize",
]
