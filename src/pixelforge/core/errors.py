"""
Error taxonomy.

Every failure the core can report is a PixelForgeError subclass carrying
structured fields. Presentation of these errors is left to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence


class PixelForgeError(Exception):
    """Base class for all errors reported by the core."""


class ParseError(PixelForgeError):
    """The wire payload could not be decoded into a graph."""

    def __init__(self, message: str, path: str | None = None) -> None:
        self.path = path
        if path:
            message = f"{path}: {message}"
        super().__init__(message)


class IssueKind(str, Enum):
    """Structural problems found by graph validation."""

    CYCLE = "Cycle"
    DANGLING_EDGE = "DanglingEdge"
    PORT_TYPE_MISMATCH = "PortTypeMismatch"
    MULTIPLE_EDGES_ON_INPUT = "MultipleEdgesOnInput"


@dataclass(frozen=True)
class GraphIssue:
    """
    A single validation finding.

    Attributes:
        kind: What went wrong
        message: Diagnostic text
        node_ids: Nodes involved (the cycle path for CYCLE)
        edge_index: Position of the offending edge in the graph, if any
    """

    kind: IssueKind
    message: str
    node_ids: tuple[str, ...] = ()
    edge_index: int | None = None

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class ValidationError(PixelForgeError):
    """The graph violates one or more structural rules."""

    def __init__(self, issues: Sequence[GraphIssue]) -> None:
        self.issues = tuple(issues)
        summary = "; ".join(str(issue) for issue in self.issues)
        super().__init__(f"Graph is invalid ({len(self.issues)} issue(s)): {summary}")

    @property
    def kinds(self) -> set[IssueKind]:
        return {issue.kind for issue in self.issues}


class EvaluationErrorKind(str, Enum):
    NO_OUTPUT = "NoOutput"
    MULTIPLE_OUTPUTS = "MultipleOutputs"
    UNKNOWN_NODE_KIND = "UnknownNodeKind"


class EvaluationError(PixelForgeError):
    """A structurally valid graph could not be evaluated."""

    def __init__(
        self,
        kind: EvaluationErrorKind,
        message: str,
        node_ids: Sequence[str] = (),
    ) -> None:
        self.kind = kind
        self.node_ids = tuple(node_ids)
        super().__init__(f"{kind.value}: {message}")


class BackendUnavailable(PixelForgeError):
    """The rendering backend has not been initialized or failed to start."""
