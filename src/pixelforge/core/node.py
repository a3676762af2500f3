"""
Node kinds and node instances.

A Node is plain data: an id, a kind tag, and parameters. The
computation for a kind lives in its kernel (see kernels.py).
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class NodeKind(str, Enum):
    """Closed set of node kinds understood by the evaluator."""

    COLOR_SOURCE = "ColorSource"
    MIX = "Mix"
    OUTPUT = "Output"

    @classmethod
    def parse(cls, tag: str) -> NodeKind | None:
        """
        Look up a kind by its wire tag.

        Accepts the canonical names as well as the editor widget names
        ("colorNode", "mixNode", "outputNode").

        Returns:
            The NodeKind, or None for an unknown tag
        """
        try:
            return cls(tag)
        except ValueError:
            return _EDITOR_ALIASES.get(tag)


_EDITOR_ALIASES: dict[str, NodeKind] = {
    "colorNode": NodeKind.COLOR_SOURCE,
    "mixNode": NodeKind.MIX,
    "outputNode": NodeKind.OUTPUT,
}


Params = dict[str, float]


@dataclass
class Node:
    """
    A node instance in a graph.

    Attributes:
        id: Opaque unique identifier
        kind: Kind tag; a NodeKind for known kinds, or the raw tag string
            for kinds this evaluator does not understand
        params: Parameter values specific to the kind
        position: Editor-only metadata, ignored by evaluation and equality
    """

    id: str
    kind: NodeKind | str
    params: Params = field(default_factory=dict)
    position: dict[str, float] | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        """Normalize the kind tag to NodeKind where possible."""
        if not isinstance(self.kind, NodeKind):
            parsed = NodeKind.parse(self.kind)
            if parsed is not None:
                self.kind = parsed

    @property
    def is_known_kind(self) -> bool:
        return isinstance(self.kind, NodeKind)

    @property
    def kind_name(self) -> str:
        """Kind as a string, whether known or not."""
        return self.kind.value if isinstance(self.kind, NodeKind) else self.kind

    def copy(self) -> Node:
        """Create a deep copy of this node."""
        return Node(
            id=self.id,
            kind=self.kind,
            params=dict(self.params),
            position=copy.deepcopy(self.position),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        data: dict[str, Any] = {
            "id": self.id,
            "kind": self.kind_name,
            "params": dict(self.params),
        }
        if self.position is not None:
            data["position"] = dict(self.position)
        return data

    def __repr__(self) -> str:
        return f"Node(id={self.id!r}, kind={self.kind_name})"
