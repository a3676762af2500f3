"""
Graph snapshot: nodes and the edges between their ports.

The editor owns the live graph; the core only ever sees a Graph value
and copies it before evaluation. Dictionary (de)serialization of the
wire records lives here; JSON text handling is in protocol.py.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real
from typing import Any, Iterator, Mapping

from pixelforge.core.errors import ParseError
from pixelforge.core.node import Node, NodeKind


@dataclass(frozen=True)
class Edge:
    """
    A directed connection from an output port to an input port.

    Attributes:
        source: ID of the node with the output port
        source_port: Name of the output port (None: the node's only output)
        target: ID of the node with the input port
        target_port: Name of the input port (None: the node's only input)
        id: Optional editor-assigned edge id
    """

    source: str
    source_port: str | None
    target: str
    target_port: str | None
    id: str | None = None

    @property
    def is_self_loop(self) -> bool:
        return self.source == self.target

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the wire record."""
        data: dict[str, Any] = {
            "source": self.source,
            "sourceHandle": self.source_port,
            "target": self.target,
            "targetHandle": self.target_port,
        }
        if self.id is not None:
            data = {"id": self.id, **data}
        return data

    @classmethod
    def from_dict(cls, data: Any, path: str = "edge") -> Edge:
        """
        Deserialize from a wire record.

        Raises:
            ParseError: If the record is not an object or has ill-typed fields
        """
        if not isinstance(data, Mapping):
            raise ParseError("edge must be an object", path)

        return cls(
            source=_require_str(data, "source", path),
            source_port=_optional_str(data, "sourceHandle", path),
            target=_require_str(data, "target", path),
            target_port=_optional_str(data, "targetHandle", path),
            id=_optional_str(data, "id", path),
        )

    def __repr__(self) -> str:
        return (
            f"Edge({self.source}.{self.source_port or '*'} -> "
            f"{self.target}.{self.target_port or '*'})"
        )


class Graph:
    """
    A set of nodes and edges at a point in time.

    The graph is a plain container: it does not reject structurally
    invalid edges, so an editor can hand over whatever it currently
    holds and receive a complete diagnostic from validation.

    Attributes:
        nodes: Dictionary of nodes by ID, in insertion order
        edges: List of edges, in insertion order
    """

    def __init__(
        self,
        nodes: list[Node] | None = None,
        edges: list[Edge] | None = None,
    ) -> None:
        """Initialize a graph, optionally with nodes and edges."""
        self.nodes: dict[str, Node] = {}
        self.edges: list[Edge] = []

        for node in nodes or []:
            self.add_node(node)
        self.edges.extend(edges or [])

    def add_node(self, node: Node) -> Node:
        """
        Add a node to the graph.

        Args:
            node: The node to add

        Returns:
            The added node (for chaining)

        Raises:
            ValueError: If a node with the same ID already exists
        """
        if node.id in self.nodes:
            raise ValueError(f"Node with ID '{node.id}' already exists in graph")

        self.nodes[node.id] = node
        return node

    def remove_node(self, node_or_id: Node | str) -> bool:
        """
        Remove a node and every edge touching it.

        Returns:
            True if removed, False if not found
        """
        node_id = node_or_id if isinstance(node_or_id, str) else node_or_id.id

        if node_id not in self.nodes:
            return False

        del self.nodes[node_id]
        self.edges = [
            e for e in self.edges if e.source != node_id and e.target != node_id
        ]
        return True

    def get_node(self, node_id: str) -> Node | None:
        """Get a node by ID."""
        return self.nodes.get(node_id)

    def connect(
        self,
        source_node: Node | str,
        source_port: str | None,
        dest_node: Node | str,
        dest_port: str | None,
        edge_id: str | None = None,
    ) -> Edge:
        """
        Add an edge from an output port to an input port.

        Args:
            source_node: Node with output (or its ID)
            source_port: Name of output port
            dest_node: Node with input (or its ID)
            dest_port: Name of input port
            edge_id: Optional editor-assigned id

        Returns:
            The new Edge
        """
        src_id = source_node if isinstance(source_node, str) else source_node.id
        dst_id = dest_node if isinstance(dest_node, str) else dest_node.id

        edge = Edge(src_id, source_port, dst_id, dest_port, id=edge_id)
        self.edges.append(edge)
        return edge

    def disconnect(
        self,
        source_node: Node | str,
        source_port: str | None,
        dest_node: Node | str,
        dest_port: str | None,
    ) -> bool:
        """
        Remove every edge between the given ports.

        Returns:
            True if at least one edge was removed
        """
        src_id = source_node if isinstance(source_node, str) else source_node.id
        dst_id = dest_node if isinstance(dest_node, str) else dest_node.id

        before = len(self.edges)
        self.edges = [
            e
            for e in self.edges
            if not (
                e.source == src_id
                and e.source_port == source_port
                and e.target == dst_id
                and e.target_port == dest_port
            )
        ]
        return len(self.edges) != before

    def edges_to(self, node_id: str) -> list[Edge]:
        """Return edges whose target is the given node."""
        return [e for e in self.edges if e.target == node_id]

    def edges_from(self, node_id: str) -> list[Edge]:
        """Return edges whose source is the given node."""
        return [e for e in self.edges if e.source == node_id]

    def nodes_of_kind(self, kind: NodeKind) -> list[Node]:
        """Return nodes of a kind, in insertion order."""
        return [n for n in self.nodes.values() if n.kind == kind]

    def snapshot(self) -> Graph:
        """
        Create an independent deep copy.

        Nodes are copied; edges are immutable and shared.
        """
        return Graph(
            nodes=[node.copy() for node in self.nodes.values()],
            edges=list(self.edges),
        )

    def clear(self) -> None:
        """Remove all nodes and edges."""
        self.nodes.clear()
        self.edges.clear()

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize graph to dictionary.

        Returns:
            Dictionary with "nodes" and "edges" lists
        """
        return {
            "nodes": [node.to_dict() for node in self.nodes.values()],
            "edges": [edge.to_dict() for edge in self.edges],
        }

    @classmethod
    def from_dict(cls, data: Any) -> Graph:
        """
        Create graph from dictionary.

        Accepts both the canonical records ({id, kind, params}) and the
        editor's widget records ({id, type, data}).

        Args:
            data: Serialized graph data

        Returns:
            New Graph instance

        Raises:
            ParseError: If the payload does not describe a graph
        """
        if not isinstance(data, Mapping):
            raise ParseError("graph must be an object")

        raw_nodes = data.get("nodes")
        raw_edges = data.get("edges", [])
        if not isinstance(raw_nodes, list):
            raise ParseError("'nodes' must be a list")
        if not isinstance(raw_edges, list):
            raise ParseError("'edges' must be a list")

        graph = cls()
        for i, node_data in enumerate(raw_nodes):
            node = _node_from_dict(node_data, f"nodes[{i}]")
            if node.id in graph.nodes:
                raise ParseError(f"duplicate node id '{node.id}'", f"nodes[{i}]")
            graph.add_node(node)

        for i, edge_data in enumerate(raw_edges):
            graph.edges.append(Edge.from_dict(edge_data, f"edges[{i}]"))

        return graph

    def __len__(self) -> int:
        """Number of nodes in the graph."""
        return len(self.nodes)

    def __iter__(self) -> Iterator[Node]:
        """Iterate over nodes in insertion order."""
        return iter(list(self.nodes.values()))

    def __contains__(self, node_or_id: Node | str) -> bool:
        """Check if node is in graph."""
        node_id = node_or_id if isinstance(node_or_id, str) else node_or_id.id
        return node_id in self.nodes

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Graph):
            return NotImplemented
        return (
            list(self.nodes.values()) == list(other.nodes.values())
            and self.edges == other.edges
        )

    def __repr__(self) -> str:
        return f"Graph(nodes={len(self.nodes)}, edges={len(self.edges)})"


def _require_str(data: Mapping[str, Any], key: str, path: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise ParseError(f"'{key}' must be a string", path)
    return value


def _optional_str(data: Mapping[str, Any], key: str, path: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise ParseError(f"'{key}' must be a string or null", path)
    return value


def _number(value: Any, key: str, path: str) -> float:
    # bool is a Real subclass but never a valid parameter
    if isinstance(value, bool) or not isinstance(value, Real):
        raise ParseError(f"parameter '{key}' must be a number", path)
    try:
        finite = math.isfinite(float(value))
    except OverflowError:
        # integers beyond float range
        finite = False
    if not finite:
        raise ParseError(f"parameter '{key}' must be finite", path)
    return value


def _params_from_editor_data(data: Mapping[str, Any], path: str) -> dict[str, float]:
    """Flatten widget data ({label, color: {r,g,b,a}, factor}) into params."""
    params: dict[str, float] = {}

    color = data.get("color")
    if color is not None:
        if not isinstance(color, Mapping):
            raise ParseError("'data.color' must be an object", path)
        for channel in ("r", "g", "b", "a"):
            if channel in color:
                params[channel] = _number(color[channel], channel, path)

    for key, value in data.items():
        # label and imageData are widget state
        if key in ("color", "label", "imageData"):
            continue
        if isinstance(value, Real) and not isinstance(value, bool):
            params[key] = _number(value, key, path)

    return params


def _position(data: Any) -> dict[str, float] | None:
    """Keep only the numeric coordinates of editor position metadata."""
    if not isinstance(data, Mapping):
        return None
    return {
        str(key): value
        for key, value in data.items()
        if isinstance(value, Real) and not isinstance(value, bool)
    }


def _node_from_dict(data: Any, path: str) -> Node:
    if not isinstance(data, Mapping):
        raise ParseError("node must be an object", path)

    node_id = _require_str(data, "id", path)

    if "kind" in data:
        kind = _require_str(data, "kind", path)
    else:
        kind = _require_str(data, "type", path)

    if "params" in data:
        raw_params = data["params"]
        if raw_params is None:
            raw_params = {}
        if not isinstance(raw_params, Mapping):
            raise ParseError("'params' must be an object", path)
        params = {
            str(key): _number(value, key, path) for key, value in raw_params.items()
        }
    elif isinstance(data.get("data"), Mapping):
        params = _params_from_editor_data(data["data"], path)
    else:
        params = {}

    return Node(id=node_id, kind=kind, params=params, position=_position(data.get("position")))
