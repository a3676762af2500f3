"""
Structural validation of graph snapshots.

GraphModel resolves every edge against the port declarations of its
node kinds, builds the node dependency structure, and reports all
rule violations in one pass. It never runs a kernel.
"""

from __future__ import annotations

import heapq
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator

from pixelforge.core.errors import GraphIssue, IssueKind
from pixelforge.core.graph import Edge, Graph
from pixelforge.core.port import PortSpec, types_compatible
from pixelforge.core import kernels  # noqa: F401  (registers the built-in kernels)
from pixelforge.core.registry import KernelRegistry


class _Mark(Enum):
    """DFS node coloring."""

    UNVISITED = auto()
    IN_PROGRESS = auto()
    DONE = auto()


@dataclass(frozen=True)
class ResolvedEdge:
    """
    An edge whose endpoints exist in the graph.

    Ports are None when the node kind on that side is not registered;
    such edges still count as dependencies but skip port checks.
    """

    edge: Edge
    index: int
    source_port: PortSpec | None
    target_port: PortSpec | None

    @property
    def source(self) -> str:
        return self.edge.source

    @property
    def target(self) -> str:
        return self.edge.target

    @property
    def input_key(self) -> tuple[str, str | None]:
        """(target node, input port) this edge feeds."""
        if self.target_port is not None:
            return (self.edge.target, self.target_port.name)
        return (self.edge.target, self.edge.target_port)


class GraphModel:
    """
    Validated view over a graph snapshot.

    Attributes:
        graph: The snapshot being inspected
        edges: Edges whose endpoints and ports resolved
        dependencies: target node id -> ids of nodes it reads from
        dependents: source node id -> ids of nodes reading from it
    """

    def __init__(self, graph: Graph) -> None:
        self.graph = graph
        self.edges: list[ResolvedEdge] = []
        self.dependencies: dict[str, set[str]] = {nid: set() for nid in graph.nodes}
        self.dependents: dict[str, set[str]] = {nid: set() for nid in graph.nodes}
        self._issues: list[GraphIssue] = []

        self._resolve_edges()

    def _resolve_edges(self) -> None:
        """Resolve edge endpoints, recording dangling edges."""
        for index, edge in enumerate(self.graph.edges):
            source_node = self.graph.get_node(edge.source)
            target_node = self.graph.get_node(edge.target)

            missing = [
                nid
                for nid, node in ((edge.source, source_node), (edge.target, target_node))
                if node is None
            ]
            if missing:
                self._issues.append(
                    GraphIssue(
                        IssueKind.DANGLING_EDGE,
                        f"edge {index} references unknown node(s): {', '.join(missing)}",
                        node_ids=tuple(missing),
                        edge_index=index,
                    )
                )
                continue

            source_port = target_port = None
            source_kernel = KernelRegistry.get(source_node.kind)
            target_kernel = KernelRegistry.get(target_node.kind)

            if source_kernel is not None:
                source_port = source_kernel.get_output(edge.source_port)
                if source_port is None:
                    self._dangling_port(index, edge.source, edge.source_port, "output")
                    continue

            if target_kernel is not None:
                target_port = target_kernel.get_input(edge.target_port)
                if target_port is None:
                    self._dangling_port(index, edge.target, edge.target_port, "input")
                    continue

            self.edges.append(ResolvedEdge(edge, index, source_port, target_port))
            self.dependencies[edge.target].add(edge.source)
            self.dependents[edge.source].add(edge.target)

    def _dangling_port(
        self, index: int, node_id: str, port: str | None, direction: str
    ) -> None:
        name = port if port is not None else "<unnamed>"
        self._issues.append(
            GraphIssue(
                IssueKind.DANGLING_EDGE,
                f"edge {index} references unknown {direction} port '{name}' on node {node_id}",
                node_ids=(node_id,),
                edge_index=index,
            )
        )

    def validate(self) -> list[GraphIssue]:
        """
        Check every structural rule.

        Order of reporting: dangling edges, type mismatches, multiple
        edges on one input, cycles.

        Returns:
            All issues found; an empty list means the graph is valid
        """
        issues = list(self._issues)
        issues.extend(self._check_port_types())
        issues.extend(self._check_fan_in())
        issues.extend(self._check_cycles())
        return issues

    def _check_port_types(self) -> list[GraphIssue]:
        issues = []
        for resolved in self.edges:
            src, dst = resolved.source_port, resolved.target_port
            if src is None or dst is None:
                continue
            if not types_compatible(src.port_type, dst.port_type):
                issues.append(
                    GraphIssue(
                        IssueKind.PORT_TYPE_MISMATCH,
                        f"edge {resolved.index} connects {resolved.source}.{src.name} "
                        f"({src.port_type.name}) to {resolved.target}.{dst.name} "
                        f"({dst.port_type.name})",
                        node_ids=(resolved.source, resolved.target),
                        edge_index=resolved.index,
                    )
                )
        return issues

    def _check_fan_in(self) -> list[GraphIssue]:
        feeding: dict[tuple[str, str | None], list[ResolvedEdge]] = {}
        for resolved in self.edges:
            feeding.setdefault(resolved.input_key, []).append(resolved)

        issues = []
        for (node_id, port), edges in feeding.items():
            if len(edges) > 1:
                sources = tuple(e.source for e in edges)
                issues.append(
                    GraphIssue(
                        IssueKind.MULTIPLE_EDGES_ON_INPUT,
                        f"input {node_id}.{port} has {len(edges)} incoming edges "
                        f"(from {', '.join(sources)})",
                        node_ids=(node_id, *sources),
                        edge_index=edges[1].index,
                    )
                )
        return issues

    def _check_cycles(self) -> list[GraphIssue]:
        """
        Three-color DFS over the dependency structure.

        A dependency on a node that is still in progress closes a cycle;
        each such back edge is reported with the nodes on the cycle in
        data-flow order.

        The walk keeps an explicit stack so chain length is not bounded
        by the interpreter's recursion limit.
        """
        marks = {nid: _Mark.UNVISITED for nid in self.dependencies}
        issues: list[GraphIssue] = []

        for root in sorted(self.dependencies):
            if marks[root] is not _Mark.UNVISITED:
                continue

            marks[root] = _Mark.IN_PROGRESS
            path: list[str] = [root]
            stack: list[Iterator[str]] = [iter(sorted(self.dependencies[root]))]

            while stack:
                upstream = next(stack[-1], None)
                if upstream is None:
                    marks[path.pop()] = _Mark.DONE
                    stack.pop()
                elif marks[upstream] is _Mark.IN_PROGRESS:
                    # path runs downstream -> upstream; flip to data-flow order
                    cycle = path[path.index(upstream):]
                    cycle.reverse()
                    issues.append(
                        GraphIssue(
                            IssueKind.CYCLE,
                            "cycle through " + " -> ".join([*cycle, cycle[0]]),
                            node_ids=tuple(cycle),
                        )
                    )
                elif marks[upstream] is _Mark.UNVISITED:
                    marks[upstream] = _Mark.IN_PROGRESS
                    path.append(upstream)
                    stack.append(iter(sorted(self.dependencies[upstream])))

        return issues

    def topological_order(self) -> list[str]:
        """
        Compute the execution order of all nodes.

        Kahn's algorithm; among ready nodes the smallest id runs first.

        Returns:
            List of node IDs in execution order

        Raises:
            ValueError: If graph contains a cycle
        """
        in_degree = {nid: len(deps) for nid, deps in self.dependencies.items()}
        ready = [nid for nid, degree in in_degree.items() if degree == 0]
        heapq.heapify(ready)
        result = []

        while ready:
            node_id = heapq.heappop(ready)
            result.append(node_id)

            for target_id in self.dependents[node_id]:
                in_degree[target_id] -= 1
                if in_degree[target_id] == 0:
                    heapq.heappush(ready, target_id)

        if len(result) != len(self.dependencies):
            raise ValueError("Graph contains a cycle")

        return result

    def inputs_of(self, node_id: str) -> dict[str, ResolvedEdge]:
        """Map each connected input port of a node to the edge feeding it."""
        return {
            resolved.input_key[1]: resolved
            for resolved in self.edges
            if resolved.target == node_id and resolved.input_key[1] is not None
        }


def validate(graph: Graph) -> list[GraphIssue]:
    """
    Validate a graph.

    Returns:
        All structural issues; empty when the graph is valid
    """
    return GraphModel(graph).validate()
