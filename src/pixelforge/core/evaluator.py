"""
Graph evaluation engine.

Validates a graph snapshot, orders its nodes by dependency, and runs
each node's kernel to produce the color that reaches the Output node.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from pixelforge.core.data_types import RGBA
from pixelforge.core.errors import EvaluationError, EvaluationErrorKind, ValidationError
from pixelforge.core.graph import Graph
from pixelforge.core.node import Node, NodeKind
from pixelforge.core.registry import KernelRegistry
from pixelforge.core.validation import GraphModel

logger = logging.getLogger(__name__)

PortKey = tuple[str, str]


@dataclass
class EvaluationResult:
    """
    Outcome of a complete evaluation.

    Attributes:
        value: Color resolved at the Output node's input
        output_node_id: ID of the Output node
        order: Node IDs in the order their kernels ran
        port_values: Every computed output, keyed by (node_id, port)
    """

    value: RGBA
    output_node_id: str
    order: list[str] = field(default_factory=list)
    port_values: dict[PortKey, RGBA] = field(default_factory=dict)


class Evaluator:
    """
    Stateless graph evaluator.

    Each call copies its input graph and keeps nothing afterwards, so a
    single Evaluator may serve overlapping requests.
    """

    def evaluate(self, graph: Graph) -> RGBA:
        """
        Evaluate a graph to its final color.

        Raises:
            ValidationError: If the graph is structurally invalid
            EvaluationError: If there is no single Output node or a node
                kind has no kernel
        """
        return self.run(graph).value

    def run(self, graph: Graph) -> EvaluationResult:
        """
        Evaluate a graph, keeping the intermediate values.

        Either every kernel runs and a result is returned, or an error
        is raised before the first kernel runs.
        """
        snapshot = graph.snapshot()
        model = GraphModel(snapshot)

        issues = model.validate()
        if issues:
            raise ValidationError(issues)

        output = self._find_output(snapshot)
        self._check_kinds(snapshot)

        order = model.topological_order()
        logger.debug("Execution order: %s", order)

        port_values: dict[PortKey, RGBA] = {}
        final: RGBA | None = None

        for node_id in order:
            node = snapshot.nodes[node_id]
            inputs = self._gather_inputs(model, node, port_values)

            kernel = KernelRegistry.get(node.kind)
            outputs = kernel.run(node, inputs)
            for port_name, value in outputs.items():
                port_values[(node_id, port_name)] = value

            logger.debug("Node %s (%s): %s -> %s", node_id, node.kind_name, inputs, outputs)

            if node_id == output.id:
                final = inputs["in"]

        return EvaluationResult(
            value=final,
            output_node_id=output.id,
            order=order,
            port_values=port_values,
        )

    def _find_output(self, graph: Graph) -> Node:
        outputs = graph.nodes_of_kind(NodeKind.OUTPUT)
        if not outputs:
            raise EvaluationError(EvaluationErrorKind.NO_OUTPUT, "graph has no Output node")
        if len(outputs) > 1:
            ids = [n.id for n in outputs]
            raise EvaluationError(
                EvaluationErrorKind.MULTIPLE_OUTPUTS,
                f"graph has {len(outputs)} Output nodes: {', '.join(ids)}",
                node_ids=ids,
            )
        return outputs[0]

    def _check_kinds(self, graph: Graph) -> None:
        unknown = [n for n in graph.nodes.values() if KernelRegistry.get(n.kind) is None]
        if unknown:
            raise EvaluationError(
                EvaluationErrorKind.UNKNOWN_NODE_KIND,
                "no kernel for "
                + ", ".join(f"{n.id} ({n.kind_name})" for n in unknown),
                node_ids=[n.id for n in unknown],
            )

    def _gather_inputs(
        self,
        model: GraphModel,
        node: Node,
        port_values: dict[PortKey, RGBA],
    ) -> dict[str, RGBA]:
        """Collect one value per input port: upstream output or kernel default."""
        kernel = KernelRegistry.get(node.kind)
        connected = model.inputs_of(node.id)

        inputs: dict[str, RGBA] = {}
        for port in kernel.inputs:
            resolved = connected.get(port.name)
            if resolved is None:
                inputs[port.name] = kernel.default_for(port.name)
            else:
                inputs[port.name] = port_values[(resolved.source, resolved.source_port.name)]
        return inputs


def evaluate(graph: Graph) -> RGBA:
    """Evaluate a graph to its final color with a fresh Evaluator."""
    return Evaluator().evaluate(graph)
