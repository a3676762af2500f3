"""
Tests for the graph evaluator.
"""

from unittest.mock import patch

import pytest

from pixelforge.core.data_types import RGBA
from pixelforge.core.errors import (
    EvaluationError,
    EvaluationErrorKind,
    IssueKind,
    ValidationError,
)
from pixelforge.core.evaluator import Evaluator, evaluate
from pixelforge.core.graph import Graph
from pixelforge.core.kernels import MixKernel
from pixelforge.core.node import Node, NodeKind


def color(node_id, r=0, g=0, b=0, a=1.0):
    return Node(node_id, NodeKind.COLOR_SOURCE, {"r": r, "g": g, "b": b, "a": a})


def mix(node_id, factor=0.5):
    return Node(node_id, NodeKind.MIX, {"factor": factor})


def output(node_id="out"):
    return Node(node_id, NodeKind.OUTPUT)


def mix_graph(a, b, factor):
    """ColorSource a, ColorSource b -> Mix -> Output."""
    graph = Graph([color("ca", *a), color("cb", *b), mix("m", factor), output()])
    graph.connect("ca", "color", "m", "a")
    graph.connect("cb", "color", "m", "b")
    graph.connect("m", "out", "out", "in")
    return graph


class TestEvaluate:
    """Tests for successful evaluation."""

    def test_color_to_output(self):
        graph = Graph([color("c", 12, 200, 7, 0.5), output()])
        graph.connect("c", "color", "out", "in")

        assert evaluate(graph) == RGBA(12, 200, 7, 0.5)

    def test_mix_factor_zero(self):
        graph = mix_graph((10, 20, 30, 1.0), (200, 150, 100, 1.0), 0.0)

        assert evaluate(graph) == RGBA(10, 20, 30, 1.0)

    def test_mix_factor_one(self):
        graph = mix_graph((10, 20, 30, 1.0), (200, 150, 100, 1.0), 1.0)

        assert evaluate(graph) == RGBA(200, 150, 100, 1.0)

    def test_mix_half_black_white(self):
        graph = mix_graph((0, 0, 0, 1.0), (255, 255, 255, 1.0), 0.5)

        assert evaluate(graph) == RGBA(128, 128, 128, 1.0)

    def test_unconnected_mix_input_defaults_to_black(self):
        """Mix(a unconnected, b=(200,10,10,1), factor=1) gives b."""
        graph = Graph([color("cb", 200, 10, 10, 1.0), mix("m", 1.0), output()])
        graph.connect("cb", "color", "m", "b")
        graph.connect("m", "out", "out", "in")

        assert evaluate(graph) == RGBA(200, 10, 10, 1.0)

    def test_unconnected_mix_blends_with_black(self):
        graph = Graph([color("ca", 100, 100, 100, 1.0), mix("m", 0.5), output()])
        graph.connect("ca", "color", "m", "a")
        graph.connect("m", "out", "out", "in")

        assert evaluate(graph) == RGBA(50, 50, 50, 1.0)

    def test_unconnected_output_is_black(self):
        graph = Graph([color("c", 255, 0, 0), output()])

        assert evaluate(graph) == RGBA.black()

    def test_chained_mixes(self):
        graph = Graph([
            color("c1", 0, 0, 0),
            color("c2", 200, 200, 200),
            color("c3", 100, 0, 0),
            mix("m1", 0.5),
            mix("m2", 0.5),
            output(),
        ])
        graph.connect("c1", "color", "m1", "a")
        graph.connect("c2", "color", "m1", "b")
        graph.connect("m1", "out", "m2", "a")
        graph.connect("c3", "color", "m2", "b")
        graph.connect("m2", "out", "out", "in")

        # m1 = (100, 100, 100); m2 = (100, 50, 50)
        assert evaluate(graph) == RGBA(100, 50, 50, 1.0)

    def test_editor_null_handles(self):
        graph = Graph([color("c", 1, 2, 3), output()])
        graph.connect("c", None, "out", None)

        assert evaluate(graph) == RGBA(1, 2, 3)

    def test_deterministic(self):
        graph = mix_graph((3, 5, 7, 0.3), (250, 1, 90, 0.9), 0.37)
        evaluator = Evaluator()

        assert evaluator.evaluate(graph) == evaluator.evaluate(graph)

    def test_input_graph_not_modified(self):
        graph = mix_graph((0, 0, 0, 1.0), (255, 255, 255, 1.0), 0.5)
        before = graph.to_dict()

        evaluate(graph)

        assert graph.to_dict() == before


class TestEvaluationResult:
    """Tests for run() and its trace."""

    def test_order_and_values(self):
        graph = mix_graph((0, 0, 0, 1.0), (255, 255, 255, 1.0), 0.5)

        result = Evaluator().run(graph)

        assert result.order == ["ca", "cb", "m", "out"]
        assert result.output_node_id == "out"
        assert result.port_values[("ca", "color")] == RGBA(0, 0, 0)
        assert result.port_values[("m", "out")] == RGBA(128, 128, 128)
        assert result.value == RGBA(128, 128, 128)


class TestEvaluationErrors:
    """Tests for graphs that cannot be evaluated."""

    def test_cycle_rejected_before_kernels(self):
        graph = Graph([mix("A"), mix("B"), output()])
        graph.connect("A", "out", "B", "a")
        graph.connect("B", "out", "A", "a")
        graph.connect("B", "out", "out", "in")

        with patch.object(MixKernel, "compute") as compute:
            with pytest.raises(ValidationError) as exc_info:
                evaluate(graph)

        compute.assert_not_called()
        assert exc_info.value.kinds == {IssueKind.CYCLE}

    def test_no_output(self):
        graph = Graph([color("c")])

        with pytest.raises(EvaluationError) as exc_info:
            evaluate(graph)

        assert exc_info.value.kind == EvaluationErrorKind.NO_OUTPUT

    def test_empty_graph_has_no_output(self):
        with pytest.raises(EvaluationError) as exc_info:
            evaluate(Graph())

        assert exc_info.value.kind == EvaluationErrorKind.NO_OUTPUT

    def test_multiple_outputs(self):
        graph = Graph([color("c"), output("o1"), output("o2")])
        graph.connect("c", "color", "o1", "in")
        graph.connect("c", "color", "o2", "in")

        with pytest.raises(EvaluationError) as exc_info:
            evaluate(graph)

        assert exc_info.value.kind == EvaluationErrorKind.MULTIPLE_OUTPUTS
        assert exc_info.value.node_ids == ("o1", "o2")

    def test_unknown_kind(self):
        graph = Graph([Node("n", "Noise"), output()])

        with pytest.raises(EvaluationError) as exc_info:
            evaluate(graph)

        assert exc_info.value.kind == EvaluationErrorKind.UNKNOWN_NODE_KIND
        assert exc_info.value.node_ids == ("n",)

    def test_validation_errors_collected(self):
        graph = Graph([color("c1"), color("c2"), output()])
        graph.connect("c1", "color", "out", "in")
        graph.connect("c2", "color", "out", "in")
        graph.connect("c1", "color", "missing", "in")

        with pytest.raises(ValidationError) as exc_info:
            evaluate(graph)

        assert exc_info.value.kinds == {
            IssueKind.DANGLING_EDGE,
            IssueKind.MULTIPLE_EDGES_ON_INPUT,
        }
        assert len(exc_info.value.issues) == 2
