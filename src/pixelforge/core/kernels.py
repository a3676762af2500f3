"""
Node kernels.

Each node kind has exactly one kernel: a pure function from named
input values and node parameters to named output values. Kernels
keep no state between calls.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar, Mapping

from pixelforge.core.data_types import RGBA, clamp
from pixelforge.core.node import Node, NodeKind, Params
from pixelforge.core.port import PortSpec, input_port, output_port, resolve_port
from pixelforge.core.registry import KernelRegistry, register_kernel


class Kernel(ABC):
    """
    Base class for node kernels.

    Subclasses must define:
        - kind: The NodeKind this kernel implements
        - inputs / outputs: Port declarations
        - compute(): The pure computation

    Example:
        @register_kernel
        class InvertKernel(Kernel):
            kind = NodeKind.INVERT
            inputs = (input_port("in", default=RGBA.black()),)
            outputs = (output_port("out"),)

            def compute(self, inputs, params):
                c = inputs["in"]
                return {"out": RGBA(255 - c.r, 255 - c.g, 255 - c.b, c.a)}
    """

    kind: ClassVar[NodeKind]
    name: ClassVar[str] = ""
    category: ClassVar[str] = "Utility"
    description: ClassVar[str] = ""

    inputs: ClassVar[tuple[PortSpec, ...]] = ()
    outputs: ClassVar[tuple[PortSpec, ...]] = ()

    # Parameter name -> default value
    param_defaults: ClassVar[dict[str, float]] = {}

    @abstractmethod
    def compute(self, inputs: Mapping[str, RGBA], params: Params) -> dict[str, RGBA]:
        """
        Run the kernel.

        Args:
            inputs: One value per declared input port (connected or default)
            params: The node's parameters

        Returns:
            One value per declared output port
        """

    def get_input(self, name: str | None) -> PortSpec | None:
        return resolve_port(self.inputs, name)

    def get_output(self, name: str | None) -> PortSpec | None:
        return resolve_port(self.outputs, name)

    def default_for(self, port_name: str) -> RGBA:
        """Default value for an unconnected input port."""
        port = self.get_input(port_name)
        if port is None or port.default is None:
            return RGBA.black()
        return port.default

    def param(self, params: Params, name: str) -> float:
        """Read a parameter, falling back to the kernel's default."""
        return float(params.get(name, self.param_defaults[name]))

    def run(self, node: Node, inputs: Mapping[str, RGBA]) -> dict[str, RGBA]:
        """Run against a node instance, checking the declared outputs."""
        result = self.compute(inputs, node.params)
        missing = {p.name for p in self.outputs} - set(result)
        if missing:
            raise RuntimeError(
                f"{type(self).__name__} did not produce outputs: {sorted(missing)}"
            )
        return result

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value})"


@register_kernel
class ColorSourceKernel(Kernel):
    """
    Solid color generator.

    Emits its (r, g, b, a) parameters verbatim. Out-of-range values are
    clamped and fractional channels rounded half away from zero.
    """

    kind = NodeKind.COLOR_SOURCE
    name = "Solid Color"
    category = "Generate"
    description = "Produce a uniform RGBA color"

    outputs = (output_port("color", description="Solid color"),)
    param_defaults = {"r": 0, "g": 0, "b": 0, "a": 1.0}

    def compute(self, inputs: Mapping[str, RGBA], params: Params) -> dict[str, RGBA]:
        color = RGBA.from_floats(
            self.param(params, "r"),
            self.param(params, "g"),
            self.param(params, "b"),
            self.param(params, "a"),
        )
        return {"color": color}


@register_kernel
class MixKernel(Kernel):
    """
    Linear blend of two colors.

    out = a * (1 - t) + b * t per channel, with t = factor clamped to
    [0, 1]. Unconnected inputs are opaque black.
    """

    kind = NodeKind.MIX
    name = "Mix"
    category = "Combine"
    description = "Blend two colors by a factor"

    inputs = (
        input_port("a", description="First color", default=RGBA.black()),
        input_port("b", description="Second color", default=RGBA.black()),
    )
    outputs = (output_port("out", description="Blended color"),)
    param_defaults = {"factor": 0.5}

    def compute(self, inputs: Mapping[str, RGBA], params: Params) -> dict[str, RGBA]:
        t = clamp(self.param(params, "factor"), 0.0, 1.0)
        return {"out": inputs["a"].lerp(inputs["b"], t)}


@register_kernel
class OutputKernel(Kernel):
    """Graph sink. Its single input is the value handed to the rasterizer."""

    kind = NodeKind.OUTPUT
    name = "Output"
    category = "Output"
    description = "Final image"

    inputs = (input_port("in", description="Final color", default=RGBA.black()),)

    def compute(self, inputs: Mapping[str, RGBA], params: Params) -> dict[str, RGBA]:
        return {}


KernelRegistry.ensure_complete()
