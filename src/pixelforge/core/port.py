"""
Port declarations for node kinds.

Ports are declared once per node kind (not per node instance) and
describe the named, typed connection points a kernel reads and writes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Sequence


class PortType(Enum):
    """Value types that can flow along an edge."""

    RGBA = auto()  # RGBA color value


class PortDirection(Enum):
    """Which side of a node a port sits on."""

    INPUT = auto()
    OUTPUT = auto()


def types_compatible(source_type: PortType, dest_type: PortType) -> bool:
    """Check if a source port type can feed a destination port type."""
    return source_type == dest_type


@dataclass(frozen=True)
class PortSpec:
    """
    Declaration of a single port on a node kind.

    Attributes:
        name: Identifier within the node kind (e.g. "a", "out")
        direction: Input or output
        port_type: Value type carried by the port
        description: Human-readable description
        default: Value used when an input is left unconnected
    """

    name: str
    direction: PortDirection
    port_type: PortType = PortType.RGBA
    description: str = ""
    default: Any = field(default=None, compare=False)

    @property
    def is_input(self) -> bool:
        return self.direction is PortDirection.INPUT


def input_port(
    name: str,
    port_type: PortType = PortType.RGBA,
    description: str = "",
    default: Any = None,
) -> PortSpec:
    """Declare an input port."""
    return PortSpec(name, PortDirection.INPUT, port_type, description, default)


def output_port(
    name: str,
    port_type: PortType = PortType.RGBA,
    description: str = "",
) -> PortSpec:
    """Declare an output port."""
    return PortSpec(name, PortDirection.OUTPUT, port_type, description)


def resolve_port(ports: Sequence[PortSpec], name: str | None) -> PortSpec | None:
    """
    Find a port by name.

    A missing name (an editor handle left as null) resolves to the only
    port in the sequence; if there are zero or several, nothing matches.

    Args:
        ports: Ports of one direction on one node kind
        name: Requested port name, or None

    Returns:
        The matching PortSpec, or None
    """
    if name is None:
        return ports[0] if len(ports) == 1 else None

    for port in ports:
        if port.name == name:
            return port
    return None
