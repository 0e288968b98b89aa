"""Grid topology: typed nodes and undirected wires (immutable/functional style)."""

from __future__ import annotations
from typing import NamedTuple, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from .config import GridConfig
    from .solver import GridSim


NodeId = Union[str, int]

GEN_ID = "GEN"


# --- Node kind payloads (one shape per kind) ---

class GenSpec(NamedTuple):
    """The single DC generator. Voltage comes from ``GridConfig.source_voltage``."""


class HouseSpec(NamedTuple):
    """House load, fixed resistance to ground."""


class LedSpec(NamedTuple):
    """Street-light LED load, fixed resistance to ground."""


class ResistorSpec(NamedTuple):
    """Inline resistor node."""
    ohms: float


class TransistorSpec(NamedTuple):
    """Switch node. Off removes every wire touching it."""
    on: bool = True


class CapacitorSpec(NamedTuple):
    """Capacitor to ground. ``farads`` is already multiplied by the time scale."""
    farads: float


class TransformerSpec(NamedTuple):
    """Fixed-voltage node at ``ratio`` times the generator voltage when reachable."""
    ratio: float


NodeSpec = Union[
    GenSpec, HouseSpec, LedSpec, ResistorSpec, TransistorSpec, CapacitorSpec, TransformerSpec,
]


class Node(NamedTuple):
    """A placed grid element."""
    id: NodeId
    spec: NodeSpec
    pos: tuple[float, float] = (0.0, 0.0)  # display only


class WireSpec(NamedTuple):
    """Undirected wire between two node ids."""
    a: NodeId
    b: NodeId


def wire_key(a: NodeId, b: NodeId) -> frozenset:
    """Order-independent key for the wire between ``a`` and ``b``."""
    return frozenset((a, b))


class Network(NamedTuple):
    """
    Immutable grid topology.

    Starts with the generator node. Build using functional style:
        net = Network()
        net, h1 = House(net, name="H1")
        net, w = Wire(net, net.gen, h1)
    """
    nodes: tuple[Node, ...] = (Node(GEN_ID, GenSpec(), (140.0, 285.0)),)
    wires: tuple[WireSpec, ...] = ()

    @property
    def gen(self) -> Node:
        """Generator node (the only source)."""
        return self.nodes[0]

    def node_map(self) -> dict[NodeId, Node]:
        """Id -> node, in insertion order."""
        return {n.id: n for n in self.nodes}

    def get(self, node_id: NodeId) -> Node | None:
        for n in self.nodes:
            if n.id == node_id:
                return n
        return None

    def count(self, kind: type) -> int:
        """Number of nodes whose payload is ``kind``."""
        return sum(1 for n in self.nodes if isinstance(n.spec, kind))

    def add_node(self, node: Node) -> Network:
        """
        Append a node.

        Raises:
            ValueError: duplicate id, or a second generator
        """
        if self.get(node.id) is not None:
            raise ValueError(f"Node id {node.id!r} already exists")
        if isinstance(node.spec, GenSpec):
            raise ValueError("Network already has a generator")
        return self._replace(nodes=self.nodes + (node,))

    def has_wire(self, a: NodeId, b: NodeId) -> bool:
        key = wire_key(a, b)
        return any(wire_key(w.a, w.b) == key for w in self.wires)

    def add_wire(self, a: NodeId, b: NodeId) -> tuple[Network, WireSpec]:
        """
        Connect two existing nodes.

        Returns (new_network, wire).

        Raises:
            ValueError: self loop, unknown endpoint, or duplicate pair
        """
        if a == b:
            raise ValueError(f"Cannot wire node {a!r} to itself")
        for end in (a, b):
            if self.get(end) is None:
                raise ValueError(f"Unknown node {end!r}")
        if self.has_wire(a, b):
            raise ValueError(f"Nodes {a!r} and {b!r} are already wired")

        wire = WireSpec(a, b)
        return self._replace(wires=self.wires + (wire,)), wire

    def set_switch(self, node_id: NodeId, on: bool) -> Network:
        """
        Return a network with transistor ``node_id`` switched on/off.

        Raises:
            ValueError: if the node is missing or not a transistor
        """
        node = self.get(node_id)
        if node is None or not isinstance(node.spec, TransistorSpec):
            raise ValueError(f"{node_id!r} is not a transistor")
        new_node = node._replace(spec=TransistorSpec(on=bool(on)))
        return self._replace(
            nodes=tuple(new_node if n.id == node_id else n for n in self.nodes)
        )

    def toggle(self, node_id: NodeId) -> Network:
        """Flip a transistor's switch state."""
        node = self.get(node_id)
        if node is None or not isinstance(node.spec, TransistorSpec):
            raise ValueError(f"{node_id!r} is not a transistor")
        return self.set_switch(node_id, not node.spec.on)

    def compile(self, config: GridConfig | None = None) -> GridSim:
        """
        Create simulation functions for this topology.

        Args:
            config: Electrical constants (defaults to ``GridConfig()``)

        Returns:
            GridSim with init, step and probe functions
        """
        from .solver import compile_network
        return compile_network(self, config)
