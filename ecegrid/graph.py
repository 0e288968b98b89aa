"""Per-tick conduction graph: edge resistances and reachability from the generator."""

from __future__ import annotations
from typing import NamedTuple

from .config import GridConfig
from .network import Network, Node, NodeId, ResistorSpec, TransistorSpec


class Edge(NamedTuple):
    """Directed half of a wire in the adjacency."""
    to: NodeId
    ohms: float


Adjacency = dict[NodeId, list[Edge]]


def is_open_switch(node: Node) -> bool:
    """True for a transistor that is switched off."""
    match node.spec:
        case TransistorSpec(on=on):
            return not on
        case _:
            return False


def _endpoint_ohms(node: Node, config: GridConfig) -> float:
    match node.spec:
        case ResistorSpec(ohms=ohms):
            return ohms
        case TransistorSpec(on=True):
            return config.transistor_on_ohms
        case _:
            return 0.0


def edge_resistance(node_a: Node, node_b: Node, config: GridConfig) -> float:
    """
    Resistance of a closed wire between two nodes.

    R = wire + each resistor endpoint's ohms + each closed transistor's on-resistance.

    A resistor is counted on every wire touching it, so a pass-through
    resistor (gen - R - house) contributes its ohms twice in series.
    """
    return config.wire_ohms + _endpoint_ohms(node_a, config) + _endpoint_ohms(node_b, config)


def build_adjacency(net: Network, config: GridConfig) -> Adjacency:
    """
    Build the symmetric adjacency for the current switch states.

    Every node gets an entry. Wires with a missing endpoint or an open-switch
    endpoint contribute no edge.
    """
    nodes = net.node_map()
    adj: Adjacency = {node_id: [] for node_id in nodes}

    for wire in net.wires:
        a = nodes.get(wire.a)
        b = nodes.get(wire.b)
        if a is None or b is None:
            continue
        if is_open_switch(a) or is_open_switch(b):
            continue

        ohms = edge_resistance(a, b, config)
        adj[wire.a].append(Edge(wire.b, ohms))
        adj[wire.b].append(Edge(wire.a, ohms))

    return adj


def reachable_from(start: NodeId, adj: Adjacency) -> set[NodeId]:
    """Ids connected to ``start`` through closed edges (including ``start``)."""
    if start not in adj:
        return set()

    reachable = {start}
    stack = [start]
    while stack:
        u = stack.pop()
        for edge in adj[u]:
            if edge.to not in reachable:
                reachable.add(edge.to)
                stack.append(edge.to)
    return reachable
