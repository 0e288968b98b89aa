"""Grid element factory functions (functional style).

These are the placement boundary: every kind-specific parameter is validated
here, so the solver can assume positive values.
"""

from __future__ import annotations

from .config import GridConfig, DEFAULT_CONFIG
from .network import (
    Network,
    Node,
    NodeId,
    NodeSpec,
    WireSpec,
    HouseSpec,
    LedSpec,
    ResistorSpec,
    TransistorSpec,
    CapacitorSpec,
    TransformerSpec,
)

Pos = tuple[float, float]

# Auto-naming prefixes, e.g. "H0", "R1"
_PREFIXES = {
    HouseSpec: "H",
    LedSpec: "L",
    ResistorSpec: "R",
    TransistorSpec: "T",
    CapacitorSpec: "C",
    TransformerSpec: "X",
}


def _require_positive(label: str, value: float) -> float:
    value = float(value)
    # NaN fails the comparison as well
    if not value > 0:
        raise ValueError(f"{label} must be a positive number, got {value!r}")
    return value


def _place(net: Network, spec: NodeSpec, name: NodeId | None, pos: Pos) -> tuple[Network, Node]:
    if name is None:
        kind = type(spec)
        index = net.count(kind)
        name = f"{_PREFIXES[kind]}{index}"
        # Skip ids already taken by explicitly named nodes
        while net.get(name) is not None:
            index += 1
            name = f"{_PREFIXES[kind]}{index}"
    node = Node(name, spec, (float(pos[0]), float(pos[1])))
    return net.add_node(node), node


def House(net: Network, *, name: NodeId | None = None, pos: Pos = (0.0, 0.0)) -> tuple[Network, Node]:
    """
    Place a house load.

    Returns:
        (new_network, node)

    Example:
        net, h = House(net, pos=(700, 210))  # named "H0"
    """
    return _place(net, HouseSpec(), name, pos)


def LED(net: Network, *, name: NodeId | None = None, pos: Pos = (0.0, 0.0)) -> tuple[Network, Node]:
    """Place an LED street light."""
    return _place(net, LedSpec(), name, pos)


def Res(
    net: Network,
    *,
    name: NodeId | None = None,
    ohms: float | None = None,
    pos: Pos = (0.0, 0.0),
    config: GridConfig = DEFAULT_CONFIG,
) -> tuple[Network, Node]:
    """
    Place an inline resistor.

    Args:
        net: Network to add to
        name: Node id (auto-generated when omitted)
        ohms: Resistance in Ohms (defaults to ``config.resistor_default_ohms``)
        pos: Display position
        config: Source of the default value

    Returns:
        (new_network, node)

    Raises:
        ValueError: if ohms is not positive
    """
    if ohms is None:
        ohms = config.resistor_default_ohms
    spec = ResistorSpec(_require_positive("Resistance", ohms))
    return _place(net, spec, name, pos)


def Trans(
    net: Network,
    *,
    name: NodeId | None = None,
    on: bool = True,
    pos: Pos = (0.0, 0.0),
) -> tuple[Network, Node]:
    """
    Place a transistor switch.

    Toggle later with ``net.toggle(node.id)``.
    """
    return _place(net, TransistorSpec(bool(on)), name, pos)


def Cap(
    net: Network,
    *,
    name: NodeId | None = None,
    microfarads: float | None = None,
    pos: Pos = (0.0, 0.0),
    config: GridConfig = DEFAULT_CONFIG,
) -> tuple[Network, Node]:
    """
    Place a capacitor to ground.

    The nominal value is converted to farads and multiplied by
    ``config.cap_time_scale`` so charging is visible over seconds.

    Args:
        net: Network to add to
        name: Node id (auto-generated when omitted)
        microfarads: Nominal capacitance in µF (defaults to ``config.capacitor_default_uf``)
        pos: Display position
        config: Time scale and default value

    Returns:
        (new_network, node)

    Raises:
        ValueError: if microfarads is not positive
    """
    if microfarads is None:
        microfarads = config.capacitor_default_uf
    uf = _require_positive("Capacitance", microfarads)
    spec = CapacitorSpec(farads=uf * 1e-6 * config.cap_time_scale)
    return _place(net, spec, name, pos)


def Xfmr(
    net: Network,
    *,
    name: NodeId | None = None,
    ratio: float | None = None,
    pos: Pos = (0.0, 0.0),
    config: GridConfig = DEFAULT_CONFIG,
) -> tuple[Network, Node]:
    """
    Place a transformer (0.5 = step down, 2 = step up).

    Raises:
        ValueError: if ratio is not positive
    """
    if ratio is None:
        ratio = config.transformer_default_ratio
    spec = TransformerSpec(_require_positive("Transformer ratio", ratio))
    return _place(net, spec, name, pos)


def Wire(net: Network, a: Node | NodeId, b: Node | NodeId) -> tuple[Network, WireSpec]:
    """
    Connect two placed nodes.

    Accepts nodes or ids.

    Raises:
        ValueError: self loop, unknown endpoint, or duplicate wire
    """
    a_id = a.id if isinstance(a, Node) else a
    b_id = b.id if isinstance(b, Node) else b
    return net.add_wire(a_id, b_id)
