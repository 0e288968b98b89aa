"""
Per-tick power solver for a grid network.

Pipeline for one tick:
1. Conduction graph from the current switch states
2. Reachability from the generator (floating fragments never enter the solve)
3. Generator and reachable transformers become fixed-voltage nodes
4. Nodal system for every other reachable node, capacitors as
   backward-Euler companions (G = C/dt, Ieq = G*Vprev)
5. Dense solve (fail-soft to zero on a degenerate system)
6. Capacitor memory, load classification and wire metrics

Every step returns a fresh SimState; nothing is mutated in place.
"""

from __future__ import annotations
from enum import Enum
from typing import NamedTuple, Callable
import logging

import numpy as np
import jax.numpy as jnp
from jax import Array

from .config import GridConfig, DEFAULT_CONFIG
from .graph import Adjacency, build_adjacency, edge_resistance, is_open_switch, reachable_from
from .linalg import solve_linear
from .network import (
    Network,
    Node,
    NodeId,
    HouseSpec,
    LedSpec,
    CapacitorSpec,
    TransformerSpec,
    wire_key,
)

logger = logging.getLogger(__name__)

MIN_CAP_DT = 1e-5


class Level(str, Enum):
    """Load brightness class."""
    ON = "ON"
    DIM = "DIM"
    OFF = "OFF"


class LoadReading(NamedTuple):
    """Solved state of a house or LED."""
    voltage: float
    current: float
    level: Level
    brightness: float  # V / V_on clamped to [0, 1]


class WireReading(NamedTuple):
    """Display-only branch metrics (current flows a -> b when positive)."""
    ohms: float
    voltage: float
    current: float


OFF_READING = LoadReading(0.0, 0.0, Level.OFF, 0.0)


class SimState(NamedTuple):
    """
    Immutable simulation state.

    cap_voltages is the only memory carried between ticks; everything else
    is recomputed by each step.
    """
    time: float
    node_voltages: dict          # id -> V
    cap_voltages: dict           # capacitor id -> Vprev
    loads: dict                  # load id -> LoadReading
    wires: dict                  # frozenset({a, b}) -> WireReading


class GridSim(NamedTuple):
    """Collection of simulation functions bound to one topology."""
    init: Callable[[], SimState]
    step: Callable[[SimState, float], SimState]
    v: Callable[[SimState, "Node | NodeId"], float]
    load: Callable[[SimState, "Node | NodeId"], LoadReading]
    wire: Callable[[SimState, "Node | NodeId", "Node | NodeId"], WireReading | None]
    network: Network
    config: GridConfig


def load_ohms(node: Node, config: GridConfig) -> float | None:
    """Resistance to ground of a load node, None for anything else."""
    match node.spec:
        case HouseSpec():
            return config.house_ohms
        case LedSpec():
            return config.led_ohms
        case _:
            return None


def fixed_voltages(net: Network, reachable: set[NodeId], config: GridConfig) -> dict[NodeId, float]:
    """
    Nodes whose voltage is imposed rather than solved.

    Transformers always reference the generator voltage, never their
    upstream neighbour, so chained transformers do not compound.
    """
    fixed = {net.gen.id: config.source_voltage}
    for node in net.nodes:
        match node.spec:
            case TransformerSpec(ratio=ratio) if node.id in reachable:
                fixed[node.id] = ratio * config.source_voltage
    return fixed


def capacitor_companion(farads: float, v_prev: float, dt: float, config: GridConfig) -> tuple[float, float]:
    """
    Backward-Euler companion for a capacitor to ground.

    A smaller slow factor shrinks the effective step, which raises G and
    makes the node track Vprev more closely (slower charging).

    Returns:
        (G, Ieq)
    """
    slow = max(0.001, min(1.0, config.cap_slow_factor))
    dt_eff = max(MIN_CAP_DT, dt * slow)
    g = farads / dt_eff
    return g, g * v_prev


def assemble(
    net: Network,
    adj: Adjacency,
    unknowns: list[NodeId],
    fixed: dict[NodeId, float],
    cap_voltages: dict,
    dt: float,
    config: GridConfig,
) -> tuple[Array, Array]:
    """
    Build the nodal system A v = b for the unknown node voltages.

    Stamps are gathered as (row, col, value) lists and scattered once.
    """
    n = len(unknowns)
    index_of = {node_id: i for i, node_id in enumerate(unknowns)}
    nodes = net.node_map()

    rows: list[int] = []
    cols: list[int] = []
    vals: list[float] = []
    b_idx: list[int] = []
    b_vals: list[float] = []

    for i, node_id in enumerate(unknowns):
        node = nodes[node_id]
        sum_g = 0.0

        for edge in adj[node_id]:
            g = 1.0 / edge.ohms
            sum_g += g
            if edge.to in fixed:
                b_idx.append(i)
                b_vals.append(g * fixed[edge.to])
            elif edge.to in index_of:
                rows.append(i)
                cols.append(index_of[edge.to])
                vals.append(-g)

        r_load = load_ohms(node, config)
        if r_load is not None:
            sum_g += 1.0 / r_load

        match node.spec:
            case CapacitorSpec(farads=farads):
                g_cap, i_eq = capacitor_companion(farads, cap_voltages.get(node_id, 0.0), dt, config)
                sum_g += g_cap
                b_idx.append(i)
                b_vals.append(i_eq)

        rows.append(i)
        cols.append(i)
        vals.append(sum_g)

    A = jnp.zeros((n, n), dtype=jnp.float64).at[
        jnp.array(rows, dtype=jnp.int32), jnp.array(cols, dtype=jnp.int32)
    ].add(jnp.array(vals, dtype=jnp.float64))
    b = jnp.zeros(n, dtype=jnp.float64).at[jnp.array(b_idx, dtype=jnp.int32)].add(
        jnp.array(b_vals, dtype=jnp.float64)
    )
    return A, b


def classify_load(node: Node, voltage: float, config: GridConfig) -> LoadReading:
    """ON/DIM/OFF level, current and brightness for a reachable load."""
    match node.spec:
        case HouseSpec():
            v_on, v_dim, r_load = config.house_on_volts, config.house_dim_volts, config.house_ohms
        case LedSpec():
            v_on, v_dim, r_load = config.led_on_volts, config.led_dim_volts, config.led_ohms
        case _:
            raise ValueError(f"{node.id!r} is not a load")

    if voltage >= v_on:
        level = Level.ON
    elif voltage >= v_dim:
        level = Level.DIM
    else:
        level = Level.OFF

    brightness = min(1.0, max(0.0, voltage / v_on))
    return LoadReading(voltage, voltage / r_load, level, brightness)


def wire_metrics(net: Network, node_voltages: dict, config: GridConfig) -> dict:
    """
    Resistance, voltage drop and current of every closed wire.

    Display only; never fed back into the solve.
    """
    nodes = net.node_map()
    metrics = {}
    for wire in net.wires:
        a = nodes.get(wire.a)
        b = nodes.get(wire.b)
        if a is None or b is None:
            continue
        if is_open_switch(a) or is_open_switch(b):
            continue

        ohms = edge_resistance(a, b, config)
        v_ab = node_voltages.get(wire.a, 0.0) - node_voltages.get(wire.b, 0.0)
        i_ab = v_ab / ohms if ohms > 0 else 0.0
        metrics[wire_key(wire.a, wire.b)] = WireReading(ohms, v_ab, i_ab)
    return metrics


def init_state(net: Network) -> SimState:
    """Zero state: every node at 0V, every capacitor discharged."""
    caps = {n.id: 0.0 for n in net.nodes if isinstance(n.spec, CapacitorSpec)}
    loads = {n.id: OFF_READING for n in net.nodes if isinstance(n.spec, (HouseSpec, LedSpec))}
    return SimState(
        time=0.0,
        node_voltages={n.id: 0.0 for n in net.nodes},
        cap_voltages=caps,
        loads=loads,
        wires={},
    )


def solve_step(
    net: Network,
    state: SimState,
    dt: float,
    config: GridConfig = DEFAULT_CONFIG,
) -> SimState:
    """
    Advance the grid by one tick.

    Args:
        net: Current topology and switch states
        state: Previous state (only cap_voltages is read)
        dt: Seconds since the previous tick (negative is treated as 0)
        config: Electrical constants

    Returns:
        New SimState. Never raises for a valid network.
    """
    dt = max(0.0, float(dt))

    adj = build_adjacency(net, config)
    reachable = reachable_from(net.gen.id, adj)
    fixed = fixed_voltages(net, reachable, config)

    # Default everything to 0V, then impose the fixed nodes
    voltages = {n.id: 0.0 for n in net.nodes}
    voltages.update(fixed)

    unknowns = [n.id for n in net.nodes if n.id in reachable and n.id not in fixed]
    logger.debug("Solving %d unknown node(s), %d reachable", len(unknowns), len(reachable))

    if unknowns:
        A, b = assemble(net, adj, unknowns, fixed, state.cap_voltages, dt, config)
        x, singular = solve_linear(A, b)
        if singular:
            logger.debug("Degenerate nodal system (%d unknowns); treating grid as de-energized", len(unknowns))
        for node_id, v in zip(unknowns, np.asarray(x).tolist()):
            voltages[node_id] = v

    # Capacitor memory: isolated capacitors discharge fully
    cap_voltages = {}
    loads = {}
    for node in net.nodes:
        match node.spec:
            case CapacitorSpec():
                cap_voltages[node.id] = voltages[node.id] if node.id in reachable else 0.0
            case HouseSpec() | LedSpec():
                if node.id in reachable:
                    loads[node.id] = classify_load(node, voltages[node.id], config)
                else:
                    loads[node.id] = OFF_READING

    return SimState(
        time=state.time + dt,
        node_voltages=voltages,
        cap_voltages=cap_voltages,
        loads=loads,
        wires=wire_metrics(net, voltages, config),
    )


def _node_id(node: Node | NodeId) -> NodeId:
    return node.id if isinstance(node, Node) else node


def compile_network(net: Network, config: GridConfig | None = None) -> GridSim:
    """
    Bind simulation functions to one topology.

    Recompile (or call ``net.compile``) after any topology or switch change.
    """
    if config is None:
        config = DEFAULT_CONFIG

    wires_by_key = {wire_key(w.a, w.b): w for w in net.wires}

    def init() -> SimState:
        return init_state(net)

    def step(state: SimState, dt: float) -> SimState:
        return solve_step(net, state, dt, config)

    def v(state: SimState, node: Node | NodeId) -> float:
        """Voltage at a node (0 for unknown ids)."""
        return state.node_voltages.get(_node_id(node), 0.0)

    def load(state: SimState, node: Node | NodeId) -> LoadReading:
        """
        Reading for a house or LED.

        Raises:
            ValueError: if the node is not a load in this network
        """
        node_id = _node_id(node)
        if node_id not in state.loads:
            raise ValueError(f"{node_id!r} is not a load")
        return state.loads[node_id]

    def wire(state: SimState, a: Node | NodeId, b: Node | NodeId) -> WireReading | None:
        """Metrics for the wire between a and b, None if absent or open."""
        a_id, b_id = _node_id(a), _node_id(b)
        key = wire_key(a_id, b_id)
        reading = state.wires.get(key)
        if reading is None:
            return None
        # Stored orientation follows the wire's own (a, b); flip to the caller's
        stored = wires_by_key.get(key)
        if stored is not None and stored.a != a_id:
            return WireReading(reading.ohms, -reading.voltage, -reading.current)
        return reading

    return GridSim(
        init=init,
        step=step,
        v=v,
        load=load,
        wire=wire,
        network=net,
        config=config,
    )
