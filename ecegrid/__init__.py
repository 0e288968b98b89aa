"""ecegrid - JAX-backed DC power solver for a small town grid.

A generator feeds houses and LED street lights through wires, resistors,
transistor switches, capacitors and transformers. Each tick solves node
voltages with nodal analysis and classifies every load as ON/DIM/OFF.

Usage:
    from ecegrid import Network, House, Wire

    net = Network()
    net, h = House(net)
    net, _ = Wire(net, net.gen, h)
    sim = net.compile()
    state = sim.step(sim.init(), 1 / 60)
    sim.load(state, h).level   # Level.ON
"""

from .config import GridConfig, DEFAULT_CONFIG
from .network import (
    Network,
    Node,
    NodeId,
    WireSpec,
    GenSpec,
    HouseSpec,
    LedSpec,
    ResistorSpec,
    TransistorSpec,
    CapacitorSpec,
    TransformerSpec,
    GEN_ID,
    wire_key,
)
from .components import House, LED, Res, Trans, Cap, Xfmr, Wire
from .solver import (
    Level,
    LoadReading,
    WireReading,
    SimState,
    GridSim,
    compile_network,
    init_state,
    solve_step,
)
from .subcircuits import Street, StreetRefs, street_power, BufferedLight, BufferedLightRefs
from .check import CheckResult, run_check

__version__ = "0.1.0"
__all__ = [
    # Configuration
    "GridConfig",
    "DEFAULT_CONFIG",
    # Topology
    "Network",
    "Node",
    "NodeId",
    "WireSpec",
    "GenSpec",
    "HouseSpec",
    "LedSpec",
    "ResistorSpec",
    "TransistorSpec",
    "CapacitorSpec",
    "TransformerSpec",
    "GEN_ID",
    "wire_key",
    # Components
    "House",
    "LED",
    "Res",
    "Trans",
    "Cap",
    "Xfmr",
    "Wire",
    # Simulation
    "Level",
    "LoadReading",
    "WireReading",
    "SimState",
    "GridSim",
    "compile_network",
    "init_state",
    "solve_step",
    # Subcircuits
    "Street",
    "StreetRefs",
    "street_power",
    "BufferedLight",
    "BufferedLightRefs",
    # Checks
    "CheckResult",
    "run_check",
    "__version__",
]
