"""'Run check' summary of how many houses are powered."""

from __future__ import annotations
from typing import NamedTuple

from .network import Network, HouseSpec
from .solver import SimState, Level


class CheckResult(NamedTuple):
    """Houses at level ON out of every house placed."""
    powered: int
    total: int

    @property
    def ok(self) -> bool:
        """True when at least one house exists and all of them are ON."""
        return self.total > 0 and self.powered == self.total

    @property
    def message(self) -> str:
        """Status line shown after a run check."""
        if self.total == 0:
            return "No houses placed yet."
        if self.ok:
            return "All houses powered! Nice work."
        return f"Only {self.powered}/{self.total} houses powered."


def run_check(net: Network, state: SimState) -> CheckResult:
    """Count houses whose level is ON in ``state``."""
    houses = [n.id for n in net.nodes if isinstance(n.spec, HouseSpec)]
    powered = sum(
        1 for node_id in houses
        if node_id in state.loads and state.loads[node_id].level is Level.ON
    )
    return CheckResult(powered, len(houses))
