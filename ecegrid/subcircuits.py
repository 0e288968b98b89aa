"""Reusable grid building blocks (functional style)."""

from __future__ import annotations
from typing import NamedTuple

from .config import GridConfig, DEFAULT_CONFIG
from .network import Network, Node
from .components import House, LED, Res, Trans, Cap, Wire


class StreetRefs(NamedTuple):
    """References to a street's switch and houses."""
    switch: Node
    houses: tuple[Node, ...]
    prefix: str


def Street(
    net: Network,
    feeder: Node,
    *,
    n_houses: int = 3,
    prefix: str = "st",
    on: bool = True,
) -> tuple[Network, StreetRefs]:
    """
    Create a row of houses fed through one transistor.

    Topology:
        feeder ──[T]──┬──── H1
                      ├──── H2
                      └──── H3

    Node ids are {prefix}_sw and {prefix}_h1 .. {prefix}_hN.

    Args:
        net: Network to add to
        feeder: Node the street hangs off (usually net.gen)
        n_houses: Number of houses
        prefix: Id prefix
        on: Initial switch state

    Returns:
        (new_network, StreetRefs)
    """
    net, sw = Trans(net, name=f"{prefix}_sw", on=on)
    net, _ = Wire(net, feeder, sw)

    houses = []
    for k in range(1, n_houses + 1):
        net, h = House(net, name=f"{prefix}_h{k}")
        net, _ = Wire(net, sw, h)
        houses.append(h)

    return net, StreetRefs(sw, tuple(houses), prefix)


def street_power(net: Network, refs: StreetRefs, on: bool) -> Network:
    """Switch a whole street on or off."""
    return net.set_switch(refs.switch.id, on)


class BufferedLightRefs(NamedTuple):
    """References to a resistor-fed LED with a hold-up capacitor."""
    resistor: Node
    cap: Node
    led: Node


def BufferedLight(
    net: Network,
    feeder: Node,
    *,
    prefix: str = "bl",
    ohms: float = 10.0,
    microfarads: float | None = None,
    config: GridConfig = DEFAULT_CONFIG,
) -> tuple[Network, BufferedLightRefs]:
    """
    LED street light behind a resistor, with a capacitor on the LED node.

    Topology:
        feeder ──[R]──(cap)──── LED
                        │
                       [C]
                        │
                       GND

    The LED fades in as the capacitor charges.
    """
    net, r = Res(net, name=f"{prefix}_r", ohms=ohms, config=config)
    net, c = Cap(net, name=f"{prefix}_c", microfarads=microfarads, config=config)
    net, led = LED(net, name=f"{prefix}_led")

    net, _ = Wire(net, feeder, r)
    net, _ = Wire(net, r, c)
    net, _ = Wire(net, c, led)
    return net, BufferedLightRefs(r, c, led)
