"""Electrical constants for a grid session."""

from __future__ import annotations
from typing import Mapping, NamedTuple


class GridConfig(NamedTuple):
    """
    Immutable set of constants shared by every solve in a session.

    Override with ``_replace`` or ``GridConfig.from_dict``:
        cfg = GridConfig()._replace(source_voltage=24.0)
    """
    source_voltage: float = 12.0      # generator voltage (V)

    # Wire loss is tiny so a direct connection reads ~12.00V
    wire_ohms: float = 0.03
    transistor_on_ohms: float = 0.5   # added per closed-transistor endpoint

    # Load resistances to ground
    house_ohms: float = 18.0
    led_ohms: float = 30.0

    # Classification thresholds (V)
    house_on_volts: float = 9.0
    house_dim_volts: float = 7.0
    led_on_volts: float = 3.0
    led_dim_volts: float = 2.2

    # Capacitor transient: smaller slow factor => slower charge
    cap_slow_factor: float = 0.04
    # Multiplies placed capacitance so charging spans seconds, not microseconds
    cap_time_scale: float = 1e4

    # Placement defaults
    resistor_default_ohms: float = 2.0
    capacitor_default_uf: float = 220.0
    transformer_default_ratio: float = 0.5

    @classmethod
    def from_dict(cls, values: Mapping[str, float]) -> GridConfig:
        """
        Merge a mapping onto the defaults.

        Raises:
            ValueError: if the mapping names an unknown constant
        """
        unknown = sorted(set(values) - set(cls._fields))
        if unknown:
            raise ValueError(f"Unknown config field(s): {', '.join(unknown)}")
        return cls()._replace(**{k: float(v) for k, v in values.items()})


DEFAULT_CONFIG = GridConfig()
