"""
Metric / imperial display conversions and temperature scales.

Every engine value is strict SI; this module only maps numbers between the
engine and whatever unit system a caller presents. All factors come from the
shared pint registry so the tables below carry unit names, not numbers.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum

from common.units import Q_


class UnitSystem(str, Enum):
    METRIC = "metric"
    IMPERIAL = "imperial"


@dataclass(frozen=True)
class UnitDefinition:
    si: str            # pint unit of the engine value
    metric: str        # pint unit shown in metric
    imperial: str      # pint unit shown in imperial
    metric_symbol: str
    imperial_symbol: str
    decimals: tuple = (2, 2)


UNIT_DEFINITIONS = {
    "temperature":          UnitDefinition("degC", "degC", "degF", "°C", "°F", (1, 1)),
    "temperature_delta":    UnitDefinition("delta_degC", "delta_degC", "delta_degF", "°C", "°F", (1, 1)),
    "length_small":         UnitDefinition("m", "mm", "inch", "mm", "in", (2, 3)),
    "length_large":         UnitDefinition("m", "m", "ft", "m", "ft", (2, 2)),
    "area":                 UnitDefinition("m**2", "m**2", "ft**2", "m²", "ft²", (2, 2)),
    "mass_flow":            UnitDefinition("kg/s", "kg/hour", "lb/hour", "kg/hr", "lb/hr", (0, 0)),
    "density":              UnitDefinition("kg/m**3", "kg/m**3", "lb/ft**3", "kg/m³", "lb/ft³", (1, 2)),
    "viscosity":            UnitDefinition("Pa*s", "cP", "cP", "cP", "cP", (3, 3)),
    "specific_heat":        UnitDefinition("J/kg/K", "kJ/kg/K", "Btu/lb/degR", "kJ/kg·K", "BTU/lb·°F", (3, 3)),
    "thermal_conductivity": UnitDefinition("W/m/K", "W/m/K", "Btu/hour/ft/degR", "W/m·K", "BTU/hr·ft·°F", (3, 3)),
    "htc":                  UnitDefinition("W/m**2/K", "W/m**2/K", "Btu/hour/ft**2/degR", "W/m²·K", "BTU/hr·ft²·°F", (1, 1)),
    "fouling":              UnitDefinition("m**2*K/W", "m**2*K/W", "hour*ft**2*degR/Btu", "m²·K/W", "hr·ft²·°F/BTU", (6, 5)),
    "pressure":             UnitDefinition("Pa", "bar", "psi", "bar", "psi", (2, 1)),
    "pressure_drop":        UnitDefinition("Pa", "kPa", "psi", "kPa", "psi", (2, 2)),
    "velocity":             UnitDefinition("m/s", "m/s", "ft/s", "m/s", "ft/s", (2, 2)),
    "power":                UnitDefinition("W", "kW", "Btu/hour", "kW", "BTU/hr", (1, 0)),
}

_TEMP_UNITS = {"C": "degC", "F": "degF", "K": "kelvin", "R": "degR"}


def _definition(quantity: str) -> UnitDefinition:
    try:
        return UNIT_DEFINITIONS[quantity]
    except KeyError:
        raise KeyError(f"unknown quantity '{quantity}'") from None


def _system_unit(d: UnitDefinition, system: UnitSystem | str) -> str:
    return d.imperial if UnitSystem(system) == UnitSystem.IMPERIAL else d.metric


def convert_value(value: float, quantity: str, from_system: UnitSystem | str, to_system: UnitSystem | str) -> float:
    """Convert a displayed value between unit systems."""
    d = _definition(quantity)
    src, dst = _system_unit(d, from_system), _system_unit(d, to_system)
    if src == dst:
        return float(value)
    return float(Q_(value, src).to(dst).magnitude)


def to_si(value: float, quantity: str, system: UnitSystem | str = UnitSystem.METRIC) -> float:
    d = _definition(quantity)
    return float(Q_(value, _system_unit(d, system)).to(d.si).magnitude)


def from_si(value: float, quantity: str, system: UnitSystem | str = UnitSystem.METRIC) -> float:
    d = _definition(quantity)
    return float(Q_(value, d.si).to(_system_unit(d, system)).magnitude)


def unit_symbol(quantity: str, system: UnitSystem | str = UnitSystem.METRIC) -> str:
    d = _definition(quantity)
    return d.imperial_symbol if UnitSystem(system) == UnitSystem.IMPERIAL else d.metric_symbol


def format_value(value: float, quantity: str, system: UnitSystem | str = UnitSystem.METRIC) -> str:
    d = _definition(quantity)
    nd = d.decimals[1] if UnitSystem(system) == UnitSystem.IMPERIAL else d.decimals[0]
    return f"{value:.{nd}f} {unit_symbol(quantity, system)}"


def _temp_unit(unit: str) -> str:
    u = unit.strip().upper().lstrip("°")
    if u not in _TEMP_UNITS:
        raise ValueError(f"unknown temperature unit '{unit}'")
    return _TEMP_UNITS[u]


def convert_temperature(t: float, from_unit: str, to_unit: str) -> float:
    src, dst = _temp_unit(from_unit), _temp_unit(to_unit)
    if src == dst:
        return float(t)
    return float(Q_(t, src).to(dst).magnitude)


def to_kelvin(t: float, unit: str) -> float:
    return convert_temperature(t, unit, "K")


def from_kelvin(t_k: float, unit: str) -> float:
    return convert_temperature(t_k, "K", unit)


def convert_temperature_delta(dt: float, from_unit: str, to_unit: str) -> float:
    """Differences scale without the offset (1 K == 1.8 F)."""
    scale = {"degC": 1.0, "kelvin": 1.0, "degF": 1.8, "degR": 1.8}
    return float(dt) / scale[_temp_unit(from_unit)] * scale[_temp_unit(to_unit)]
