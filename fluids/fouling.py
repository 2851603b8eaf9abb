# TEMA RGP-T-2.4 fouling resistances, m^2*K/W
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List


@dataclass(frozen=True)
class FoulingEntry:
    service: str
    category: str
    rf: float           # m^2*K/W
    note: str = ""


FOULING_FACTORS: Dict[str, FoulingEntry] = {
    "cooling_water_treated":   FoulingEntry("Cooling water, treated", "water", 0.000176, "v > 0.9 m/s, T < 50 °C"),
    "cooling_water_untreated": FoulingEntry("Cooling water, untreated", "water", 0.000528, "v > 0.9 m/s"),
    "cooling_tower_water":     FoulingEntry("Cooling tower water", "water", 0.000352),
    "city_water":              FoulingEntry("City / municipal water", "water", 0.000176),
    "boiler_feedwater":        FoulingEntry("Boiler feedwater, treated", "water", 0.000088),
    "condensate":              FoulingEntry("Steam condensate", "water", 0.000088),
    "seawater":                FoulingEntry("Seawater, below 45 °C", "water", 0.000088),
    "seawater_hot":            FoulingEntry("Seawater, above 45 °C", "water", 0.000176),
    "river_water":             FoulingEntry("River water", "water", 0.000352),
    "steam_clean":             FoulingEntry("Steam, oil free", "steam", 0.000088),
    "steam_exhaust":           FoulingEntry("Exhaust steam, oil bearing", "steam", 0.000176),
    "gasoline":                FoulingEntry("Gasoline", "petroleum", 0.000176),
    "naphtha":                 FoulingEntry("Naphtha", "petroleum", 0.000176),
    "kerosene":                FoulingEntry("Kerosene", "petroleum", 0.000176),
    "diesel":                  FoulingEntry("Light gas oil / diesel", "petroleum", 0.000352),
    "crude_below_120":         FoulingEntry("Crude oil, dry, below 120 °C", "crude", 0.000352),
    "crude_120_180":           FoulingEntry("Crude oil, dry, 120-180 °C", "crude", 0.000528),
    "crude_180_230":           FoulingEntry("Crude oil, dry, 180-230 °C", "crude", 0.000704),
    "crude_above_230":         FoulingEntry("Crude oil, dry, above 230 °C", "crude", 0.000881),
    "fuel_oil":                FoulingEntry("Fuel oil No. 6", "petroleum", 0.000881),
    "lube_oil":                FoulingEntry("Lube oil", "petroleum", 0.000176),
    "thermal_oil":             FoulingEntry("Heat transfer oil, clean", "industrial", 0.000176),
    "lpg":                     FoulingEntry("LPG / propane / butane", "light hydrocarbons", 0.000176),
    "natural_gas":             FoulingEntry("Natural gas", "gas", 0.000176),
    "air":                     FoulingEntry("Compressed air", "gas", 0.000176),
    "hydrogen":                FoulingEntry("Hydrogen", "gas", 0.000176),
    "nitrogen":                FoulingEntry("Nitrogen", "gas", 0.000088),
    "amine":                   FoulingEntry("Lean amine solution", "chemical", 0.000352),
    "glycol":                  FoulingEntry("Glycol solution", "chemical", 0.000352),
}

_FLUID_SERVICE = {
    "water": "cooling_water_treated",
    "cooling_water": "cooling_water_treated",
    "seawater": "seawater",
    "boiler_feedwater": "boiler_feedwater",
    "steam": "steam_clean",
    "naphtha": "naphtha",
    "kerosene": "kerosene",
    "diesel": "diesel",
    "gasoline": "gasoline",
    "fuel_oil": "fuel_oil",
    "lube_oil": "lube_oil",
    "thermal_oil": "thermal_oil",
    "propane": "lpg",
    "butane": "lpg",
    "natural_gas": "natural_gas",
    "methane": "natural_gas",
    "ethane": "natural_gas",
    "air": "air",
    "nitrogen": "nitrogen",
    "hydrogen": "hydrogen",
    "amine_mea": "amine",
    "amine": "amine",
    "glycol_meg": "glycol",
    "glycol": "glycol",
}


def crude_fouling(temperature: float) -> FoulingEntry:
    if temperature < 120.0:
        return FOULING_FACTORS["crude_below_120"]
    if temperature < 180.0:
        return FOULING_FACTORS["crude_120_180"]
    if temperature < 230.0:
        return FOULING_FACTORS["crude_180_230"]
    return FOULING_FACTORS["crude_above_230"]


def fouling_for_fluid(fluid: str, temperature: float = 25.0) -> FoulingEntry:
    """Default service fouling for a library fluid; crude oils are banded by temperature."""
    key = (fluid or "").lower()
    if key.startswith("crude"):
        return crude_fouling(temperature)
    if key == "seawater" and temperature > 45.0:
        return FOULING_FACTORS["seawater_hot"]
    return FOULING_FACTORS[_FLUID_SERVICE.get(key, "cooling_tower_water")]


def services_by_category() -> Dict[str, List[str]]:
    out: Dict[str, List[str]] = {}
    for k, e in FOULING_FACTORS.items():
        out.setdefault(e.category, []).append(k)
    return out
