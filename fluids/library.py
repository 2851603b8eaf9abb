# =========================================================
# FILE: fluids/library.py
# Static process-fluid table (GPSA / API data book / NIST reference values).
# Reference properties are stored in SI at t_ref. Temperature behaviour:
#   density, cp, k : P(T) = P_ref * (1 + B * (T - t_ref) / 1000)
#   viscosity      : mu(T) = A * exp(B / (T_K + C)), A fixed by mu(t_ref)
# =========================================================
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional

from common.models import FluidPhase


@dataclass(frozen=True)
class FluidCoefficients:
    t_ref: float            # degC
    t_min: float            # degC
    t_max: float            # degC
    density_b: float        # 1e-3/K
    cp_b: float             # 1e-3/K
    k_b: float              # 1e-3/K
    visc_b: float           # K
    visc_c: float = 0.0     # K


@dataclass(frozen=True)
class FluidDefinition:
    key: str
    name: str
    category: str
    phase: FluidPhase
    density: float                  # kg/m^3 at t_ref
    viscosity: float                # Pa*s at t_ref
    specific_heat: float            # J/kg/K
    thermal_conductivity: float     # W/m/K
    molecular_weight: Optional[float] = None    # g/mol
    gamma: Optional[float] = None
    bulk_modulus: Optional[float] = None        # Pa
    boiling_point: Optional[float] = None       # degC at 1 atm
    critical_temperature: Optional[float] = None  # K
    critical_pressure: Optional[float] = None     # Pa
    coefficients: Optional[FluidCoefficients] = None
    description: str = ""


WATER_STEAM = "water_steam"
CRUDE_PRODUCTS = "crude_products"
LIGHT_HC = "light_hydrocarbons"
PROCESS_CHEMICALS = "process_chemicals"
GASES = "gases"
OTHER = "other"

_LIQ = FluidPhase.LIQUID
_GAS = FluidPhase.GAS

# water-type Vogel constants
_W_VB, _W_VC = 507.88, -149.3

FLUIDS: Dict[str, FluidDefinition] = {f.key: f for f in [
    # ---------------- water & steam ----------------
    FluidDefinition("water", "Water", WATER_STEAM, _LIQ,
                    997.0, 0.89e-3, 4180.0, 0.606, 18.015, None, 2.2e9, 100.0, 647.1, 22.064e6,
                    FluidCoefficients(25.0, 0.0, 200.0, -0.3, 0.1, 1.9, _W_VB, _W_VC),
                    "Pure water at standard conditions"),
    FluidDefinition("cooling_water", "Cooling Water", WATER_STEAM, _LIQ,
                    996.0, 0.90e-3, 4180.0, 0.60, 18.015, None, 2.2e9, 100.0, 647.1, 22.064e6,
                    FluidCoefficients(25.0, 5.0, 60.0, -0.3, 0.1, 1.9, _W_VB, _W_VC),
                    "Circulating cooling water (treated)"),
    FluidDefinition("seawater", "Seawater (3.5% salinity)", WATER_STEAM, _LIQ,
                    1025.0, 1.08e-3, 3990.0, 0.58, 18.5, None, 2.3e9, 100.6, None, None,
                    FluidCoefficients(25.0, 5.0, 80.0, -0.35, 0.08, 1.8, _W_VB, _W_VC),
                    "Seawater, 35 g/kg salinity"),
    FluidDefinition("boiler_feedwater", "Boiler Feedwater", WATER_STEAM, _LIQ,
                    972.0, 0.355e-3, 4196.0, 0.67, 18.015, None, 2.2e9, 100.0, 647.1, 22.064e6,
                    FluidCoefficients(80.0, 40.0, 200.0, -0.6, 0.3, 0.6, _W_VB, _W_VC),
                    "Treated feedwater for boilers"),
    FluidDefinition("steam", "Steam (saturated, 1 atm)", WATER_STEAM, _GAS,
                    0.60, 1.2e-5, 2080.0, 0.025, 18.015, 1.33, None, 100.0, 647.1, 22.064e6,
                    FluidCoefficients(100.0, 100.0, 400.0, -2.0, 0.2, 2.5, -508.0),
                    "Low pressure steam"),
    # ---------------- crude & products ----------------
    FluidDefinition("crude_oil_light", "Light Crude Oil (API 35-40)", CRUDE_PRODUCTS, _LIQ,
                    830.0, 8.0e-3, 2000.0, 0.135, 220.0, None, 1.4e9, None, None, None,
                    FluidCoefficients(25.0, 20.0, 300.0, -0.7, 1.8, -0.8, 2056.0)),
    FluidDefinition("crude_oil_medium", "Medium Crude Oil (API 25-35)", CRUDE_PRODUCTS, _LIQ,
                    880.0, 25.0e-3, 1920.0, 0.13, 280.0, None, 1.5e9, None, None, None,
                    FluidCoefficients(25.0, 20.0, 300.0, -0.65, 2.0, -0.7, 2719.0)),
    FluidDefinition("crude_oil_heavy", "Heavy Crude Oil (API 15-25)", CRUDE_PRODUCTS, _LIQ,
                    940.0, 150.0e-3, 1850.0, 0.125, 400.0, None, 1.6e9, None, None, None,
                    FluidCoefficients(30.0, 30.0, 300.0, -0.58, 2.2, -0.6, 3721.0)),
    FluidDefinition("naphtha", "Naphtha", CRUDE_PRODUCTS, _LIQ,
                    720.0, 0.55e-3, 2100.0, 0.14, 100.0, None, 1.1e9, None, None, None,
                    FluidCoefficients(25.0, -20.0, 150.0, -0.95, 2.2, -1.2, 899.0)),
    FluidDefinition("kerosene", "Kerosene", CRUDE_PRODUCTS, _LIQ,
                    800.0, 1.8e-3, 2000.0, 0.138, 170.0, None, 1.3e9, None, None, None,
                    FluidCoefficients(25.0, -50.0, 200.0, -0.8, 2.0, -1.0, 1401.0)),
    FluidDefinition("diesel", "Diesel Fuel", CRUDE_PRODUCTS, _LIQ,
                    840.0, 3.5e-3, 1950.0, 0.132, 200.0, None, 1.35e9, None, None, None,
                    FluidCoefficients(25.0, -20.0, 250.0, -0.75, 2.0, -0.9, 1717.0)),
    FluidDefinition("gasoline", "Gasoline", CRUDE_PRODUCTS, _LIQ,
                    740.0, 0.5e-3, 2050.0, 0.14, 100.0, None, 1.0e9, None, None, None,
                    FluidCoefficients(25.0, -40.0, 100.0, -1.0, 2.2, -1.3, 860.0)),
    FluidDefinition("fuel_oil", "Heavy Fuel Oil (No. 6)", CRUDE_PRODUCTS, _LIQ,
                    970.0, 300.0e-3, 1750.0, 0.12, 450.0, None, 1.6e9, None, None, None,
                    FluidCoefficients(50.0, 50.0, 300.0, -0.55, 2.4, -0.5, 4859.0)),
    FluidDefinition("lube_oil", "Lubricating Oil", CRUDE_PRODUCTS, _LIQ,
                    880.0, 100.0e-3, 2000.0, 0.13, 400.0, None, 1.5e9, None, None, None,
                    FluidCoefficients(40.0, 20.0, 150.0, -0.6, 2.0, -0.6, 4485.0)),
    FluidDefinition("thermal_oil", "Thermal Oil (synthetic)", OTHER, _LIQ,
                    1000.0, 30.0e-3, 1600.0, 0.13, 250.0, None, 1.5e9, None, None, None,
                    FluidCoefficients(40.0, 0.0, 340.0, -0.75, 1.9, -0.7, 2508.0)),
    # ---------------- light hydrocarbons (liquid) ----------------
    FluidDefinition("propane", "Propane (liquid)", LIGHT_HC, _LIQ,
                    493.0, 0.098e-3, 2520.0, 0.089, 44.1, 1.13, 0.35e9, -42.1, 369.8, 4.25e6,
                    FluidCoefficients(25.0, -40.0, 60.0, -2.8, 4.0, -3.5, 762.0)),
    FluidDefinition("butane", "n-Butane (liquid)", LIGHT_HC, _LIQ,
                    573.0, 0.16e-3, 2390.0, 0.107, 58.12, 1.09, 0.42e9, -0.5, 425.1, 3.80e6,
                    FluidCoefficients(25.0, -30.0, 100.0, -2.0, 3.0, -2.8, 900.0)),
    # ---------------- gases ----------------
    FluidDefinition("natural_gas", "Natural Gas (SG 0.62)", GASES, _GAS,
                    0.73, 1.1e-5, 2200.0, 0.033, 18.0, 1.29, None, None, 200.0, 4.6e6,
                    FluidCoefficients(25.0, -50.0, 300.0, -2.0, 1.0, 2.8, -300.0)),
    FluidDefinition("methane", "Methane", GASES, _GAS,
                    0.656, 1.1e-5, 2220.0, 0.034, 16.04, 1.31, None, -161.5, 190.6, 4.60e6,
                    FluidCoefficients(25.0, -50.0, 300.0, -2.0, 1.2, 3.0, -293.0)),
    FluidDefinition("ethane", "Ethane", GASES, _GAS,
                    1.23, 9.2e-6, 1750.0, 0.021, 30.07, 1.19, None, -88.6, 305.3, 4.87e6,
                    FluidCoefficients(25.0, -50.0, 300.0, -2.0, 1.5, 3.5, -330.0)),
    FluidDefinition("air", "Air", GASES, _GAS,
                    1.184, 1.85e-5, 1007.0, 0.026, 28.97, 1.40, None, None, 132.5, 3.77e6,
                    FluidCoefficients(25.0, -50.0, 400.0, -2.0, 0.1, 2.6, -323.0)),
    FluidDefinition("nitrogen", "Nitrogen", GASES, _GAS,
                    1.145, 1.78e-5, 1040.0, 0.026, 28.01, 1.40, None, -195.8, 126.2, 3.39e6,
                    FluidCoefficients(25.0, -50.0, 400.0, -2.0, 0.1, 2.5, -310.0)),
    FluidDefinition("hydrogen", "Hydrogen", GASES, _GAS,
                    0.0824, 8.9e-6, 14300.0, 0.18, 2.016, 1.41, None, -252.9, 33.2, 1.30e6,
                    FluidCoefficients(25.0, -50.0, 400.0, -2.0, 0.05, 2.2, -231.0)),
    # ---------------- process chemicals ----------------
    FluidDefinition("amine_mea", "MEA Solution (30 wt%)", PROCESS_CHEMICALS, _LIQ,
                    1010.0, 2.0e-3, 3700.0, 0.48, 61.08, None, 2.1e9, 105.0, None, None,
                    FluidCoefficients(25.0, 10.0, 130.0, -0.45, 0.6, 0.8, 2010.0)),
    FluidDefinition("glycol_meg", "MEG Solution (50 wt%)", PROCESS_CHEMICALS, _LIQ,
                    1070.0, 3.9e-3, 3300.0, 0.39, 62.07, None, 2.5e9, 107.0, None, None,
                    FluidCoefficients(25.0, -30.0, 120.0, -0.5, 0.9, 0.6, 2256.0)),
    # ---------------- fallback ----------------
    FluidDefinition("custom", "Custom Fluid", OTHER, _LIQ,
                    1000.0, 1.0e-3, 4000.0, 0.6, None, None, 2.2e9),
]}

ALIASES = {
    "crude_oil": "crude_oil_medium",
    "amine": "amine_mea",
    "glycol": "glycol_meg",
}


def fluid_definition(key: str) -> FluidDefinition:
    """Unknown keys fall back to the custom definition."""
    k = (key or "custom").strip().lower()
    k = ALIASES.get(k, k)
    return FLUIDS.get(k, FLUIDS["custom"])


def is_known(key: str) -> bool:
    k = (key or "").strip().lower()
    return ALIASES.get(k, k) in FLUIDS


def list_fluids() -> List[str]:
    return list(FLUIDS)


def fluids_by_category() -> Dict[str, List[str]]:
    out: Dict[str, List[str]] = {}
    for f in FLUIDS.values():
        out.setdefault(f.category, []).append(f.key)
    return out
