from __future__ import annotations
import logging
from math import exp, sqrt
from typing import Optional

from common.constants import R_gas, T_abs
from common.models import FluidPhase, FluidProperties
from fluids.library import FluidDefinition, fluid_definition, is_known
from logging_utils import trace_calls

log = logging.getLogger(__name__)

P_atm = 101325.0


def _poly(ref: float, b: float, dT: float) -> float:
    return ref * (1.0 + b * dT / 1000.0)


def _andrade(mu_ref: float, b: float, c: float, T_C: float, Tref_C: float) -> float:
    # A * exp(B / (T + C)) with A fixed so that mu(Tref) == mu_ref
    return mu_ref * exp(b / (T_C + T_abs + c) - b / (Tref_C + T_abs + c))


def _clamp_temperature(fluid: FluidDefinition, T: float) -> tuple[float, Optional[str]]:
    co = fluid.coefficients
    if co is None:
        return T, None
    Tc = min(max(T, co.t_min), co.t_max)
    if Tc != T:
        return Tc, (f"{fluid.name}: {T:.1f} °C outside property range "
                    f"[{co.t_min:.0f}, {co.t_max:.0f}] °C, evaluated at {Tc:.1f} °C")
    return T, None


@trace_calls()
def properties_at(fluid: str, temperature: float, pressure: Optional[float] = None) -> FluidProperties:
    """
    Properties of a library fluid at `temperature` (degC).

    Outside the fluid's valid range the nearest bound is used and the result
    is flagged `clamped` with a warning. Gas densities are referenced to
    1 atm and scaled ideally when `pressure` (Pa) is given.
    """
    fd = fluid_definition(fluid)
    warnings: list[str] = []
    if not is_known(fluid):
        warnings.append(f"Unknown fluid '{fluid}', using custom fluid defaults")

    T, msg = _clamp_temperature(fd, temperature)
    if msg:
        warnings.append(msg)
        log.debug(msg)

    rho, cp, k, mu = fd.density, fd.specific_heat, fd.thermal_conductivity, fd.viscosity
    co = fd.coefficients
    if co is not None:
        dT = T - co.t_ref
        rho = _poly(rho, co.density_b, dT)
        cp = _poly(cp, co.cp_b, dT)
        k = _poly(k, co.k_b, dT)
        mu = _andrade(mu, co.visc_b, co.visc_c, T, co.t_ref)

    if fd.phase == FluidPhase.GAS and pressure and pressure > 0:
        rho *= pressure / P_atm

    return FluidProperties(
        density=max(rho, 0.01),
        viscosity=max(mu, 1e-6),
        specific_heat=max(cp, 100.0),
        thermal_conductivity=max(k, 1e-3),
        temperature=T,
        phase=fd.phase,
        molecular_weight=fd.molecular_weight,
        gamma=fd.gamma,
        bulk_modulus=fd.bulk_modulus,
        critical_temperature=fd.critical_temperature,
        critical_pressure=fd.critical_pressure,
        clamped=msg is not None,
        warnings=warnings,
    )


def gas_speed_of_sound(gamma: float, molecular_weight: float, T_K: float) -> float:
    """c = sqrt(gamma R T / M), M in g/mol."""
    return sqrt(gamma * R_gas * T_K / (molecular_weight / 1000.0))


def liquid_speed_of_sound(bulk_modulus: float, density: float) -> float:
    """Newton-Laplace c = sqrt(K / rho), K in Pa."""
    return sqrt(bulk_modulus / density)


def speed_of_sound(fluid: str, temperature: float) -> float:
    fd = fluid_definition(fluid)
    if fd.phase == FluidPhase.GAS:
        return gas_speed_of_sound(fd.gamma or 1.4, fd.molecular_weight or 28.97, temperature + T_abs)
    props = properties_at(fluid, temperature)
    return liquid_speed_of_sound(fd.bulk_modulus or 2.2e9, props.density)


def prandtl_number(props: FluidProperties) -> float:
    return props.specific_heat * props.viscosity / props.thermal_conductivity
