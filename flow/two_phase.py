"""
Adiabatic gas-liquid flow in a straight pipe or tube.

Lockhart-Martinelli X from single-phase friction gradients, Chisholm void
fraction and friction multiplier, a simplified Taitel-Dukler / Baker
pattern map, and screening checks for flow instabilities. Condensing and
boiling heat-transfer multipliers (Shah, Chen) live here too since they
share the two-phase vocabulary.
"""
from __future__ import annotations
import logging
from math import pi, sin, sqrt
from typing import Optional

from common.constants import Re_laminar, g
from common.models import FlowPattern, TwoPhaseInputs
from common.results import TwoPhaseResult
from logging_utils import trace_calls

log = logging.getLogger(__name__)

NEAR_HORIZONTAL = 0.1    # rad
SINGLE_PHASE_VELOCITY = 1e-3   # m/s

CHISHOLM_C = {
    FlowPattern.ANNULAR: 20.0,
    FlowPattern.SLUG: 12.0,
    FlowPattern.CHURN: 12.0,
    FlowPattern.STRATIFIED: 10.0,
    FlowPattern.STRATIFIED_WAVY: 10.0,
    FlowPattern.BUBBLE: 5.0,
    FlowPattern.DISPERSED_BUBBLE: 5.0,
}


def _friction_gradient(rho: float, v: float, mu: float, D: float) -> float:
    """dP/dz = 2 f rho v^2 / D with Fanning f (16/Re laminar, Blasius above)."""
    if v <= 0:
        return 0.0
    Re = rho * v * D / mu
    f = 16.0 / Re if Re < Re_laminar else 0.079 * Re ** -0.25
    return 2.0 * f * rho * v * v / D


def lockhart_martinelli(dPdz_L: float, dPdz_G: float) -> float:
    if dPdz_L <= 0 or dPdz_G <= 0:
        return 0.0
    return sqrt(dPdz_L / dPdz_G)


def chisholm_void_fraction(X: float) -> float:
    if X <= 0:
        return 1.0
    return min(1.0, max(0.0, 1.0 / (1.0 + 0.28 * X ** 0.71)))


def friction_multiplier(X: float, pattern: FlowPattern) -> float:
    """phi_L^2 = 1 + C/X + 1/X^2."""
    if X <= 0:
        return 1.0
    C = CHISHOLM_C.get(pattern, 12.0)
    return 1.0 + C / X + 1.0 / (X * X)


def flow_pattern(vL: float, vG: float, rhoL: float, rhoG: float, sigma: float,
                 D: float, theta: float = 0.0) -> FlowPattern:
    if vG <= SINGLE_PHASE_VELOCITY:
        return FlowPattern.BUBBLE
    if vL <= SINGLE_PHASE_VELOCITY:
        return FlowPattern.MIST

    FrL = vL / sqrt(g * D)
    FrG = vG / sqrt(g * D)
    FrM = vG ** 2 / (g * D)
    We = rhoG * vG ** 2 * D / sigma
    alpha = vG / (vG + vL)   # no-slip

    if abs(theta) < NEAR_HORIZONTAL:
        if FrG < 0.5 and FrL < 0.1:
            return FlowPattern.STRATIFIED if FrG < 0.1 else FlowPattern.STRATIFIED_WAVY
        if alpha < 0.4 and FrM < 4:
            return FlowPattern.SLUG
        if We > 350 or FrG > 3:
            return FlowPattern.ANNULAR
        if FrL > 0.5 and alpha < 0.3:
            return FlowPattern.DISPERSED_BUBBLE
        if 0.2 < alpha < 0.8:
            return FlowPattern.SLUG
        if alpha > 0.6 and FrG > 1:
            return FlowPattern.CHURN
        return FlowPattern.SLUG

    if theta > NEAR_HORIZONTAL:
        if alpha < 0.25:
            return FlowPattern.BUBBLE
        if alpha < 0.65 and FrM < 4:
            return FlowPattern.SLUG
        if alpha < 0.85:
            return FlowPattern.CHURN
        return FlowPattern.ANNULAR

    return FlowPattern.STRATIFIED if FrG < 1 else FlowPattern.ANNULAR


def detect_instabilities(pattern: FlowPattern, alpha: float, vm: float,
                         pressure: float, rhoL: float) -> tuple[list[str], Optional[str]]:
    found = []
    if pattern == FlowPattern.SLUG and 0.3 < alpha < 0.7:
        found.append("Slug flow oscillation")
    if pressure / rhoL > 1e5 and vm < 1.0:
        found.append("Potential Ledinegg instability")
    if pressure < 5e5 and alpha > 0.8:
        found.append("Flashing risk at low pressure")
    if pattern == FlowPattern.CHURN:
        found.append("Churn flow oscillation")
    if not found:
        return found, None
    return found, "high" if len(found) > 1 else "medium"


def slug_frequency(vm: float, D: float) -> float:
    """Heywood-Richardson order of magnitude, f ~ 0.3 Vm / D."""
    return 0.3 * vm / D


def _error_result(errors: list[str]) -> TwoPhaseResult:
    return TwoPhaseResult(FlowPattern.SLUG, 0.0, 1.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 1.0,
                          errors=errors)


@trace_calls()
def classify(inp: TwoPhaseInputs, case: str = "-") -> TwoPhaseResult:
    """
    Flow pattern, void fraction and pressure drop for one pipe section.

    A liquid-only input (no gas) is reported with X = 0 and void
    fraction 1 as its degenerate marker, pattern BUBBLE, and the pressure
    drop of the liquid alone; gas-only input is MIST. The acceleration
    term is zero (no phase change).
    """
    xtra = {"case": case, "step": "two_phase"}
    errors = []
    if inp.liquid_flow <= 0 and inp.gas_flow <= 0:
        errors.append("At least one phase flow rate must be positive")
    if inp.pipe_id <= 0 or inp.pipe_length < 0:
        errors.append("Pipe diameter must be positive and length non-negative")
    if inp.liquid_density <= 0 or inp.gas_density <= 0:
        errors.append("Phase densities must be positive")
    if inp.liquid_viscosity <= 0 or inp.gas_viscosity <= 0 or inp.surface_tension <= 0:
        errors.append("Viscosities and surface tension must be positive")
    if errors:
        for e in errors:
            log.error(e, extra=xtra)
        return _error_result(errors)

    warnings: list[str] = []
    D, L = inp.pipe_id, inp.pipe_length
    area = pi * (D / 2.0) ** 2
    vL = max(inp.liquid_flow, 0.0) / inp.liquid_density / area
    vG = max(inp.gas_flow, 0.0) / inp.gas_density / area
    vm = vL + vG

    dPdz_L = _friction_gradient(inp.liquid_density, vL, inp.liquid_viscosity, D)
    dPdz_G = _friction_gradient(inp.gas_density, vG, inp.gas_viscosity, D)
    X = lockhart_martinelli(dPdz_L, dPdz_G)
    alpha = chisholm_void_fraction(X)
    pattern = flow_pattern(vL, vG, inp.liquid_density, inp.gas_density, inp.surface_tension, D, inp.inclination)
    phi2 = friction_multiplier(X, pattern)

    liquid_only = inp.gas_flow <= 0
    gas_only = inp.liquid_flow <= 0
    if liquid_only:
        rho_m = inp.liquid_density
        friction = dPdz_L * L
        warnings.append("No gas flow: single-phase liquid")
    elif gas_only:
        rho_m = inp.gas_density
        friction = dPdz_G * L
        warnings.append("No liquid flow: single-phase gas")
    else:
        rho_m = inp.liquid_density * (1.0 - alpha) + inp.gas_density * alpha
        friction = dPdz_L * phi2 * L
    gravity = rho_m * g * L * sin(inp.inclination)
    accel = 0.0
    total = max(0.0, friction + abs(gravity) + accel)

    instabilities, severity = ([], None)
    if not (liquid_only or gas_only):
        instabilities, severity = detect_instabilities(pattern, alpha, vm, inp.pressure, inp.liquid_density)
    unstable = bool(instabilities)
    if unstable:
        warnings.append(f"Flow instability detected: {'; '.join(instabilities)}")

    is_slug = pattern == FlowPattern.SLUG
    f_slug = None
    if is_slug:
        f_slug = slug_frequency(vm, D)
        warnings.append(f"Slug flow detected - frequency ~{f_slug:.1f} Hz. "
                        "May cause mechanical vibration and instrumentation issues.")

    x = max(inp.gas_flow, 0.0) / (max(inp.gas_flow, 0.0) + max(inp.liquid_flow, 0.0))
    if not (liquid_only or gas_only):
        if x > 0.9:
            warnings.append("Very high gas quality (>90%) - approaching mist flow")
        if x < 0.1:
            warnings.append("Very low gas quality (<10%) - approaching bubble flow")

    for w in warnings:
        log.debug(w, extra=xtra)
    return TwoPhaseResult(
        flow_pattern=pattern, void_fraction=alpha, liquid_holdup=1.0 - alpha,
        pressure_drop=total, friction_pressure_drop=max(0.0, friction),
        acceleration_pressure_drop=accel, gravitational_pressure_drop=gravity,
        liquid_velocity=vL, gas_velocity=vG, mixture_velocity=vm,
        lockhart_martinelli=X, friction_multiplier=phi2,
        is_slug_flow=is_slug, slug_frequency=f_slug,
        is_flow_unstable=unstable, instability_type="; ".join(instabilities) or None,
        instability_severity=severity, warnings=warnings,
    )


def shah_condensation_htc(h_liquid: float, pressure: float, critical_pressure: float, quality: float) -> float:
    """Shah (1979): h = h_L [(1-x)^0.8 + 3.8 x^0.76 (1-x)^0.04 / p_r^0.38]."""
    if critical_pressure <= 0 or pressure <= 0:
        return h_liquid
    x = min(max(quality, 0.0), 1.0)
    pr = pressure / critical_pressure
    return h_liquid * ((1.0 - x) ** 0.8 + 3.8 * x ** 0.76 * (1.0 - x) ** 0.04 / pr ** 0.38)


def chen_boiling_htc(h_liquid: float, liquid_reynolds: float, quality: float,
                     wall_superheat: float, T_sat_K: float,
                     k_l: float, cp_l: float, rho_l: float, mu_l: float,
                     rho_v: float, mu_v: float, sigma: float, h_fg: float) -> float:
    """
    Chen (1966): h = F h_L + S h_NB.

    F from the turbulent-turbulent Martinelli parameter, S from the
    two-phase Reynolds number, h_NB by Forster-Zuber with the saturation
    pressure rise estimated by Clausius-Clapeyron.
    """
    x = min(max(quality, 1e-6), 1.0 - 1e-6)
    Xtt = ((1.0 - x) / x) ** 0.9 * (rho_v / rho_l) ** 0.5 * (mu_l / mu_v) ** 0.1
    inv = 1.0 / Xtt
    F = 1.0 if inv <= 0.1 else 2.35 * (inv + 0.213) ** 0.736
    Re_tp = liquid_reynolds * F ** 1.25
    S = 1.0 / (1.0 + 2.53e-6 * Re_tp ** 1.17)
    if wall_superheat <= 0:
        return F * h_liquid
    dP_sat = h_fg * rho_v * wall_superheat / T_sat_K
    h_nb = (0.00122 * k_l ** 0.79 * cp_l ** 0.45 * rho_l ** 0.49
            / (sigma ** 0.5 * mu_l ** 0.29 * h_fg ** 0.24 * rho_v ** 0.24)
            * wall_superheat ** 0.24 * dP_sat ** 0.75)
    return F * h_liquid + S * h_nb
