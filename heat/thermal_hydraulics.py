# =========================================================
# FILE: heat/thermal_hydraulics.py
# One-shot thermal-hydraulic calculation of a shell-and-tube exchanger:
# stream properties -> tube/shell HTC and dP -> U -> LMTD/F -> area or NTU.
# =========================================================
from __future__ import annotations
import logging
from math import pi
from typing import Optional

from common.constants import velocity_limit
from common.models import (CalculationMode, FlowArrangement, FluidProperties, MechanicalGeometry,
                           ProcessConditions, ProcessStream, ShellSideMethod, TubeSide)
from common.results import ThermalHydraulicResult
from fluids.properties import properties_at
from heat.shell_side import bell_delaware, kern_shell_side, shell_side_htc
from heat.thermal import (correction_factor, effectiveness, lmtd, ntu, overall_u,
                          p_r_parameters, required_area, terminal_differences)
from heat.tube_side import tube_side_htc, tube_side_pressure_drop, tube_velocity
from logging_utils import trace_calls
from mechanical.geometry import tube_count as lookup_tube_count

log = logging.getLogger(__name__)

VALID_PASSES = (1, 2, 4, 6, 8)
DUTY_IMBALANCE = 0.05


def zeroed_result(errors: list[str], warnings: Optional[list[str]] = None) -> ThermalHydraulicResult:
    return ThermalHydraulicResult(
        heat_duty=0.0, lmtd=0.0, correction_factor=0.0, effective_mtd=0.0, hi=0.0, ho=0.0,
        U_clean=0.0, U_fouled=0.0, required_area=0.0, actual_area=0.0, ntu=0.0,
        effectiveness=0.0, capacity_ratio=0.0, tube_pressure_drop=0.0, shell_pressure_drop=0.0,
        tube_velocity=0.0, shell_velocity=0.0, tube_reynolds=0.0, shell_reynolds=0.0,
        warnings=list(warnings or []), errors=list(errors),
    )


def validate_inputs(conditions: ProcessConditions, geometry: MechanicalGeometry) -> list[str]:
    errs: list[str] = []
    g = geometry
    for name, s in (("hot", conditions.hot), ("cold", conditions.cold)):
        if s.mass_flow <= 0:
            errs.append(f"{name} stream flow rate must be positive")
    if g.tube_od <= 0 or g.tube_wall <= 0:
        errs.append("tube OD and wall thickness must be positive")
    elif g.tube_id <= 0:
        errs.append(f"tube wall {g.tube_wall*1000:.2f} mm leaves no bore in a {g.tube_od*1000:.2f} mm tube")
    if g.tube_length <= 0:
        errs.append("tube length must be positive")
    if g.pitch <= g.tube_od:
        errs.append(f"tube pitch {g.pitch*1000:.2f} mm must exceed tube OD {g.tube_od*1000:.2f} mm")
    if not 0.0 < g.baffle_cut < 0.5:
        errs.append(f"baffle cut {g.baffle_cut:.3f} outside (0, 0.5)")
    if g.passes not in VALID_PASSES:
        errs.append(f"tube passes {g.passes} not one of {VALID_PASSES}")
    if g.shell_id <= 0 or g.baffle_spacing <= 0:
        errs.append("shell diameter and baffle spacing must be positive")
    if g.tube_count is not None and g.tube_count <= 0:
        errs.append("tube count must be positive")
    return errs


def _props(stream: ProcessStream, given: Optional[FluidProperties]) -> FluidProperties:
    if given is not None:
        return given
    return properties_at(stream.fluid, stream.T_mean, stream.pressure)


@trace_calls()
def calculate_thermal_hydraulics(conditions: ProcessConditions, geometry: MechanicalGeometry,
                                 hot_props: Optional[FluidProperties] = None,
                                 cold_props: Optional[FluidProperties] = None,
                                 case: str = "-") -> ThermalHydraulicResult:
    """
    Full shell-and-tube calculation for one set of inputs.

    Design mode sizes the required area from the specified outlet
    temperatures; rating mode takes the geometric area and predicts duty
    and outlet temperatures by NTU-effectiveness. Properties are taken at
    each stream's mean temperature unless supplied. Invalid input returns a
    zeroed result with `errors`; nothing is raised.
    """
    xtra = {"case": case, "step": "thermal"}
    errors = validate_inputs(conditions, geometry)
    if errors:
        for e in errors:
            log.error(e, extra=xtra)
        return zeroed_result(errors)

    g = geometry
    hot, cold = conditions.hot, conditions.cold
    arrangement = FlowArrangement(conditions.arrangement)
    rating = CalculationMode(conditions.mode) == CalculationMode.RATING
    warnings: list[str] = []

    hp, cp = _props(hot, hot_props), _props(cold, cold_props)
    warnings += hp.warnings + cp.warnings

    # ---------------- tube count ----------------
    if g.tube_count:
        Nt = int(g.tube_count)
    else:
        tc = lookup_tube_count(g.shell_id, g.tube_od, g.pitch, g.pattern, g.passes, g.shell_type)
        warnings += tc.warnings
        if tc.count <= 0:
            return zeroed_result([f"no tubes fit a {g.shell_id*1000:.0f} mm shell"], warnings)
        Nt = tc.count

    # ---------------- energy balance ----------------
    Ch = hot.mass_flow * hp.specific_heat
    Cc = cold.mass_flow * cp.specific_heat
    C_min, C_max = min(Ch, Cc), max(Ch, Cc)
    Cr = C_min / C_max
    Qh = Ch * (hot.T_in - hot.T_out)
    Qc = Cc * (cold.T_out - cold.T_in)
    if not rating and max(abs(Qh), abs(Qc)) > 0:
        imbalance = abs(Qh - Qc) / max(abs(Qh), abs(Qc))
        if imbalance > DUTY_IMBALANCE:
            warnings.append(f"Hot/cold duty imbalance {imbalance*100:.1f}% (Qh={Qh/1e3:.1f} kW, "
                            f"Qc={Qc/1e3:.1f} kW), hot-side duty used")

    dT1, dT2 = terminal_differences(hot.T_in, hot.T_out, cold.T_in, cold.T_out, arrangement)
    if dT1 <= 0 or dT2 <= 0:
        msg = (f"Temperature cross: terminal differences {dT1:.2f} K / {dT2:.2f} K "
               f"for {arrangement.value} flow")
        if not rating:
            log.error(msg, extra=xtra)
            return zeroed_result([msg], warnings)
        warnings.append(msg + ", LMTD not evaluated")
    mtd = lmtd(dT1, dT2)
    P, R = p_r_parameters(hot.T_in, hot.T_out, cold.T_in, cold.T_out)
    cf = correction_factor(R, P, arrangement)
    if cf.warning and cf.message:
        warnings.append(cf.message)
    F = cf.F

    # ---------------- allocation ----------------
    hot_in_tubes = TubeSide(conditions.tube_side) == TubeSide.HOT
    t_stream, t_props = (hot, hp) if hot_in_tubes else (cold, cp)
    s_stream, s_props = (cold, cp) if hot_in_tubes else (hot, hp)

    # ---------------- tube side ----------------
    Di, Do = g.tube_id, g.tube_od
    v_t = tube_velocity(t_stream.mass_flow, t_props, Di, Nt, g.passes)
    dp_t = tube_side_pressure_drop(v_t, t_props, Di, g.tube_length, g.passes)
    mu_wall = None
    if conditions.viscosity_correction:
        # wall taken at the mean of the two bulk temperatures
        T_wall = 0.5 * (hot.T_mean + cold.T_mean)
        mu_wall = properties_at(t_stream.fluid, T_wall, t_stream.pressure).viscosity
    hi = tube_side_htc(v_t, t_props, Di, heating=not hot_in_tubes, mu_wall=mu_wall)

    # ---------------- shell side ----------------
    method = ShellSideMethod(conditions.method)
    if method == ShellSideMethod.KERN:
        shell = kern_shell_side(s_stream.mass_flow, s_props, g)
    else:
        shell = bell_delaware(s_stream.mass_flow, s_props, g, Nt)
    warnings += shell.warnings
    ho = shell_side_htc(shell, s_props, g.pattern, method)

    # ---------------- overall U ----------------
    U_clean, U_fouled, u_err = overall_u(hi.h, ho.h, Di, Do, g.tube_material.conductivity,
                                         Rfi=t_stream.fouling, Rfo=s_stream.fouling)
    if u_err:
        log.error(u_err, extra=xtra)
        return zeroed_result([u_err], warnings)

    A_act = Nt * pi * Do * g.tube_length
    hot_out = cold_out = None
    if rating:
        n = ntu(U_fouled, A_act, C_min)
        eps = effectiveness(n, Cr, arrangement)
        Q = eps * C_min * (hot.T_in - cold.T_in)
        hot_out = hot.T_in - Q / Ch
        cold_out = cold.T_in + Q / Cc
        A_req = A_act
        over = 0.0
    else:
        Q = Qh
        A_req = required_area(Q, U_fouled, F, mtd)
        n = ntu(U_fouled, A_req, C_min)
        eps = effectiveness(n, Cr, arrangement)
        over = (A_act / A_req - 1.0) * 100.0 if A_req > 0 else 0.0
        if over < 0:
            warnings.append(f"Actual area {A_act:.1f} m² is {-over:.1f}% below required {A_req:.1f} m²")

    # ---------------- limits ----------------
    v_lim_t, _ = velocity_limit(conditions.service, t_stream.phase)
    _, v_lim_s = velocity_limit(conditions.service, s_stream.phase)
    if v_t > v_lim_t:
        warnings.append(f"Tube velocity {v_t:.2f} m/s exceeds {v_lim_t:.1f} m/s limit (erosion)")
    if shell.velocity > v_lim_s:
        warnings.append(f"Shell velocity {shell.velocity:.2f} m/s exceeds {v_lim_s:.1f} m/s limit")
    if t_stream.allowable_dp and dp_t.pressure_drop > t_stream.allowable_dp:
        warnings.append(f"Tube-side pressure drop {dp_t.pressure_drop/1e3:.1f} kPa exceeds allowable "
                        f"{t_stream.allowable_dp/1e3:.1f} kPa")
    if s_stream.allowable_dp and shell.pressure_drop > s_stream.allowable_dp:
        warnings.append(f"Shell-side pressure drop {shell.pressure_drop/1e3:.1f} kPa exceeds allowable "
                        f"{s_stream.allowable_dp/1e3:.1f} kPa")

    for w in warnings:
        log.warning(w, extra=xtra)
    log.info(f"Q={Q/1e3:.2f} kW  U={U_fouled:.1f} W/m2K  A_req={A_req:.2f} m2  A_act={A_act:.2f} m2",
             extra=xtra)

    return ThermalHydraulicResult(
        heat_duty=Q, lmtd=mtd, correction_factor=F, effective_mtd=mtd * F,
        hi=hi.h, ho=ho.h, U_clean=U_clean, U_fouled=U_fouled,
        required_area=A_req, actual_area=A_act, ntu=n, effectiveness=eps, capacity_ratio=Cr,
        tube_pressure_drop=dp_t.pressure_drop, shell_pressure_drop=shell.pressure_drop,
        tube_velocity=v_t, shell_velocity=shell.velocity,
        tube_reynolds=dp_t.reynolds, shell_reynolds=shell.reynolds,
        tube_count=Nt, tube_regime=hi.regime, over_design=over, tube_nusselt=hi.Nu,
        shell=shell, hot_outlet=hot_out, cold_outlet=cold_out, hot_props=hp, cold_props=cp,
        warnings=warnings, errors=[],
    )
