# analysis.py
from __future__ import annotations

import logging
from dataclasses import replace

from common.models import CaseConfig, FluidPhase, TubeSide, VibrationInputs
from common.results import AnalysisResult, TubeCountResult
from flow.two_phase import classify
from fluids.properties import properties_at, speed_of_sound
from heat.sizing import optimize_shell
from heat.thermal_hydraulics import calculate_thermal_hydraulics
from logging_utils import trace_calls
from mechanical.geometry import bundle_diameter_from_count, bundle_shell_clearance, tube_count
from mechanical.materials import select_material
from mechanical.validation import create_safety_report, validate_api660, validate_tema_class
from mechanical.vibration import analyze_vibration

log = logging.getLogger(__name__)


def _tube_count(case: CaseConfig) -> TubeCountResult:
    g = case.geometry
    if g.tube_count:
        Db = bundle_diameter_from_count(g.tube_count, g.tube_od, g.pattern, g.passes)
        Db_max = g.shell_id - bundle_shell_clearance(g.shell_id, g.shell_type)
        warns = []
        if Db > Db_max:
            warns.append(f"{g.tube_count} tubes need a {Db*1000:.0f} mm bundle, "
                         f"shell allows {Db_max*1000:.0f} mm")
        return TubeCountResult(int(g.tube_count), "given", Db, warns)
    return tube_count(g.shell_id, g.tube_od, g.pitch, g.pattern, g.passes, g.shell_type)


def vibration_inputs(case: CaseConfig, thermal) -> VibrationInputs:
    """Shell-side crossflow at the thermal result's velocity, on the geometry's unsupported span."""
    g = case.geometry
    hot_in_tubes = TubeSide(case.conditions.tube_side) == TubeSide.HOT
    s_stream = case.conditions.cold if hot_in_tubes else case.conditions.hot
    s_props = thermal.cold_props if hot_in_tubes else thermal.hot_props
    t_props = thermal.hot_props if hot_in_tubes else thermal.cold_props
    phase = FluidPhase(s_stream.phase)
    c = case.speed_of_sound
    if c is None and phase in (FluidPhase.GAS, FluidPhase.SUPERCRITICAL):
        c = speed_of_sound(s_stream.fluid, s_stream.T_mean)
    return VibrationInputs(
        velocity=thermal.shell_velocity, shell_density=s_props.density,
        tube_od=g.tube_od, tube_id=g.tube_id, pitch=g.pitch, pattern=g.pattern,
        elastic_modulus=g.tube_material.elastic_modulus, tube_density=g.tube_material.density,
        span=g.span, shell_diameter=g.shell_id, tube_fluid_density=t_props.density,
        shell_phase=phase, shell_viscosity=s_props.viscosity, speed_of_sound=c,
        damping_ratio=case.damping_ratio, fei_safety_factor=case.fei_safety_factor,
    )


@trace_calls()
def analyze(case: CaseConfig) -> AnalysisResult:
    """
    Run every check a case asks for and bundle the results.

    Order: stream properties -> tube count -> thermal-hydraulics ->
    vibration (only on a valid thermal result) -> optional two-phase,
    materials and sizing -> API 660 / TEMA -> safety report.
    """
    name = case.name
    xtra = {"case": name, "step": "analyze"}
    cond, g = case.conditions, case.geometry

    hp = properties_at(cond.hot.fluid, cond.hot.T_mean, cond.hot.pressure)
    cp = properties_at(cond.cold.fluid, cond.cold.T_mean, cond.cold.pressure)

    tc = _tube_count(case)
    geom = g if g.tube_count else replace(g, tube_count=tc.count or None)
    thermal = calculate_thermal_hydraulics(cond, geom, hp, cp, case=name)

    vib = None
    if thermal.is_valid:
        vib = analyze_vibration(vibration_inputs(case, thermal), case=name)
    else:
        log.warning("thermal result invalid, vibration skipped", extra=xtra)

    two_phase = classify(case.two_phase, case=name) if case.two_phase else None

    materials = None
    if case.environment is not None and case.material_conditions is not None:
        materials = select_material(case.environment, case.material_conditions, case=name)

    sizing = None
    if case.sizing is not None and thermal.required_area > 0:
        sizing = optimize_shell(thermal.required_area, g, case.sizing.design_margin,
                                case.sizing.fixed_length, case=name)

    hot_in_tubes = TubeSide(cond.tube_side) == TubeSide.HOT
    t_stream, s_stream = (cond.hot, cond.cold) if hot_in_tubes else (cond.cold, cond.hot)
    api = validate_api660(geom, thermal.tube_velocity, thermal.shell_velocity, cond.service,
                          t_stream.phase, s_stream.phase, tc.count, case.design_pressure)
    tema = validate_tema_class(geom, case.tema_class)

    result = AnalysisResult(thermal=thermal, tube_count=tc, vibration=vib, two_phase=two_phase,
                            materials=materials, api660=api, tema=tema, sizing=sizing)
    safety = create_safety_report(result)
    log.info(f"analysis done: valid={result.is_valid}, {len(safety.critical_warnings)} critical, "
             f"{len(safety.warnings)} warnings, {len(safety.errors)} errors", extra=xtra)
    return replace(result, safety=safety)
