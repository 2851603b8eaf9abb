# =========================================================
# FILE: mechanical/validation.py
# API 660 / TEMA screening checks on a mechanical layout and the
# consolidated safety report over a full analysis.
# =========================================================
from __future__ import annotations
import logging
from math import pi, sqrt
from typing import Optional

from common.constants import DISCLAIMER, min_pitch_ratio, max_pitch_ratio, velocity_limit
from common.models import FluidPhase, MechanicalGeometry, ServiceType, TemaClass, TubePattern
from common.results import SafetyReport, ValidationCheck, ValidationResult
from mechanical.geometry import STANDARD_LENGTHS, STANDARD_TUBES

log = logging.getLogger(__name__)

BAFFLE_CUT_RANGE = (0.15, 0.45)
LD_RANGE = (3.0, 15.0)
PACKING_FACTOR = 0.78
LENGTH_TOLERANCE = 0.1      # m
COUNT_TOLERANCE = (1.05, 1.10)
TEMA_MIN_WALL = {TemaClass.R: 2.11e-3, TemaClass.C: 1.65e-3, TemaClass.B: 1.65e-3}
CRITICAL_WORDS = ("critical", "safety", "exceed")


def minimum_tube_wall(tube_od: float) -> float:
    """API 660 minimum wall (m) by tube OD."""
    if tube_od <= 0.01905 + 1e-6:
        return 1.65e-3
    if tube_od <= 0.0254 + 1e-6:
        return 2.11e-3
    return 2.77e-3


def bwg_for(tube_od: float, tube_wall: float) -> Optional[int]:
    """BWG gauge of a standard tube matching OD and wall, None when not listed."""
    for od_mm, bwg, wall_mm, _ in STANDARD_TUBES:
        if abs(od_mm - tube_od * 1000) < 0.1 and abs(wall_mm - tube_wall * 1000) < 0.05:
            return bwg
    return None


def estimate_max_tube_count(shell_id: float, pitch: float, triangular: bool) -> int:
    """Tubes that pack into the bundle circle at a 0.78 utilisation."""
    Db = shell_id - 0.024
    if Db <= 0 or pitch <= 0:
        return 0
    cell = pitch * pitch * (sqrt(3.0) / 2.0 if triangular else 1.0)
    return int(PACKING_FACTOR * pi * Db * Db / 4.0 / cell)


def _velocity_check(section: str, what: str, v: float, limit: float, fail_severity: str) -> ValidationCheck:
    if v <= limit:
        status, severity = "pass", "info"
    elif v <= 1.1 * limit:
        status, severity = "warning", "warning"
    else:
        status, severity = "fail", fail_severity
    return ValidationCheck(section, f"{what} velocity within service limit",
                           f"{v:.2f} m/s", f"<= {limit:.2f} m/s", status, severity)


def validate_api660(geometry: MechanicalGeometry, tube_velocity: float, shell_velocity: float,
                    service: ServiceType = ServiceType.CLEAN_LIQUID,
                    phase: FluidPhase = FluidPhase.LIQUID,
                    shell_phase: Optional[FluidPhase] = None,
                    tube_count: Optional[int] = None,
                    design_pressure: Optional[float] = None) -> ValidationResult:
    """
    Screen a layout against the API 660 shell-and-tube rules.

    Failures with critical severity are errors; anything else that does
    not pass is a warning. `phase` sets the tube-side velocity limit and
    `shell_phase` (default: `phase`) the shell-side one. `design_pressure`
    (Pa) only annotates the result, no pressure-part sizing is attempted.
    """
    g = geometry
    checks: list[ValidationCheck] = []
    warnings: list[str] = []
    errors: list[str] = []

    # ---------------- tubes ----------------
    ratio = g.pitch / g.tube_od if g.tube_od > 0 else 0.0
    ok = round(ratio, 3) >= min_pitch_ratio
    checks.append(ValidationCheck("4.2.3", "Tube pitch >= 1.25 x OD", f"{ratio:.3f}",
                                  f">= {min_pitch_ratio:g}", "pass" if ok else "fail",
                                  "info" if ok else "critical"))
    if not ok:
        errors.append(f"Pitch ratio {ratio:.3f} below API 660 minimum {min_pitch_ratio:g}")

    w_min = minimum_tube_wall(g.tube_od)
    ok = g.tube_wall >= w_min - 1e-6
    checks.append(ValidationCheck("4.2.1", "Minimum tube wall thickness", f"{g.tube_wall*1000:.2f} mm",
                                  f">= {w_min*1000:.2f} mm", "pass" if ok else "fail",
                                  "info" if ok else "critical"))
    if not ok:
        errors.append(f"Tube wall {g.tube_wall*1000:.2f} mm below API 660 minimum {w_min*1000:.2f} mm "
                      f"for {g.tube_od*1000:.2f} mm OD")
    elif bwg_for(g.tube_od, g.tube_wall) is None:
        warnings.append(f"{g.tube_od*1000:.2f} mm x {g.tube_wall*1000:.2f} mm is not a listed standard tube")

    # ---------------- velocities ----------------
    phase = FluidPhase(phase)
    shell_phase = FluidPhase(shell_phase) if shell_phase else phase
    v_tube, _ = velocity_limit(ServiceType(service), phase)
    _, v_shell = velocity_limit(ServiceType(service), shell_phase)
    c = _velocity_check("7.1.2", "Tube-side", tube_velocity, v_tube, "critical")
    checks.append(c)
    if c.status == "fail":
        errors.append(f"Tube velocity {tube_velocity:.2f} m/s exceeds erosion limit {v_tube:.2f} m/s")
    elif c.status == "warning":
        warnings.append(f"Tube velocity {tube_velocity:.2f} m/s near erosion limit {v_tube:.2f} m/s")
    c = _velocity_check("7.1.2", "Shell-side", shell_velocity, v_shell, "warning")
    checks.append(c)
    if c.status != "pass":
        warnings.append(f"Shell velocity {shell_velocity:.2f} m/s exceeds recommended {v_shell:.2f} m/s")

    if FluidPhase.GAS in (phase, shell_phase) or ServiceType(service) == ServiceType.GAS_VAPOR:
        checks.append(ValidationCheck("7.2", "Vibration analysis", "gas service",
                                      "TEMA RGP T-4", "warning", "warning"))
        warnings.append("Gas service: Detailed vibration analysis per TEMA RGP T-4 is mandatory")

    # ---------------- baffles ----------------
    b_min = max(0.2 * g.shell_id, 0.05)
    ok = g.baffle_spacing >= b_min
    checks.append(ValidationCheck("5.4.2", "Minimum baffle spacing", f"{g.baffle_spacing*1000:.0f} mm",
                                  f">= {b_min*1000:.0f} mm", "pass" if ok else "warning",
                                  "info" if ok else "warning"))
    if not ok:
        warnings.append(f"Baffle spacing {g.baffle_spacing*1000:.0f} mm below minimum {b_min*1000:.0f} mm")
    ok = g.baffle_spacing <= g.shell_id
    checks.append(ValidationCheck("5.4.2", "Maximum baffle spacing", f"{g.baffle_spacing*1000:.0f} mm",
                                  f"<= {g.shell_id*1000:.0f} mm", "pass" if ok else "warning",
                                  "info" if ok else "warning"))
    if not ok:
        warnings.append(f"Baffle spacing {g.baffle_spacing*1000:.0f} mm exceeds shell diameter")

    lo, hi = BAFFLE_CUT_RANGE
    ok = lo <= g.baffle_cut <= hi
    checks.append(ValidationCheck("5.4.1", "Baffle cut 15-45%", f"{g.baffle_cut*100:.0f}%",
                                  f"{lo*100:.0f}-{hi*100:.0f}%", "pass" if ok else "warning",
                                  "info" if ok else "warning"))
    if not ok:
        warnings.append(f"Baffle cut {g.baffle_cut*100:.0f}% outside 15-45%")

    # ---------------- length and count ----------------
    nearest = min(STANDARD_LENGTHS, key=lambda L: abs(L - g.tube_length))
    ok = abs(nearest - g.tube_length) <= LENGTH_TOLERANCE
    checks.append(ValidationCheck("4.1", "Standard tube length", f"{g.tube_length:.2f} m",
                                  f"~{nearest:.2f} m", "pass" if ok else "warning",
                                  "info" if ok else "warning"))
    if not ok:
        warnings.append(f"Tube length {g.tube_length:.2f} m is non-standard (nearest {nearest:.2f} m)")

    if tube_count:
        n_max = estimate_max_tube_count(g.shell_id, g.pitch, TubePattern(g.pattern).is_triangular)
        if n_max > 0:
            lo_f, hi_f = COUNT_TOLERANCE
            if tube_count <= lo_f * n_max:
                status, severity = "pass", "info"
            elif tube_count <= hi_f * n_max:
                status, severity = "warning", "info"
            else:
                status, severity = "warning", "warning"
            checks.append(ValidationCheck("4.3", "Tube count fits shell", str(tube_count),
                                          f"~{n_max}", status, severity))
            if severity == "warning":
                warnings.append(f"{tube_count} tubes exceed the ~{n_max} that fit a "
                                f"{g.shell_id*1000:.0f} mm shell")

    if design_pressure is not None:
        checks.append(ValidationCheck("6.1", "Design pressure recorded", f"{design_pressure/1e5:.1f} bar",
                                      "ASME VIII", "pass", "info"))
    log.debug(f"API 660: {len(checks)} checks, "
              f"{len(errors)} errors, {len(warnings)} warnings")
    return ValidationResult("API 660", checks, warnings, errors)


def validate_tema_class(geometry: MechanicalGeometry, tema_class: TemaClass = TemaClass.R) -> ValidationResult:
    g = geometry
    cls = TemaClass(tema_class)
    checks: list[ValidationCheck] = []
    warnings: list[str] = []
    errors: list[str] = []

    w_min = TEMA_MIN_WALL[cls]
    ok = g.tube_wall >= w_min - 1e-6
    checks.append(ValidationCheck(f"TEMA {cls.value}", "Minimum tube wall", f"{g.tube_wall*1000:.2f} mm",
                                  f">= {w_min*1000:.2f} mm", "pass" if ok else "fail",
                                  "info" if ok else "critical"))
    if not ok:
        errors.append(f"Tube wall {g.tube_wall*1000:.2f} mm below TEMA class {cls.value} "
                      f"minimum {w_min*1000:.2f} mm")

    ratio = g.pitch_ratio if g.tube_od > 0 else 0.0
    ok = min_pitch_ratio <= round(ratio, 3) <= max_pitch_ratio
    checks.append(ValidationCheck(f"TEMA {cls.value}", "Pitch ratio 1.25-1.50", f"{ratio:.3f}",
                                  f"{min_pitch_ratio:g}-{max_pitch_ratio:g}", "pass" if ok else "warning",
                                  "info" if ok else "warning"))
    if not ok:
        warnings.append(f"Pitch ratio {ratio:.3f} outside TEMA 1.25-1.50")

    ld = g.tube_length / g.shell_id if g.shell_id > 0 else 0.0
    ok = LD_RANGE[0] <= ld <= LD_RANGE[1]
    checks.append(ValidationCheck(f"TEMA {cls.value}", "L/D ratio 3-15", f"{ld:.1f}",
                                  f"{LD_RANGE[0]:g}-{LD_RANGE[1]:g}", "pass" if ok else "warning",
                                  "info" if ok else "warning"))
    if not ok:
        warnings.append(f"L/D ratio {ld:.1f} outside 3-15")
    return ValidationResult(f"TEMA {cls.value}", checks, warnings, errors)


def create_safety_report(analysis) -> SafetyReport:
    """
    Collect every warning and error of an AnalysisResult.

    Warnings that mention critical, safety or exceed are raised to
    critical warnings; the report is valid when no part has errors.
    """
    parts = [analysis.thermal, analysis.vibration, analysis.two_phase, analysis.materials,
             analysis.api660, analysis.tema, analysis.sizing]
    warnings: list[str] = []
    errors: list[str] = []
    for p in parts:
        if p is None:
            continue
        warnings += [w for w in p.warnings if w not in warnings]
        errors += [e for e in p.errors if e not in errors]
    if analysis.tube_count is not None:
        warnings += [w for w in analysis.tube_count.warnings if w not in warnings]
    critical = [w for w in warnings if any(k in w.lower() for k in CRITICAL_WORDS)]
    if analysis.vibration is not None and analysis.vibration.is_fluid_elastic_risk:
        critical.insert(0, "CRITICAL: fluid-elastic instability predicted")
    return SafetyReport(DISCLAIMER, critical, warnings, errors, is_valid=not errors)
