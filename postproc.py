# postproc.py
from __future__ import annotations
from pathlib import Path
from typing import List

import pandas as pd

from common.conversions import UnitSystem, from_si, unit_symbol
from common.results import (AnalysisResult, SizingResult, ThermalHydraulicResult, ValidationResult,
                            VibrationResult)


def _c(label: str, quantity: str, system: UnitSystem) -> str:
    return f"{label}[{unit_symbol(quantity, system)}]"


def _v(value, quantity: str, system: UnitSystem) -> float:
    return from_si(value, quantity, system) if value is not None else float("nan")


def thermal_to_dataframe(th: ThermalHydraulicResult,
                         system: UnitSystem = UnitSystem.METRIC) -> "pd.DataFrame":
    s = UnitSystem(system)
    row = {
        # 1) duty and driving force
        _c("Q", "power", s): _v(th.heat_duty, "power", s),
        _c("LMTD", "temperature_delta", s): _v(th.lmtd, "temperature_delta", s),
        "F[-]": th.correction_factor,
        _c("MTD_eff", "temperature_delta", s): _v(th.effective_mtd, "temperature_delta", s),

        # 2) film and overall coefficients
        _c("h_tube", "htc", s): _v(th.hi, "htc", s),
        _c("h_shell", "htc", s): _v(th.ho, "htc", s),
        _c("U_clean", "htc", s): _v(th.U_clean, "htc", s),
        _c("U_fouled", "htc", s): _v(th.U_fouled, "htc", s),

        # 3) area
        _c("A_required", "area", s): _v(th.required_area, "area", s),
        _c("A_actual", "area", s): _v(th.actual_area, "area", s),
        "over_design[%]": th.over_design,
        "tubes[-]": th.tube_count,

        # 4) NTU view
        "NTU[-]": th.ntu,
        "effectiveness[-]": th.effectiveness,
        "Cr[-]": th.capacity_ratio,

        # 5) hydraulics
        _c("V_tube", "velocity", s): _v(th.tube_velocity, "velocity", s),
        _c("V_shell", "velocity", s): _v(th.shell_velocity, "velocity", s),
        "Re_tube[-]": th.tube_reynolds,
        "Re_shell[-]": th.shell_reynolds,
        "tube_regime": th.tube_regime.value,
        _c("dP_tube", "pressure_drop", s): _v(th.tube_pressure_drop, "pressure_drop", s),
        _c("dP_shell", "pressure_drop", s): _v(th.shell_pressure_drop, "pressure_drop", s),
    }
    if th.hot_outlet is not None:
        row[_c("T_hot_out", "temperature", s)] = _v(th.hot_outlet, "temperature", s)
        row[_c("T_cold_out", "temperature", s)] = _v(th.cold_outlet, "temperature", s)
    if th.shell is not None:
        row.update({"Jc[-]": th.shell.Jc, "Jl[-]": th.shell.Jl, "Jb[-]": th.shell.Jb,
                    "Jr[-]": th.shell.Jr, "Js[-]": th.shell.Js, "baffles[-]": th.shell.baffle_count})
    return pd.DataFrame([row])


def vibration_to_dataframe(vib: VibrationResult,
                           system: UnitSystem = UnitSystem.METRIC) -> "pd.DataFrame":
    s = UnitSystem(system)
    row = {
        "fn[Hz]": vib.natural_frequency,
        "fvs[Hz]": vib.vortex_shedding_frequency,
        "fa[Hz]": vib.acoustic_frequency,
        "ftb[Hz]": vib.turbulent_buffeting_frequency,
        _c("V_crit", "velocity", s): _v(vib.critical_velocity, "velocity", s),
        "V/V_crit[-]": vib.velocity_ratio,
        "fvs/fn[-]": vib.frequency_ratio,
        "Vr[-]": vib.reduced_velocity,
        "damage[-]": vib.damage_number,
        "Cm[-]": vib.added_mass_coefficient,
        "m_eff[kg/m]": vib.effective_mass,
        "wear[mm/yr]": vib.tube_wear_rate,
        "vortex": vib.is_vortex_shedding_risk,
        "fluid_elastic": vib.is_fluid_elastic_risk,
        "acoustic": vib.is_acoustic_risk,
        "buffeting": vib.is_buffeting_risk,
        "message": vib.message,
    }
    return pd.DataFrame([row])


def sizing_to_dataframe(sz: SizingResult, system: UnitSystem = UnitSystem.METRIC) -> "pd.DataFrame":
    s = UnitSystem(system)
    rows = []
    for rank, o in enumerate(sz.options, start=1):
        rows.append({
            "rank": rank,
            _c("Ds", "length_small", s): _v(o.shell_diameter, "length_small", s),
            _c("L", "length_large", s): _v(o.tube_length, "length_large", s),
            "tubes[-]": o.tube_count,
            _c("A", "area", s): _v(o.actual_area, "area", s),
            "margin[%]": o.area_margin,
            "L/D[-]": o.ld_ratio,
            "score[-]": o.score,
            "count_method": o.count_method,
        })
    return pd.DataFrame(rows)


def checks_to_dataframe(v: ValidationResult) -> "pd.DataFrame":
    return pd.DataFrame([{
        "standard": v.standard, "section": c.section, "requirement": c.requirement,
        "actual": c.actual, "limit": c.limit, "status": c.status, "severity": c.severity,
    } for c in v.checks])


def summary_rows(analysis: AnalysisResult) -> List[dict]:
    """One row per analysis part: validity and message counts, plus the headline figure."""
    a = analysis
    parts = [
        ("thermal", a.thermal, f"Q={a.thermal.heat_duty/1e3:.1f} kW, A_req={a.thermal.required_area:.2f} m²"),
        ("vibration", a.vibration, a.vibration.message if a.vibration else ""),
        ("two_phase", a.two_phase, a.two_phase.flow_pattern.value if a.two_phase else ""),
        ("materials", a.materials, (a.materials.recommended_id or "") if a.materials else ""),
        ("api660", a.api660, f"{len(a.api660.checks)} checks" if a.api660 else ""),
        ("tema", a.tema, a.tema.standard if a.tema else ""),
        ("sizing", a.sizing, (f"best Ds={a.sizing.options[0].shell_diameter*1000:.0f} mm"
                              if a.sizing and a.sizing.options else "")),
    ]
    rows = []
    for name, part, headline in parts:
        if part is None:
            continue
        rows.append({
            "part": name,
            "valid": part.is_valid,
            "warnings": len(part.warnings),
            "errors": len(part.errors),
            "headline": headline,
        })
    if a.safety is not None:
        rows.append({
            "part": "overall",
            "valid": a.is_valid,
            "warnings": len(a.safety.warnings),
            "errors": len(a.safety.errors),
            "headline": f"{len(a.safety.critical_warnings)} critical",
        })
    return rows


def write_results_csvs(analysis: AnalysisResult, outdir: str | Path, run_id: str,
                       system: UnitSystem = UnitSystem.METRIC) -> List[str]:
    """
    Write CSVs:
      - <run_id>_thermal.csv   : single-row thermal-hydraulic result.
      - <run_id>_vibration.csv : single-row vibration result (when run).
      - <run_id>_sizing.csv    : ranked sizing options (when run).
      - <run_id>_checks.csv    : API 660 and TEMA checks.
      - <run_id>_summary.csv   : per-part validity summary.

    Returns the written paths as strings.
    """
    outdir = Path(outdir)
    outdir.mkdir(parents=True, exist_ok=True)
    paths = []

    def _write(df: "pd.DataFrame", suffix: str) -> None:
        p = outdir / f"{run_id}_{suffix}.csv"
        df.to_csv(p, index=False)
        paths.append(str(p))

    _write(thermal_to_dataframe(analysis.thermal, system), "thermal")
    if analysis.vibration is not None:
        _write(vibration_to_dataframe(analysis.vibration, system), "vibration")
    if analysis.sizing is not None:
        _write(sizing_to_dataframe(analysis.sizing, system), "sizing")
    checks = [checks_to_dataframe(v) for v in (analysis.api660, analysis.tema) if v is not None]
    if checks:
        _write(pd.concat(checks, ignore_index=True), "checks")
    _write(pd.DataFrame(summary_rows(analysis)), "summary")
    return paths
