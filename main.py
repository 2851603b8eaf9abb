# main.py
import argparse
import logging
import sys

import pandas as pd

from analysis import analyze
from common.conversions import UnitSystem
from fluids.library import FLUIDS, list_fluids
from fluids.properties import properties_at
from heat.sizing import optimize_shell
from heat.thermal_hydraulics import calculate_thermal_hydraulics
from io_loader import load_case
from logging_utils import setup_logging
from postproc import (checks_to_dataframe, sizing_to_dataframe, summary_rows, thermal_to_dataframe,
                      vibration_to_dataframe, write_results_csvs)

log = logging.getLogger(__name__)


def _show(title: str, df: "pd.DataFrame", transpose: bool = False) -> None:
    print(f"\n== {title} ==")
    print((df.T if transpose else df).to_string())


def cmd_analyze(args) -> int:
    case = load_case(args.case)
    result = analyze(case)
    system = UnitSystem(args.units)

    _show("thermal-hydraulics", thermal_to_dataframe(result.thermal, system), transpose=True)
    if result.vibration is not None:
        _show("vibration", vibration_to_dataframe(result.vibration, system), transpose=True)
    if result.sizing is not None:
        _show("sizing", sizing_to_dataframe(result.sizing, system))
    checks = [checks_to_dataframe(v) for v in (result.api660, result.tema) if v is not None]
    if checks:
        _show("checks", pd.concat(checks, ignore_index=True))
    _show("summary", pd.DataFrame(summary_rows(result)))

    if result.safety is not None:
        for w in result.safety.critical_warnings:
            print(f"!! {w}")
        for e in result.safety.errors:
            print(f"ERROR: {e}")
        print(f"\n{result.safety.disclaimer}")

    if args.csv:
        paths = write_results_csvs(result, args.csv, case.name, system)
        log.info(f"wrote {len(paths)} CSV files to {args.csv}")
    return 0 if result.is_valid else 1


def cmd_size(args) -> int:
    case = load_case(args.case)
    thermal = calculate_thermal_hydraulics(case.conditions, case.geometry, case=case.name)
    if not thermal.is_valid:
        for e in thermal.errors:
            print(f"ERROR: {e}")
        return 1
    opts = case.sizing
    margin = args.margin if args.margin is not None else (opts.design_margin if opts else 15.0)
    length = opts.fixed_length if opts else None
    sizing = optimize_shell(thermal.required_area, case.geometry, margin, length, case=case.name)
    print(f"required area {thermal.required_area:.2f} m², with {margin:g}% margin "
          f"{sizing.required_area:.2f} m²")
    _show("sizing", sizing_to_dataframe(sizing, UnitSystem(args.units)))
    for w in sizing.warnings + sizing.errors:
        print(w)
    return 0 if sizing.is_valid else 1


def cmd_fluids(args) -> int:
    rows = []
    for key in list_fluids():
        fd = FLUIDS[key]
        p = properties_at(key, args.temperature)
        rows.append({
            "fluid": key,
            "category": fd.category,
            "phase": p.phase.value,
            "rho[kg/m³]": p.density,
            "mu[cP]": p.viscosity * 1000.0,
            "cp[kJ/kg·K]": p.specific_heat / 1000.0,
            "k[W/m·K]": p.thermal_conductivity,
            "Pr[-]": p.prandtl,
            "clamped": p.clamped,
        })
    _show(f"fluids at {args.temperature:g} °C", pd.DataFrame(rows))
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="hx-screen", description="Shell-and-tube heat exchanger screening")
    ap.add_argument("--log-level", default="INFO", help="TRACE, DEBUG, INFO, WARNING or ERROR")
    ap.add_argument("--log-file", help="also write a TRACE-level log here")
    sub = ap.add_subparsers(dest="command", required=True)

    a = sub.add_parser("analyze", help="full analysis of a YAML case")
    a.add_argument("case")
    a.add_argument("--units", choices=[u.value for u in UnitSystem], default="metric")
    a.add_argument("--csv", metavar="OUTDIR", help="write result CSVs here")
    a.set_defaults(func=cmd_analyze)

    s = sub.add_parser("size", help="rank standard shells for the case's required area")
    s.add_argument("case")
    s.add_argument("--margin", type=float, help="design margin in percent")
    s.add_argument("--units", choices=[u.value for u in UnitSystem], default="metric")
    s.set_defaults(func=cmd_size)

    f = sub.add_parser("fluids", help="list the fluid library")
    f.add_argument("--temperature", type=float, default=25.0, help="degC")
    f.set_defaults(func=cmd_fluids)
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, args.log_file)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
