from __future__ import annotations
from typing import Any, Dict, Optional
import yaml

from common.units import Q_
from common.models import (CalculationMode, CaseConfig, CorrosionEnvironment, FlowArrangement, FluidPhase,
                           MaterialConditions, MechanicalGeometry, ProcessConditions, ProcessStream,
                           ServiceType, ShellSideMethod, ShellType, SizingOptions, TemaClass, TubePattern,
                           TubeSide, TUBE_MATERIALS, TwoPhaseInputs)
from fluids.fouling import fouling_for_fluid
from fluids.library import fluid_definition


def _q(node: Any) -> Q_:
    if isinstance(node, dict) and "value" in node and "unit" in node:
        unit = str(node["unit"])
        if unit in ("dimensionless", "1", "-"):
            unit = ""
        return Q_(node["value"], unit)
    raise ValueError(f"Invalid quantity format: {node!r}")


def _get(d: Dict[str, Any] | None, key: str, default=None):
    return d.get(key, default) if isinstance(d, dict) else default


def _si(node: Any, unit: str) -> float:
    """Quantity node -> magnitude in `unit`; bare numbers are taken as already in `unit`."""
    if isinstance(node, (int, float)) and not isinstance(node, bool):
        return float(node)
    return float(_q(node).to(unit).magnitude)


def _opt(d: Dict[str, Any] | None, key: str, unit: str) -> Optional[float]:
    node = _get(d, key)
    return None if node is None else _si(node, unit)


def _require(d: Dict[str, Any], section: str, *keys: str) -> None:
    for k in keys:
        if k not in d:
            raise KeyError(f"{section}: '{k}' is required")


def _section(doc: Dict[str, Any], name: str) -> Dict[str, Any]:
    node = doc.get(name)
    if not isinstance(node, dict):
        raise KeyError(f"'{name}' section is required")
    return node


def load_stream(node: Dict[str, Any], section: str) -> ProcessStream:
    _require(node, section, "fluid", "mass_flow", "T_in", "T_out")
    fluid = str(node["fluid"])
    T_in = _si(node["T_in"], "degC")
    T_out = _si(node["T_out"], "degC")
    phase = _get(node, "phase")
    phase = FluidPhase(phase) if phase else fluid_definition(fluid).phase
    fouling = _opt(node, "fouling", "m^2*K/W")
    if fouling is None:
        fouling = fouling_for_fluid(fluid, 0.5 * (T_in + T_out)).rf
    return ProcessStream(
        mass_flow=_si(node["mass_flow"], "kg/s"),
        T_in=T_in, T_out=T_out,
        pressure=_opt(node, "pressure", "Pa") or 101325.0,
        phase=phase,
        allowable_dp=_opt(node, "allowable_dp", "Pa"),
        fouling=fouling,
        fluid=fluid,
    )


def load_geometry(node: Dict[str, Any]) -> MechanicalGeometry:
    _require(node, "geometry", "tube_od", "tube_wall", "tube_length", "pitch", "shell_id", "baffle_spacing")
    material = str(_get(node, "tube_material", "carbon_steel"))
    if material not in TUBE_MATERIALS:
        raise ValueError(f"geometry: unknown tube_material '{material}', expected one of {sorted(TUBE_MATERIALS)}")
    count = _get(node, "tube_count")
    return MechanicalGeometry(
        tube_od=_si(node["tube_od"], "m"),
        tube_wall=_si(node["tube_wall"], "m"),
        tube_length=_si(node["tube_length"], "m"),
        pitch=_si(node["pitch"], "m"),
        pattern=TubePattern(_get(node, "pattern", "triangular_30")),
        passes=int(_get(node, "passes", 1)),
        shell_id=_si(node["shell_id"], "m"),
        baffle_cut=_si(_get(node, "baffle_cut", 0.25), ""),
        baffle_spacing=_si(node["baffle_spacing"], "m"),
        tube_count=int(count) if count else None,
        shell_type=ShellType(_get(node, "shell_type", "fixed")),
        tube_material=TUBE_MATERIALS[material],
        shell_baffle_clearance=_opt(node, "shell_baffle_clearance", "m") or 0.0016,
        tube_baffle_clearance=_opt(node, "tube_baffle_clearance", "m") or 0.0004,
        bypass_fraction=float(_get(node, "bypass_fraction", 0.1)),
        unsupported_span=_opt(node, "unsupported_span", "m"),
    )


def load_two_phase(node: Dict[str, Any]) -> TwoPhaseInputs:
    _require(node, "two_phase", "liquid_flow", "gas_flow", "liquid_density", "gas_density",
             "liquid_viscosity", "gas_viscosity", "surface_tension", "pipe_id", "pipe_length")
    return TwoPhaseInputs(
        liquid_flow=_si(node["liquid_flow"], "kg/s"),
        gas_flow=_si(node["gas_flow"], "kg/s"),
        liquid_density=_si(node["liquid_density"], "kg/m^3"),
        gas_density=_si(node["gas_density"], "kg/m^3"),
        liquid_viscosity=_si(node["liquid_viscosity"], "Pa*s"),
        gas_viscosity=_si(node["gas_viscosity"], "Pa*s"),
        surface_tension=_si(node["surface_tension"], "N/m"),
        pipe_id=_si(node["pipe_id"], "m"),
        pipe_length=_si(node["pipe_length"], "m"),
        inclination=_opt(node, "inclination", "rad") or 0.0,
        pressure=_opt(node, "pressure", "Pa") or 101325.0,
    )


def load_material_conditions(node: Dict[str, Any]) -> MaterialConditions:
    _require(node, "materials", "temperature", "pressure")
    return MaterialConditions(
        temperature=_si(node["temperature"], "K"),
        pressure=_si(node["pressure"], "Pa"),
        design_life=float(_get(node, "design_life", 20.0)),
        h2s_content=float(_get(node, "h2s_content", 0.0)),
        co2_content=float(_get(node, "co2_content", 0.0)),
        chloride_content=float(_get(node, "chloride_content", 0.0)),
        pH=float(_get(node, "pH", 7.0)),
    )


def load_case(path: str) -> CaseConfig:
    """Read one exchanger case; KeyError/ValueError name the offending section."""
    with open(path, "r", encoding="utf-8") as fh:
        doc = yaml.safe_load(fh)
    if not isinstance(doc, dict):
        raise ValueError(f"{path}: expected a mapping at top level")

    hot = load_stream(_section(doc, "hot"), "hot")
    cold = load_stream(_section(doc, "cold"), "cold")
    geometry = load_geometry(_section(doc, "geometry"))

    opt = doc.get("options") or {}
    conditions = ProcessConditions(
        hot=hot, cold=cold,
        tube_side=TubeSide(_get(opt, "tube_side", "cold")),
        arrangement=FlowArrangement(_get(opt, "arrangement", "shell_tube_1_2")),
        method=ShellSideMethod(_get(opt, "method", "bell_delaware")),
        mode=CalculationMode(_get(opt, "mode", "design")),
        service=ServiceType(_get(opt, "service", "clean_liquid")),
        viscosity_correction=bool(_get(opt, "viscosity_correction", False)),
    )

    vib = doc.get("vibration") or {}
    tp = doc.get("two_phase")
    mat = doc.get("materials")
    sz = doc.get("sizing") or {}

    return CaseConfig(
        name=str(doc.get("name", "case")),
        conditions=conditions,
        geometry=geometry,
        damping_ratio=_get(vib, "damping_ratio"),
        fei_safety_factor=float(_get(vib, "fei_safety_factor", 0.8)),
        speed_of_sound=_opt(vib, "speed_of_sound", "m/s"),
        two_phase=load_two_phase(tp) if tp else None,
        environment=CorrosionEnvironment(_get(mat, "environment", "mild")) if mat else None,
        material_conditions=load_material_conditions(mat) if mat else None,
        sizing=SizingOptions(float(_get(sz, "design_margin", 15.0)), _opt(sz, "fixed_length", "m"))
        if "sizing" in doc else None,
        tema_class=TemaClass(str(_get(opt, "tema_class", "R"))),
        design_pressure=_opt(opt, "design_pressure", "Pa"),
    )
