from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from math import pi
from typing import Optional


class FluidPhase(str, Enum):
    LIQUID = "liquid"
    GAS = "gas"
    TWO_PHASE = "two_phase"
    SUPERCRITICAL = "supercritical"


class TubePattern(str, Enum):
    TRIANGULAR_30 = "triangular_30"
    TRIANGULAR_60 = "triangular_60"
    SQUARE_90 = "square_90"
    SQUARE_45 = "square_45"

    @property
    def is_triangular(self) -> bool:
        return self in (TubePattern.TRIANGULAR_30, TubePattern.TRIANGULAR_60)


class ShellType(str, Enum):
    FIXED = "fixed"
    FLOATING = "floating"
    U_TUBE = "u_tube"


class ShellSideMethod(str, Enum):
    BELL_DELAWARE = "bell_delaware"
    KERN = "kern"


class FlowArrangement(str, Enum):
    COUNTER = "counter"
    PARALLEL = "parallel"
    SHELL_TUBE_1_2 = "shell_tube_1_2"
    SHELL_TUBE_1_4 = "shell_tube_1_4"
    CROSSFLOW = "crossflow"


class CalculationMode(str, Enum):
    DESIGN = "design"
    RATING = "rating"


class TubeSide(str, Enum):
    HOT = "hot"
    COLD = "cold"


class BaffleService(str, Enum):
    LIQUID = "liquid"
    BOILING = "boiling"
    CONDENSING = "condensing"
    GAS = "gas"


class ServiceType(str, Enum):
    CLEAN_LIQUID = "clean_liquid"
    FOULING_LIQUID = "fouling_liquid"
    GAS_VAPOR = "gas_vapor"
    TWO_PHASE = "two_phase"
    EROSIVE = "erosive"


class FlowRegime(str, Enum):
    LAMINAR = "laminar"
    TRANSITIONAL = "transitional"
    TURBULENT = "turbulent"


class FlowPattern(str, Enum):
    BUBBLE = "bubble"
    SLUG = "slug"
    CHURN = "churn"
    ANNULAR = "annular"
    STRATIFIED = "stratified"
    STRATIFIED_WAVY = "stratified_wavy"
    MIST = "mist"
    DISPERSED_BUBBLE = "dispersed_bubble"


class MaterialClass(str, Enum):
    CARBON_STEEL = "carbon_steel"
    LOW_ALLOY = "low_alloy"
    STAINLESS = "stainless"
    DUPLEX = "duplex"
    NICKEL_ALLOY = "nickel_alloy"
    TITANIUM = "titanium"
    COPPER_ALLOY = "copper_alloy"


class CorrosionEnvironment(str, Enum):
    NONE = "none"
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"
    SOUR = "sour"
    ACIDIC = "acidic"


class TemaClass(str, Enum):
    R = "R"
    C = "C"
    B = "B"


@dataclass(frozen=True)
class TubeMaterial:
    name: str
    elastic_modulus: float   # Pa
    density: float           # kg/m^3
    conductivity: float      # W/m/K


TUBE_MATERIALS = {
    "carbon_steel":   TubeMaterial("Carbon steel",         200e9, 7850.0, 50.0),
    "stainless_304":  TubeMaterial("Stainless steel 304",  193e9, 8000.0, 16.2),
    "stainless_316":  TubeMaterial("Stainless steel 316",  193e9, 8000.0, 16.3),
    "duplex_2205":    TubeMaterial("Duplex 2205",          200e9, 7800.0, 19.0),
    "titanium":       TubeMaterial("Titanium Gr. 2",       105e9, 4510.0, 21.9),
    "copper_nickel":  TubeMaterial("Copper-nickel 90/10",  135e9, 8900.0, 45.0),
    "admiralty":      TubeMaterial("Admiralty brass",      110e9, 8530.0, 111.0),
    "inconel_625":    TubeMaterial("Inconel 625",          205e9, 8440.0, 9.8),
}


@dataclass(frozen=True)
class FluidProperties:
    density: float                 # kg/m^3
    viscosity: float               # Pa*s
    specific_heat: float           # J/kg/K
    thermal_conductivity: float    # W/m/K
    temperature: float = 25.0      # degC actually used (after clamping)
    phase: FluidPhase = FluidPhase.LIQUID
    molecular_weight: Optional[float] = None   # g/mol
    gamma: Optional[float] = None
    bulk_modulus: Optional[float] = None       # Pa
    critical_temperature: Optional[float] = None   # K
    critical_pressure: Optional[float] = None      # Pa
    clamped: bool = False
    warnings: list[str] = field(default_factory=list)

    @property
    def prandtl(self) -> float:
        return self.specific_heat * self.viscosity / self.thermal_conductivity


@dataclass
class ProcessStream:
    mass_flow: float          # kg/s
    T_in: float               # degC
    T_out: float              # degC
    pressure: float = 101325.0            # Pa (abs)
    phase: FluidPhase = FluidPhase.LIQUID
    allowable_dp: Optional[float] = None  # Pa
    fouling: float = 0.0                  # m^2*K/W
    fluid: str = "water"

    @property
    def T_mean(self) -> float:
        return 0.5 * (self.T_in + self.T_out)


@dataclass
class MechanicalGeometry:
    tube_od: float                 # m
    tube_wall: float               # m
    tube_length: float             # m
    pitch: float                   # m
    pattern: TubePattern = TubePattern.TRIANGULAR_30
    passes: int = 1
    shell_id: float = 0.5          # m
    baffle_cut: float = 0.25       # fraction of shell ID
    baffle_spacing: float = 0.2    # m
    tube_count: Optional[int] = None
    shell_type: ShellType = ShellType.FIXED
    tube_material: TubeMaterial = field(default_factory=lambda: TUBE_MATERIALS["carbon_steel"])
    shell_baffle_clearance: float = 0.0016  # m, diametral gap shell-to-baffle
    tube_baffle_clearance: float = 0.0004   # m, diametral gap tube-to-baffle hole
    bypass_fraction: float = 0.1            # Fbp, bundle bypass area fraction
    unsupported_span: Optional[float] = None  # m, defaults to baffle spacing

    @property
    def tube_id(self) -> float:
        return self.tube_od - 2.0 * self.tube_wall

    @property
    def pitch_ratio(self) -> float:
        return self.pitch / self.tube_od

    @property
    def span(self) -> float:
        return self.unsupported_span if self.unsupported_span else self.baffle_spacing

    def area_per_tube(self) -> float:
        return pi * self.tube_od * self.tube_length


@dataclass
class ProcessConditions:
    hot: ProcessStream
    cold: ProcessStream
    tube_side: TubeSide = TubeSide.COLD
    arrangement: FlowArrangement = FlowArrangement.SHELL_TUBE_1_2
    method: ShellSideMethod = ShellSideMethod.BELL_DELAWARE
    mode: CalculationMode = CalculationMode.DESIGN
    service: ServiceType = ServiceType.CLEAN_LIQUID
    viscosity_correction: bool = False


@dataclass
class VibrationInputs:
    velocity: float              # m/s, shell-side crossflow
    shell_density: float         # kg/m^3
    tube_od: float               # m
    tube_id: float               # m
    pitch: float                 # m
    pattern: TubePattern
    elastic_modulus: float       # Pa
    tube_density: float          # kg/m^3
    span: float                  # m
    shell_diameter: float        # m
    tube_fluid_density: float = 1000.0   # kg/m^3
    shell_phase: FluidPhase = FluidPhase.LIQUID
    shell_viscosity: Optional[float] = None   # Pa*s, selects damping for liquids
    speed_of_sound: Optional[float] = None    # m/s, gas service
    damping_ratio: Optional[float] = None
    fei_safety_factor: float = 0.8


@dataclass
class TwoPhaseInputs:
    liquid_flow: float           # kg/s
    gas_flow: float              # kg/s
    liquid_density: float        # kg/m^3
    gas_density: float           # kg/m^3
    liquid_viscosity: float      # Pa*s
    gas_viscosity: float         # Pa*s
    surface_tension: float       # N/m
    pipe_id: float               # m
    pipe_length: float           # m
    inclination: float = 0.0     # rad from horizontal
    pressure: float = 101325.0   # Pa


@dataclass
class MaterialConditions:
    temperature: float           # K
    pressure: float              # Pa
    design_life: float = 20.0    # years
    h2s_content: float = 0.0     # mol %
    co2_content: float = 0.0     # mol %
    chloride_content: float = 0.0  # mg/L
    pH: float = 7.0


@dataclass
class SizingOptions:
    design_margin: float = 15.0       # %
    fixed_length: Optional[float] = None  # m


@dataclass
class CaseConfig:
    name: str
    conditions: ProcessConditions
    geometry: MechanicalGeometry
    damping_ratio: Optional[float] = None
    fei_safety_factor: float = 0.8
    speed_of_sound: Optional[float] = None    # m/s, overrides the fluid library
    two_phase: Optional[TwoPhaseInputs] = None
    environment: Optional[CorrosionEnvironment] = None
    material_conditions: Optional[MaterialConditions] = None
    sizing: Optional[SizingOptions] = None
    tema_class: TemaClass = TemaClass.R
    design_pressure: Optional[float] = None   # Pa
