from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional

from common.models import FlowPattern, FlowRegime, MaterialClass, FluidProperties


@dataclass(frozen=True)
class TubeCountResult:
    count: int
    method: str               # "table" | "palen" | "invalid"
    bundle_diameter: float    # m
    warnings: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class BaffleSpacingResult:
    min_spacing: float        # m
    max_spacing: float        # m
    recommended: float        # m
    baffle_count: int


@dataclass(frozen=True)
class HTCResult:
    h: float                  # W/m^2/K
    Nu: float
    regime: FlowRegime = FlowRegime.TURBULENT


@dataclass(frozen=True)
class TubePressureDrop:
    pressure_drop: float      # Pa
    reynolds: float
    friction_factor: float    # Fanning
    straight_loss: float      # Pa
    return_loss: float        # Pa


@dataclass(frozen=True)
class ShellSideResult:
    pressure_drop: float      # Pa
    velocity: float           # m/s
    reynolds: float
    cross_flow_area: float    # m^2
    equivalent_diameter: float  # m
    mass_velocity: float      # kg/m^2/s
    baffle_count: int
    crossflow_rows: int = 0
    Jc: float = 1.0
    Jl: float = 1.0
    Jb: float = 1.0
    Jr: float = 1.0
    Js: float = 1.0
    warnings: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class CorrectionFactor:
    F: float
    warning: bool = False
    message: str = ""


@dataclass(frozen=True)
class ThermalHydraulicResult:
    heat_duty: float              # W
    lmtd: float                   # K
    correction_factor: float
    effective_mtd: float          # K
    hi: float                     # W/m^2/K
    ho: float                     # W/m^2/K
    U_clean: float                # W/m^2/K
    U_fouled: float               # W/m^2/K
    required_area: float          # m^2
    actual_area: float            # m^2
    ntu: float
    effectiveness: float
    capacity_ratio: float
    tube_pressure_drop: float     # Pa
    shell_pressure_drop: float    # Pa
    tube_velocity: float          # m/s
    shell_velocity: float         # m/s
    tube_reynolds: float
    shell_reynolds: float
    tube_count: int = 0
    tube_regime: FlowRegime = FlowRegime.LAMINAR
    over_design: float = 0.0      # % of actual over required area
    tube_nusselt: float = 0.0
    shell: Optional[ShellSideResult] = None
    hot_outlet: Optional[float] = None    # degC, rating mode
    cold_outlet: Optional[float] = None   # degC, rating mode
    hot_props: Optional[FluidProperties] = None
    cold_props: Optional[FluidProperties] = None
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class VibrationResult:
    natural_frequency: float          # Hz
    vortex_shedding_frequency: float  # Hz
    acoustic_frequency: float         # Hz, 0 for liquid / two-phase
    critical_velocity: float          # m/s
    reduced_velocity: float
    frequency_ratio: float            # fvs / fn
    damage_number: float
    effective_mass: float             # kg/m
    added_mass_coefficient: float
    turbulent_buffeting_frequency: float  # Hz
    frequency_margin: float
    velocity_ratio: float             # V / Vcrit
    tube_wear_rate: float             # mm/year, indicative
    is_vortex_shedding_risk: bool
    is_fluid_elastic_risk: bool
    is_acoustic_risk: bool
    is_buffeting_risk: bool
    message: str
    recommendations: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors and not self.is_fluid_elastic_risk and not self.is_vortex_shedding_risk

    @property
    def is_vibration_risk(self) -> bool:
        return (self.is_vortex_shedding_risk or self.is_fluid_elastic_risk
                or self.is_acoustic_risk or self.is_buffeting_risk)


@dataclass(frozen=True)
class TwoPhaseResult:
    flow_pattern: FlowPattern
    void_fraction: float
    liquid_holdup: float
    pressure_drop: float              # Pa
    friction_pressure_drop: float     # Pa
    acceleration_pressure_drop: float # Pa
    gravitational_pressure_drop: float  # Pa
    liquid_velocity: float            # m/s, superficial
    gas_velocity: float               # m/s, superficial
    mixture_velocity: float           # m/s
    lockhart_martinelli: float
    friction_multiplier: float
    is_slug_flow: bool = False
    slug_frequency: Optional[float] = None   # Hz
    is_flow_unstable: bool = False
    instability_type: Optional[str] = None
    instability_severity: Optional[str] = None   # "medium" | "high"
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class MaterialScore:
    material_id: str
    material_class: MaterialClass
    score: float


@dataclass(frozen=True)
class MaterialSelectionResult:
    recommended_material: MaterialClass
    recommended_id: Optional[str]
    alternative_materials: List[MaterialClass]
    corrosion_rate: float             # mm/year
    expected_life: float              # years
    is_nace_compliant: bool
    nace_requirements: List[str]
    galvanic_compatible: bool
    hydrogen_embrittlement_risk: bool
    stress_corrosion_cracking_risk: bool
    temperature_limits: tuple         # (min K, max K)
    sour_region: int = 0
    scores: List[MaterialScore] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class SizingOption:
    shell_diameter: float     # m
    tube_length: float        # m
    tube_count: int
    actual_area: float        # m^2
    area_margin: float        # % over target area
    ld_ratio: float
    score: float
    count_method: str = "table"
    warnings: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class SizingResult:
    options: List[SizingOption]
    target_area: float        # m^2
    required_area: float      # m^2, target with margin
    candidates_evaluated: int = 0
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors and bool(self.options)


@dataclass(frozen=True)
class ValidationCheck:
    section: str
    requirement: str
    actual: str
    limit: str
    status: str               # "pass" | "warning" | "fail"
    severity: str             # "info" | "warning" | "critical"


@dataclass(frozen=True)
class ValidationResult:
    standard: str
    checks: List[ValidationCheck]
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class SafetyReport:
    disclaimer: str
    critical_warnings: List[str]
    warnings: List[str]
    errors: List[str]
    is_valid: bool


@dataclass(frozen=True)
class AnalysisResult:
    thermal: ThermalHydraulicResult
    tube_count: TubeCountResult
    vibration: Optional[VibrationResult] = None
    two_phase: Optional[TwoPhaseResult] = None
    materials: Optional[MaterialSelectionResult] = None
    api660: Optional[ValidationResult] = None
    tema: Optional[ValidationResult] = None
    sizing: Optional[SizingResult] = None
    safety: Optional[SafetyReport] = None

    @property
    def is_valid(self) -> bool:
        parts = [self.thermal, self.vibration, self.two_phase, self.materials, self.api660]
        return all(p.is_valid for p in parts if p is not None)
