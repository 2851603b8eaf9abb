# =========================================================
# FILE: mechanical/vibration.py
# Flow-induced tube vibration screening after TEMA RGP T-4:
# natural frequency, vortex shedding, fluid-elastic instability (Connors),
# turbulent buffeting and acoustic resonance (gas service).
# =========================================================
from __future__ import annotations
import logging
from math import pi, sqrt

from common.constants import safety_factors
from common.models import FluidPhase, TubePattern, VibrationInputs
from common.results import VibrationResult
from logging_utils import trace_calls

log = logging.getLogger(__name__)

STROUHAL = {
    TubePattern.TRIANGULAR_30: 0.20,
    TubePattern.TRIANGULAR_60: 0.22,
    TubePattern.SQUARE_90: 0.25,
    TubePattern.SQUARE_45: 0.21,
}

CONNORS_K = {
    TubePattern.TRIANGULAR_30: 2.4,
    TubePattern.TRIANGULAR_60: 2.8,
    TubePattern.SQUARE_90: 3.4,
    TubePattern.SQUARE_45: 3.0,
}

# mode constant, fixed-fixed span between baffles
Cn_fixed_fixed = 22.4

DAMPING = {
    "gas": 0.01,
    "liquid_light": 0.03,
    "liquid_viscous": 0.05,
    "two_phase": 0.08,
}
VISCOUS_LIQUID = 0.01     # Pa*s

MIN_SPEED_OF_SOUND = 150.0   # m/s
RESONANCE_BAND = (0.7, 1.3)
ACOUSTIC_BAND = (0.85, 1.15)
BUFFETING_LIMIT = 3.3
DAMAGE_LIMIT = 0.5
ADDED_MASS_CAP = 3.0


def damping_ratio(phase: FluidPhase, viscosity: float | None = None) -> float:
    phase = FluidPhase(phase)
    if phase in (FluidPhase.GAS, FluidPhase.SUPERCRITICAL):
        return DAMPING["gas"]
    if phase == FluidPhase.TWO_PHASE:
        return DAMPING["two_phase"]
    if viscosity is not None and viscosity > VISCOUS_LIQUID:
        return DAMPING["liquid_viscous"]
    return DAMPING["liquid_light"]


def added_mass_coefficient(pitch_ratio: float, pattern: TubePattern) -> float:
    c = 0.6 if TubePattern(pattern).is_triangular else 0.5
    return min(1.0 + c / (pitch_ratio - 1.0) ** 1.5, ADDED_MASS_CAP)


def effective_mass(inp: VibrationInputs) -> tuple[float, float]:
    """(kg/m, Cm): tube metal + tube-side fluid + hydrodynamic added mass."""
    Do, Di = inp.tube_od, inp.tube_id
    metal = inp.tube_density * pi / 4.0 * (Do ** 2 - Di ** 2)
    inner = inp.tube_fluid_density * pi / 4.0 * Di ** 2
    Cm = added_mass_coefficient(inp.pitch / Do, inp.pattern)
    added = Cm * inp.shell_density * pi / 4.0 * Do ** 2
    return metal + inner + added, Cm


def natural_frequency(E: float, I: float, mass: float, span: float, Cn: float = Cn_fixed_fixed) -> float:
    """fn = (Cn/2pi) sqrt(EI / (m L^4))."""
    return Cn / (2.0 * pi) * sqrt(E * I / (mass * span ** 4))


def vortex_shedding_frequency(velocity: float, tube_od: float, pattern: TubePattern) -> float:
    return STROUHAL[TubePattern(pattern)] * velocity / tube_od


def buffeting_frequency(velocity: float, tube_od: float, pitch: float) -> float:
    """Owen: f_tb = 3.05 V (1 - d/P) / d."""
    return max(0.0, 3.05 * velocity * (1.0 - tube_od / pitch) / tube_od)


def critical_velocity(fn: float, tube_od: float, mass: float, density: float,
                      zeta: float, pattern: TubePattern) -> float:
    """Connors: Vcrit = K fn d sqrt(m/(rho d^2) * 2 pi zeta)."""
    return CONNORS_K[TubePattern(pattern)] * fn * tube_od * sqrt(mass / (density * tube_od ** 2) * 2.0 * pi * zeta)


def damage_number(density: float, velocity: float, tube_od: float, mass: float, fn: float, zeta: float) -> float:
    return density * velocity ** 2 * tube_od / (mass * fn * 2.0 * pi * zeta)


def is_vortex_shedding_risk(fn: float, fvs: float) -> bool:
    if fn <= 0:
        return False
    r = fvs / fn
    return RESONANCE_BAND[0] < r < RESONANCE_BAND[1]


def is_fluid_elastic_risk(velocity: float, v_crit: float, factor: float = safety_factors["vibration"]) -> bool:
    return v_crit > 0 and velocity / v_crit > factor


def is_acoustic_risk(fvs: float, fa: float, phase: FluidPhase) -> bool:
    if FluidPhase(phase) in (FluidPhase.LIQUID, FluidPhase.TWO_PHASE) or fa <= 0:
        return False
    lo, hi = ACOUSTIC_BAND
    return lo < fvs / fa < hi or lo < 2.0 * fvs / fa < hi


def is_buffeting_risk(velocity: float, fn: float, tube_od: float) -> bool:
    return fn > 0 and velocity / (fn * tube_od) > BUFFETING_LIMIT


def acoustic_frequency(speed_of_sound: float, shell_diameter: float, phase: FluidPhase) -> float:
    """Fundamental transverse mode fa = c/(2 Ds); zero for liquid and two-phase service."""
    if FluidPhase(phase) in (FluidPhase.LIQUID, FluidPhase.TWO_PHASE):
        return 0.0
    return max(speed_of_sound, MIN_SPEED_OF_SOUND) / (2.0 * shell_diameter)


def tube_wear_rate(resonant: bool, damage: float, phase: FluidPhase) -> float:
    if not resonant and damage < 0.3:
        return 0.01
    rate = damage * 0.5
    if FluidPhase(phase) == FluidPhase.TWO_PHASE:
        rate *= 2.0
    return min(rate, 5.0)


def validate_inputs(inp: VibrationInputs) -> tuple[list[str], list[str]]:
    errors, warnings = [], []
    if inp.velocity <= 0:
        errors.append("Cross-flow velocity must be positive")
    if inp.tube_od <= 0 or inp.tube_id <= 0:
        errors.append("Tube dimensions must be positive")
    if inp.tube_od <= inp.tube_id:
        errors.append("Tube OD must be greater than ID")
    if inp.pitch <= inp.tube_od:
        errors.append("Tube pitch must be greater than OD")
    if inp.span <= 0:
        errors.append("Unsupported span must be positive")
    if inp.shell_diameter <= 0:
        errors.append("Shell diameter must be positive")
    if inp.shell_density <= 0:
        errors.append("Shell-side density must be positive")
    if inp.elastic_modulus <= 0:
        errors.append("Tube elastic modulus must be positive")
    if inp.tube_density <= 0:
        errors.append("Tube material density must be positive")
    if inp.tube_fluid_density < 0:
        errors.append("Tube-side density cannot be negative")
    if inp.tube_od > 0:
        pr = inp.pitch / inp.tube_od
        if round(pr, 3) < 1.25:
            errors.append(f"Pitch ratio ({pr:.3f}) below TEMA minimum of 1.25")
        elif pr > 2.0:
            warnings.append(f"Pitch ratio ({pr:.3f}) above typical range - verify geometry")
    return errors, warnings


def _error_result(errors: list[str]) -> VibrationResult:
    return VibrationResult(
        natural_frequency=0.0, vortex_shedding_frequency=0.0, acoustic_frequency=0.0,
        critical_velocity=0.0, reduced_velocity=0.0, frequency_ratio=0.0, damage_number=0.0,
        effective_mass=0.0, added_mass_coefficient=0.0, turbulent_buffeting_frequency=0.0,
        frequency_margin=0.0, velocity_ratio=0.0, tube_wear_rate=0.0,
        is_vortex_shedding_risk=False, is_fluid_elastic_risk=False,
        is_acoustic_risk=False, is_buffeting_risk=False,
        message="Error: Invalid inputs", errors=errors,
    )


def _message(fei: bool, vortex: bool, acoustic: bool, buffeting: bool, v_ratio: float, factor: float) -> str:
    if fei:
        return "CRITICAL: Fluid-elastic instability risk - REDESIGN REQUIRED"
    if vortex:
        return "WARNING: Vortex shedding resonance - reduce baffle spacing"
    if acoustic:
        return "WARNING: Acoustic resonance possible - install acoustic baffles"
    if buffeting:
        return "CAUTION: Turbulent buffeting concern - review support design"
    if v_ratio > 0.6:
        return f"ACCEPTABLE: Operating at {v_ratio*100:.0f}% of critical velocity (limit: {factor*100:.0f}%)"
    return f"SAFE: Design well within vibration limits ({v_ratio*100:.0f}% of critical)"


@trace_calls()
def analyze_vibration(inp: VibrationInputs, case: str = "-") -> VibrationResult:
    """
    Single-point flow-induced vibration check of the tube span `inp.span`.

    The four mechanisms are flagged independently; the result is valid
    when neither fluid-elastic instability nor vortex-shedding resonance
    is predicted. Invalid geometry returns a zeroed result with errors.
    """
    xtra = {"case": case, "step": "vibration"}
    errors, warnings = validate_inputs(inp)
    if errors:
        for e in errors:
            log.error(e, extra=xtra)
        return _error_result(errors)

    phase = FluidPhase(inp.shell_phase)
    recommendations: list[str] = []
    zeta = inp.damping_ratio if inp.damping_ratio else damping_ratio(phase, inp.shell_viscosity)
    factor = inp.fei_safety_factor

    Do, Di = inp.tube_od, inp.tube_id
    I = pi / 64.0 * (Do ** 4 - Di ** 4)
    m_eff, Cm = effective_mass(inp)
    fn = natural_frequency(inp.elastic_modulus, I, m_eff, inp.span)
    fvs = vortex_shedding_frequency(inp.velocity, Do, inp.pattern)
    ftb = buffeting_frequency(inp.velocity, Do, inp.pitch)

    c = inp.speed_of_sound or 0.0
    if phase not in (FluidPhase.LIQUID, FluidPhase.TWO_PHASE) and c < MIN_SPEED_OF_SOUND:
        warnings.append(f"Speed of sound ({c:.1f} m/s) is below the credible minimum - clamping to {MIN_SPEED_OF_SOUND:.0f} m/s")
    fa = acoustic_frequency(c, inp.shell_diameter, phase)

    v_crit = critical_velocity(fn, Do, m_eff, inp.shell_density, zeta, inp.pattern)
    Vr = inp.velocity / (fn * Do)
    fr = fvs / fn
    damage = damage_number(inp.shell_density, inp.velocity, Do, m_eff, fn, zeta)
    v_ratio = inp.velocity / v_crit

    # recommendations in severity order: FEI, vortex, acoustic, buffeting
    fei = is_fluid_elastic_risk(inp.velocity, v_crit, factor)
    if fei:
        warnings.append(f"CRITICAL: Cross-flow velocity ({inp.velocity:.2f} m/s) exceeds "
                        f"{factor*100:.0f}% of critical velocity ({v_crit:.2f} m/s)")
        recommendations += ["Reduce shell-side flow rate", "Increase tube pitch", "Use larger shell diameter"]

    vortex = is_vortex_shedding_risk(fn, fvs)
    if vortex:
        warnings.append(f"CRITICAL: Vortex shedding frequency ({fvs:.1f} Hz) in resonance band "
                        f"(0.7-1.3 x fn = {0.7*fn:.1f}-{1.3*fn:.1f} Hz)")
        recommendations += ["Reduce baffle spacing to raise natural frequency",
                            "Add intermediate tube supports",
                            "Consider rotated square pitch layout"]

    acoustic = is_acoustic_risk(fvs, fa, phase)
    if acoustic:
        warnings.append(f"CRITICAL: Acoustic resonance risk - vortex frequency near acoustic mode ({fa:.1f} Hz)")
        recommendations += ["Install acoustic baffles or detuning plates",
                            "Modify tube pitch to shift vortex frequency"]

    buffeting = is_buffeting_risk(inp.velocity, fn, Do)
    if buffeting:
        warnings.append(f"Turbulent buffeting concern: Reduced velocity ({Vr:.2f}) > {BUFFETING_LIMIT}")
        recommendations.append("Review tube support design")

    if damage > DAMAGE_LIMIT:
        warnings.append(f"High damage potential: Connors damage number ({damage:.3f}) > {DAMAGE_LIMIT}")
        recommendations.append("Increase tube support frequency")

    margin = min(abs(fr - RESONANCE_BAND[0]), abs(fr - RESONANCE_BAND[1]))
    msg = _message(fei, vortex, acoustic, buffeting, v_ratio, factor)
    for w in warnings:
        log.warning(w, extra=xtra)
    log.debug(f"fn={fn:.2f} Hz fvs={fvs:.2f} Hz Vcrit={v_crit:.3f} m/s -> {msg}", extra=xtra)

    return VibrationResult(
        natural_frequency=fn, vortex_shedding_frequency=fvs, acoustic_frequency=fa,
        critical_velocity=v_crit, reduced_velocity=Vr, frequency_ratio=fr, damage_number=damage,
        effective_mass=m_eff, added_mass_coefficient=Cm, turbulent_buffeting_frequency=ftb,
        frequency_margin=margin, velocity_ratio=v_ratio,
        tube_wear_rate=tube_wear_rate(vortex or fei, damage, phase),
        is_vortex_shedding_risk=vortex, is_fluid_elastic_risk=fei,
        is_acoustic_risk=acoustic, is_buffeting_risk=buffeting,
        message=msg, recommendations=recommendations, warnings=warnings,
    )
