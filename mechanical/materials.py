# =========================================================
# FILE: mechanical/materials.py
# Pressure-part material screening: corrosion allowance over design life,
# relative cost, chloride pitting resistance, and NACE MR0175 / ISO 15156
# sour-service rules.
# =========================================================
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from common.constants import safety_factors
from common.models import CorrosionEnvironment, MaterialClass, MaterialConditions
from common.results import MaterialScore, MaterialSelectionResult
from logging_utils import trace_calls

log = logging.getLogger(__name__)

H2S_THRESHOLD = 0.345   # kPa partial pressure, NACE MR0175 sour limit


@dataclass(frozen=True)
class MaterialProperties:
    name: str
    material_class: MaterialClass
    yield_strength: float       # MPa
    tensile_strength: float     # MPa
    allowable_stress: float     # MPa, ASME II-D at design T
    max_temperature: float      # K
    min_temperature: float      # K
    corrosion_rate: Dict[CorrosionEnvironment, float] = field(default_factory=dict)  # mm/yr
    nace_listed: bool = False
    max_hardness_hrc: float = 22.0
    pren: Optional[float] = None


def _rates(none, mild, moderate, severe, sour, acidic) -> Dict[CorrosionEnvironment, float]:
    E = CorrosionEnvironment
    return {E.NONE: none, E.MILD: mild, E.MODERATE: moderate, E.SEVERE: severe, E.SOUR: sour, E.ACIDIC: acidic}


MATERIAL_DATABASE: Dict[str, MaterialProperties] = {
    "SA-516-70": MaterialProperties("SA-516 Grade 70 carbon steel", MaterialClass.CARBON_STEEL,
                                    260, 485, 137.9, 700, 243, _rates(0.1, 0.25, 0.5, 1.0, 0.5, 2.0), True, 22),
    "SA-387-11": MaterialProperties("SA-387 Grade 11 1.25Cr-0.5Mo", MaterialClass.LOW_ALLOY,
                                    310, 515, 158.6, 811, 243, _rates(0.05, 0.15, 0.3, 0.6, 0.3, 1.0), True, 22),
    "SS-304": MaterialProperties("Type 304 stainless", MaterialClass.STAINLESS,
                                 205, 515, 137.9, 1089, 77, _rates(0.01, 0.05, 0.1, 0.3, 0.2, 0.5), False, 22, 18),
    "SS-316L": MaterialProperties("Type 316L stainless", MaterialClass.STAINLESS,
                                  170, 485, 115.1, 1089, 77, _rates(0.01, 0.03, 0.08, 0.2, 0.1, 0.3), True, 22, 25),
    "DUPLEX-2205": MaterialProperties("Duplex 2205 (UNS S32205)", MaterialClass.DUPLEX,
                                      450, 620, 165.5, 573, 233, _rates(0.005, 0.02, 0.05, 0.1, 0.05, 0.15), True, 28, 35),
    "INCONEL-625": MaterialProperties("Alloy 625 (UNS N06625)", MaterialClass.NICKEL_ALLOY,
                                      414, 827, 165.5, 1366, 77, _rates(0.001, 0.005, 0.01, 0.03, 0.02, 0.05), True, 35, 51),
    "TITANIUM-GR2": MaterialProperties("Titanium Grade 2", MaterialClass.TITANIUM,
                                       275, 345, 96.5, 589, 77, _rates(0.001, 0.002, 0.005, 0.01, 0.01, 0.02), True, 25),
    "CU-NI-90-10": MaterialProperties("90/10 copper-nickel", MaterialClass.COPPER_ALLOY,
                                      105, 275, 68.9, 505, 200, _rates(0.02, 0.05, 0.1, 0.3, 2.0, 1.0), False, 20),
}

COST_FACTOR = {
    MaterialClass.CARBON_STEEL: 1.0,
    MaterialClass.LOW_ALLOY: 1.5,
    MaterialClass.STAINLESS: 3.0,
    MaterialClass.DUPLEX: 5.0,
    MaterialClass.NICKEL_ALLOY: 10.0,
    MaterialClass.TITANIUM: 15.0,
    MaterialClass.COPPER_ALLOY: 4.0,
}

# 1 = most noble
GALVANIC_POSITION = {
    MaterialClass.TITANIUM: 1,
    MaterialClass.NICKEL_ALLOY: 2,
    MaterialClass.STAINLESS: 3,
    MaterialClass.DUPLEX: 3,
    MaterialClass.COPPER_ALLOY: 4,
    MaterialClass.LOW_ALLOY: 5,
    MaterialClass.CARBON_STEEL: 6,
}


def material_properties(material_id: str) -> Optional[MaterialProperties]:
    return MATERIAL_DATABASE.get(material_id)


def suitable_materials(environment: CorrosionEnvironment, max_rate: float = 0.5) -> List[str]:
    env = CorrosionEnvironment(environment)
    return [k for k, m in MATERIAL_DATABASE.items() if m.corrosion_rate[env] <= max_rate]


def h2s_partial_pressure(conditions: MaterialConditions) -> float:
    """kPa, from mol % and total pressure in Pa."""
    return conditions.h2s_content / 100.0 * conditions.pressure / 1000.0


def determine_sour_region(h2s_kpa: float, pH: float) -> tuple[int, str]:
    """NACE MR0175 / ISO 15156-2 SSC region (0 = not sour)."""
    if h2s_kpa < H2S_THRESHOLD:
        return 0, "Non-sour service"
    if pH >= 3.5:
        if h2s_kpa < 1.0:
            return 1, "SSC Region 1 - Mild sour"
        if h2s_kpa < 10.0:
            return 2, "SSC Region 2 - Moderate sour"
    return 3, "SSC Region 3 - Severe sour"


def validate_nace_mr0175(material_id: str, conditions: MaterialConditions) -> tuple[bool, list[str], list[str]]:
    """(compliant, requirements, restrictions) for one catalogue material."""
    m = MATERIAL_DATABASE.get(material_id)
    if m is None:
        return False, ["Unknown material - verify NACE compliance manually"], \
            ["Cannot assess compliance for unknown material"]

    region, _ = determine_sour_region(h2s_partial_pressure(conditions), conditions.pH)
    if region == 0:
        return True, ["Standard material specifications apply"], []
    if not m.nace_listed:
        return False, ["Select NACE MR0175 listed material"], [f"{m.name} is NOT listed in NACE MR0175"]

    requirements = [f"Maximum hardness: {m.max_hardness_hrc:g} HRC"]
    restrictions = []
    if m.material_class == MaterialClass.DUPLEX and conditions.temperature > 505:
        restrictions.append("Duplex SS limited to 232°C (450°F) in sour service")
    if region >= 2:
        requirements.append("Post-weld heat treatment (PWHT) required")
        requirements.append("Impact testing per NACE TM0177 required")
    if region == 3:
        requirements.append("SSC testing per NACE TM0177 Method A required")
        restrictions.append("Limited weld procedure qualification required")
    if (m.material_class == MaterialClass.STAINLESS and conditions.chloride_content > 50
            and conditions.temperature > 333):
        restrictions.append("Risk of chloride SCC - consider duplex or nickel alloy")
    return not restrictions, requirements, restrictions


def galvanic_compatible(primary: MaterialClass, others: List[MaterialClass]) -> bool:
    """More than two places apart in the galvanic series is a coupling risk."""
    p = GALVANIC_POSITION[MaterialClass(primary)]
    return all(abs(p - GALVANIC_POSITION[MaterialClass(o)]) <= 2 for o in others)


def score_material(m: MaterialProperties, environment: CorrosionEnvironment,
                   conditions: MaterialConditions, sour: bool) -> float:
    T = conditions.temperature
    if T > m.max_temperature or T < m.min_temperature:
        return 0.0
    if sour and not m.nace_listed:
        return 0.0
    score = 100.0
    wear = m.corrosion_rate[environment] * conditions.design_life
    if wear > 2 * safety_factors["corrosion"]:
        score -= 50.0
    elif wear > safety_factors["corrosion"]:
        score -= 25.0
    score -= (COST_FACTOR[m.material_class] - 1.0) * 5.0
    if conditions.chloride_content > 100 and m.pren:
        score += (m.pren - 20.0) * 0.5
    return score


@trace_calls()
def select_material(environment: CorrosionEnvironment, conditions: MaterialConditions,
                    case: str = "-") -> MaterialSelectionResult:
    """
    Rank the catalogue for a corrosion environment and service conditions.

    Materials outside their temperature range, or not NACE MR0175 listed
    in sour service, score 0. The best is recommended and the next three
    positive scores are alternatives. No positive score is a failure result.
    """
    xtra = {"case": case, "step": "materials"}
    env = CorrosionEnvironment(environment)
    warnings: list[str] = []
    h2s = h2s_partial_pressure(conditions)
    region, region_desc = determine_sour_region(h2s, conditions.pH)
    sour = env == CorrosionEnvironment.SOUR or h2s >= H2S_THRESHOLD
    if sour:
        log.info(f"sour service: pH2S={h2s:.3f} kPa, {region_desc}", extra=xtra)

    scores = [MaterialScore(k, m.material_class, score_material(m, env, conditions, sour))
              for k, m in MATERIAL_DATABASE.items()]
    scores.sort(key=lambda s: -s.score)

    if not scores or scores[0].score <= 0:
        msg = "No suitable material found for specified conditions"
        log.error(msg, extra=xtra)
        return MaterialSelectionResult(
            recommended_material=MaterialClass.NICKEL_ALLOY, recommended_id=None,
            alternative_materials=[], corrosion_rate=0.0, expected_life=0.0,
            is_nace_compliant=False, nace_requirements=["Consult materials engineer"],
            galvanic_compatible=True, hydrogen_embrittlement_risk=sour,
            stress_corrosion_cracking_risk=False, temperature_limits=(0.0, 0.0),
            sour_region=region, scores=scores, warnings=warnings, errors=[msg],
        )

    best = scores[0]
    m = MATERIAL_DATABASE[best.material_id]
    alternatives = [s for s in scores[1:4] if s.score > 0]

    requirements: list[str] = []
    if sour:
        _, requirements, restrictions = validate_nace_mr0175(best.material_id, conditions)
        warnings += restrictions

    galvanic = galvanic_compatible(m.material_class, [a.material_class for a in alternatives])
    if not galvanic:
        warnings.append("Alternatives span more than two galvanic-series positions - isolate dissimilar metals")

    h2_risk = sour and (m.yield_strength > 550 or m.max_hardness_hrc > 28)
    if h2_risk:
        warnings.append("Hydrogen embrittlement risk - verify hardness and PWHT requirements")
    scc = (m.material_class == MaterialClass.STAINLESS and conditions.chloride_content > 50
           and conditions.temperature > 333)
    if scc:
        warnings.append("Chloride stress corrosion cracking risk for austenitic SS")

    rate = m.corrosion_rate[env]
    life = safety_factors["corrosion"] / rate if rate > 0 else 2.0 * conditions.design_life
    life = min(life, 2.0 * conditions.design_life)

    for w in warnings:
        log.warning(w, extra=xtra)
    return MaterialSelectionResult(
        recommended_material=m.material_class, recommended_id=best.material_id,
        alternative_materials=[a.material_class for a in alternatives],
        corrosion_rate=rate, expected_life=life,
        is_nace_compliant=m.nace_listed if sour else True,
        nace_requirements=requirements, galvanic_compatible=galvanic,
        hydrogen_embrittlement_risk=h2_risk, stress_corrosion_cracking_risk=scc,
        temperature_limits=(m.min_temperature, m.max_temperature),
        sour_region=region, scores=scores, warnings=warnings,
    )
