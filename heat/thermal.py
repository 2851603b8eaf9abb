from __future__ import annotations
import logging
from math import exp, isfinite, log as ln, sqrt
from typing import Optional

from common.constants import safety_factors
from common.models import FlowArrangement
from common.results import CorrectionFactor

log = logging.getLogger(__name__)


def terminal_differences(Thi: float, Tho: float, Tci: float, Tco: float,
                         arrangement: FlowArrangement = FlowArrangement.COUNTER) -> tuple[float, float]:
    """Parallel flow pairs inlets with inlets; every other arrangement is referenced to counterflow."""
    if FlowArrangement(arrangement) == FlowArrangement.PARALLEL:
        return Thi - Tci, Tho - Tco
    return Thi - Tco, Tho - Tci


def lmtd(dT1: float, dT2: float) -> float:
    if dT1 <= 0 or dT2 <= 0:
        return 0.0
    if abs(dT1 - dT2) < 1e-3:
        return dT1
    return (dT1 - dT2) / ln(dT1 / dT2)


def p_r_parameters(Thi: float, Tho: float, Tci: float, Tco: float) -> tuple[float, float]:
    """P = (Tco-Tci)/(Thi-Tci), R = (Thi-Tho)/(Tco-Tci)."""
    span = Thi - Tci
    rise = Tco - Tci
    P = rise / span if span != 0 else 0.0
    R = (Thi - Tho) / rise if rise != 0 else 0.0
    return P, R


def correction_factor(R: float, P: float, arrangement: FlowArrangement) -> CorrectionFactor:
    """
    LMTD correction F, Bowman-Mueller-Nagle closed form for one shell pass
    and an even number of tube passes (also used for 1-4 and crossflow).
    """
    arrangement = FlowArrangement(arrangement)
    if arrangement in (FlowArrangement.COUNTER, FlowArrangement.PARALLEL):
        return CorrectionFactor(1.0)

    if P <= 0 or P >= 1 or R <= 0:
        return CorrectionFactor(0.9, True, f"Invalid P or R values (P={P:.4g}, R={R:.4g}), F=0.9 assumed")

    try:
        if abs(R - 1.0) < 1e-3:
            s2 = sqrt(2.0)
            F = (P * s2) / ((1.0 - P) * ln((2.0 - P * (2.0 - s2)) / (2.0 - P * (2.0 + s2))))
        else:
            s = sqrt(R * R + 1.0)
            num = s * ln((1.0 - P) / (1.0 - P * R))
            den = (R - 1.0) * ln((2.0 - P * (R + 1.0 - s)) / (2.0 - P * (R + 1.0 + s)))
            F = num / den
    except (ValueError, ZeroDivisionError):
        # temperature cross: log of a non-positive ratio
        F = float("nan")

    if not isfinite(F):
        F = 0.9
    F = min(1.0, max(0.5, F))

    F_min = safety_factors["min_F"]
    if F < F_min:
        msg = (f"F-factor ({F:.3f}) is below TEMA recommended minimum of {F_min}. "
               "Consider increasing shell passes or changing flow arrangement.")
        log.warning(msg)
        return CorrectionFactor(F, True, msg)
    return CorrectionFactor(F)


def effectiveness_counter(ntu: float, Cr: float) -> float:
    if Cr == 0:
        eps = 1.0 - exp(-ntu)
    elif abs(Cr - 1.0) < 1e-3:
        eps = ntu / (1.0 + ntu)
    else:
        e = exp(-ntu * (1.0 - Cr))
        eps = (1.0 - e) / (1.0 - Cr * e)
    return min(1.0, max(0.0, eps))


def effectiveness_parallel(ntu: float, Cr: float) -> float:
    eps = (1.0 - exp(-ntu * (1.0 + Cr))) / (1.0 + Cr)
    return min(1.0, max(0.0, eps))


def effectiveness(ntu: float, Cr: float, arrangement: FlowArrangement = FlowArrangement.COUNTER) -> float:
    if ntu <= 0:
        return 0.0
    if FlowArrangement(arrangement) == FlowArrangement.PARALLEL:
        return effectiveness_parallel(ntu, Cr)
    return effectiveness_counter(ntu, Cr)


def ntu(U: float, area: float, C_min: float) -> float:
    return U * area / C_min if C_min > 0 else 0.0


def overall_u(hi: float, ho: float, Di: float, Do: float, k_wall: float,
              Rfi: float = 0.0, Rfo: float = 0.0) -> tuple[float, float, Optional[str]]:
    """
    (U_clean, U_fouled, error) referenced to the tube outside area:
    1/U = 1/ho + Rfo + Do ln(Do/Di)/(2k) + Rfi Do/Di + Do/(Di hi)
    """
    if hi <= 0 or ho <= 0 or Di <= 0 or Do <= 0 or k_wall <= 0:
        return 0.0, 0.0, (f"Overall U needs positive hi, ho, Di, Do, k "
                          f"(hi={hi:.4g}, ho={ho:.4g}, Di={Di:.4g}, Do={Do:.4g}, k={k_wall:.4g})")
    if Do <= Di:
        return 0.0, 0.0, f"Tube OD {Do:.4g} m must exceed ID {Di:.4g} m"
    r_clean = 1.0 / ho + Do * ln(Do / Di) / (2.0 * k_wall) + Do / (Di * hi)
    r_fouled = r_clean + Rfo + Rfi * Do / Di
    return 1.0 / r_clean, 1.0 / r_fouled, None


def required_area(duty: float, U: float, F: float, lmtd_: float) -> float:
    den = U * F * lmtd_
    return duty / den if den > 0 else 0.0
