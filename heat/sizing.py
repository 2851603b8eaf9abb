from __future__ import annotations
import logging
from math import ceil, pi
from typing import Optional

import numpy as np

from common.models import MechanicalGeometry
from common.results import SizingOption, SizingResult
from logging_utils import trace_calls
from mechanical.geometry import STANDARD_LENGTHS, STANDARD_SHELLS, tube_count

log = logging.getLogger(__name__)

LD_LIMITS = (3.0, 15.0)
LD_OPTIMAL = (6.0, 10.0)
MARGIN_LIMITS = (5.0, 50.0)       # %
MARGIN_OPTIMAL = (15.0, 25.0)     # %
PRACTICAL_LENGTH = (3.0, 6.0)     # m
MAX_TUBES = 1000
TOP_N = 5


def _band_penalty(x: float, optimal: tuple, limits: tuple, weight: float) -> float:
    """0 inside the optimal band, rising linearly to `weight` at the limits."""
    lo, hi = optimal
    lo_lim, hi_lim = limits
    if x < lo:
        return weight * float(np.clip((lo - x) / (lo - lo_lim), 0.0, 1.0))
    if x > hi:
        return weight * float(np.clip((x - hi) / (hi_lim - hi), 0.0, 1.0))
    return 0.0


def score_option(ld_ratio: float, area_margin: float, shell_mm: float, length: float, count: int) -> float:
    """
    Composite score out of 100. L/D outside [3, 15] scores 0; the rest
    deducts for L/D and margin away from their optimal bands, shell size
    squared (cost), large tube counts, and credits practical lengths.
    """
    if not LD_LIMITS[0] <= ld_ratio <= LD_LIMITS[1]:
        return 0.0
    s = 100.0
    s -= _band_penalty(ld_ratio, LD_OPTIMAL, LD_LIMITS, 30.0)
    s -= _band_penalty(area_margin, MARGIN_OPTIMAL, MARGIN_LIMITS, 20.0)
    if not MARGIN_LIMITS[0] <= area_margin <= MARGIN_LIMITS[1]:
        s -= 20.0
    s -= 10.0 * (shell_mm / 1000.0) ** 2
    if PRACTICAL_LENGTH[0] <= length <= PRACTICAL_LENGTH[1]:
        s += 5.0
    if count > MAX_TUBES:
        s -= min(20.0, (count - MAX_TUBES) / 100.0)
    return float(np.clip(s, 0.0, 100.0))


@trace_calls()
def optimize_shell(target_area: float, geometry: MechanicalGeometry, design_margin: float = 15.0,
                   fixed_length: Optional[float] = None, case: str = "-") -> SizingResult:
    """
    Search standard tube lengths x standard shells for the best layouts.

    Only candidates whose tube count gives at least target*(1+margin) are
    scored, so every option meets the margined area. Returns the top five
    by score (ties to the smaller shell).
    """
    required = target_area * (1.0 + design_margin / 100.0)
    g = geometry
    if target_area <= 0 or g.tube_od <= 0 or g.pitch <= g.tube_od:
        msg = f"invalid sizing input: area={target_area}, OD={g.tube_od}, pitch={g.pitch}"
        log.error(msg, extra={"case": case, "step": "sizing"})
        return SizingResult([], target_area, required, errors=[msg])

    lengths = [fixed_length] if fixed_length else STANDARD_LENGTHS
    options: list[SizingOption] = []
    evaluated = 0
    for L in lengths:
        per_tube = pi * g.tube_od * L
        needed = ceil(required / per_tube)
        for d_mm in STANDARD_SHELLS:
            res = tube_count(d_mm / 1000.0, g.tube_od, g.pitch, g.pattern, g.passes, g.shell_type)
            evaluated += 1
            if res.count < needed:
                continue
            area = res.count * per_tube
            margin = (area / target_area - 1.0) * 100.0
            ld = L * 1000.0 / d_mm
            warns: list[str] = []
            if ld < LD_LIMITS[0]:
                warns.append(f"L/D ratio {ld:.1f} below minimum ({LD_LIMITS[0]:g})")
            elif ld > LD_LIMITS[1]:
                warns.append(f"L/D ratio {ld:.1f} above maximum ({LD_LIMITS[1]:g})")
            elif not LD_OPTIMAL[0] <= ld <= LD_OPTIMAL[1]:
                warns.append(f"L/D ratio {ld:.1f} outside optimal range ({LD_OPTIMAL[0]:g}-{LD_OPTIMAL[1]:g})")
            if margin > MARGIN_LIMITS[1]:
                warns.append(f"Area margin {margin:.0f}% may be excessive")
            if res.count > MAX_TUBES:
                warns.append(f"{res.count} tubes, bundle handling and cleaning become difficult")
            options.append(SizingOption(
                shell_diameter=d_mm / 1000.0, tube_length=L, tube_count=res.count,
                actual_area=area, area_margin=margin, ld_ratio=ld,
                score=score_option(ld, margin, d_mm, L, res.count),
                count_method=res.method, warnings=warns,
            ))

    options.sort(key=lambda o: (-o.score, o.shell_diameter))
    top = options[:TOP_N]
    if not top:
        msg = (f"No standard shell up to {STANDARD_SHELLS[-1]} mm holds {required:.1f} m² "
               f"with {g.tube_od*1000:.2f} mm tubes")
        log.error(msg, extra={"case": case, "step": "sizing"})
        return SizingResult([], target_area, required, evaluated, errors=[msg])

    warnings = []
    if top[0].score <= 0:
        warnings.append("No candidate has L/D within 3-15; best geometric fits returned with zero score")
    log.info(f"sizing: {len(options)} feasible of {evaluated}, best Ds={top[0].shell_diameter*1000:.0f} mm "
             f"L={top[0].tube_length:.2f} m score={top[0].score:.1f}", extra={"case": case, "step": "sizing"})
    return SizingResult(top, target_area, required, evaluated, warnings)
