from __future__ import annotations
import logging
from math import ceil, floor
from typing import Optional

from common.constants import max_pitch_ratio, min_pitch_ratio
from common.models import BaffleService, ShellType, TubePattern
from common.results import BaffleSpacingResult, TubeCountResult
from mechanical.tube_counts import PASS_COLUMNS, TUBE_COUNT_TABLES

log = logging.getLogger(__name__)

# (OD mm, BWG, wall mm, ID mm); BWG 0 marks metric sizes
STANDARD_TUBES = [
    (19.05, 12, 2.77, 13.51), (19.05, 14, 2.11, 14.83), (19.05, 16, 1.65, 15.75), (19.05, 18, 1.24, 16.57),
    (25.40, 10, 3.40, 18.60), (25.40, 12, 2.77, 19.86), (25.40, 14, 2.11, 21.18), (25.40, 16, 1.65, 22.10),
    (31.75, 12, 2.77, 26.21), (31.75, 14, 2.11, 27.53),
    (38.10, 12, 2.77, 32.56), (38.10, 14, 2.11, 33.88),
    (20.0, 0, 2.0, 16.0), (25.0, 0, 2.0, 21.0), (25.0, 0, 2.5, 20.0), (30.0, 0, 2.5, 25.0), (38.0, 0, 3.0, 32.0),
]

# OD mm -> [(triangular pitch, square pitch)] mm
STANDARD_PITCHES = {
    19.05: [(23.81, 25.40), (25.40, 25.40)],
    25.40: [(31.75, 31.75), (33.34, 34.93)],
    31.75: [(39.69, 41.28)],
    38.10: [(47.63, 50.80)],
}

# mm
STANDARD_SHELLS = [205, 257, 307, 337, 387, 438, 489, 540, 591, 635, 686, 737,
                   787, 838, 889, 940, 991, 1067, 1219, 1372, 1524]

# m
STANDARD_LENGTHS = [2.44, 3.05, 3.66, 4.88, 6.10, 7.32]

# TEMA bundle constants Db = Do*(Nt/K1)^(1/n1), keyed by passes
_K1_N1 = {
    "triangular": {1: (0.319, 2.142), 2: (0.249, 2.207), 4: (0.175, 2.285), 6: (0.0743, 2.499), 8: (0.0365, 2.675)},
    "square":     {1: (0.215, 2.207), 2: (0.156, 2.291), 4: (0.158, 2.263), 6: (0.0402, 2.617), 8: (0.0331, 2.643)},
}

# Palen tube-count constant by passes
_CTP = {1: 0.93, 2: 0.90, 4: 0.85, 6: 0.80, 8: 0.75}

# diametral clearance mm, bands < 300 mm, < 700 mm, above
_CLEARANCE = {
    ShellType.FIXED:    (10.0, 20.0, 30.0),
    ShellType.FLOATING: (40.0, 60.0, 80.0),
    ShellType.U_TUBE:   (15.0, 25.0, 35.0),
}

_BAFFLE_FRACTION = {
    BaffleService.LIQUID: 0.40,
    BaffleService.BOILING: 0.40,
    BaffleService.CONDENSING: 0.45,
    BaffleService.GAS: 0.50,
}

_OD_TOL_MM = 0.5
_SHELL_TOL = 0.05


def _layout(pattern: TubePattern) -> str:
    return "triangular" if TubePattern(pattern).is_triangular else "square"


def _pass_key(passes: int) -> int:
    return passes if passes in _CTP else (1 if passes < 2 else 8 if passes > 8 else 2 * (passes // 2))


def bundle_shell_clearance(diameter: float, shell_type: ShellType = ShellType.FIXED) -> float:
    """Diametral shell-to-bundle clearance (m) for a shell or bundle diameter (m)."""
    d_mm = diameter * 1000.0
    small, mid, large = _CLEARANCE[ShellType(shell_type)]
    if d_mm < 300.0:
        return small / 1000.0
    if d_mm < 700.0:
        return mid / 1000.0
    return large / 1000.0


def _table_lookup(shell_mm: float, od_mm: float, pitch_mm: float, layout: str, passes: int) -> Optional[int]:
    table = None
    for (t_od, t_pitch, t_layout), rows in TUBE_COUNT_TABLES.items():
        if t_layout == layout and abs(t_od - od_mm) <= _OD_TOL_MM and abs(t_pitch - pitch_mm) <= _OD_TOL_MM:
            table = rows
            break
    if table is None:
        return None
    nearest = min(table, key=lambda d: abs(d - shell_mm))
    if abs(nearest - shell_mm) > _SHELL_TOL * shell_mm:
        return None
    bucket = 1 if passes <= 1 else 2 if passes == 2 else 4
    return table[nearest][PASS_COLUMNS.index(bucket)]


def palen_tube_count(shell_id: float, tube_od: float, pitch: float, pattern: TubePattern,
                     passes: int = 1, shell_type: ShellType = ShellType.FIXED) -> tuple[int, float]:
    """Nt = geom * CTP * (Db/Pt)^2 / CL; returns (count, bundle diameter)."""
    tri = TubePattern(pattern).is_triangular
    Db = max(shell_id - bundle_shell_clearance(shell_id, shell_type), tube_od)
    geom = 0.907 if tri else 0.785
    CL = 0.866 if tri else 1.0
    Nt = geom * _CTP[_pass_key(passes)] * (Db / pitch) ** 2 / CL
    return max(1, int(floor(Nt))), Db


def tube_count(shell_id: float, tube_od: float, pitch: float,
               pattern: TubePattern = TubePattern.TRIANGULAR_30, passes: int = 1,
               shell_type: ShellType = ShellType.FIXED) -> TubeCountResult:
    """
    Tubes that fit a shell of inside diameter `shell_id` (m).

    Strategy order: digitized TEMA table (OD and pitch within 0.5 mm, same
    layout, nearest shell within 5 %, pass bucket 1/2/4), then Palen's
    correlation on the clearance-reduced bundle diameter.
    """
    if shell_id <= 0 or tube_od <= 0 or pitch <= tube_od:
        msg = f"invalid tube-count input: shell={shell_id}, OD={tube_od}, pitch={pitch}"
        log.warning(msg)
        return TubeCountResult(0, "invalid", 0.0, [msg])

    layout = _layout(pattern)
    n = _table_lookup(shell_id * 1000.0, tube_od * 1000.0, pitch * 1000.0, layout, passes)
    if n is not None:
        Db = shell_id - bundle_shell_clearance(shell_id, shell_type)
        log.debug(f"tube count from table: {n} (Ds={shell_id*1000:.0f} mm, {layout}, {passes} pass)")
        return TubeCountResult(n, "table", Db)

    n, Db = palen_tube_count(shell_id, tube_od, pitch, pattern, passes, shell_type)
    msg = (f"No TEMA table for OD {tube_od*1000:.2f} mm / pitch {pitch*1000:.2f} mm / "
           f"shell {shell_id*1000:.0f} mm, Palen correlation used")
    log.debug(msg)
    return TubeCountResult(n, "palen", Db, [msg])


def bundle_diameter_from_count(count: int, tube_od: float,
                               pattern: TubePattern = TubePattern.TRIANGULAR_30, passes: int = 1) -> float:
    if count <= 0 or tube_od <= 0:
        return 0.0
    K1, n1 = _K1_N1[_layout(pattern)][_pass_key(passes)]
    return tube_od * (count / K1) ** (1.0 / n1)


def shell_diameter_for_count(count: int, tube_od: float, pitch: float,
                             pattern: TubePattern = TubePattern.TRIANGULAR_30, passes: int = 1,
                             shell_type: ShellType = ShellType.FIXED) -> tuple[float, TubeCountResult]:
    """Smallest standard shell (m) holding `count` tubes; beyond the series the K1/n1 estimate is returned."""
    for d_mm in STANDARD_SHELLS:
        res = tube_count(d_mm / 1000.0, tube_od, pitch, pattern, passes, shell_type)
        if res.count >= count:
            return d_mm / 1000.0, res
    Db = bundle_diameter_from_count(count, tube_od, pattern, passes)
    Ds = Db + bundle_shell_clearance(Db, shell_type)
    msg = f"{count} tubes exceed the largest standard shell, estimated shell {Ds*1000:.0f} mm"
    log.warning(msg)
    return Ds, TubeCountResult(count, "bundle", Db, [msg])


def recommended_baffle_spacing(shell_id: float, tube_length: float,
                               service: BaffleService = BaffleService.LIQUID) -> BaffleSpacingResult:
    s_min = max(0.05, shell_id / 5.0)
    s_max = shell_id
    spacing = round(shell_id * _BAFFLE_FRACTION[BaffleService(service)] / 0.025) * 0.025
    if spacing < s_min:
        spacing = ceil(s_min / 0.025 - 1e-9) * 0.025
    spacing = min(spacing, s_max)
    count = max(1, int(floor(tube_length / spacing)) - 1) if spacing > 0 else 1
    return BaffleSpacingResult(s_min, s_max, spacing, count)


def recommended_pitch(tube_od: float, pattern: TubePattern = TubePattern.TRIANGULAR_30,
                      mechanical_cleaning: bool = False) -> float:
    tri = TubePattern(pattern).is_triangular
    ratio = 1.33 if (mechanical_cleaning and not tri) else min_pitch_ratio
    p_mm = round(tube_od * ratio * 10000.0) / 10.0
    for od, pairs in STANDARD_PITCHES.items():
        if abs(od - tube_od * 1000.0) > _OD_TOL_MM:
            continue
        for tri_p, sq_p in pairs:
            std = tri_p if tri else sq_p
            if abs(std - p_mm) <= _OD_TOL_MM:
                return std / 1000.0
    return p_mm / 1000.0


def validate_pitch_ratio(pitch: float, tube_od: float) -> tuple[bool, Optional[str]]:
    if tube_od <= 0:
        return False, "tube OD must be positive"
    pr = pitch / tube_od
    if round(pr, 3) < min_pitch_ratio:
        return False, f"Pitch ratio {pr:.3f} below TEMA minimum {min_pitch_ratio}"
    if round(pr, 3) > max_pitch_ratio:
        return True, f"Pitch ratio {pr:.3f} above {max_pitch_ratio}, bundle will be oversized"
    return True, None
