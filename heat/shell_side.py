"""
Shell-side crossflow: Bell-Delaware (j-factor with Jc Jl Jb Jr Js corrections)
and the simplified Kern method. Both take plain SI inputs and a
MechanicalGeometry; the method is chosen by the caller.
"""
from __future__ import annotations
import logging
from math import exp, floor, log as ln, pi, sqrt

from common.models import FluidProperties, MechanicalGeometry, ShellSideMethod, TubePattern
from common.results import HTCResult, ShellSideResult

log = logging.getLogger(__name__)

# (Re lower bound, a, b) for j = a * Re^b, first matching band wins
_J_TRIANGULAR = [
    (1.0e4, 0.321, -0.388),
    (1.0e3, 0.593, -0.477),
    (1.0e2, 1.520, -0.574),
    (0.0,   1.040, -0.451),
]
_J_SQUARE = [
    (1.0e4, 0.249, -0.382),
    (1.0e3, 0.391, -0.438),
    (1.0e2, 1.187, -0.547),
    (0.0,   0.994, -0.426),
]


def _zero_shell(warnings=None) -> ShellSideResult:
    return ShellSideResult(0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0, warnings=list(warnings or []))


def shell_j_factor(Re: float, pattern: TubePattern) -> float:
    bands = _J_TRIANGULAR if TubePattern(pattern).is_triangular else _J_SQUARE
    for Re_lo, a, b in bands:
        if Re > Re_lo:
            return a * Re ** b
    return 0.0


def crossflow_area(geometry: MechanicalGeometry) -> float:
    """Sm = Ds * B * (Pt - Do) / Pt."""
    g = geometry
    return g.shell_id * g.baffle_spacing * (g.pitch - g.tube_od) / g.pitch


def baffle_count(tube_length: float, baffle_spacing: float) -> int:
    return max(1, int(floor(tube_length / baffle_spacing)) - 1)


def bell_delaware(mass_flow: float, props: FluidProperties, geometry: MechanicalGeometry,
                  tube_count: int) -> ShellSideResult:
    g = geometry
    if mass_flow <= 0 or g.shell_id <= 0 or g.baffle_spacing <= 0:
        return _zero_shell()
    Sm = crossflow_area(g)
    if Sm <= 0:
        return _zero_shell()

    warnings: list[str] = []
    tri = TubePattern(g.pattern).is_triangular
    Do, Pt, Ds, Bc = g.tube_od, g.pitch, g.shell_id, g.baffle_cut

    Gs = mass_flow / Sm
    velocity = Gs / props.density
    if tri:
        De = 1.1 / Do * (Pt ** 2 - 0.917 * Do ** 2)
    else:
        De = 1.27 / Do * (Pt ** 2 - 0.785 * Do ** 2)
    De = max(De, 0.001)
    Re = Do * Gs / props.viscosity
    Nb = baffle_count(g.tube_length, g.baffle_spacing)

    # baffle cut
    Jc = 0.55 + 0.72 * min(max(1.0 - 2.0 * Bc, 0.3), 0.9)

    # shell-baffle and tube-baffle leakage
    Asb = pi * Ds * g.shell_baffle_clearance
    Atb = tube_count * pi * Do * g.tube_baffle_clearance
    rs = Asb / (Asb + Atb + 0.001)
    rlm = (Asb + Atb) / (Sm + 0.001)
    Jl = 0.44 * (1.0 - rs) + (1.0 - 0.44 * (1.0 - rs)) * exp(-2.2 * rlm)

    # bundle bypass, one sealing strip pair per two crossflow rows
    Cbp = 1.35 if Re >= 100 else 1.25
    rss = 0.5
    Jb = exp(-Cbp * g.bypass_fraction * (1.0 - (2.0 * rss) ** (1.0 / 3.0)))

    if Re >= 100:
        Jr = 1.0
    elif Re >= 20:
        Jr = 0.9
    else:
        Jr = 0.8
    Js = 1.0

    if Re > 1000:
        f = exp(0.576 - (0.19 if tri else 0.18) * ln(Re))
    elif Re > 100:
        f = exp(0.8 - 0.15 * ln(Re))
    else:
        f = 48.0 / Re

    Nc = int(floor(Ds * (1.0 - 2.0 * Bc) / Pt))
    if Nc < 1:
        msg = f"Crossflow tube rows estimated at {Nc}, using 1"
        warnings.append(msg)
        log.warning(msg)
        Nc = 1
    dp_cross = Nb * 4.0 * f * Gs ** 2 * Nc / (2.0 * props.density)
    Nw = int(floor(2.0 * Bc * Ds / Pt))
    dp_window = (Nb + 1) * (2.0 + 0.6 * Nw) * Gs ** 2 / (2.0 * props.density)
    dp_ends = 2.0 * Gs ** 2 / (2.0 * props.density)
    dp = dp_cross * Jb * Jl ** 2 + dp_window + dp_ends

    log.debug(f"Bell-Delaware: Re={Re:.4g} Jc={Jc:.3f} Jl={Jl:.3f} Jb={Jb:.3f} dP={dp:.4g} Pa")
    return ShellSideResult(max(dp, 0.0), velocity, Re, Sm, De, Gs, Nb, Nc,
                           Jc, Jl, Jb, Jr, Js, warnings)


def kern_equivalent_diameter(tube_od: float, pitch: float, pattern: TubePattern) -> float:
    if TubePattern(pattern).is_triangular:
        return 4.0 * (pitch ** 2 * sqrt(3.0) / 4.0 - pi * tube_od ** 2 / 8.0) / (pi * tube_od / 2.0)
    return 4.0 * (pitch ** 2 - pi * tube_od ** 2 / 4.0) / (pi * tube_od)


def kern_shell_side(mass_flow: float, props: FluidProperties, geometry: MechanicalGeometry) -> ShellSideResult:
    g = geometry
    if mass_flow <= 0 or g.shell_id <= 0 or g.baffle_spacing <= 0:
        return _zero_shell()
    Sm = crossflow_area(g)
    if Sm <= 0:
        return _zero_shell()

    Gs = mass_flow / Sm
    De = kern_equivalent_diameter(g.tube_od, g.pitch, g.pattern)
    Re = De * Gs / props.viscosity
    f = exp(0.576 - 0.19 * ln(Re)) if Re > 500 else 1.0
    Nb = baffle_count(g.tube_length, g.baffle_spacing)
    dp = f * Gs ** 2 * g.shell_id * (Nb + 1) / (2.0 * props.density * De)
    return ShellSideResult(max(dp, 0.0), Gs / props.density, Re, Sm, De, Gs, Nb)


def shell_side_htc(shell: ShellSideResult, props: FluidProperties, pattern: TubePattern,
                   method: ShellSideMethod = ShellSideMethod.BELL_DELAWARE) -> HTCResult:
    """
    Bell-Delaware: h = j * Cp * Gs * Pr^(-2/3) * Jc Jl Jb Jr Js.
    Kern: Nu = 0.36 Re^0.55 Pr^(1/3) on the equivalent diameter.
    """
    Pr = props.prandtl
    Re, Gs, De = shell.reynolds, shell.mass_velocity, shell.equivalent_diameter
    if Re <= 0 or Gs <= 0 or De <= 0 or Pr <= 0:
        return HTCResult(0.0, 0.0)
    k = props.thermal_conductivity
    if ShellSideMethod(method) == ShellSideMethod.KERN:
        Nu = max(0.36 * Re ** 0.55 * Pr ** (1.0 / 3.0), 3.66)
        return HTCResult(Nu * k / De, Nu)
    j = shell_j_factor(Re, pattern)
    h_ideal = j * props.specific_heat * Gs * Pr ** (-2.0 / 3.0)
    h = h_ideal * shell.Jc * shell.Jl * shell.Jb * shell.Jr * shell.Js
    return HTCResult(h, h * De / k)
