from __future__ import annotations
import logging
from math import pi
from typing import Optional

from common.constants import Re_fully_turbulent, Re_laminar, Re_turbulent
from common.models import FlowRegime, FluidProperties
from common.results import HTCResult, TubePressureDrop

log = logging.getLogger(__name__)

Nu_laminar = 3.66   # fully developed, constant wall temperature


def flow_regime(Re: float) -> FlowRegime:
    if Re < Re_laminar:
        return FlowRegime.LAMINAR
    if Re < Re_turbulent:
        return FlowRegime.TRANSITIONAL
    return FlowRegime.TURBULENT


def _dittus_boelter(Re: float, Pr: float, heating: bool) -> float:
    n = 0.4 if heating else 0.3
    return 0.023 * Re ** 0.8 * Pr ** n


def nusselt_tube(Re: float, Pr: float, heating: bool = True,
                 mu_bulk: Optional[float] = None, mu_wall: Optional[float] = None) -> float:
    """
    Tube-side Nusselt number.

    Re < 2300 laminar 3.66; 2300 <= Re < 1e4 Gnielinski's transition
    interpolation between the laminar value and the turbulent value at
    Re = 1e4; Re >= 1e4 Dittus-Boelter, with the Sieder-Tate
    (mu_b/mu_w)^0.14 factor when both viscosities are given.
    """
    if Re < Re_laminar:
        return Nu_laminar
    if Re < Re_fully_turbulent:
        gamma = (Re - Re_laminar) / (Re_fully_turbulent - Re_laminar)
        return (1.0 - gamma) * Nu_laminar + gamma * _dittus_boelter(Re_fully_turbulent, Pr, heating)
    Nu = _dittus_boelter(Re, Pr, heating)
    if mu_bulk and mu_wall:
        Nu *= (mu_bulk / mu_wall) ** 0.14
    return Nu


def tube_velocity(mass_flow: float, props: FluidProperties, tube_id: float, tube_count: int, passes: int) -> float:
    tubes_per_pass = max(tube_count / max(passes, 1), 1.0)
    area = tubes_per_pass * pi * tube_id ** 2 / 4.0
    return mass_flow / (props.density * area)


def tube_side_htc(velocity: float, props: FluidProperties, tube_id: float, heating: bool = True,
                  mu_wall: Optional[float] = None) -> HTCResult:
    Re = props.density * velocity * tube_id / props.viscosity
    Nu = nusselt_tube(Re, props.prandtl, heating, props.viscosity if mu_wall else None, mu_wall)
    return HTCResult(Nu * props.thermal_conductivity / tube_id, Nu, flow_regime(Re))


def fanning_friction_factor(Re: float) -> float:
    if Re <= 0:
        return 0.0
    if Re < Re_laminar:
        return 16.0 / Re
    if Re < 1.0e5:
        return 0.079 * Re ** -0.25
    return 0.046 * Re ** -0.2


def tube_side_pressure_drop(velocity: float, props: FluidProperties, tube_id: float,
                            tube_length: float, passes: int) -> TubePressureDrop:
    """Kern: straight-tube friction plus 4 velocity heads per pass for the return."""
    Re = props.density * velocity * tube_id / props.viscosity
    f = fanning_friction_factor(Re)
    head = props.density * velocity ** 2 / 2.0
    straight = 4.0 * f * tube_length * passes / tube_id * head
    returns = 4.0 * passes * head
    return TubePressureDrop(straight + returns, Re, f, straight, returns)
