from dataclasses import replace

import pytest

from common.models import FlowPattern, TwoPhaseInputs
from flow.two_phase import (chen_boiling_htc, chisholm_void_fraction, classify, flow_pattern,
                            friction_multiplier, lockhart_martinelli, shah_condensation_htc, slug_frequency)


@pytest.fixture
def mixed() -> TwoPhaseInputs:
    # water/air in a 50 mm line
    return TwoPhaseInputs(
        liquid_flow=2.0, gas_flow=0.05, liquid_density=998.0, gas_density=1.2,
        liquid_viscosity=1e-3, gas_viscosity=1.8e-5, surface_tension=0.072,
        pipe_id=0.05, pipe_length=10.0, pressure=2e5,
    )


def test_liquid_only_is_degenerate_bubble(mixed):
    res = classify(replace(mixed, gas_flow=0.0))
    assert res.is_valid
    assert res.lockhart_martinelli == 0.0
    assert res.void_fraction == 1.0
    assert res.flow_pattern == FlowPattern.BUBBLE
    assert res.friction_multiplier == 1.0
    assert not res.is_flow_unstable
    assert res.pressure_drop > 0


def test_gas_only_is_mist(mixed):
    res = classify(replace(mixed, liquid_flow=0.0))
    assert res.is_valid
    assert res.flow_pattern == FlowPattern.MIST


def test_no_flow_is_error(mixed):
    res = classify(replace(mixed, liquid_flow=0.0, gas_flow=0.0))
    assert not res.is_valid
    assert res.errors


def test_mixed_flow_consistency(mixed):
    res = classify(mixed)
    assert res.is_valid
    assert 0.0 < res.void_fraction < 1.0
    assert res.liquid_holdup == pytest.approx(1.0 - res.void_fraction)
    assert res.mixture_velocity == pytest.approx(res.liquid_velocity + res.gas_velocity)
    assert res.friction_multiplier > 1.0
    assert res.pressure_drop >= res.friction_pressure_drop
    assert res.acceleration_pressure_drop == 0.0
    if res.is_slug_flow:
        assert res.slug_frequency == pytest.approx(slug_frequency(res.mixture_velocity, 0.05))


def test_vertical_upflow_adds_gravity(mixed):
    up = classify(replace(mixed, inclination=1.5707963))
    assert up.gravitational_pressure_drop > 0


def test_chisholm_relations():
    assert chisholm_void_fraction(0.0) == 1.0
    assert chisholm_void_fraction(1.0) == pytest.approx(1.0 / 1.28)
    assert friction_multiplier(1.0, FlowPattern.ANNULAR) == pytest.approx(22.0)
    assert friction_multiplier(0.0, FlowPattern.SLUG) == 1.0
    assert lockhart_martinelli(4.0, 1.0) == pytest.approx(2.0)
    assert lockhart_martinelli(0.0, 1.0) == 0.0


def test_pattern_map_edges():
    assert flow_pattern(1.0, 0.0, 998, 1.2, 0.072, 0.05) == FlowPattern.BUBBLE
    assert flow_pattern(0.0, 5.0, 998, 1.2, 0.072, 0.05) == FlowPattern.MIST
    # slow gas over slow liquid in a horizontal line
    assert flow_pattern(0.05, 0.05, 998, 1.2, 0.072, 0.05) == FlowPattern.STRATIFIED
    # vertical, low gas fraction
    assert flow_pattern(2.0, 0.2, 998, 1.2, 0.072, 0.05, theta=1.5) == FlowPattern.BUBBLE


def test_slug_frequency():
    assert slug_frequency(3.0, 0.1) == pytest.approx(9.0)


def test_shah_limits():
    assert shah_condensation_htc(1000.0, 1e6, 22e6, 0.0) == pytest.approx(1000.0)
    assert shah_condensation_htc(1000.0, 1e6, 22e6, 0.5) > 1000.0
    assert shah_condensation_htc(1000.0, 0.0, 22e6, 0.5) == 1000.0


def test_chen_without_superheat_is_convective_only():
    kw = dict(T_sat_K=373.15, k_l=0.68, cp_l=4220.0, rho_l=958.0, mu_l=2.8e-4,
              rho_v=0.6, mu_v=1.2e-5, sigma=0.059, h_fg=2.257e6)
    convective = chen_boiling_htc(5000.0, 5e4, 0.2, 0.0, **kw)
    boiling = chen_boiling_htc(5000.0, 5e4, 0.2, 10.0, **kw)
    assert convective > 5000.0
    assert boiling > convective
