from dataclasses import replace

import pytest

from common.models import FluidPhase, TubePattern
from mechanical.vibration import (acoustic_frequency, added_mass_coefficient, analyze_vibration,
                                  buffeting_frequency, damping_ratio, is_acoustic_risk,
                                  is_vortex_shedding_risk, tube_wear_rate)


def test_low_velocity_is_safe(vib_inputs):
    res = analyze_vibration(vib_inputs)
    assert res.is_valid
    assert not res.is_vibration_risk
    assert res.message.startswith("SAFE")
    assert res.natural_frequency == pytest.approx(212.0, rel=0.02)
    assert res.vortex_shedding_frequency == pytest.approx(0.2 * 0.5 / 0.01905)
    assert res.critical_velocity == pytest.approx(10.1, rel=0.03)
    assert res.added_mass_coefficient == 3.0
    assert res.acoustic_frequency == 0.0
    assert res.tube_wear_rate == 0.01


def test_high_velocity_predicts_fluid_elastic_instability(vib_inputs):
    res = analyze_vibration(replace(vib_inputs, velocity=12.0))
    assert res.is_fluid_elastic_risk
    assert not res.is_valid
    assert res.message.startswith("CRITICAL")
    assert res.velocity_ratio > 0.8
    assert any("critical velocity" in w for w in res.warnings)
    assert "Increase tube pitch" in res.recommendations
    assert res.tube_wear_rate > 0.01


def test_fei_threshold_follows_safety_factor(vib_inputs):
    res = analyze_vibration(replace(vib_inputs, velocity=6.0, fei_safety_factor=0.5))
    assert res.is_fluid_elastic_risk
    assert not analyze_vibration(replace(vib_inputs, velocity=6.0)).is_fluid_elastic_risk


def test_invalid_pitch_returns_errors(vib_inputs):
    res = analyze_vibration(replace(vib_inputs, pitch=0.02))
    assert not res.is_valid
    assert res.natural_frequency == 0.0
    assert any("Pitch ratio" in e for e in res.errors)


def test_zero_velocity_is_error(vib_inputs):
    assert analyze_vibration(replace(vib_inputs, velocity=0.0)).errors


def test_resonance_band():
    assert is_vortex_shedding_risk(10.0, 10.0)
    assert not is_vortex_shedding_risk(10.0, 5.0)
    assert not is_vortex_shedding_risk(10.0, 13.0)
    assert not is_vortex_shedding_risk(0.0, 5.0)


@pytest.mark.parametrize("phase, viscosity, zeta", [
    (FluidPhase.LIQUID, 0.02, 0.05),
    (FluidPhase.LIQUID, 0.001, 0.03),
    (FluidPhase.LIQUID, None, 0.03),
    (FluidPhase.GAS, None, 0.01),
    (FluidPhase.SUPERCRITICAL, None, 0.01),
    (FluidPhase.TWO_PHASE, None, 0.08),
])
def test_damping_by_phase(phase, viscosity, zeta):
    assert damping_ratio(phase, viscosity) == zeta


def test_given_damping_overrides(vib_inputs):
    low = analyze_vibration(replace(vib_inputs, damping_ratio=0.01))
    high = analyze_vibration(replace(vib_inputs, damping_ratio=0.08))
    assert low.critical_velocity < high.critical_velocity


def test_added_mass_capped_and_falling():
    assert added_mass_coefficient(1.25, TubePattern.TRIANGULAR_30) == 3.0
    assert added_mass_coefficient(1.5, TubePattern.SQUARE_90) < added_mass_coefficient(1.5, TubePattern.TRIANGULAR_30)
    assert added_mass_coefficient(2.0, TubePattern.SQUARE_90) == pytest.approx(1.5)


def test_acoustic_frequency_clamps_speed_of_sound():
    assert acoustic_frequency(340.0, 0.489, FluidPhase.LIQUID) == 0.0
    assert acoustic_frequency(20.0, 0.489, FluidPhase.GAS) == pytest.approx(150.0 / (2 * 0.489))
    assert acoustic_frequency(340.0, 0.5, FluidPhase.GAS) == pytest.approx(340.0)


def test_acoustic_risk_only_in_gas():
    assert is_acoustic_risk(100.0, 100.0, FluidPhase.GAS)
    assert is_acoustic_risk(50.0, 100.0, FluidPhase.GAS)
    assert not is_acoustic_risk(100.0, 100.0, FluidPhase.LIQUID)
    assert not is_acoustic_risk(70.0, 100.0, FluidPhase.GAS)


def test_gas_service_low_speed_of_sound_warns(vib_inputs):
    gas = replace(vib_inputs, shell_density=5.0, shell_phase=FluidPhase.GAS, speed_of_sound=20.0, velocity=5.0)
    res = analyze_vibration(gas)
    assert any("Speed of sound" in w for w in res.warnings)
    assert res.acoustic_frequency == pytest.approx(150.0 / (2 * 0.489))


def test_buffeting_frequency_and_wear():
    assert buffeting_frequency(2.0, 0.01905, 0.02381) == pytest.approx(3.05 * 2.0 * (1 - 0.01905 / 0.02381) / 0.01905)
    assert tube_wear_rate(True, 1.0, FluidPhase.TWO_PHASE) == pytest.approx(1.0)
    assert tube_wear_rate(True, 50.0, FluidPhase.LIQUID) == 5.0


@pytest.mark.parametrize("field", ["shell_density", "elastic_modulus", "tube_density"])
@pytest.mark.parametrize("value", [0.0, -1.0])
def test_non_positive_material_inputs_are_errors(vib_inputs, field, value):
    res = analyze_vibration(replace(vib_inputs, **{field: value}))
    assert not res.is_valid
    assert res.errors
    assert res.natural_frequency == 0.0
    assert res.critical_velocity == 0.0


def test_speed_of_sound_below_clamp_warns(vib_inputs):
    gas = replace(vib_inputs, shell_density=5.0, shell_phase=FluidPhase.GAS, velocity=5.0)
    res = analyze_vibration(replace(gas, speed_of_sound=100.0))
    assert any("Speed of sound" in w for w in res.warnings)
    assert res.acoustic_frequency == pytest.approx(150.0 / (2 * 0.489))

    ok = analyze_vibration(replace(gas, speed_of_sound=340.0))
    assert not any("Speed of sound" in w for w in ok.warnings)
    assert ok.acoustic_frequency == pytest.approx(340.0 / (2 * 0.489))


def test_fei_recommendations_come_before_vortex(vib_inputs):
    # fn ~ 34 Hz, fvs ~ 27 Hz, Vcrit ~ 1.6 m/s
    res = analyze_vibration(replace(vib_inputs, span=1.5, velocity=2.6))
    assert res.is_fluid_elastic_risk
    assert res.is_vortex_shedding_risk
    assert res.recommendations[0] == "Reduce shell-side flow rate"
    recs = res.recommendations
    assert recs.index("Use larger shell diameter") < recs.index("Reduce baffle spacing to raise natural frequency")
