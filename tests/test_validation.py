from dataclasses import replace

import pytest

from common.constants import DISCLAIMER
from common.models import FluidPhase, ServiceType, TemaClass
from common.results import AnalysisResult, TubeCountResult
from heat.thermal_hydraulics import zeroed_result
from mechanical.validation import (bwg_for, create_safety_report, estimate_max_tube_count, minimum_tube_wall,
                                   validate_api660, validate_tema_class)


def _status(res, requirement):
    return next(c.status for c in res.checks if c.requirement == requirement)


def test_reference_layout_passes(geometry):
    res = validate_api660(geometry, 0.85, 0.6, tube_count=262, design_pressure=1e6)
    assert res.is_valid
    assert res.standard == "API 660"
    assert not res.warnings
    assert _status(res, "Tube count fits shell") == "pass"
    assert any(c.section == "6.1" for c in res.checks)


def test_max_tube_count_estimate():
    assert estimate_max_tube_count(0.489, 0.02381, True) == 269
    assert estimate_max_tube_count(0.489, 0.02381, False) < 269
    assert estimate_max_tube_count(0.02, 0.02381, True) == 0


def test_thin_wall_is_error(geometry):
    res = validate_api660(replace(geometry, tube_wall=0.001), 0.85, 0.6)
    assert not res.is_valid
    assert _status(res, "Minimum tube wall thickness") == "fail"


def test_minimum_wall_and_bwg():
    assert minimum_tube_wall(0.01905) == pytest.approx(1.65e-3)
    assert minimum_tube_wall(0.0254) == pytest.approx(2.11e-3)
    assert minimum_tube_wall(0.0381) == pytest.approx(2.77e-3)
    assert bwg_for(0.01905, 0.00211) == 14
    assert bwg_for(0.01905, 0.003) is None


def test_gas_service_requires_vibration_study(geometry):
    res = validate_api660(geometry, 10.0, 5.0, phase=FluidPhase.GAS)
    assert any("TEMA RGP T-4" in w for w in res.warnings)
    assert _status(res, "Tube-side velocity within service limit") == "pass"


def test_shell_phase_sets_shell_limit(geometry):
    res = validate_api660(geometry, 1.0, 5.0, phase=FluidPhase.LIQUID, shell_phase=FluidPhase.GAS)
    assert _status(res, "Shell-side velocity within service limit") == "pass"
    assert _status(res, "Tube-side velocity within service limit") == "pass"


def test_velocity_bands(geometry):
    res = validate_api660(geometry, 5.0, 0.6, service=ServiceType.CLEAN_LIQUID)
    assert not res.is_valid
    assert any("erosion limit" in e for e in res.errors)
    near = validate_api660(geometry, 2.5, 0.6)
    assert near.is_valid
    assert _status(near, "Tube-side velocity within service limit") == "warning"


def test_baffle_and_length_warnings(geometry):
    res = validate_api660(replace(geometry, baffle_cut=0.10, tube_length=5.5), 0.85, 0.6)
    assert res.is_valid
    assert any("Baffle cut" in w for w in res.warnings)
    assert any("non-standard" in w for w in res.warnings)


def test_tema_wall_by_class(geometry):
    thin = replace(geometry, tube_wall=0.00165)
    assert not validate_tema_class(thin, TemaClass.R).is_valid
    assert validate_tema_class(thin, TemaClass.C).is_valid
    res = validate_tema_class(geometry, TemaClass.R)
    assert res.standard == "TEMA R"
    assert res.is_valid and not res.warnings


def test_tema_pitch_and_ld_warnings(geometry):
    res = validate_tema_class(replace(geometry, pitch=0.04, tube_length=1.0))
    assert res.is_valid
    assert len(res.warnings) == 2


def test_safety_report_flags_critical_words():
    thermal = zeroed_result([], ["Tube velocity exceeds limit", "minor note"])
    tc = TubeCountResult(262, "table", 0.46)
    report = create_safety_report(AnalysisResult(thermal=thermal, tube_count=tc))
    assert report.disclaimer == DISCLAIMER
    assert report.critical_warnings == ["Tube velocity exceeds limit"]
    assert len(report.warnings) == 2
    assert report.is_valid


def test_safety_report_collects_errors():
    thermal = zeroed_result(["hot stream flow rate must be positive"])
    report = create_safety_report(AnalysisResult(thermal=thermal, tube_count=TubeCountResult(0, "invalid", 0.0)))
    assert not report.is_valid
    assert report.errors == ["hot stream flow rate must be positive"]
