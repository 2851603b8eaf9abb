import pytest

from common.models import CorrosionEnvironment, MaterialClass, MaterialConditions
from mechanical.materials import (determine_sour_region, galvanic_compatible, h2s_partial_pressure,
                                  select_material, suitable_materials, validate_nace_mr0175)


@pytest.fixture
def mild_service() -> MaterialConditions:
    return MaterialConditions(temperature=423.15, pressure=8e5, design_life=20.0, chloride_content=20.0)


def test_mild_service_prefers_low_alloy(mild_service):
    res = select_material(CorrosionEnvironment.MILD, mild_service)
    assert res.is_valid
    assert res.recommended_id == "SA-387-11"
    assert res.recommended_material == MaterialClass.LOW_ALLOY
    scores = {s.material_id: s.score for s in res.scores}
    assert scores["SA-387-11"] == pytest.approx(97.5)
    assert scores["SA-516-70"] == pytest.approx(75.0)
    assert scores["SS-304"] == pytest.approx(90.0)
    assert scores["DUPLEX-2205"] == pytest.approx(80.0)
    assert res.expected_life == pytest.approx(20.0)
    assert res.is_nace_compliant
    assert res.sour_region == 0
    assert len(res.alternative_materials) == 3


def test_sour_service_eliminates_unlisted(mild_service):
    sour = MaterialConditions(temperature=350.0, pressure=5e6, design_life=20.0, h2s_content=0.01, pH=7.0)
    assert h2s_partial_pressure(sour) == pytest.approx(0.5)
    res = select_material(CorrosionEnvironment.MODERATE, sour)
    scores = {s.material_id: s.score for s in res.scores}
    assert scores["SS-304"] == 0.0
    assert scores["CU-NI-90-10"] == 0.0
    assert res.recommended_id == "SS-316L"
    assert res.is_nace_compliant
    assert res.sour_region == 1
    assert any("hardness" in r for r in res.nace_requirements)


def test_sour_environment_flag_alone_triggers_nace(mild_service):
    res = select_material(CorrosionEnvironment.SOUR, mild_service)
    scores = {s.material_id: s.score for s in res.scores}
    assert scores["SS-304"] == 0.0


@pytest.mark.parametrize("h2s, pH, region", [
    (0.1, 5.0, 0),
    (0.5, 4.0, 1),
    (5.0, 4.0, 2),
    (20.0, 4.0, 3),
    (0.5, 3.0, 3),
])
def test_sour_regions(h2s, pH, region):
    assert determine_sour_region(h2s, pH)[0] == region


def test_nace_unknown_and_unlisted():
    sour = MaterialConditions(temperature=350.0, pressure=5e6, h2s_content=0.01)
    ok, req, restr = validate_nace_mr0175("UNOBTAINIUM", sour)
    assert not ok and restr
    ok, _, restr = validate_nace_mr0175("SS-304", sour)
    assert not ok
    assert "NOT listed" in restr[0]
    ok, req, _ = validate_nace_mr0175("SA-516-70", MaterialConditions(temperature=350.0, pressure=1e5))
    assert ok
    assert req == ["Standard material specifications apply"]


def test_severe_sour_adds_pwht_and_ssc_testing():
    severe = MaterialConditions(temperature=350.0, pressure=5e6, h2s_content=1.0, pH=4.0)
    ok, req, restr = validate_nace_mr0175("SA-516-70", severe)
    assert not ok
    assert any("PWHT" in r for r in req)
    assert any("TM0177 Method A" in r for r in req)


def test_temperature_out_of_every_range_fails():
    res = select_material(CorrosionEnvironment.MILD, MaterialConditions(temperature=2000.0, pressure=1e5))
    assert not res.is_valid
    assert res.recommended_id is None


def test_suitable_materials_filter():
    found = suitable_materials(CorrosionEnvironment.SEVERE, 0.1)
    assert "INCONEL-625" in found
    assert "DUPLEX-2205" in found
    assert "SA-516-70" not in found


def test_galvanic_series():
    assert galvanic_compatible(MaterialClass.STAINLESS, [MaterialClass.COPPER_ALLOY, MaterialClass.LOW_ALLOY])
    assert not galvanic_compatible(MaterialClass.TITANIUM, [MaterialClass.CARBON_STEEL])
