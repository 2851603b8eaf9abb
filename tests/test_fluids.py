import pytest

from common.models import FluidPhase
from fluids.fouling import FOULING_FACTORS, fouling_for_fluid
from fluids.library import ALIASES, fluid_definition, fluids_by_category, is_known, list_fluids
from fluids.properties import properties_at, speed_of_sound


def test_library_covers_common_services():
    keys = list_fluids()
    assert len(keys) >= 20
    for k in ("water", "seawater", "steam", "crude_oil_medium", "air", "hydrogen", "custom"):
        assert k in keys
    cats = fluids_by_category()
    assert sum(len(v) for v in cats.values()) == len(keys)


@pytest.mark.parametrize("alias", sorted(ALIASES))
def test_aliases_resolve(alias):
    assert is_known(alias)
    assert fluid_definition(alias).key == ALIASES[alias]


def test_reference_point_matches_table():
    p = properties_at("water", 25.0)
    assert p.density == pytest.approx(997.0)
    assert p.viscosity == pytest.approx(0.89e-3)
    assert not p.clamped
    assert p.prandtl == pytest.approx(p.specific_heat * p.viscosity / p.thermal_conductivity)


def test_viscosity_falls_with_temperature():
    assert properties_at("water", 80.0).viscosity < properties_at("water", 25.0).viscosity
    assert properties_at("crude_oil", 150.0).viscosity < properties_at("crude_oil", 50.0).viscosity


def test_out_of_range_is_clamped_and_flagged():
    p = properties_at("cooling_water", 80.0)
    assert p.clamped
    assert p.temperature == pytest.approx(60.0)
    assert any("outside property range" in w for w in p.warnings)


def test_unknown_fluid_uses_custom():
    p = properties_at("unobtainium", 25.0)
    assert p.density == pytest.approx(1000.0)
    assert any("Unknown fluid" in w for w in p.warnings)


def test_gas_density_scales_with_pressure():
    p1 = properties_at("air", 25.0)
    p10 = properties_at("air", 25.0, 10 * 101325.0)
    assert p1.phase == FluidPhase.GAS
    assert p10.density == pytest.approx(10 * p1.density)


def test_speed_of_sound():
    assert speed_of_sound("air", 20.0) == pytest.approx(343.0, rel=0.01)
    assert speed_of_sound("water", 25.0) == pytest.approx(1485.0, rel=0.01)


def test_fouling_lookup():
    assert fouling_for_fluid("crude_oil_medium", 100.0).rf == FOULING_FACTORS["crude_below_120"].rf
    assert fouling_for_fluid("crude_oil_medium", 250.0).rf == FOULING_FACTORS["crude_above_230"].rf
    assert fouling_for_fluid("seawater", 50.0).rf == FOULING_FACTORS["seawater_hot"].rf
    assert fouling_for_fluid("something_else").rf > 0
