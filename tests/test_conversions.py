import pytest

from common.conversions import (UnitSystem, convert_temperature, convert_temperature_delta, convert_value,
                                format_value, from_kelvin, from_si, to_kelvin, to_si, unit_symbol)


@pytest.mark.parametrize("t", [-40.0, 0.0, 25.0, 100.0, 350.0])
def test_temperature_round_trip(t):
    f = convert_temperature(t, "C", "F")
    assert convert_temperature(f, "F", "C") == pytest.approx(t)
    assert from_kelvin(to_kelvin(t, "C"), "C") == pytest.approx(t)


def test_temperature_fixed_points():
    assert convert_temperature(100.0, "C", "F") == pytest.approx(212.0)
    assert convert_temperature(-40.0, "F", "C") == pytest.approx(-40.0)
    assert to_kelvin(0.0, "°C") == pytest.approx(273.15)
    assert convert_temperature(0.0, "K", "R") == pytest.approx(0.0)


def test_temperature_delta_has_no_offset():
    assert convert_temperature_delta(10.0, "C", "F") == pytest.approx(18.0)
    assert convert_temperature_delta(10.0, "K", "C") == pytest.approx(10.0)


def test_unknown_temperature_unit():
    with pytest.raises(ValueError):
        convert_temperature(1.0, "X", "C")


def test_metric_imperial_values():
    assert convert_value(1.0, "length_large", UnitSystem.IMPERIAL, UnitSystem.METRIC) == pytest.approx(0.3048)
    assert from_si(1e5, "pressure", UnitSystem.METRIC) == pytest.approx(1.0)
    assert to_si(1.0, "viscosity", UnitSystem.METRIC) == pytest.approx(1e-3)
    assert from_si(1000.0, "power", "metric") == pytest.approx(1.0)


def test_symbols_and_format():
    assert unit_symbol("pressure_drop", UnitSystem.METRIC) == "kPa"
    assert unit_symbol("pressure_drop", UnitSystem.IMPERIAL) == "psi"
    assert format_value(12.346, "velocity") == "12.35 m/s"
