import pytest
import yaml

from common.models import FluidPhase, ShellSideMethod, TubePattern, TubeSide
from common.units import Q_
from io_loader import _q, load_case


def test__q_parses_quantity():
    q = _q({"value": 5, "unit": "m"})
    assert isinstance(q, Q_)
    assert q.to("m").magnitude == 5


def test__q_dimensionless_and_bad_node():
    assert _q({"value": 0.3, "unit": "dimensionless"}).to("").magnitude == pytest.approx(0.3)
    with pytest.raises(ValueError):
        _q({"value": 5})
    with pytest.raises(ValueError):
        _q(5)


def test_load_case_converts_to_si(case):
    g = case.geometry
    assert g.tube_od == pytest.approx(0.01905)
    assert g.tube_wall == pytest.approx(0.00211)
    assert g.shell_id == pytest.approx(0.489)
    assert g.baffle_spacing == pytest.approx(0.2)
    assert g.baffle_cut == pytest.approx(0.25)
    assert g.pattern == TubePattern.TRIANGULAR_30
    assert g.tube_count is None

    hot, cold = case.conditions.hot, case.conditions.cold
    assert hot.T_in == pytest.approx(150.0)
    assert hot.pressure == pytest.approx(8e5)
    assert hot.allowable_dp == pytest.approx(70e3)
    assert cold.phase == FluidPhase.LIQUID
    assert case.conditions.tube_side == TubeSide.COLD
    assert case.conditions.method == ShellSideMethod.BELL_DELAWARE


def test_load_case_defaults_fouling_from_table(case):
    # crude at a 120 degC mean sits in the 120-180 degC band
    assert case.conditions.hot.fouling == pytest.approx(0.000528)
    assert case.conditions.cold.fouling == pytest.approx(0.000176)


def test_load_case_optional_sections(case):
    assert case.sizing is not None and case.sizing.design_margin == pytest.approx(15.0)
    assert case.material_conditions.temperature == pytest.approx(423.15)
    assert case.two_phase is None


def test_missing_section_names_it(tmp_path, case_path):
    doc = yaml.safe_load(case_path.read_text(encoding="utf-8"))
    del doc["geometry"]
    p = tmp_path / "broken.yaml"
    p.write_text(yaml.safe_dump(doc), encoding="utf-8")
    with pytest.raises(KeyError, match="geometry"):
        load_case(str(p))


def test_missing_stream_key_names_section(tmp_path, case_path):
    doc = yaml.safe_load(case_path.read_text(encoding="utf-8"))
    del doc["cold"]["mass_flow"]
    p = tmp_path / "broken.yaml"
    p.write_text(yaml.safe_dump(doc), encoding="utf-8")
    with pytest.raises(KeyError, match="cold"):
        load_case(str(p))
