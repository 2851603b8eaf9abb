import pytest

from common.models import FlowArrangement
from heat.thermal import (correction_factor, effectiveness, lmtd, ntu, overall_u, p_r_parameters,
                          required_area, terminal_differences)


def test_lmtd_cases():
    assert lmtd(20.0, 20.0) == pytest.approx(20.0)
    assert lmtd(30.0, 10.0) == pytest.approx(20.0 / 1.0986123, rel=1e-6)
    assert lmtd(-5.0, 10.0) == 0.0


def test_terminal_differences():
    assert terminal_differences(150, 90, 30, 45, FlowArrangement.COUNTER) == (105, 60)
    assert terminal_differences(150, 90, 30, 45, FlowArrangement.PARALLEL) == (120, 45)


def test_p_and_r():
    P, R = p_r_parameters(150.0, 90.0, 30.0, 45.0)
    assert P == pytest.approx(15.0 / 120.0)
    assert R == pytest.approx(4.0)


@pytest.mark.parametrize("arr", [FlowArrangement.COUNTER, FlowArrangement.PARALLEL])
def test_pure_arrangements_have_unit_f(arr):
    assert correction_factor(2.0, 0.3, arr).F == 1.0


@pytest.mark.parametrize("P", [0.05, 0.2, 0.4, 0.6, 0.8, 0.95])
@pytest.mark.parametrize("R", [0.1, 0.5, 1.0, 2.0, 5.0])
def test_f_is_bounded(P, R):
    cf = correction_factor(R, P, FlowArrangement.SHELL_TUBE_1_2)
    assert 0.5 <= cf.F <= 1.0


def test_f_known_value_r_equal_one():
    assert correction_factor(1.0, 0.5, FlowArrangement.SHELL_TUBE_1_2).F == pytest.approx(0.80, abs=0.01)


def test_f_invalid_inputs_default():
    cf = correction_factor(1.0, 1.2, FlowArrangement.SHELL_TUBE_1_2)
    assert cf.F == pytest.approx(0.9)
    assert cf.warning


def test_low_f_warns():
    cf = correction_factor(2.0, 0.35, FlowArrangement.SHELL_TUBE_1_2)
    assert cf.F < 0.75
    assert cf.warning and "F-factor" in cf.message


@pytest.mark.parametrize("arr", list(FlowArrangement))
@pytest.mark.parametrize("n", [0.0, 0.1, 1.0, 3.0, 10.0, 100.0])
@pytest.mark.parametrize("Cr", [0.0, 0.3, 1.0])
def test_effectiveness_bounded(arr, n, Cr):
    assert 0.0 <= effectiveness(n, Cr, arr) <= 1.0


def test_effectiveness_limits():
    assert effectiveness(0.0, 0.5) == 0.0
    assert effectiveness(50.0, 0.0) == pytest.approx(1.0)
    assert effectiveness(50.0, 0.5) == pytest.approx(1.0)
    assert effectiveness(50.0, 1.0, FlowArrangement.PARALLEL) == pytest.approx(0.5)
    assert effectiveness(1.0, 1.0) == pytest.approx(0.5)


def test_ntu_guard():
    assert ntu(500.0, 10.0, 0.0) == 0.0
    assert ntu(500.0, 10.0, 1000.0) == pytest.approx(5.0)


def test_overall_u():
    Uc, Uf, err = overall_u(3000.0, 1000.0, 0.0148, 0.01905, 50.0, Rfi=0.0002, Rfo=0.0003)
    assert err is None
    assert 0 < Uf < Uc < 1000.0


def test_overall_u_rejects_zero_coefficient():
    Uc, Uf, err = overall_u(0.0, 1000.0, 0.0148, 0.01905, 50.0)
    assert (Uc, Uf) == (0.0, 0.0)
    assert err


def test_required_area():
    assert required_area(1e6, 500.0, 0.9, 50.0) == pytest.approx(1e6 / (500 * 0.9 * 50))
    assert required_area(1e6, 0.0, 0.9, 50.0) == 0.0
