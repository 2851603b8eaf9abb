import pytest

from heat.sizing import optimize_shell, score_option


def test_options_meet_margined_area(geometry):
    res = optimize_shell(50.0, geometry)
    assert res.is_valid
    assert res.required_area == pytest.approx(57.5)
    assert 0 < len(res.options) <= 5
    for o in res.options:
        assert o.actual_area >= 57.5 - 1e-9
        assert o.score == 0.0 or 3.0 <= o.ld_ratio <= 15.0
    scores = [o.score for o in res.options]
    assert scores == sorted(scores, reverse=True)
    assert res.candidates_evaluated > len(res.options)


def test_fixed_length(geometry):
    res = optimize_shell(50.0, geometry, fixed_length=4.88)
    assert res.options
    assert all(o.tube_length == 4.88 for o in res.options)


def test_zero_margin_needs_less_area(geometry):
    assert optimize_shell(50.0, geometry, design_margin=0.0).required_area == pytest.approx(50.0)


def test_invalid_target(geometry):
    res = optimize_shell(0.0, geometry)
    assert not res.is_valid
    assert res.errors


def test_score_bounds():
    assert score_option(20.0, 20.0, 500, 4.88, 500) == 0.0
    assert score_option(2.0, 20.0, 500, 4.88, 500) == 0.0
    assert score_option(8.0, 20.0, 500, 4.88, 500) == pytest.approx(100.0)
    assert score_option(8.0, 20.0, 1000, 7.32, 500) == pytest.approx(90.0)


def test_score_penalises_margin_and_tube_count():
    base = score_option(8.0, 20.0, 1000, 7.32, 500)
    assert score_option(8.0, 60.0, 1000, 7.32, 500) < base
    assert score_option(8.0, 20.0, 1000, 7.32, 1500) < base
