import pytest

from common.models import BaffleService, ShellType, TubePattern
from mechanical.geometry import (STANDARD_SHELLS, bundle_diameter_from_count, bundle_shell_clearance,
                                 recommended_baffle_spacing, recommended_pitch, shell_diameter_for_count,
                                 tube_count, validate_pitch_ratio)

TRI = TubePattern.TRIANGULAR_30


@pytest.mark.parametrize("passes, expected", [(1, 100), (2, 94), (4, 84), (6, 84)])
def test_table_count_307mm_shell(passes, expected):
    res = tube_count(0.307, 0.01905, 0.02381, TRI, passes)
    assert res.method == "table"
    assert not res.warnings
    assert res.count == expected


@pytest.mark.parametrize("shell, pattern, passes, expected", [
    (0.489, TRI, 1, 224),
    (0.489, TRI, 2, 212),
    (0.489, TubePattern.SQUARE_90, 4, 150),
    (0.991, TubePattern.SQUARE_90, 2, 724),
    (1.524, TRI, 1, 2394),
])
def test_published_tema_counts_for_three_quarter_inch_on_one_inch(shell, pattern, passes, expected):
    res = tube_count(shell, 0.01905, 0.0254, pattern, passes)
    assert res.method == "table"
    assert res.count == expected
    assert not res.warnings


def test_table_tolerates_near_shell_size():
    # 310 mm is within 5 % of the 307 mm table row
    assert tube_count(0.310, 0.01905, 0.02381, TRI, 1).count == 100


def test_palen_fallback_for_untabulated_tube():
    res = tube_count(0.5, 0.016, 0.020, TRI, 1)
    assert res.method == "palen"
    assert res.count > 0
    assert res.warnings


def test_square_layout_holds_fewer_tubes():
    tri = tube_count(0.6, 0.016, 0.020, TRI, 1).count
    sq = tube_count(0.6, 0.016, 0.020, TubePattern.SQUARE_90, 1).count
    assert sq < tri


def test_invalid_tube_count_input():
    res = tube_count(0.3, 0.02, 0.019)
    assert res.method == "invalid"
    assert res.count == 0


def test_clearance_bands():
    assert bundle_shell_clearance(0.25) == pytest.approx(0.010)
    assert bundle_shell_clearance(0.5) == pytest.approx(0.020)
    assert bundle_shell_clearance(1.0) == pytest.approx(0.030)
    assert bundle_shell_clearance(0.5, ShellType.FLOATING) > bundle_shell_clearance(0.5)


def test_bundle_diameter_grows_with_count():
    d100 = bundle_diameter_from_count(100, 0.01905, TRI, 1)
    d400 = bundle_diameter_from_count(400, 0.01905, TRI, 1)
    assert 0.25 < d100 < 0.307
    assert d400 > d100
    assert bundle_diameter_from_count(0, 0.01905) == 0.0


def test_shell_for_count():
    Ds, res = shell_diameter_for_count(100, 0.01905, 0.02381, TRI, 1)
    assert Ds == pytest.approx(0.307)
    assert res.count >= 100


def test_shell_for_count_beyond_series():
    Ds, res = shell_diameter_for_count(20000, 0.01905, 0.02381, TRI, 1)
    assert Ds > STANDARD_SHELLS[-1] / 1000.0
    assert res.method == "bundle"
    assert res.warnings


def test_baffle_spacing_recommendation():
    res = recommended_baffle_spacing(0.5, 4.88, BaffleService.LIQUID)
    assert res.min_spacing == pytest.approx(0.1)
    assert res.max_spacing == pytest.approx(0.5)
    assert res.recommended == pytest.approx(0.2)
    assert res.baffle_count == 23


def test_baffle_spacing_never_below_minimum():
    res = recommended_baffle_spacing(0.2, 3.0, BaffleService.LIQUID)
    assert res.recommended >= res.min_spacing - 1e-12


def test_recommended_pitch_snaps_to_standard():
    assert recommended_pitch(0.01905, TRI) == pytest.approx(0.02381)
    assert recommended_pitch(0.01905, TubePattern.SQUARE_90, mechanical_cleaning=True) == pytest.approx(0.0254)


def test_pitch_ratio_validation():
    ok, msg = validate_pitch_ratio(0.02, 0.019)
    assert not ok and msg
    ok, msg = validate_pitch_ratio(0.02381, 0.01905)
    assert ok and msg is None
    ok, msg = validate_pitch_ratio(0.03, 0.019)
    assert ok and "oversized" in msg
