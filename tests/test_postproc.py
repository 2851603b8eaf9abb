import pandas as pd
import pytest

from analysis import analyze
from common.conversions import UnitSystem
from postproc import (checks_to_dataframe, sizing_to_dataframe, summary_rows, thermal_to_dataframe,
                      vibration_to_dataframe, write_results_csvs)


@pytest.fixture
def result(case):
    return analyze(case)


def test_thermal_frame_metric(result):
    df = thermal_to_dataframe(result.thermal)
    assert len(df) == 1
    assert df["Q[kW]"].iloc[0] == pytest.approx(result.thermal.heat_duty / 1000.0)
    assert df["F[-]"].iloc[0] == result.thermal.correction_factor
    assert "Jc[-]" in df.columns
    assert "T_hot_out[°C]" not in df.columns


def test_thermal_frame_imperial(result):
    df = thermal_to_dataframe(result.thermal, UnitSystem.IMPERIAL)
    assert "Q[BTU/hr]" in df.columns
    assert df["Q[BTU/hr]"].iloc[0] == pytest.approx(result.thermal.heat_duty * 3.41214, rel=1e-3)


def test_vibration_and_sizing_frames(result):
    vib = vibration_to_dataframe(result.vibration)
    assert vib["fn[Hz]"].iloc[0] == result.vibration.natural_frequency
    sz = sizing_to_dataframe(result.sizing)
    assert list(sz["rank"]) == list(range(1, len(result.sizing.options) + 1))
    assert sz["Ds[mm]"].iloc[0] == pytest.approx(result.sizing.options[0].shell_diameter * 1000.0)


def test_checks_frame(result):
    df = checks_to_dataframe(result.api660)
    assert set(df["standard"]) == {"API 660"}
    assert set(df["status"]) <= {"pass", "warning", "fail"}


def test_summary_rows(result):
    rows = summary_rows(result)
    parts = [r["part"] for r in rows]
    assert parts[0] == "thermal"
    assert parts[-1] == "overall"
    assert "two_phase" not in parts
    assert rows[-1]["valid"] == result.is_valid


def test_write_results_csvs(result, tmp_path):
    paths = write_results_csvs(result, tmp_path / "out", "run1")
    names = sorted(p.split("/")[-1] for p in paths)
    assert names == ["run1_checks.csv", "run1_sizing.csv", "run1_summary.csv",
                     "run1_thermal.csv", "run1_vibration.csv"]
    thermal = pd.read_csv(tmp_path / "out" / "run1_thermal.csv")
    assert thermal["Q[kW]"].iloc[0] == pytest.approx(result.thermal.heat_duty / 1000.0, rel=1e-6)
