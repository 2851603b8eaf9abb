import logging
from pathlib import Path

import pytest

from common.models import (FluidPhase, MechanicalGeometry, ProcessConditions, ProcessStream, TubePattern,
                           VibrationInputs)
from io_loader import load_case
from logging_utils import setup_logging

REPO_ROOT = Path(__file__).resolve().parents[1]
CASE_PATH = REPO_ROOT / "config" / "exchanger.yaml"


@pytest.fixture(autouse=True, scope="session")
def _quiet_logs():
    setup_logging(logging.ERROR)


@pytest.fixture
def case_path() -> Path:
    return CASE_PATH


@pytest.fixture
def case():
    return load_case(str(CASE_PATH))


@pytest.fixture
def geometry() -> MechanicalGeometry:
    # 3/4 in BWG 14 tubes on 15/16 in triangular pitch, 489 mm shell, 2 passes
    return MechanicalGeometry(
        tube_od=0.01905, tube_wall=0.00211, tube_length=4.88, pitch=0.02381,
        pattern=TubePattern.TRIANGULAR_30, passes=2, shell_id=0.489,
        baffle_cut=0.25, baffle_spacing=0.2,
    )


@pytest.fixture
def hot_stream() -> ProcessStream:
    return ProcessStream(mass_flow=10.0, T_in=150.0, T_out=90.0, pressure=8e5,
                         fouling=0.000528, fluid="crude_oil_medium")


@pytest.fixture
def cold_stream() -> ProcessStream:
    return ProcessStream(mass_flow=19.0, T_in=30.0, T_out=45.0, pressure=4e5,
                         fouling=0.000176, fluid="cooling_water")


@pytest.fixture
def conditions(hot_stream, cold_stream) -> ProcessConditions:
    return ProcessConditions(hot=hot_stream, cold=cold_stream)


@pytest.fixture
def vib_inputs() -> VibrationInputs:
    return VibrationInputs(
        velocity=0.5, shell_density=850.0, tube_od=0.01905, tube_id=0.01483, pitch=0.02381,
        pattern=TubePattern.TRIANGULAR_30, elastic_modulus=200e9, tube_density=7850.0,
        span=0.6, shell_diameter=0.489, tube_fluid_density=1000.0, shell_phase=FluidPhase.LIQUID,
    )


@pytest.fixture
def trace_logs():
    """Route every engine call through the TRACE wrappers for one test."""
    setup_logging("TRACE")
    yield
    setup_logging(logging.ERROR)
