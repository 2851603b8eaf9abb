import logging

import pytest

from logging_utils import TRACE, setup_logging, trace_calls


@trace_calls(values=True)
def _double(x, case="-"):
    return 2 * x


@trace_calls()
def _boom(case="-"):
    raise RuntimeError("boom")


def test_trace_records_carry_case(caplog):
    with caplog.at_level(TRACE):
        assert _double(2.5, case="c1") == 5.0
    steps = [(r.case, r.step, r.getMessage()) for r in caplog.records]
    assert ("c1", "_double", "enter") in steps
    assert any(m.startswith("ret: 5") for _, _, m in steps)


def test_trace_reraises(caplog):
    with caplog.at_level(TRACE), pytest.raises(RuntimeError):
        _boom(case="c2")
    assert any(r.levelno == logging.ERROR and r.case == "c2" for r in caplog.records)


def test_untraced_call_skips_records(caplog):
    with caplog.at_level(logging.INFO):
        assert _double(1.0) == 2.0
    assert not caplog.records


def test_unknown_level_name_falls_back_to_info():
    setup_logging("LOUD")
    assert logging.getLogger().level == logging.INFO
    setup_logging(logging.ERROR)
