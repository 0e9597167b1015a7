import json
import logging

import numpy as np
import pytest

from summed_area import ArraySource, InvalidRegionError, build, decor
from summed_area.decor import json_serializable, log_action


def records(caplog):
    return [json.loads(r.getMessage()) for r in caplog.records if r.name == "summed_area.decor"]


def test_build_is_logged(caplog):
    caplog.set_level(logging.DEBUG, logger="summed_area.decor")
    build(ArraySource(np.ones((2, 3))))
    logged = records(caplog)
    assert [r["status"] for r in logged] == ["started", "success"]
    assert logged[0]["action"] == "build_summed_area_table"
    assert logged[1]["result_type"] == "SummedAreaTable"


def test_build_failure_is_logged_and_raised(caplog):
    caplog.set_level(logging.DEBUG, logger="summed_area.decor")
    with pytest.raises(InvalidRegionError):
        build(ArraySource(np.ones((2, 2))), region=((1, 1), (0, 0)))
    logged = records(caplog)
    assert logged[-1]["status"] == "error"
    assert logged[-1]["error_type"] == "InvalidRegionError"


def test_bare_decorator(caplog):
    caplog.set_level(logging.INFO, logger="summed_area.decor")

    @log_action
    def double(value):
        return 2 * value

    assert double(21) == 42
    logged = records(caplog)
    assert logged[-1]["action"] == "double"
    assert logged[-1]["result"] == 42


def test_excluded_args(caplog):
    caplog.set_level(logging.INFO, logger="summed_area.decor")

    @log_action("secret", exclude_args=["token"])
    def call(token, n):
        return n

    call("hunter2", 3)
    assert "token" not in records(caplog)[0]["args"]


def test_json_serializable():
    assert json_serializable(np.zeros((2, 3))) == "<ndarray shape=(2, 3) dtype=float64>"
    assert json_serializable(np.int64(5)) == 5
    assert json_serializable(list(range(5)), max_length=3) == [0, 1, 2, "..."]
    assert json_serializable({"a": (1, 2)}) == {"a": [1, 2]}


def test_disabled_level_skips_serialization(caplog, monkeypatch):
    caplog.set_level(logging.WARNING, logger="summed_area.decor")

    def fail(*args, **kwargs):
        raise AssertionError("serialized while logging is disabled")

    monkeypatch.setattr(decor, "json_serializable", fail)
    table = build(ArraySource(np.ones((2, 2))))
    assert table.get_overall_sum() == 4
    assert records(caplog) == []


def test_disabled_level_still_logs_errors(caplog):
    caplog.set_level(logging.WARNING, logger="summed_area.decor")
    with pytest.raises(InvalidRegionError):
        build(ArraySource(np.ones((2, 2))), region=((1, 1), (0, 0)))
    errors = [r for r in caplog.records if r.name == "summed_area.decor"]
    assert [r.levelno for r in errors] == [logging.ERROR]
    assert "InvalidRegionError" in errors[0].getMessage()
