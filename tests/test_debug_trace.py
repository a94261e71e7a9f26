"""Tests for the optional debug tracing in debug_trace.py."""
from __future__ import annotations

import pytest

import debug_trace


@pytest.fixture()
def tracing(tmp_path):
    log_path = tmp_path / "trace.log"
    debug_trace.set_enabled(True, log_file=str(log_path))
    yield log_path
    debug_trace.set_enabled(False)


def test_disabled_by_default_prints_nothing(capsys):
    debug_trace.trace("hidden", "GEOM")
    assert capsys.readouterr().err == ""


def test_trace_writes_stderr_and_file(tracing, capsys):
    debug_trace.trace("rebuilt", "GEOM")
    debug_trace.close_log()
    assert "[GEOM    ] rebuilt" in capsys.readouterr().err
    assert "rebuilt" in tracing.read_text(encoding="utf-8")


def test_trigger_category_needs_its_own_switch(tracing, capsys):
    debug_trace.trace("armed", "TRIGGER")
    assert "armed" not in capsys.readouterr().err

    debug_trace.set_enabled(True, triggers=True, log_file=None)
    debug_trace.trace("armed", "TRIGGER")
    assert "armed" in capsys.readouterr().err


def test_trace_call_reports_duration_and_errors(tracing, capsys):
    @debug_trace.trace_call("GEOM")
    def ok():
        return 42

    @debug_trace.trace_call("GEOM")
    def broken():
        raise ValueError("bad")

    assert ok() == 42
    with pytest.raises(ValueError):
        broken()

    err = capsys.readouterr().err
    assert ">>> test_trace_call_reports_duration_and_errors.<locals>.ok" in err
    assert " ms)" in err
    assert "raised ValueError: bad" in err


def test_trace_call_is_identity_when_disabled():
    def f():
        return 1

    assert debug_trace.trace_call("GEOM")(f) is f
