"""Streamlit front end tests, driven through streamlit's AppTest harness."""

import time
from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

import solar_loop_simulator
from solar_loop_simulator.scheduler import ManualScheduler
from solar_loop_simulator.simulation_core import RunStatus

APP_PATH = str(Path(solar_loop_simulator.__file__).with_name("app.py"))


def _button(at, label):
    return next(b for b in at.sidebar.button if b.label == label)


@pytest.fixture
def app():
    at = AppTest.from_file(APP_PATH, default_timeout=30)
    at.run()
    assert not at.exception
    yield at
    at.session_state["engine"].reset()


def test_initial_page(app):
    engine = app.session_state["engine"]
    assert isinstance(engine.scheduler, ManualScheduler)
    assert engine.status == RunStatus.IDLE
    assert _button(app, "Pause").disabled


def test_pause_available_right_after_start(app):
    _button(app, "Start").click().run()
    engine = app.session_state["engine"]
    assert engine.status == RunStatus.RUNNING
    assert not _button(app, "Pause").disabled

    _button(app, "Pause").click().run()
    assert engine.status == RunStatus.PAUSED
    assert _button(app, "Pause").disabled

    _button(app, "Reset").click().run()
    assert engine.status == RunStatus.IDLE
    assert engine.state.time == 0
    assert not app.exception


def test_refresh_fires_elapsed_ticks(app):
    _button(app, "Start").click().run()
    engine = app.session_state["engine"]
    ticks_before = engine.state.time

    app.session_state["last_tick_at"] = time.monotonic() - 3.5
    app.run()
    assert engine.state.time - ticks_before >= 3
    assert len(engine.history) == engine.state.time


def test_paused_engine_ignores_elapsed_time(app):
    _button(app, "Start").click().run()
    _button(app, "Pause").click().run()
    engine = app.session_state["engine"]
    paused_at = engine.state.time

    app.session_state["last_tick_at"] = time.monotonic() - 5.0
    app.run()
    assert engine.state.time == paused_at
