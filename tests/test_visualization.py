"""Chart and export tests."""

import pytest

from solar_loop_simulator.visualization import (
    create_combined_dashboard,
    create_power_plot,
    create_temperature_plot,
    export_data_to_csv,
)


@pytest.fixture
def history_data(engine, scheduler, params):
    engine.start(params)
    scheduler.advance(5)
    return engine.get_history_data()


def test_temperature_plot(history_data):
    fig = create_temperature_plot(history_data, ambient_temp=70.0)
    assert [trace.name for trace in fig.data] == ['Panel', 'Tank']
    assert len(fig.layout.shapes) == 1
    assert len(fig.data[0].x) == 5


def test_power_plot(history_data):
    fig = create_power_plot(history_data)
    assert len(fig.data) == 2
    assert fig.layout.yaxis.title.text == "Power (W)"


def test_dashboard_has_both_panels(history_data):
    fig = create_combined_dashboard(history_data)
    assert len(fig.data) == 4
    assert fig.data[2].yaxis == 'y2'


def test_csv_export(history_data):
    csv = export_data_to_csv(history_data)
    lines = csv.strip().splitlines()
    assert lines[0] == 'Time (s),Tank Temp (F),Panel Temp (F),Q (W),Q_loss (W)'
    assert len(lines) == 6
    assert lines[1].startswith('1.0,')


def test_empty_history_exports_header_only(engine):
    csv = export_data_to_csv(engine.get_history_data())
    assert csv.strip() == 'Time (s),Tank Temp (F),Panel Temp (F),Q (W),Q_loss (W)'
