"""Shared fixtures for the solar loop simulator tests."""

import pytest

from solar_loop_simulator.fluid_library import FluidType, get_library
from solar_loop_simulator.scheduler import ManualScheduler
from solar_loop_simulator.simulation_core import SimulationParameters, SolarLoopSimulation


@pytest.fixture
def params():
    """Reference scenario: 2 m2 panel, 200 L water tank 10 m above it."""
    return SimulationParameters(
        fluid=FluidType.WATER,
        irradiance=1000.0,
        efficiency=0.8,
        ambient_temp=70.0,
        flow_rate=1.0,
        tank_volume=200.0,
        initial_temp=68.0,
        panel_area=2.0,
        elevation_diff=10.0,
    )


@pytest.fixture
def water():
    return get_library().get_fluid(FluidType.WATER)


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def engine(scheduler):
    return SolarLoopSimulation(scheduler=scheduler)
