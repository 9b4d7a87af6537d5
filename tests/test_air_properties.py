"""Air property model tests."""

import pytest

from solar_loop_simulator.air_properties import (
    K_AIR_REF,
    MU_REF,
    PR_REF,
    SEA_LEVEL_PRESSURE,
    air_density,
    air_pressure,
    air_properties,
    air_thermal_conductivity,
    air_viscosity,
    fahrenheit_to_kelvin,
    kelvin_to_fahrenheit,
    prandtl_number,
)


def test_temperature_conversion():
    assert fahrenheit_to_kelvin(32.0) == pytest.approx(273.15)
    assert fahrenheit_to_kelvin(212.0) == pytest.approx(373.15)
    assert kelvin_to_fahrenheit(fahrenheit_to_kelvin(77.0)) == pytest.approx(77.0)


def test_pressure_drops_with_elevation_and_ignores_negative_values():
    assert air_pressure(0.0) == pytest.approx(SEA_LEVEL_PRESSURE)
    assert air_pressure(-50.0) == pytest.approx(SEA_LEVEL_PRESSURE)
    assert air_pressure(1000.0) < SEA_LEVEL_PRESSURE


def test_density_from_ideal_gas_law():
    # 20 C at sea level
    assert air_density(68.0) == pytest.approx(1.204, rel=1e-3)
    assert air_density(120.0) < air_density(68.0)
    assert air_density(68.0, elevation_m=1500.0) < air_density(68.0)


def test_sutherland_viscosity():
    assert air_viscosity(32.0) == pytest.approx(MU_REF)
    assert air_viscosity(100.0) > air_viscosity(32.0)


def test_conductivity_is_linear_with_optional_irradiance_boost():
    assert air_thermal_conductivity(32.0) == pytest.approx(K_AIR_REF)
    k50 = air_thermal_conductivity(50.0)
    k68 = air_thermal_conductivity(68.0)
    k86 = air_thermal_conductivity(86.0)
    assert k68 - k50 == pytest.approx(k86 - k68)
    assert air_thermal_conductivity(68.0, irradiance=1000.0) > k68


def test_prandtl_number_and_flow_correction():
    assert prandtl_number(32.0) == pytest.approx(PR_REF)
    assert prandtl_number(32.0, flow_rate=10.0) == pytest.approx(PR_REF * 1.1)
    assert prandtl_number(32.0, flow_rate=40.0) == pytest.approx(PR_REF * 1.1)


def test_air_properties_bundle():
    air = air_properties(80.0)
    assert air.density == pytest.approx(air_density(80.0))
    assert air.prandtl == pytest.approx(prandtl_number(80.0))
    assert air.kinematic_viscosity == pytest.approx(air.viscosity / air.density)
    assert 1.0e-5 < air.kinematic_viscosity < 2.0e-5
