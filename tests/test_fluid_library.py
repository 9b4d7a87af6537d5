"""Fluid catalog tests."""

import pytest

from solar_loop_simulator.fluid_library import (
    FLUIDS,
    REFERENCE_TEMP_F,
    FluidType,
    get_library,
    lookup,
)


@pytest.mark.parametrize("fluid_type", list(FluidType))
def test_every_catalog_entry_has_positive_density_and_heat_capacity(fluid_type):
    fluid = get_library().get_fluid(fluid_type)
    assert fluid.density > 0
    assert fluid.specific_heat > 0
    assert fluid.freezing_point < fluid.boiling_point


def test_lookup_accepts_enum_and_string_id():
    assert lookup("water") is lookup(FluidType.WATER)
    assert lookup("propylene_glycol").label == "Propylene Glycol"


def test_unknown_fluid_fails_fast():
    with pytest.raises(ValueError, match="not found"):
        get_library().get_fluid("liquid_sodium")


def test_catalog_matches_listed_ids():
    library = get_library()
    assert set(library.list_fluids()) == {t.value for t in FLUIDS}
    assert library.list_labels()["silicone"] == "Silicone Oil"


def test_water_properties():
    water = lookup(FluidType.WATER)
    assert water.density == 998.0
    assert water.specific_heat == 4186.0
    assert water.kinematic_viscosity == pytest.approx(0.001002 / 998.0)


def test_density_falls_with_temperature():
    glycol = lookup(FluidType.ETHYLENE_GLYCOL)
    assert glycol.density_at(REFERENCE_TEMP_F) == pytest.approx(glycol.density)
    assert glycol.density_at(150.0) < glycol.density_at(100.0) < glycol.density_at(50.0)


def test_fluid_info_for_display():
    info = get_library().get_fluid_info("mineral_oil")
    assert info["Name"] == "Mineral Oil"
    assert info["Density"] == "850.0 kg/m3"
    assert "Boiling Point" in info
