"""Flow-mode resolver and thermosiphon solver tests."""

import pytest

from solar_loop_simulator.fluid_library import FluidType, lookup
from solar_loop_simulator.flow_resolver import (
    GRAVITY_RETURN_COEFF,
    PASSIVE_FLOW_LIMIT_COEFF,
    THERMOSIPHON_COEFF,
    FlowMode,
    PassiveFlowModel,
    friction_factor,
    gravity_return_flow,
    passive_return_flow,
    proportional_thermosiphon_flow,
    resolve_flow_rate,
    thermosiphon_flow,
)
from solar_loop_simulator.geometry import LoopPipeGeometry

MODELS = list(PassiveFlowModel)


def test_pump_above_threshold_is_forced(water):
    flow = resolve_flow_rate(1.0, 100.0, 70.0, 10.0, water)
    assert flow.mode == FlowMode.FORCED
    assert flow.flow_rate == 1.0
    assert flow.mass_flow_rate(water.density) == pytest.approx(1.0 / 60000 * 998.0)


def test_pump_exactly_zero_stops_circulation(water):
    flow = resolve_flow_rate(0.0, 140.0, 70.0, 10.0, water)
    assert flow.mode == FlowMode.STOPPED
    assert flow.flow_rate == 0.0


@pytest.mark.parametrize("model", MODELS)
def test_trickle_uses_passive_flow_capped_at_pump_setting(water, model):
    flow = resolve_flow_rate(0.005, 100.0, 70.0, 10.0, water, model=model)
    assert flow.mode == FlowMode.PASSIVE
    assert 0.0 < flow.flow_rate <= 0.005


@pytest.mark.parametrize("model", MODELS)
@pytest.mark.parametrize("elevation", [0.0, -3.0])
@pytest.mark.parametrize("panel_temp", [60.0, 70.0])
def test_no_passive_path_without_head_or_buoyancy(water, model, elevation, panel_temp):
    assert passive_return_flow(panel_temp, 70.0, elevation, water, model=model) == 0.0
    flow = resolve_flow_rate(0.005, panel_temp, 70.0, elevation, water, model=model)
    assert flow.flow_rate == 0.0


@pytest.mark.parametrize("model", MODELS)
@pytest.mark.parametrize("panel_temp", [40.0, 70.0, 160.0])
def test_gravity_path_active_whenever_tank_is_above_panel(water, model, panel_temp):
    assert passive_return_flow(panel_temp, 70.0, 2.0, water, model=model) > 0.0


def test_passive_candidates_are_alternatives_not_additive(water):
    gravity = gravity_return_flow(10.0)
    siphon = proportional_thermosiphon_flow(100.0, 70.0)
    assert gravity == pytest.approx(GRAVITY_RETURN_COEFF * 10.0)
    assert siphon == pytest.approx(THERMOSIPHON_COEFF * 30.0)
    passive = passive_return_flow(100.0, 70.0, 10.0, water, model=PassiveFlowModel.PROPORTIONAL)
    assert passive == pytest.approx(max(gravity, siphon))


def test_friction_factor_regimes():
    assert friction_factor(1000.0) == pytest.approx(0.064)
    turbulent = friction_factor(1e5, 1e-4)
    assert 0.015 < turbulent < 0.025
    assert friction_factor(0.0) == 64.0


def test_thermosiphon_needs_hotter_panel_and_positive_head(water):
    assert thermosiphon_flow(70.0, 70.0, 10.0, water).flow_rate == 0.0
    assert thermosiphon_flow(60.0, 70.0, 10.0, water).flow_rate == 0.0
    assert thermosiphon_flow(100.0, 70.0, 0.0, water).flow_rate == 0.0
    assert thermosiphon_flow(100.0, 70.0, -5.0, water).flow_rate == 0.0


def test_thermosiphon_solution_within_limits(water):
    pipe = LoopPipeGeometry()
    solution = thermosiphon_flow(100.0, 70.0, 10.0, water, pipe)
    limit = PASSIVE_FLOW_LIMIT_COEFF * 10.0 * pipe.inner_diameter_m
    assert 0.0 < solution.flow_rate <= limit
    assert 1 <= solution.iterations <= 10
    assert solution.velocity > 0.0
    assert solution.reynolds > 0.0


def test_thermosiphon_grows_with_temperature_excess(water):
    weak = thermosiphon_flow(80.0, 70.0, 10.0, water).flow_rate
    strong = thermosiphon_flow(150.0, 70.0, 10.0, water).flow_rate
    assert strong > weak > 0.0


def test_thermosiphon_clamped_to_pump_setting(water):
    solution = thermosiphon_flow(150.0, 70.0, 10.0, water, max_flow=0.004)
    assert solution.flow_rate == pytest.approx(0.004)


def test_viscous_fluid_circulates_slower():
    water = thermosiphon_flow(120.0, 70.0, 5.0, lookup(FluidType.WATER))
    oil = thermosiphon_flow(120.0, 70.0, 5.0, lookup(FluidType.SILICONE))
    assert oil.velocity < water.velocity
