"""
Flow Resolver
=============
Decides the circulating flow rate for each tick: pump-driven when the pump
is on, passive (gravity return or thermosiphon) when the pump is trickling,
and none when the pump is switched fully off.
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional
from enum import Enum

from .air_properties import GRAVITY
from .fluid_library import FluidProperties
from .geometry import LoopPipeGeometry


PUMP_THRESHOLD = 0.01               # Above this the pump drives the loop [L/min]
GRAVITY_RETURN_COEFF = 0.01         # Gravity return per metre of head [L/min/m]
THERMOSIPHON_COEFF = 0.005          # Proportional thermosiphon [L/min/F]
PASSIVE_FLOW_LIMIT_COEFF = 50.0     # Cap per metre head per metre bore [L/min/m2]
RE_LAMINAR = 2300.0

M3S_TO_LPM = 60000.0


class FlowMode(Enum):
    """How the loop is circulating"""
    FORCED = "Forced"
    PASSIVE = "Passive"
    STOPPED = "Stopped"


class PassiveFlowModel(Enum):
    """Thermosiphon candidate used in passive mode"""
    PROPORTIONAL = "Proportional"
    ITERATIVE = "Iterative"


@dataclass(frozen=True)
class FlowResolution:
    """Effective flow for one tick"""
    flow_rate: float        # [L/min]
    mode: FlowMode

    def mass_flow_rate(self, density: float) -> float:
        """[kg/s]"""
        return self.flow_rate / M3S_TO_LPM * density


@dataclass(frozen=True)
class ThermosiphonSolution:
    """Result of the iterative thermosiphon solve"""
    flow_rate: float        # [L/min]
    velocity: float         # [m/s], before clamping
    reynolds: float
    iterations: int
    converged: bool


_NO_THERMOSIPHON = ThermosiphonSolution(0.0, 0.0, 0.0, 0, True)


def friction_factor(reynolds: float, relative_roughness: float = 0.0) -> float:
    """
    Darcy friction factor

    Laminar: f = 64/Re. Turbulent: Swamee-Jain explicit form of Colebrook.
    """
    if reynolds < RE_LAMINAR:
        return 64.0 / max(reynolds, 1.0)
    term = relative_roughness / 3.7 + 5.74 / reynolds ** 0.9
    return 0.25 / np.log10(term) ** 2


def gravity_return_flow(elevation_diff: float) -> float:
    """Gravity-assisted return, only when the tank sits above the panel [L/min]"""
    if elevation_diff <= 0:
        return 0.0
    return GRAVITY_RETURN_COEFF * elevation_diff


def proportional_thermosiphon_flow(panel_temp: float, tank_temp: float) -> float:
    """Thermosiphon proportional to how much hotter the panel is [L/min]"""
    excess = panel_temp - tank_temp
    if excess <= 0:
        return 0.0
    return THERMOSIPHON_COEFF * excess


def thermosiphon_flow(panel_temp: float,
                      tank_temp: float,
                      elevation_diff: float,
                      fluid: FluidProperties,
                      pipe: Optional[LoopPipeGeometry] = None,
                      max_flow: Optional[float] = None,
                      max_iterations: int = 10,
                      tolerance: float = 1e-6) -> ThermosiphonSolution:
    """
    Solve for buoyancy-driven loop velocity.

    The driving head comes from the density difference between a column of
    panel-temperature fluid and one of tank-temperature fluid, both of height
    elevation_diff. Starting from the frictionless velocity sqrt(2*g*head),
    the loop balance g*head = (1 + f*L/D) * v^2 / 2 is iterated until the
    velocity change drops below tolerance or the budget runs out.

    Args:
        panel_temp: Panel (hot leg) temperature [F]
        tank_temp: Tank (cold leg) temperature [F]
        elevation_diff: Tank height above panel [m]
        fluid: Loop fluid
        pipe: Loop piping; defaults to LoopPipeGeometry()
        max_flow: Additional cap, typically the nominal pump setting [L/min]
        max_iterations: Iteration budget
        tolerance: Convergence tolerance on velocity [m/s]
    """
    if panel_temp <= tank_temp or elevation_diff <= 0:
        return _NO_THERMOSIPHON

    pipe = pipe or LoopPipeGeometry()

    rho_hot = fluid.density_at(panel_temp)
    rho_cold = fluid.density_at(tank_temp)
    rho_mean = (rho_hot + rho_cold) / 2
    head = (rho_cold - rho_hot) / rho_mean * elevation_diff
    if head <= 0:
        return _NO_THERMOSIPHON

    D = pipe.inner_diameter_m
    v = np.sqrt(2 * GRAVITY * head)
    Re = 0.0
    converged = False
    iterations = 0

    for iterations in range(1, max_iterations + 1):
        Re = rho_mean * v * D / fluid.viscosity
        f = friction_factor(Re, pipe.relative_roughness)
        v_balance = np.sqrt(2 * GRAVITY * head / (1 + f * pipe.length_to_diameter))
        change = abs(v_balance - v)
        v = v_balance
        if change < tolerance:
            converged = True
            break

    flow = v * pipe.flow_area_m2 * M3S_TO_LPM
    flow = min(flow, PASSIVE_FLOW_LIMIT_COEFF * elevation_diff * D)
    if max_flow is not None:
        flow = min(flow, max_flow)

    return ThermosiphonSolution(
        flow_rate=float(max(flow, 0.0)),
        velocity=float(v),
        reynolds=float(Re),
        iterations=iterations,
        converged=converged,
    )


def passive_return_flow(panel_temp: float,
                        tank_temp: float,
                        elevation_diff: float,
                        fluid: FluidProperties,
                        pipe: Optional[LoopPipeGeometry] = None,
                        model: PassiveFlowModel = PassiveFlowModel.ITERATIVE) -> float:
    """
    Passive flow candidate [L/min]

    Gravity return and thermosiphon drive the same return path, so the larger
    of the two is taken rather than their sum.
    """
    gravity = gravity_return_flow(elevation_diff)
    if model == PassiveFlowModel.ITERATIVE:
        siphon = thermosiphon_flow(panel_temp, tank_temp, elevation_diff, fluid, pipe).flow_rate
    else:
        siphon = proportional_thermosiphon_flow(panel_temp, tank_temp)
    return max(gravity, siphon, 0.0)


def resolve_flow_rate(pump_setting: float,
                      panel_temp: float,
                      tank_temp: float,
                      elevation_diff: float,
                      fluid: FluidProperties,
                      pipe: Optional[LoopPipeGeometry] = None,
                      model: PassiveFlowModel = PassiveFlowModel.ITERATIVE) -> FlowResolution:
    """Effective flow rate for the current tick"""
    if pump_setting > PUMP_THRESHOLD:
        return FlowResolution(pump_setting, FlowMode.FORCED)
    if pump_setting <= 0:
        return FlowResolution(0.0, FlowMode.STOPPED)

    # Pump trickling: passive return, never more than the nominal setting
    passive = passive_return_flow(panel_temp, tank_temp, elevation_diff, fluid, pipe, model)
    return FlowResolution(min(passive, pump_setting), FlowMode.PASSIVE)
