"""
Solar Loop Simulator Package
============================
Transient simulation of a solar collector, storage tank and the pumped or
thermosiphon loop connecting them.
"""

from .fluid_library import (
    FluidType,
    FluidProperties,
    FluidLibrary,
    get_library,
    lookup
)

from .air_properties import (
    AirProperties,
    fahrenheit_to_kelvin,
    kelvin_to_fahrenheit
)

from .geometry import (
    PanelGeometry,
    LoopPipeGeometry,
    GeometryPresets
)

from .convection import (
    H_FLOOR,
    churchill_chu_nusselt,
    convective_coefficient
)

from .flow_resolver import (
    FlowMode,
    PassiveFlowModel,
    FlowResolution,
    ThermosiphonSolution,
    passive_return_flow,
    resolve_flow_rate,
    thermosiphon_flow
)

from .scheduler import (
    Cancellation,
    Scheduler,
    ThreadingScheduler,
    ManualScheduler
)

from .simulation_core import (
    RunStatus,
    ParameterValidationError,
    SimulationConfig,
    SimulationParameters,
    SimulationState,
    TickRecord,
    SimulationSummary,
    HistoryBuffer,
    StartAction,
    PauseAction,
    ResetAction,
    TickAction,
    DEFAULT_PARAMS,
    initial_state,
    integrate_tick,
    simulation_reducer,
    SolarLoopSimulation
)

from .visualization import (
    create_temperature_plot,
    create_power_plot,
    create_combined_dashboard,
    export_data_to_csv
)

__version__ = "1.0.0"
__all__ = [
    # Fluids
    'FluidType',
    'FluidProperties',
    'FluidLibrary',
    'get_library',
    'lookup',
    # Air
    'AirProperties',
    'fahrenheit_to_kelvin',
    'kelvin_to_fahrenheit',
    # Geometry
    'PanelGeometry',
    'LoopPipeGeometry',
    'GeometryPresets',
    # Convection
    'H_FLOOR',
    'churchill_chu_nusselt',
    'convective_coefficient',
    # Flow
    'FlowMode',
    'PassiveFlowModel',
    'FlowResolution',
    'ThermosiphonSolution',
    'passive_return_flow',
    'resolve_flow_rate',
    'thermosiphon_flow',
    # Scheduling
    'Cancellation',
    'Scheduler',
    'ThreadingScheduler',
    'ManualScheduler',
    # Simulation
    'RunStatus',
    'ParameterValidationError',
    'SimulationConfig',
    'SimulationParameters',
    'SimulationState',
    'TickRecord',
    'SimulationSummary',
    'HistoryBuffer',
    'StartAction',
    'PauseAction',
    'ResetAction',
    'TickAction',
    'DEFAULT_PARAMS',
    'initial_state',
    'integrate_tick',
    'simulation_reducer',
    'SolarLoopSimulation',
    # Visualization
    'create_temperature_plot',
    'create_power_plot',
    'create_combined_dashboard',
    'export_data_to_csv',
]
