"""
Simulation Core Module
======================
Solar collector loop simulation engine: run parameters, per-tick heat
balance between a single-node panel and a well-mixed tank, bounded history
and the start/pause/reset state machine.

Temperatures are degrees Fahrenheit throughout; flow in L/min, tank volume
in litres, heat rates in W. One tick advances one second of simulated time.
"""

import logging
import threading
from collections import deque
from dataclasses import dataclass, field, replace, asdict
from typing import Callable, Deque, Dict, Iterator, List, Optional, Tuple, Union
from enum import Enum

import numpy as np

from .air_properties import DEG_F_PER_K
from .convection import convective_coefficient
from .flow_resolver import FlowMode, PassiveFlowModel, resolve_flow_rate
from .fluid_library import FluidProperties, FluidType, get_library
from .geometry import LoopPipeGeometry, PanelGeometry
from .scheduler import Cancellation, Scheduler, ThreadingScheduler

_LOGGER = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

T_REF = 77.0                            # Efficiency rating temperature [F]
TEMP_COEFFICIENT = -0.004 / DEG_F_PER_K # Efficiency change per degree [1/F]
TIME_STEP_S = 1.0                       # Simulated time per tick [s]
HISTORY_LIMIT = 50                      # Records kept for charting
ELEVATION_LOSS_REDUCTION = 0.1          # Fractional loss reduction per 1000 m


# =============================================================================
# ENUMERATIONS
# =============================================================================

class RunStatus(Enum):
    """Engine run states"""
    IDLE = "Idle"
    RUNNING = "Running"
    PAUSED = "Paused"


# =============================================================================
# DATA CLASSES
# =============================================================================

class ParameterValidationError(ValueError):
    """Raised by start() when the run parameters are not physically valid"""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__("Invalid simulation parameters: " + "; ".join(errors))


@dataclass
class SimulationConfig:
    """Engine configuration (fixed across runs)"""
    tick_interval_s: float = 1.0        # Wall time between ticks [s]
    history_limit: int = HISTORY_LIMIT
    panel: PanelGeometry = field(default_factory=PanelGeometry)
    pipe: LoopPipeGeometry = field(default_factory=LoopPipeGeometry)
    passive_flow_model: PassiveFlowModel = PassiveFlowModel.ITERATIVE
    elevation_corrections: bool = True  # Reduce convective loss with elevation


@dataclass(frozen=True)
class SimulationParameters:
    """Run parameters, bound at start()"""
    fluid: Union[FluidType, str] = FluidType.WATER
    irradiance: float = 1000.0          # [W/m2]
    efficiency: float = 0.8             # Base efficiency at T_REF [-]
    ambient_temp: float = 70.0          # [F]
    flow_rate: float = 1.0              # Pump setting [L/min]
    tank_volume: float = 200.0          # [L]
    initial_temp: float = 68.0          # Initial tank temperature [F]
    panel_area: float = 2.0             # [m2]
    elevation_diff: float = 10.0        # Tank height above panel [m]

    @property
    def fluid_properties(self) -> FluidProperties:
        return get_library().get_fluid(self.fluid)

    def validate(self) -> None:
        """Raise ParameterValidationError listing every violated constraint"""
        errors = []

        try:
            get_library().get_fluid(self.fluid)
        except ValueError as e:
            errors.append(str(e))

        if not np.isfinite(self.irradiance) or self.irradiance < 0:
            errors.append(f"irradiance must be >= 0, got {self.irradiance}")
        if not np.isfinite(self.efficiency) or not 0 <= self.efficiency <= 1:
            errors.append(f"efficiency must be within [0, 1], got {self.efficiency}")
        if not np.isfinite(self.flow_rate) or self.flow_rate < 0:
            errors.append(f"flow_rate must be >= 0, got {self.flow_rate}")
        if not np.isfinite(self.tank_volume) or self.tank_volume <= 0:
            errors.append(f"tank_volume must be > 0, got {self.tank_volume}")
        if not np.isfinite(self.panel_area) or self.panel_area <= 0:
            errors.append(f"panel_area must be > 0, got {self.panel_area}")
        for name in ("ambient_temp", "initial_temp", "elevation_diff"):
            if not np.isfinite(getattr(self, name)):
                errors.append(f"{name} must be finite, got {getattr(self, name)}")

        if errors:
            raise ParameterValidationError(errors)

    def to_dict(self) -> Dict:
        """Plain dictionary, suitable for JSON"""
        data = asdict(self)
        if isinstance(self.fluid, FluidType):
            data["fluid"] = self.fluid.value
        return data

    @classmethod
    def from_dict(cls, data: Dict) -> "SimulationParameters":
        """Build from a dictionary produced by to_dict() or a form"""
        values = dict(data)
        fluid = values.get("fluid", FluidType.WATER)
        if isinstance(fluid, str) and fluid in get_library().list_fluids():
            values["fluid"] = FluidType(fluid)
        for key, value in values.items():
            if key != "fluid":
                values[key] = float(value)
        return cls(**values)


DEFAULT_PARAMS = SimulationParameters()


@dataclass
class SimulationState:
    """Current state of the simulation"""
    time: int = 0                       # Ticks elapsed [s]
    tank_temp: float = 0.0              # [F]
    panel_temp: float = 0.0             # [F]
    Q: float = 0.0                      # Last heat input [W]
    Q_loss: float = 0.0                 # Last convective loss [W]
    running: bool = False


@dataclass(frozen=True)
class TickRecord:
    """One history entry"""
    time: int
    tank_temp: float
    panel_temp: float
    Q: float
    Q_loss: float


@dataclass
class SimulationSummary:
    """Summary of a batch run"""
    ticks: int
    total_time_s: float
    initial_tank_temp: float
    final_tank_temp: float
    final_panel_temp: float
    tank_temp_rise: float
    energy_collected_kWh: float
    energy_lost_kWh: float
    average_heat_input_W: float
    fluid: str


def initial_state(params: SimulationParameters) -> SimulationState:
    """Tank at its initial temperature, panel at ambient"""
    return SimulationState(
        time=0,
        tank_temp=params.initial_temp,
        panel_temp=params.ambient_temp,
        Q=0.0,
        Q_loss=0.0,
        running=False,
    )


# =============================================================================
# STATE TRANSITIONS
# =============================================================================

@dataclass(frozen=True)
class StartAction:
    params: SimulationParameters


@dataclass(frozen=True)
class PauseAction:
    pass


@dataclass(frozen=True)
class ResetAction:
    params: SimulationParameters


@dataclass(frozen=True)
class TickAction:
    record: TickRecord


SimulationAction = Union[StartAction, PauseAction, ResetAction, TickAction]


def simulation_reducer(state: SimulationState, action: SimulationAction) -> SimulationState:
    """Return the state that follows action. Never mutates state."""
    if isinstance(action, TickAction):
        record = action.record
        return replace(
            state,
            time=record.time,
            tank_temp=record.tank_temp,
            panel_temp=record.panel_temp,
            Q=record.Q,
            Q_loss=record.Q_loss,
        )
    if isinstance(action, StartAction):
        return replace(initial_state(action.params), running=True)
    if isinstance(action, PauseAction):
        return replace(state, running=False)
    if isinstance(action, ResetAction):
        return initial_state(action.params)
    raise TypeError(f"Unknown simulation action: {action!r}")


# =============================================================================
# HEAT BALANCE
# =============================================================================

def compute_heat_input(irradiance: float, base_efficiency: float,
                       area: float, panel_temp: float) -> float:
    """Absorbed solar power [W]; efficiency falls linearly above T_REF, floored at 0"""
    efficiency = base_efficiency * (1 + TEMP_COEFFICIENT * (panel_temp - T_REF))
    return irradiance * max(0.0, efficiency) * area


def compute_heat_loss(area: float, panel_temp: float, ambient_temp: float,
                      h: float, elevation_diff: float = 0.0) -> float:
    """Convective loss to ambient [W]; thinner air at elevation reduces it"""
    elevation_factor = 1 - max(0.0, elevation_diff) / 1000 * ELEVATION_LOSS_REDUCTION
    return h * area * (panel_temp - ambient_temp) / DEG_F_PER_K * elevation_factor


def temperature_change(energy: float, heat_capacity: float) -> float:
    """Temperature change [F] of a node with heat_capacity [J/K] receiving energy [J]"""
    return energy / heat_capacity * DEG_F_PER_K


def integrate_tick(state: SimulationState,
                   params: SimulationParameters,
                   config: Optional[SimulationConfig] = None,
                   fluid: Optional[FluidProperties] = None) -> Tuple[SimulationState, TickRecord]:
    """
    Advance the panel and tank nodes by one time step.

    Parameters are assumed valid (see SimulationParameters.validate).

    Returns:
        (new_state, record)
    """
    config = config or SimulationConfig()
    fluid = fluid or params.fluid_properties
    dt = TIME_STEP_S
    T_panel = state.panel_temp
    T_tank = state.tank_temp
    area = params.panel_area

    Q = compute_heat_input(params.irradiance, params.efficiency, area, T_panel)

    h = convective_coefficient(T_panel, params.ambient_temp, config.panel.height_m)
    loss_elevation = params.elevation_diff if config.elevation_corrections else 0.0
    Q_loss = compute_heat_loss(area, T_panel, params.ambient_temp, h, loss_elevation)

    flow = resolve_flow_rate(
        params.flow_rate, T_panel, T_tank, params.elevation_diff,
        fluid, config.pipe, config.passive_flow_model,
    )
    m_dot = flow.mass_flow_rate(fluid.density)     # [kg/s]
    C_fluid = m_dot * fluid.specific_heat          # [W/K]

    # Tank hotter than panel: circulating fluid carries heat back to the panel
    Q_transfer = 0.0
    if m_dot > 0 and T_tank > T_panel:
        Q_transfer = C_fluid * (T_tank - T_panel) / DEG_F_PER_K

    Q_net = Q - Q_loss + Q_transfer
    new_panel_temp = T_panel + temperature_change(Q_net * dt, config.panel.heat_capacity(area))

    Q_delivered = 0.0
    if m_dot > 0:
        if T_tank > T_panel:
            dT_fluid = -Q_transfer / C_fluid * DEG_F_PER_K
        else:
            dT_fluid = Q_net / C_fluid * DEG_F_PER_K
        T_outlet = new_panel_temp + dT_fluid
        Q_delivered = C_fluid * (T_outlet - T_tank) / DEG_F_PER_K

    tank_mass = params.tank_volume / 1000 * fluid.density
    new_tank_temp = T_tank + temperature_change(Q_delivered * dt, tank_mass * fluid.specific_heat)

    record = TickRecord(
        time=state.time + 1,
        tank_temp=float(new_tank_temp),
        panel_temp=float(new_panel_temp),
        Q=float(Q),
        Q_loss=float(Q_loss),
    )
    if flow.mode != FlowMode.FORCED:
        _LOGGER.debug("Tick %d: %s flow %.4f L/min", record.time, flow.mode.value, flow.flow_rate)
    return simulation_reducer(state, TickAction(record)), record


# =============================================================================
# HISTORY
# =============================================================================

class HistoryBuffer:
    """Most recent tick records, oldest evicted first"""

    def __init__(self, max_length: int = HISTORY_LIMIT):
        if max_length < 1:
            raise ValueError(f"max_length must be >= 1, got {max_length}")
        self._records: Deque[TickRecord] = deque(maxlen=max_length)

    @property
    def max_length(self) -> int:
        return self._records.maxlen

    @property
    def latest(self) -> Optional[TickRecord]:
        return self._records[-1] if self._records else None

    def append(self, record: TickRecord) -> None:
        self._records.append(record)

    def clear(self) -> None:
        self._records.clear()

    def snapshot(self) -> Tuple[TickRecord, ...]:
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[TickRecord]:
        return iter(self.snapshot())

    def to_numpy(self) -> Dict[str, np.ndarray]:
        """Convert to numpy arrays"""
        records = self.snapshot()
        time = np.array([r.time for r in records], dtype=float)
        return {
            'time_s': time,
            'time_min': time / 60,
            'tank_temp_F': np.array([r.tank_temp for r in records], dtype=float),
            'panel_temp_F': np.array([r.panel_temp for r in records], dtype=float),
            'Q_W': np.array([r.Q for r in records], dtype=float),
            'Q_loss_W': np.array([r.Q_loss for r in records], dtype=float),
        }

    def to_dataframe(self):
        """Convert to pandas DataFrame"""
        import pandas as pd
        data = self.to_numpy()
        return pd.DataFrame({
            'Time (s)': data['time_s'],
            'Tank Temp (F)': data['tank_temp_F'],
            'Panel Temp (F)': data['panel_temp_F'],
            'Q (W)': data['Q_W'],
            'Q_loss (W)': data['Q_loss_W'],
        })


# =============================================================================
# MAIN SIMULATION CLASS
# =============================================================================

class SolarLoopSimulation:
    """
    Solar collector loop engine.

    Owns the current state and history. start() binds parameters and begins
    ticking once per config.tick_interval_s through the scheduler; pause()
    and reset() cancel the timer. Ticks are serialized by a lock, and each
    timer carries a generation number so a firing from a cancelled timer is
    dropped.
    """

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        scheduler: Optional[Scheduler] = None,
        on_tick: Optional[Callable[[SimulationState, TickRecord], None]] = None
    ):
        self.config = config or SimulationConfig()
        self.scheduler = scheduler or ThreadingScheduler()
        self.on_tick = on_tick

        self._lock = threading.RLock()
        self._params: Optional[SimulationParameters] = None
        self._fluid: Optional[FluidProperties] = None
        self._state = initial_state(DEFAULT_PARAMS)
        self._history = HistoryBuffer(self.config.history_limit)
        self._status = RunStatus.IDLE
        self._timer: Optional[Cancellation] = None
        self._generation = 0

    # --- Read accessors ---

    @property
    def state(self) -> SimulationState:
        with self._lock:
            return replace(self._state)

    @property
    def history(self) -> Tuple[TickRecord, ...]:
        with self._lock:
            return self._history.snapshot()

    @property
    def params(self) -> Optional[SimulationParameters]:
        return self._params

    @property
    def status(self) -> RunStatus:
        return self._status

    @property
    def is_running(self) -> bool:
        return self._status == RunStatus.RUNNING

    def get_history_data(self) -> Dict[str, np.ndarray]:
        """History as numpy arrays, for plotting and export"""
        with self._lock:
            return self._history.to_numpy()

    def get_history_dataframe(self):
        with self._lock:
            return self._history.to_dataframe()

    # --- Controls ---

    def start(self, params: SimulationParameters) -> None:
        """Bind params, reinitialise state and history, and begin ticking"""
        params.validate()
        fluid = params.fluid_properties

        with self._lock:
            self._cancel_timer()
            self._params = params
            self._fluid = fluid
            self._state = simulation_reducer(self._state, StartAction(params))
            self._history.clear()
            self._status = RunStatus.RUNNING
            generation = self._generation
            self._timer = self.scheduler.schedule_interval(
                self.config.tick_interval_s,
                lambda: self._on_timer(generation),
            )

        _LOGGER.info(
            "Simulation started: %s, %.0f W/m2, %.2f L/min, tank %.0f L at %.1f F",
            fluid.label, params.irradiance, params.flow_rate,
            params.tank_volume, params.initial_temp,
        )

    def pause(self) -> None:
        """Stop ticking, keeping state and history. No-op unless running."""
        with self._lock:
            if self._status != RunStatus.RUNNING:
                return
            self._cancel_timer()
            self._state = simulation_reducer(self._state, PauseAction())
            self._status = RunStatus.PAUSED
            time = self._state.time
        _LOGGER.info("Simulation paused at t=%d s", time)

    def reset(self) -> None:
        """Stop ticking and restore the initial state of the last-bound params"""
        with self._lock:
            self._cancel_timer()
            params = self._params or DEFAULT_PARAMS
            self._state = simulation_reducer(self._state, ResetAction(params))
            self._history.clear()
            self._status = RunStatus.IDLE
        _LOGGER.info("Simulation reset")

    def step(self) -> TickRecord:
        """Run one tick immediately, regardless of the timer"""
        with self._lock:
            if self._params is None:
                raise RuntimeError("No parameters bound; call start() first")
            self._state, record = integrate_tick(
                self._state, self._params, self.config, self._fluid)
            self._history.append(record)
            state = replace(self._state)

        _LOGGER.debug(
            "Tick %d: tank %.3f F, panel %.3f F, Q %.1f W, Q_loss %.1f W",
            record.time, record.tank_temp, record.panel_temp, record.Q, record.Q_loss,
        )
        if self.on_tick:
            try:
                self.on_tick(state, record)
            except Exception:
                _LOGGER.exception("on_tick listener failed at t=%d s", record.time)
        return record

    def run(self, n_ticks: int) -> SimulationSummary:
        """Run n_ticks synchronously and summarise them"""
        if self._params is None:
            raise RuntimeError("No parameters bound; call start() first")

        initial_tank = self.state.tank_temp
        E_in = 0.0
        E_loss = 0.0
        for _ in range(n_ticks):
            record = self.step()
            E_in += record.Q * TIME_STEP_S
            E_loss += record.Q_loss * TIME_STEP_S

        final = self.state
        total_time = n_ticks * TIME_STEP_S
        return SimulationSummary(
            ticks=n_ticks,
            total_time_s=total_time,
            initial_tank_temp=initial_tank,
            final_tank_temp=final.tank_temp,
            final_panel_temp=final.panel_temp,
            tank_temp_rise=final.tank_temp - initial_tank,
            energy_collected_kWh=E_in / 3.6e6,
            energy_lost_kWh=E_loss / 3.6e6,
            average_heat_input_W=E_in / total_time if total_time > 0 else 0.0,
            fluid=self._fluid.label,
        )

    # --- Timer plumbing ---

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._generation += 1

    def _on_timer(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._status != RunStatus.RUNNING:
                return
            self.step()
