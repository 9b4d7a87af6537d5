"""
Solar Loop Simulator
====================
Streamlit web application driving the simulation engine.

Run with: streamlit run solar_loop_simulator/app.py
"""

import time

import streamlit as st

from solar_loop_simulator.fluid_library import get_library
from solar_loop_simulator.flow_resolver import PassiveFlowModel
from solar_loop_simulator.geometry import GeometryPresets
from solar_loop_simulator.scheduler import ManualScheduler
from solar_loop_simulator.simulation_core import (
    DEFAULT_PARAMS,
    ParameterValidationError,
    RunStatus,
    SimulationConfig,
    SimulationParameters,
    SolarLoopSimulation,
)
from solar_loop_simulator.visualization import (
    create_combined_dashboard,
    export_data_to_csv,
)

# Page config
st.set_page_config(
    page_title="Solar Loop Simulator",
    page_icon="☀️",
    layout="wide",
    initial_sidebar_state="expanded"
)


def _get_engine(config: SimulationConfig) -> SolarLoopSimulation:
    """One engine per browser session; rebuilt when the configuration changes"""
    if st.session_state.get('engine_config') != config:
        engine = st.session_state.get('engine')
        if engine is not None:
            engine.reset()
        # Ticks are fired from the refresh fragment, so nothing outlives the session
        st.session_state.engine = SolarLoopSimulation(config=config, scheduler=ManualScheduler())
        st.session_state.engine_config = config
    return st.session_state.engine


def _advance_clock(engine: SolarLoopSimulation):
    """Fire one tick per tick interval of wall time since the last refresh"""
    interval = engine.config.tick_interval_s
    now = time.monotonic()
    last = st.session_state.get('last_tick_at', now)
    periods = int((now - last) / interval)
    if periods > 0:
        engine.scheduler.advance(periods)
        last += periods * interval
    st.session_state.last_tick_at = last


def _on_start(engine: SolarLoopSimulation, params: SimulationParameters):
    try:
        engine.start(params)
    except ParameterValidationError as e:
        st.session_state.start_errors = e.errors
        return
    st.session_state.start_errors = []
    st.session_state.last_tick_at = time.monotonic()


def _on_pause(engine: SolarLoopSimulation):
    engine.pause()


def _on_reset(engine: SolarLoopSimulation):
    st.session_state.start_errors = []
    engine.reset()


def _sidebar_parameters() -> SimulationParameters:
    library = get_library()
    defaults = DEFAULT_PARAMS
    labels = library.list_labels()
    fluids = library.list_fluids()

    st.subheader("1. Loop Fluid")
    fluid = st.selectbox("Fluid", fluids, index=0, format_func=lambda f: labels[f])
    with st.expander("Fluid properties"):
        for key, value in library.get_fluid_info(fluid).items():
            st.text(f"{key}: {value}")

    st.subheader("2. Collector")
    irradiance = st.number_input("Irradiance (W/m2)", value=defaults.irradiance, min_value=0.0)
    efficiency = st.number_input("Base Efficiency", value=defaults.efficiency,
                                 min_value=0.0, max_value=1.0, step=0.05)
    panel_area = st.number_input("Panel Area (m2)", value=defaults.panel_area, min_value=0.1)
    ambient_temp = st.number_input("Ambient Temp (F)", value=defaults.ambient_temp)

    st.subheader("3. Tank & Loop")
    tank_volume = st.number_input("Tank Volume (L)", value=defaults.tank_volume, min_value=1.0)
    initial_temp = st.number_input("Initial Tank Temp (F)", value=defaults.initial_temp)
    flow_rate = st.number_input("Pump Flow Rate (L/min)", value=defaults.flow_rate,
                                min_value=0.0, step=0.005, format="%.3f")
    elevation_diff = st.number_input("Tank Height Above Panel (m)", value=defaults.elevation_diff)

    # Form values arrive as plain str/float; from_dict maps the fluid id
    return SimulationParameters.from_dict({
        'fluid': fluid,
        'irradiance': irradiance,
        'efficiency': efficiency,
        'ambient_temp': ambient_temp,
        'flow_rate': flow_rate,
        'tank_volume': tank_volume,
        'initial_temp': initial_temp,
        'panel_area': panel_area,
        'elevation_diff': elevation_diff,
    })


def _sidebar_config() -> SimulationConfig:
    with st.expander("Model Options"):
        pipe_presets = GeometryPresets.get_pipe_presets()
        panel_presets = GeometryPresets.get_panel_presets()
        pipe_name = st.selectbox("Loop Piping", list(pipe_presets))
        panel_name = st.selectbox("Panel Type", list(panel_presets))
        model = st.radio("Thermosiphon Model",
                         [m.value for m in PassiveFlowModel], horizontal=True)
        elevation_corrections = st.checkbox("Elevation correction on losses", value=True)

    return SimulationConfig(
        panel=panel_presets[panel_name],
        pipe=pipe_presets[pipe_name],
        passive_flow_model=PassiveFlowModel(model),
        elevation_corrections=elevation_corrections,
    )


@st.fragment(run_every=1.0)
def live_results(engine: SolarLoopSimulation):
    """Advance the engine and pull the latest state and history; reruns every second"""
    _advance_clock(engine)
    state = engine.state
    params = engine.params

    col1, col2, col3, col4, col5 = st.columns(5)
    with col1:
        st.metric("Status", engine.status.value)
    with col2:
        st.metric("Time", f"{state.time} s")
    with col3:
        st.metric("Tank", f"{state.tank_temp:.2f} F")
    with col4:
        st.metric("Panel", f"{state.panel_temp:.2f} F")
    with col5:
        st.metric("Q / Q_loss", f"{state.Q:.0f} / {state.Q_loss:.0f} W")

    data = engine.get_history_data()
    if len(data['time_s']) == 0:
        st.info("Set parameters in the sidebar and press Start.")
        return

    ambient = params.ambient_temp if params else None
    fig = create_combined_dashboard(data, ambient_temp=ambient)
    st.plotly_chart(fig, use_container_width=True)

    st.download_button(
        label="Download CSV",
        data=export_data_to_csv(data),
        file_name=f"solar_loop_t{state.time}.csv",
        mime="text/csv"
    )


def main():
    st.title("Solar Thermal Loop Simulator")
    st.markdown("*Collector, storage tank and pumped or thermosiphon loop*")

    with st.sidebar:
        st.header("Simulation Parameters")
        params = _sidebar_parameters()
        config = _sidebar_config()

        engine = _get_engine(config)

        # Click callbacks run before this pass, so the status below is current
        st.divider()
        col_start, col_pause, col_reset = st.columns(3)
        with col_start:
            st.button("Start", type="primary", use_container_width=True,
                      on_click=_on_start, args=(engine, params))
        with col_pause:
            st.button("Pause", use_container_width=True,
                      disabled=engine.status != RunStatus.RUNNING,
                      on_click=_on_pause, args=(engine,))
        with col_reset:
            st.button("Reset", use_container_width=True,
                      on_click=_on_reset, args=(engine,))

    for error in st.session_state.get('start_errors', []):
        st.error(error)

    live_results(engine)


if __name__ == "__main__":
    main()
