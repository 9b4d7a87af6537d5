"""
Visualization Module
====================
Plotly-based interactive plotting and export of the simulation history.
"""

import numpy as np
import plotly.graph_objects as go
from plotly.subplots import make_subplots
from typing import Dict, Optional


def create_temperature_plot(data: Dict[str, np.ndarray],
                            ambient_temp: Optional[float] = None,
                            title: str = "Temperature vs Time") -> go.Figure:
    """Create tank and panel temperature vs time plot"""
    fig = go.Figure()

    fig.add_trace(go.Scatter(
        x=data['time_s'],
        y=data['panel_temp_F'],
        mode='lines',
        name='Panel',
        line=dict(color='red', width=2)
    ))

    fig.add_trace(go.Scatter(
        x=data['time_s'],
        y=data['tank_temp_F'],
        mode='lines',
        name='Tank',
        line=dict(color='blue', width=2, dash='dash')
    ))

    if ambient_temp is not None:
        fig.add_hline(y=ambient_temp, line_dash="dot", line_color="gray",
                      annotation_text="Ambient", annotation_position="right")

    fig.update_layout(
        title=title,
        xaxis_title="Time (s)",
        yaxis_title="Temperature (F)",
        legend=dict(yanchor="top", y=0.99, xanchor="left", x=0.01),
        hovermode='x unified'
    )

    return fig


def create_power_plot(data: Dict[str, np.ndarray],
                      title: str = "Heat Input and Loss vs Time") -> go.Figure:
    """Create heat input / convective loss vs time plot"""
    fig = go.Figure()

    fig.add_trace(go.Scatter(
        x=data['time_s'],
        y=data['Q_W'],
        mode='lines',
        name='Q (solar input)',
        line=dict(color='orange', width=2)
    ))

    fig.add_trace(go.Scatter(
        x=data['time_s'],
        y=data['Q_loss_W'],
        mode='lines',
        name='Q_loss (convection)',
        line=dict(color='brown', width=1.5, dash='dashdot')
    ))

    fig.update_layout(
        title=title,
        xaxis_title="Time (s)",
        yaxis_title="Power (W)",
        legend=dict(yanchor="top", y=0.99, xanchor="left", x=0.01),
        hovermode='x unified'
    )

    return fig


def create_combined_dashboard(data: Dict[str, np.ndarray],
                              ambient_temp: Optional[float] = None,
                              title: str = "Solar Loop Simulation") -> go.Figure:
    """Temperatures and heat rates stacked on a shared time axis"""
    fig = make_subplots(
        rows=2, cols=1,
        shared_xaxes=True,
        subplot_titles=('Temperature vs Time', 'Heat Input and Loss vs Time'),
        vertical_spacing=0.1
    )

    fig.add_trace(go.Scatter(
        x=data['time_s'], y=data['panel_temp_F'],
        mode='lines', name='Panel',
        line=dict(color='red', width=2)
    ), row=1, col=1)
    fig.add_trace(go.Scatter(
        x=data['time_s'], y=data['tank_temp_F'],
        mode='lines', name='Tank',
        line=dict(color='blue', width=2, dash='dash')
    ), row=1, col=1)

    if ambient_temp is not None:
        fig.add_hline(y=ambient_temp, line_dash="dot", line_color="gray", row=1, col=1)

    fig.add_trace(go.Scatter(
        x=data['time_s'], y=data['Q_W'],
        mode='lines', name='Q',
        line=dict(color='orange', width=2)
    ), row=2, col=1)
    fig.add_trace(go.Scatter(
        x=data['time_s'], y=data['Q_loss_W'],
        mode='lines', name='Q_loss',
        line=dict(color='brown', width=1.5, dash='dashdot')
    ), row=2, col=1)

    fig.update_xaxes(title_text="Time (s)", row=2, col=1)
    fig.update_yaxes(title_text="Temperature (F)", row=1, col=1)
    fig.update_yaxes(title_text="Power (W)", row=2, col=1)

    fig.update_layout(
        title=dict(text=title, x=0.5),
        height=700,
        hovermode='x unified'
    )

    return fig


def export_data_to_csv(data: Dict[str, np.ndarray]) -> str:
    """Export data to CSV string"""
    import pandas as pd
    df = pd.DataFrame({
        'Time (s)': data['time_s'],
        'Tank Temp (F)': data['tank_temp_F'],
        'Panel Temp (F)': data['panel_temp_F'],
        'Q (W)': data['Q_W'],
        'Q_loss (W)': data['Q_loss_W'],
    })
    return df.to_csv(index=False)
