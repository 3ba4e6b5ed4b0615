"""
Reusable chart components for the Aquarium Simulator UI.

Provides helper functions that return Plotly figures for:
  - Population over time
  - Predation events over time
  - Fish size mix
"""

import plotly.graph_objects as go
import pandas as pd


def _x_axis(df: pd.DataFrame):
    return df["tick"] if "tick" in df.columns else df.index


# ---------------------------------------------------------------------------
# Population charts
# ---------------------------------------------------------------------------

def population_over_time(
    df: pd.DataFrame,
    title: str = "Population Over Time",
) -> go.Figure:
    """
    Line chart of active entity counts over ticks.

    Args:
        df: DataFrame of tick KPIs (see MetricsCollector.kpi_names()).
        title: Chart title.

    Returns:
        Plotly figure.
    """
    fig = go.Figure()

    pop_cols = {
        "fish_active": ("Fish", "#ff5500"),
        "bubbles_active": ("Bubbles", "#00aaff"),
        "plankton_active": ("Plankton", "#55aa00"),
    }

    for col, (label, color) in pop_cols.items():
        if col in df.columns:
            fig.add_trace(go.Scatter(
                x=_x_axis(df),
                y=df[col],
                mode="lines",
                name=label,
                line=dict(color=color, width=2),
            ))

    fig.update_layout(
        title=title,
        xaxis_title="Tick",
        yaxis_title="Count",
        template="plotly_white",
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
    )
    return fig


def fish_size_mix(
    df: pd.DataFrame,
    title: str = "Fish Size Mix",
) -> go.Figure:
    """Stacked area of large vs small active fish."""
    fig = go.Figure()
    for col, label, color in (
        ("fish_small", "Small", "#ffaa00"),
        ("fish_large", "Large", "#ff5500"),
    ):
        if col in df.columns:
            fig.add_trace(go.Scatter(
                x=_x_axis(df), y=df[col], mode="lines", name=label,
                stackgroup="fish", line=dict(color=color, width=1),
            ))
    fig.update_layout(
        title=title,
        xaxis_title="Tick",
        yaxis_title="Fish",
        template="plotly_white",
    )
    return fig


# ---------------------------------------------------------------------------
# Event charts
# ---------------------------------------------------------------------------

def predation_over_time(
    df: pd.DataFrame,
    title: str = "Predation Events",
) -> go.Figure:
    """
    Bar chart of fish and shark predations per sampled tick, with the
    shark's presence shaded.

    Args:
        df: DataFrame of tick KPIs.
        title: Chart title.

    Returns:
        Plotly figure.
    """
    fig = go.Figure()
    x = _x_axis(df)

    if "predations" in df.columns:
        fig.add_trace(go.Bar(x=x, y=df["predations"], name="Fish", marker_color="#ff5500"))
    if "shark_kills" in df.columns:
        fig.add_trace(go.Bar(x=x, y=df["shark_kills"], name="Shark", marker_color="#555555"))
    if "shark_active" in df.columns:
        active = df["shark_active"].astype(str).str.lower().isin(["true", "1"])
        fig.add_trace(go.Scatter(
            x=x, y=active.astype(int), mode="lines", name="Shark present",
            line=dict(color="#aaaaaa", width=0, shape="hv"),
            fill="tozeroy", yaxis="y2",
        ))

    fig.update_layout(
        title=title,
        barmode="stack",
        xaxis_title="Tick",
        yaxis_title="Eaten",
        yaxis2=dict(overlaying="y", side="right", range=[0, 1], visible=False),
        template="plotly_white",
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
    )
    return fig
