"""
Standard chart wrappers using Plotly.
"""
import plotly.graph_objects as go
import pandas as pd
from typing import Dict, Optional


# =============================================================================
# CHART THEME
# =============================================================================

CHART_COLORS = {
    "primary": "#1f77b4",
    "secondary": "#ff7f0e",
    "success": "#28a745",
    "warning": "#ffc107",
    "danger": "#dc3545",
    "neutral": "#6c757d",
    "light": "#f8f9fa",
}

CHART_TEMPLATE = "plotly_white"

DEFAULT_LAYOUT = {
    "template": CHART_TEMPLATE,
    "font": {"family": "Arial, sans-serif", "size": 12},
    "margin": {"l": 50, "r": 30, "t": 40, "b": 50},
    "hoverlabel": {"bgcolor": "white"},
}


def apply_layout(fig: go.Figure, **kwargs) -> go.Figure:
    """Apply standard layout to figure."""
    layout = {**DEFAULT_LAYOUT, **kwargs}
    fig.update_layout(**layout)
    return fig


# =============================================================================
# HOURS
# =============================================================================

def hours_outlook_chart(df: pd.DataFrame, title: str = "") -> go.Figure:
    """
    Stacked ticket + pipeline bars against target and capacity lines.

    df is one division frame from build_hours_outlook.
    """
    fig = go.Figure()

    fig.add_trace(go.Bar(
        name="Work tickets",
        x=df["month"],
        y=df["ticket_hours"],
        marker_color=CHART_COLORS["primary"],
    ))
    fig.add_trace(go.Bar(
        name="Pipeline (weighted)",
        x=df["month"],
        y=df["pipeline_hours"],
        marker_color=CHART_COLORS["secondary"],
        opacity=0.7,
    ))
    fig.add_trace(go.Scatter(
        name="Target",
        x=df["month"],
        y=df["target_hours"],
        mode="lines+markers",
        line={"color": CHART_COLORS["success"], "width": 2},
    ))
    fig.add_trace(go.Scatter(
        name="Capacity",
        x=df["month"],
        y=df["capacity_hours"],
        mode="lines",
        line={"color": CHART_COLORS["neutral"], "width": 2, "dash": "dash"},
    ))

    fig.update_layout(barmode="stack", title=title)
    fig.update_yaxes(title_text="Hours")

    return apply_layout(fig, height=380)


# =============================================================================
# REVENUE
# =============================================================================

def revenue_year_chart(year: Dict[str, float], title: str = "Year revenue vs pipeline") -> go.Figure:
    """Target revenue vs unweighted and weighted pipeline dollars."""
    labels = ["Target", "Pipeline (unweighted)", "Pipeline (weighted)"]
    values = [year.get("target", 0.0), year.get("unweighted", 0.0), year.get("weighted", 0.0)]

    fig = go.Figure(go.Bar(
        x=labels,
        y=values,
        marker_color=[CHART_COLORS["success"], CHART_COLORS["neutral"], CHART_COLORS["primary"]],
        text=[f"${v:,.0f}" for v in values],
        textposition="outside",
    ))
    fig.update_layout(title=title, showlegend=False)

    return apply_layout(fig, height=320)


def revenue_pace_chart(pace: Dict[str, float], title: str = "Revenue pace") -> go.Figure:
    """Month target vs actual vs projected full-month revenue."""
    labels = ["Target", "Actual", "Projected"]
    values = [pace.get("target", 0.0), pace.get("actual", 0.0), pace.get("projected", 0.0)]

    fig = go.Figure(go.Bar(
        x=labels,
        y=values,
        marker_color=[CHART_COLORS["success"], CHART_COLORS["primary"], CHART_COLORS["secondary"]],
        text=[f"${v:,.0f}" for v in values],
        textposition="outside",
    ))
    fig.update_layout(title=title, showlegend=False)

    return apply_layout(fig, height=320)


# =============================================================================
# KPI CHARTS
# =============================================================================

def coverage_gauge(ratio: Optional[float], color: str,
                   title: str = "", on_track_at: Optional[float] = None) -> go.Figure:
    """
    Gauge of coverage in percent, with the on-track cut point as threshold.
    """
    value = (ratio or 0.0) * 100
    fig = go.Figure(go.Indicator(
        mode="gauge+number",
        value=value,
        title={"text": title},
        number={"suffix": "%", "valueformat": ".1f"},
        gauge={
            "axis": {"range": [0, max(120, value)]},
            "bar": {"color": color},
            "threshold": {
                "line": {"color": CHART_COLORS["danger"], "width": 2},
                "value": on_track_at * 100,
            } if on_track_at else None,
        },
    ))

    return apply_layout(fig, height=200)
