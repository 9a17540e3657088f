"""
Reusable UI components and blocks.
"""
import streamlit as st
import pandas as pd
from typing import Iterable

from ops_dashboard.data.loader import SourceStatus
from ops_dashboard.metrics.daily_ops import PeriodSummary
from ops_dashboard.ui.formatting import (
    band_color,
    band_dot,
    fmt_hours,
    fmt_hours0,
    fmt_ratio_pct,
    fmt_signed,
)


def render_source_status(statuses: Iterable[SourceStatus]):
    """
    Render one status pill per data source.
    """
    statuses = list(statuses)
    if not statuses:
        return

    cols = st.columns(len(statuses))
    for col, status in zip(cols, statuses):
        with col:
            icon = "✅" if status.ok else "⚪"
            st.markdown(f"{icon} **{status.name}**  \n{status.label}")


def render_period_card(summary: PeriodSummary):
    """
    Render an MTD/YTD card: headline, budget/actual/variance, progress bar
    and per-division lines.
    """
    status = summary.status

    st.markdown(
        f"{band_dot(status.band)} **{summary.label}** "
        f"<span style='color:#6c757d'>{summary.start} → {summary.end}</span>",
        unsafe_allow_html=True,
    )
    st.subheader(summary.headline)

    show_variance = summary.has_budget or summary.actual_value > 0
    c1, c2, c3, c4 = st.columns(4)
    with c1:
        st.metric("Budget", fmt_hours(summary.budget_value))
    with c2:
        st.metric("Actual", fmt_hours(summary.actual_value))
    with c3:
        st.metric("Variance", fmt_signed(summary.variance) if show_variance else "—")
    with c4:
        st.metric("% of budget", fmt_ratio_pct(summary.pct))

    st.progress(summary.progress)

    st.caption(
        f"Maintenance {fmt_hours(summary.actual.maint)} / {fmt_hours(summary.budget.maint)} · "
        f"Construction {fmt_hours(summary.actual.cons)} / {fmt_hours(summary.budget.cons)} · "
        f"Budget source: {summary.budget.source.value}"
    )


def _band_style(val) -> str:
    return f"color: {band_color(val)}; font-weight: 600"


def render_two_week_table(df: pd.DataFrame):
    """
    Render the trailing two-week table with formatted numbers.
    """
    if len(df) == 0:
        st.info("No days to show.")
        return

    display = df.copy()
    for col in ["budget_maint", "budget_cons", "budget_total",
                "actual_maint", "actual_cons", "actual_total"]:
        display[col] = display[col].apply(fmt_hours)
    display["delta_hours"] = display["delta_hours"].apply(fmt_signed)
    display["delta_pct"] = display["delta_pct"].apply(fmt_ratio_pct)
    display["missed_tickets"] = display["missed_tickets"].apply(fmt_hours0)
    display["safety_incidents"] = display["safety_incidents"].apply(fmt_hours0)

    display = display.rename(columns={
        "date": "Date",
        "day_type": "Day type",
        "budget_maint": "Budget maint",
        "budget_cons": "Budget const",
        "budget_total": "Budget total",
        "actual_maint": "Actual maint",
        "actual_cons": "Actual const",
        "actual_total": "Actual total",
        "delta_hours": "Δ hrs",
        "delta_pct": "Δ %",
        "missed_tickets": "Missed tickets",
        "safety_incidents": "Safety",
        "notes": "Notes",
        "budget_source": "Source",
        "band": "Status",
    })

    styled = display.style.map(_band_style, subset=["Status"])
    st.dataframe(styled, use_container_width=True, hide_index=True)
