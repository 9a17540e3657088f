"""
Hours & Revenue Outlook: booked hours vs targets and capacity, revenue pace.
"""
import streamlit as st
import pandas as pd
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

from ops_dashboard.data.loader import (
    load_capacity,
    load_pipeline,
    load_revenue_actuals,
    load_targets,
    load_work_tickets,
    safe_load,
)
from ops_dashboard.data.semantic import SCOPES
from ops_dashboard.metrics.outlook import (
    build_hours_outlook,
    build_revenue_pace,
    build_revenue_year,
    default_outlook_month,
)
from ops_dashboard.metrics.coverage import SHORT_HORIZON_POLICY
from ops_dashboard.ui.charts import coverage_gauge, hours_outlook_chart, revenue_pace_chart, revenue_year_chart
from ops_dashboard.ui.components import render_source_status
from ops_dashboard.ui.formatting import band_color, band_dot, fmt_currency, fmt_hours, fmt_ratio_pct
from ops_dashboard.ui.state import get_state, init_state, set_state

st.set_page_config(page_title="Hours & Revenue Outlook", page_icon="📈", layout="wide")

SCOPE_LABELS = {"all": "All divisions", "construction": "Construction", "maintenance": "Maintenance"}


def render_division_hours(division: str, df, mk: str):
    """Chart, as-of month gauge and coverage line for one division."""
    st.markdown(f"#### {division.title()} hours")

    chart_col, gauge_col = st.columns([3, 1])
    with chart_col:
        st.plotly_chart(hours_outlook_chart(df), use_container_width=True)
    with gauge_col:
        row = df.set_index("month").loc[mk]
        ratio = None if pd.isna(row["coverage"]) else float(row["coverage"])
        st.plotly_chart(
            coverage_gauge(ratio, band_color(row["band"]), title=f"{mk} coverage",
                           on_track_at=SHORT_HORIZON_POLICY.on_track_at),
            use_container_width=True,
        )

    parts = []
    for _, row in df.iterrows():
        parts.append(f"{band_dot(row['band'])} {row['month']}: {fmt_ratio_pct(row['coverage'])}")
    st.markdown(" &nbsp; ".join(parts), unsafe_allow_html=True)


def main():
    init_state()

    st.title("Hours & Revenue Outlook")

    with st.spinner("Loading data..."):
        targets, targets_status = safe_load("Monthly targets", load_targets, {})
        pipeline, pipeline_status = safe_load("Pipeline", load_pipeline, [])
        tickets, tickets_status = safe_load("Work tickets", load_work_tickets, [])

    month_keys = list(targets.keys())
    if not month_keys:
        render_source_status([targets_status, pipeline_status, tickets_status])
        st.error("No target months loaded. Add `targets.csv` to the data directory.")
        return

    with st.spinner("Loading capacity and revenue..."):
        capacity, capacity_status = safe_load("Capacity", lambda: load_capacity(tuple(month_keys)), {})
        actuals, revenue_status = safe_load("Revenue logbook", lambda: load_revenue_actuals(tuple(month_keys)), {})

    render_source_status([targets_status, pipeline_status, tickets_status, capacity_status, revenue_status])

    # Controls
    with st.sidebar:
        scope = st.selectbox(
            "View",
            SCOPES,
            index=SCOPES.index(get_state("outlook_view")),
            format_func=lambda s: SCOPE_LABELS[s],
        )
        set_state("outlook_view", scope)

        current = get_state("as_of_month")
        if current not in month_keys:
            current = default_outlook_month(month_keys)
        mk = st.selectbox("As-of month", month_keys, index=month_keys.index(current))
        set_state("as_of_month", mk)

    # Revenue
    st.markdown("---")
    year = build_revenue_year(scope, month_keys, targets, pipeline)
    pace = build_revenue_pace(scope, mk, targets, actuals)

    col1, col2 = st.columns(2)
    with col1:
        st.plotly_chart(revenue_year_chart(year), use_container_width=True)
        st.caption(
            f"Target {fmt_currency(year['target'])} · "
            f"Pipeline {fmt_currency(year['unweighted'])} unweighted / "
            f"{fmt_currency(year['weighted'])} weighted"
        )
    with col2:
        st.plotly_chart(revenue_pace_chart(pace, title=f"Revenue pace ({mk})"), use_container_width=True)
        st.caption(
            f"Actual {fmt_currency(pace['actual'])} · projected {fmt_currency(pace['projected'])} "
            f"vs target {fmt_currency(pace['target'])}"
        )

    # Hours
    st.markdown("---")
    st.markdown("### Hours by month")
    outlook = build_hours_outlook(month_keys, targets, capacity, tickets, pipeline)

    divisions = [scope] if scope in outlook else list(outlook.keys())
    for division in divisions:
        render_division_hours(division, outlook[division], mk)

    with st.expander("Monthly detail"):
        for division in divisions:
            st.markdown(f"**{division.title()}**")
            detail = outlook[division].copy()
            for col in ["target_hours", "capacity_hours", "ticket_hours", "pipeline_hours", "booked_hours"]:
                detail[col] = detail[col].apply(fmt_hours)
            detail["coverage"] = detail["coverage"].apply(fmt_ratio_pct)
            st.dataframe(detail, use_container_width=True, hide_index=True)


main()
