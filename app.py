"""
Ops Budget Dashboard

Main entry point for Streamlit app: daily operations budget vs actuals.
"""
import streamlit as st
from pathlib import Path
from datetime import datetime, timezone

# Page config must be first Streamlit command
st.set_page_config(
    page_title="Ops Budget Dashboard",
    page_icon="📊",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Add package root to path
import sys
sys.path.insert(0, str(Path(__file__).parent))

from ops_dashboard.config import config
from ops_dashboard.data.calendar import year_bounds
from ops_dashboard.data.loader import (
    get_data_status,
    load_calendar,
    load_daily_log,
    load_targets,
    safe_load,
)
from ops_dashboard.logger import get_logger
from ops_dashboard.metrics.daily_ops import (
    KPI_VIEWS,
    build_two_week_table,
    default_as_of,
    summarize_mtd_ytd,
)
from ops_dashboard.ui.components import render_period_card, render_source_status, render_two_week_table
from ops_dashboard.ui.state import get_state, init_state, set_state

logger = get_logger("ops_dashboard.app")

VIEW_LABELS = {"total": "Total", "maint": "Maintenance", "const": "Construction"}


def load_year_daily_log(as_of: str):
    """Full as-of year of the daily log, so month workday counts see every day."""
    bounds = year_bounds(as_of)
    return safe_load("Daily log", lambda: load_daily_log(bounds.start, bounds.end), {})


def main():
    """Main app entry point."""

    # Initialize session state
    init_state()

    as_of = default_as_of()

    # Header
    st.title("Ops Budget Dashboard")
    st.caption(f"Budget vs actual hours through {as_of} (yesterday)")

    # Sidebar
    with st.sidebar:
        view = st.selectbox(
            "KPI view",
            KPI_VIEWS,
            index=KPI_VIEWS.index(get_state("kpi_view")),
            format_func=lambda v: VIEW_LABELS[v],
        )
        set_state("kpi_view", view)

        if st.button("Refresh daily log"):
            st.cache_data.clear()
            set_state("daily_log_refreshed_at", datetime.now(timezone.utc))
            logger.info("Manual refresh requested")

        refreshed = get_state("daily_log_refreshed_at")
        if refreshed:
            st.caption(f"Last refresh: {refreshed.strftime('%Y-%m-%d %H:%M')} UTC")

        st.page_link("pages/1_Hours_Revenue_Outlook.py", label="Hours & Revenue Outlook", icon="📈")

    # Load sources
    with st.spinner("Loading data..."):
        calendar, calendar_status = safe_load("Calendar", load_calendar, {})
        targets, targets_status = safe_load("Monthly targets", load_targets, {})
        day_records, daily_status = load_year_daily_log(as_of)

    render_source_status([calendar_status, targets_status, daily_status])

    if not config.daily_log_configured:
        st.info("Set `DAILY_LOG_URL` to show actuals from the ops daily log.")

    if not (calendar or targets or day_records):
        st.error("No budget sources available!")
        st.markdown(f"""
        ### Setup Required

        Place `targets.csv` and/or `calendar.csv` in: `{config.data_dir}`
        and configure the daily log endpoint.
        """)
        return

    # MTD / YTD
    st.markdown("---")
    mtd, ytd = summarize_mtd_ytd(as_of, view, day_records, calendar, targets)

    col1, col2 = st.columns(2)
    with col1:
        render_period_card(mtd)
    with col2:
        render_period_card(ytd)

    # Two-week table
    st.markdown("---")
    st.markdown(f"### Last {config.two_week_days} days")
    table = build_two_week_table(as_of, day_records, calendar, targets)
    render_two_week_table(table)

    # Data status
    st.markdown("---")
    with st.expander("Data Status"):
        status = get_data_status()
        col1, col2 = st.columns(2)

        with col1:
            st.markdown("**Data Files**")
            for key, info in status["files"].items():
                icon = "✅" if info["exists"] else "❌"
                st.markdown(f"{icon} `{key}` ({Path(info['path']).name})")

        with col2:
            st.markdown("**Remote Sources**")
            for key, info in status["remote"].items():
                icon = "✅" if info["configured"] else "⚪"
                st.markdown(f"{icon} `{key}` ({'configured' if info['configured'] else 'not configured'})")


if __name__ == "__main__":
    main()
