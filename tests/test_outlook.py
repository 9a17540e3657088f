"""
Tests for the hours and revenue outlook.
"""
import pytest
import pandas as pd
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from ops_dashboard.data.calendar import month_keys_between
from ops_dashboard.data.models import (
    CapacityRecord,
    MonthlyTargetRecord,
    PipelineOpportunity,
    RevenueActual,
    WorkTicket,
)
from ops_dashboard.metrics.coverage import CoverageBand
from ops_dashboard.metrics.outlook import (
    HOURS_COLUMNS,
    build_hours_outlook,
    build_revenue_pace,
    build_revenue_year,
    default_outlook_month,
)

YEAR = month_keys_between("2026-01", "2026-12")


@pytest.fixture
def targets():
    return {
        "2026-06": MonthlyTargetRecord(
            month="2026-06",
            maintenance_monthly=200.0,
            construction_monthly=400.0,
            maintenance_revenue=20000.0,
            construction_revenue=50000.0,
        ),
        "2026-07": MonthlyTargetRecord(month="2026-07", maintenance_revenue=10000.0),
    }


@pytest.fixture
def pipeline():
    return [
        PipelineOpportunity(division="Commercial Maintenance", status="Open", start_month="2026-06",
                            weighted_hours=600.0, weighted_dollars=3000.0, estimated_dollars=6000.0),
        PipelineOpportunity(division="Construction", status="Proposal", start_month="2026-06",
                            weighted_hours=300.0, weighted_dollars=8000.0, estimated_dollars=20000.0),
        PipelineOpportunity(division="Construction", status="Won", start_month="2026-06",
                            weighted_hours=999.0, weighted_dollars=1.0, estimated_dollars=1.0),
    ]


@pytest.fixture
def tickets():
    return [
        WorkTicket(division="Maintenance", status="Scheduled", scheduled_day="2026-06-15", estimated_hours=50.0),
        WorkTicket(division="Construction", status="Open", scheduled_day="2026-06-20", estimated_hours=20.0),
    ]


class TestHoursOutlook:
    """Tests for monthly hours coverage per division."""

    def test_both_divisions(self, targets, pipeline, tickets):
        outlook = build_hours_outlook(YEAR, targets, {}, tickets, pipeline, horizon_month=11)

        assert set(outlook.keys()) == {"construction", "maintenance"}
        assert list(outlook["maintenance"].columns) == HOURS_COLUMNS
        assert len(outlook["maintenance"]) == 12

    def test_maintenance_june(self, targets, pipeline, tickets):
        capacity = {"2026-06": CapacityRecord(month="2026-06", maintenance_capacity=300.0)}
        df = build_hours_outlook(YEAR, targets, capacity, tickets, pipeline, horizon_month=11)["maintenance"]
        june = df.set_index("month").loc["2026-06"]

        assert june["target_hours"] == 200.0
        assert june["capacity_hours"] == 300.0
        assert june["ticket_hours"] == 50.0
        assert june["pipeline_hours"] == pytest.approx(100.0)
        assert june["coverage"] == pytest.approx(0.75)
        assert june["band"] == CoverageBand.CLOSE.value

    def test_construction_pipeline_not_spread(self, targets, pipeline, tickets):
        df = build_hours_outlook(YEAR, targets, {}, tickets, pipeline)["construction"].set_index("month")

        assert df.loc["2026-06", "pipeline_hours"] == 300.0
        assert df.loc["2026-07", "pipeline_hours"] == 0.0
        assert df.loc["2026-06", "booked_hours"] == 320.0

    def test_month_without_target(self, targets, pipeline, tickets):
        df = build_hours_outlook(YEAR, targets, {}, tickets, pipeline)["construction"].set_index("month")

        assert pd.isna(df.loc["2026-07", "coverage"])
        assert df.loc["2026-07", "band"] == CoverageBand.NONE.value


class TestRevenue:
    """Tests for revenue year and pace."""

    def test_year_all_scope(self, targets, pipeline):
        year = build_revenue_year("all", YEAR, targets, pipeline)

        assert year["target"] == 80000.0
        assert year["unweighted"] == 26001.0
        assert year["weighted"] == 11001.0

    def test_year_maintenance_scope(self, targets, pipeline):
        year = build_revenue_year("maintenance", YEAR, targets, pipeline)

        assert year["target"] == 30000.0
        assert year["unweighted"] == 6000.0

    def test_pace_projects_current_month(self, targets):
        actuals = {"2026-06": RevenueActual(constr=6000.0, maint=4000.0)}

        pace = build_revenue_pace("all", "2026-06", targets, actuals, today="2026-06-10")

        assert pace["target"] == 70000.0
        assert pace["actual"] == 10000.0
        assert pace["projected"] == pytest.approx(30000.0)

    def test_pace_past_month_not_projected(self, targets):
        actuals = {"2026-06": RevenueActual(constr=6000.0)}

        pace = build_revenue_pace("construction", "2026-06", targets, actuals, today="2026-08-01")

        assert pace["projected"] == 6000.0

    def test_default_month(self):
        months = ["2026-01", "2026-02"]

        assert default_outlook_month(months, today="2026-02-10") == "2026-02"
        assert default_outlook_month(months, today="2027-05-01") == "2026-02"
        assert default_outlook_month([], today="2026-02-10") is None
