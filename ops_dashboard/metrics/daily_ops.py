"""
Daily operations metrics pack.

Single source of truth for: the trailing two-week budget vs actual table and
the MTD / YTD period summaries.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

import numpy as np
import pandas as pd

from ops_dashboard.config import config
from ops_dashboard.data.calendar import DateLike, day_key, month_bounds, month_key, shift_day, to_date, year_bounds
from ops_dashboard.data.models import CalendarTargetRecord, DayRecord, DivisionTotals, MonthlyTargetRecord, ResolvedBudget
from ops_dashboard.metrics.actuals import sum_actuals_for_range
from ops_dashboard.metrics.budget import resolve_day_budget, sum_budget_for_range
from ops_dashboard.metrics.coverage import (
    PERIOD_TRACKING_POLICY,
    SHORT_HORIZON_POLICY,
    CoverageStatus,
    classify,
    coverage_ratio,
)

KPI_VIEWS = ["total", "maint", "const"]

TWO_WEEK_COLUMNS = [
    "date", "day_type",
    "budget_maint", "budget_cons", "budget_total",
    "actual_maint", "actual_cons", "actual_total",
    "delta_hours", "delta_pct",
    "missed_tickets", "safety_incidents", "notes",
    "budget_source", "band",
]


def default_as_of(today: Optional[DateLike] = None) -> str:
    """The dashboard reports through yesterday."""
    today = to_date(today) if today is not None else pd.Timestamp.today().date()
    return shift_day(today, -1)


# =============================================================================
# TWO-WEEK TABLE
# =============================================================================

def build_two_week_table(as_of: DateLike,
                         day_records: Mapping[str, DayRecord],
                         calendar: Mapping[str, CalendarTargetRecord],
                         monthly_fallback: Mapping[str, MonthlyTargetRecord],
                         days: Optional[int] = None) -> pd.DataFrame:
    """
    Per-day budget vs actual for the trailing window ending at as_of.

    Rows run from as_of backwards. Each day's budget comes from the
    single-day resolver; delta_pct is actual/budget - 1 and NaN when the
    day has no budget.
    """
    days = days or config.two_week_days
    as_of = day_key(as_of)

    rows = []
    for i in range(days):
        key = shift_day(as_of, -i)
        rec = day_records.get(key)
        budget = resolve_day_budget(key, rec, calendar, monthly_fallback, day_records)
        rec = rec or DayRecord()

        actual_total = float(rec.actual_maint) + float(rec.actual_const)
        status = classify(coverage_ratio(actual_total, budget.total), SHORT_HORIZON_POLICY)
        rows.append({
            "date": key,
            "day_type": rec.day_type.value,
            "budget_maint": budget.maint,
            "budget_cons": budget.cons,
            "budget_total": budget.total,
            "actual_maint": float(rec.actual_maint),
            "actual_cons": float(rec.actual_const),
            "actual_total": actual_total,
            "missed_tickets": float(rec.missed_tickets),
            "safety_incidents": float(rec.safety_incidents),
            "notes": rec.notes,
            "budget_source": budget.source.value,
            "band": status.band.value,
        })

    if not rows:
        return pd.DataFrame(columns=TWO_WEEK_COLUMNS)

    df = pd.DataFrame(rows)
    df["delta_hours"] = df["actual_total"] - df["budget_total"]
    df["delta_pct"] = np.where(
        df["budget_total"] > 0,
        df["actual_total"] / df["budget_total"].where(df["budget_total"] > 0, 1.0) - 1,
        np.nan,
    )
    return df[TWO_WEEK_COLUMNS]


# =============================================================================
# PERIOD SUMMARIES
# =============================================================================

@dataclass(frozen=True)
class PeriodSummary:
    """Budget vs actual over one reporting period, seen through a KPI view."""
    label: str
    start: str
    end: str
    view: str
    budget: ResolvedBudget
    actual: DivisionTotals

    @property
    def budget_value(self) -> float:
        return self.budget.pick(self.view)

    @property
    def actual_value(self) -> float:
        return self.actual.pick(self.view)

    @property
    def has_budget(self) -> bool:
        return self.budget_value > 0

    @property
    def variance(self) -> float:
        return self.actual_value - self.budget_value

    @property
    def pct(self) -> Optional[float]:
        if not self.has_budget:
            return None
        return self.actual_value / self.budget_value

    @property
    def progress(self) -> float:
        """Progress bar fill, clamped to [0, 1]."""
        return min(1.0, max(0.0, self.pct or 0.0))

    @property
    def status(self) -> CoverageStatus:
        return classify(self.pct, PERIOD_TRACKING_POLICY)

    @property
    def headline(self) -> str:
        if not self.has_budget:
            return "No budget"
        return f"{self.actual_value:,.1f} / {self.budget_value:,.1f} hrs"


def summarize_period(label: str,
                     start: DateLike,
                     end: DateLike,
                     view: str,
                     day_records: Mapping[str, DayRecord],
                     calendar: Mapping[str, CalendarTargetRecord],
                     monthly_fallback: Mapping[str, MonthlyTargetRecord]) -> PeriodSummary:
    """Range budget and actuals for [start, end]."""
    if view not in KPI_VIEWS:
        raise ValueError(f"Unknown KPI view: {view}")
    start, end = day_key(start), day_key(end)
    return PeriodSummary(
        label=label,
        start=start,
        end=end,
        view=view,
        budget=sum_budget_for_range(start, end, day_records, calendar, monthly_fallback),
        actual=sum_actuals_for_range(start, end, day_records),
    )


def summarize_mtd_ytd(as_of: DateLike,
                      view: str,
                      day_records: Mapping[str, DayRecord],
                      calendar: Mapping[str, CalendarTargetRecord],
                      monthly_fallback: Mapping[str, MonthlyTargetRecord]):
    """(MTD, YTD) summaries ending at as_of."""
    as_of = day_key(as_of)
    mtd_start = month_bounds(month_key(as_of)).start
    ytd_start = year_bounds(as_of).start
    mtd = summarize_period("MTD", mtd_start, as_of, view, day_records, calendar, monthly_fallback)
    ytd = summarize_period("YTD", ytd_start, as_of, view, day_records, calendar, monthly_fallback)
    return mtd, ytd
