"""
Hours & revenue outlook metrics pack.

Single source of truth for: monthly hours coverage per division, the
year revenue vs pipeline comparison and month revenue pace.
"""
from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Sequence

import numpy as np
import pandas as pd

from ops_dashboard.data.calendar import DateLike, month_key, to_date
from ops_dashboard.data.models import (
    CapacityRecord,
    MonthlyTargetRecord,
    PipelineOpportunity,
    RevenueActual,
    WorkTicket,
)
from ops_dashboard.data.semantic import filter_division
from ops_dashboard.metrics.coverage import SHORT_HORIZON_POLICY, classify
from ops_dashboard.modeling.pipeline import (
    bucket_by_start_month,
    bucket_tickets_by_month,
    pipeline_revenue_totals,
    spread_maintenance_pipeline,
)
from ops_dashboard.modeling.projection import project_month

DIVISIONS = ["construction", "maintenance"]

HOURS_COLUMNS = [
    "month", "target_hours", "capacity_hours",
    "ticket_hours", "pipeline_hours", "booked_hours",
    "coverage", "band",
]


def default_outlook_month(month_keys: Sequence[str], today: Optional[DateLike] = None) -> Optional[str]:
    """Current month when tracked, else the last tracked month."""
    if not month_keys:
        return None
    today = to_date(today) if today is not None else pd.Timestamp.today().date()
    current = month_key(today)
    return current if current in month_keys else list(month_keys)[-1]


# =============================================================================
# HOURS BY MONTH
# =============================================================================

def _target_hours(target: Optional[MonthlyTargetRecord], division: str) -> float:
    if target is None:
        return 0.0
    if division == "construction":
        return float(target.construction_monthly or 0.0)
    return float(target.maintenance_monthly or 0.0)


def _capacity_hours(cap: Optional[CapacityRecord], division: str) -> float:
    if cap is None:
        return 0.0
    if division == "construction":
        return float(cap.construction_capacity or 0.0)
    return float(cap.maintenance_capacity or 0.0)


def division_hours(division: str,
                   month_keys: Sequence[str],
                   targets: Mapping[str, MonthlyTargetRecord],
                   capacity: Mapping[str, CapacityRecord],
                   tickets: Sequence[WorkTicket],
                   pipeline: Sequence[PipelineOpportunity],
                   horizon_month: Optional[int] = None) -> pd.DataFrame:
    """
    Monthly hours picture for one division.

    booked_hours = active ticket hours + open pipeline hours; coverage is
    booked / target under the short-horizon policy.
    """
    if division not in DIVISIONS:
        raise ValueError(f"Unknown division: {division}")

    ticket_hours = bucket_tickets_by_month(filter_division(tickets, division), month_keys)
    opps = filter_division(pipeline, division)
    if division == "maintenance":
        pipeline_hours = spread_maintenance_pipeline(opps, month_keys, horizon_month)
    else:
        pipeline_hours = bucket_by_start_month(opps, month_keys)

    df = pd.DataFrame({
        "month": list(month_keys),
        "target_hours": [_target_hours(targets.get(mk), division) for mk in month_keys],
        "capacity_hours": [_capacity_hours(capacity.get(mk), division) for mk in month_keys],
        "ticket_hours": [ticket_hours[mk] for mk in month_keys],
        "pipeline_hours": [pipeline_hours[mk] for mk in month_keys],
    })
    df["booked_hours"] = df["ticket_hours"] + df["pipeline_hours"]

    has_target = df["target_hours"] > 0
    df["coverage"] = np.where(
        has_target,
        df["booked_hours"] / df["target_hours"].where(has_target, 1.0),
        np.nan,
    )
    df["band"] = [
        classify(None if pd.isna(r) else float(r), SHORT_HORIZON_POLICY).band.value
        for r in df["coverage"]
    ]
    return df[HOURS_COLUMNS]


def build_hours_outlook(month_keys: Sequence[str],
                        targets: Mapping[str, MonthlyTargetRecord],
                        capacity: Mapping[str, CapacityRecord],
                        tickets: Sequence[WorkTicket],
                        pipeline: Sequence[PipelineOpportunity],
                        horizon_month: Optional[int] = None) -> Dict[str, pd.DataFrame]:
    """Division -> monthly hours frame, for both divisions."""
    return {
        division: division_hours(division, month_keys, targets, capacity, tickets, pipeline, horizon_month)
        for division in DIVISIONS
    }


# =============================================================================
# REVENUE
# =============================================================================

def _scope_divisions(scope: str) -> List[str]:
    if scope == "construction":
        return ["construction"]
    if scope == "maintenance":
        return ["maintenance"]
    return list(DIVISIONS)


def target_revenue(target: Optional[MonthlyTargetRecord], scope: str) -> float:
    if target is None:
        return 0.0
    total = 0.0
    for division in _scope_divisions(scope):
        if division == "construction":
            total += float(target.construction_revenue or 0.0)
        else:
            total += float(target.maintenance_revenue or 0.0)
    return total


def actual_revenue(actual: Optional[RevenueActual], scope: str) -> float:
    if actual is None:
        return 0.0
    if scope == "construction":
        return actual.constr
    if scope == "maintenance":
        return actual.maint
    return actual.total


def build_revenue_year(scope: str,
                       month_keys: Sequence[str],
                       targets: Mapping[str, MonthlyTargetRecord],
                       pipeline: Sequence[PipelineOpportunity]) -> Dict[str, float]:
    """
    Target revenue over the tracked months vs pipeline dollars in scope.

    Returns dict with target, unweighted and weighted.
    """
    totals = pipeline_revenue_totals(filter_division(pipeline, scope))
    return {
        "target": sum(target_revenue(targets.get(mk), scope) for mk in month_keys),
        "unweighted": totals["unweighted"],
        "weighted": totals["weighted"],
    }


def build_revenue_pace(scope: str,
                       mk: str,
                       targets: Mapping[str, MonthlyTargetRecord],
                       actuals: Mapping[str, RevenueActual],
                       today: Optional[DateLike] = None) -> Dict[str, float]:
    """
    Month target revenue vs logged actual vs run-rate projection.

    Returns dict with target, actual and projected.
    """
    today = to_date(today) if today is not None else pd.Timestamp.today().date()
    actual = actual_revenue(actuals.get(mk), scope)
    return {
        "target": target_revenue(targets.get(mk), scope),
        "actual": actual,
        "projected": project_month(mk, actual, today),
    }
