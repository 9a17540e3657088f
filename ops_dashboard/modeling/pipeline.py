"""
Pipeline hours by month.

Maintenance opportunities are spread linearly from their start month through
the end-of-season horizon month; construction opportunities land entirely in
their start month.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

from ops_dashboard.config import config
from ops_dashboard.data.calendar import month_key, month_keys_between, parse_month_key
from ops_dashboard.data.models import PipelineOpportunity, WorkTicket
from ops_dashboard.data.semantic import is_open_status, is_ticket_active


def _zero_series(month_keys: Sequence[str]) -> Dict[str, float]:
    return {mk: 0.0 for mk in month_keys}


def open_opportunities(opportunities: Iterable[PipelineOpportunity]) -> List[PipelineOpportunity]:
    """Opportunities still in play (not won, not lost)."""
    return [opp for opp in opportunities if is_open_status(opp.status)]


def spread_months(start_month: str, horizon_month: int) -> List[str]:
    """
    Months an opportunity's hours are spread over.

    From start_month through the horizon month of the same year; a start
    after the horizon keeps everything in its own month.
    """
    year, month = parse_month_key(start_month)
    if month > horizon_month:
        return [start_month]
    return month_keys_between(start_month, f"{year:04d}-{horizon_month:02d}")


def spread_maintenance_pipeline(opportunities: Iterable[PipelineOpportunity],
                                month_keys: Sequence[str],
                                horizon_month: Optional[int] = None) -> Dict[str, float]:
    """
    Spread open maintenance pipeline hours across tracked months.

    Args:
        opportunities: Maintenance opportunities (callers filter the division)
        month_keys: Tracked months; the result has exactly these keys
        horizon_month: Calendar month (1-12) ending the season, default from config

    Returns:
        Month key -> weighted hours. Shares falling on untracked months are
        dropped, not redistributed.
    """
    if horizon_month is None:
        horizon_month = config.pipeline_horizon_month

    out = _zero_series(month_keys)
    for opp in open_opportunities(opportunities):
        months = spread_months(opp.start_month, horizon_month)
        share = float(opp.weighted_hours or 0.0) / len(months)
        for mk in months:
            if mk in out:
                out[mk] += share
    return out


def bucket_by_start_month(opportunities: Iterable[PipelineOpportunity],
                          month_keys: Sequence[str]) -> Dict[str, float]:
    """Open pipeline hours attributed entirely to the start month."""
    out = _zero_series(month_keys)
    for opp in open_opportunities(opportunities):
        if opp.start_month in out:
            out[opp.start_month] += float(opp.weighted_hours or 0.0)
    return out


def bucket_tickets_by_month(tickets: Iterable[WorkTicket],
                            month_keys: Sequence[str]) -> Dict[str, float]:
    """Estimated hours of active (open/scheduled) tickets by scheduled month."""
    out = _zero_series(month_keys)
    for ticket in tickets:
        if not is_ticket_active(ticket.status):
            continue
        mk = month_key(ticket.scheduled_day)
        if mk in out:
            out[mk] += float(ticket.estimated_hours or 0.0)
    return out


def pipeline_revenue_totals(opportunities: Iterable[PipelineOpportunity]) -> Dict[str, float]:
    """Unweighted and weighted pipeline dollars for the given opportunities."""
    unweighted = 0.0
    weighted = 0.0
    for opp in opportunities:
        unweighted += float(opp.estimated_dollars or 0.0)
        weighted += float(opp.weighted_dollars or 0.0)
    return {"unweighted": unweighted, "weighted": weighted}
