"""
Actuals metrics pack: recorded hours per division over a date range.
"""
from __future__ import annotations

from typing import Mapping

from ops_dashboard.data.calendar import to_date
from ops_dashboard.data.models import DayRecord, DivisionTotals


def sum_actuals_for_range(start: str,
                          end: str,
                          day_records: Mapping[str, DayRecord]) -> DivisionTotals:
    """
    Sum actual maintenance/construction hours for days in [start, end].

    Days without a record contribute nothing.
    """
    # Validate bounds; keys compare lexicographically afterwards
    start = to_date(start).isoformat()
    end = to_date(end).isoformat()

    maint = 0.0
    cons = 0.0
    for key, rec in day_records.items():
        if key < start or key > end:
            continue
        maint += float(rec.actual_maint or 0.0)
        cons += float(rec.actual_const or 0.0)

    return DivisionTotals(maint=maint, cons=cons)
