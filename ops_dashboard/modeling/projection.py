"""
Run-rate projection of month-to-date actuals.
"""
from __future__ import annotations

from ops_dashboard.data.calendar import DateLike, days_in_month, month_key, parse_month_key, to_date


def project_month(mk: str, actual_month_to_date: float, today: DateLike) -> float:
    """
    Extrapolate month-to-date actuals to a full month.

    Only the month containing `today` is projected:
        actual / day_of_month * days_in_month
    Past and future months return the actual unchanged.
    """
    parse_month_key(mk)
    today = to_date(today)
    if mk != month_key(today):
        return actual_month_to_date

    elapsed = today.day
    if elapsed <= 0:
        return actual_month_to_date
    return actual_month_to_date / elapsed * days_in_month(mk)
