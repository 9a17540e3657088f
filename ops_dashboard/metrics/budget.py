"""
Budget resolution pack.

Single source of truth for: daily targets, range targets, workday proration.

Three target sources disagree and are merged by precedence:
    1. Sheet           explicit per-day targets in the daily log (0 counts)
    2. Calendar        per-day target table
    3. MonthlyAverage  monthly totals spread evenly over eligible workdays
"""
from __future__ import annotations

from typing import Dict, Mapping, Optional, Tuple

from ops_dashboard.data.calendar import (
    is_weekday,
    iterate_days,
    month_bounds,
)
from ops_dashboard.data.models import (
    BudgetSource,
    CalendarTargetRecord,
    DayRecord,
    DayType,
    MonthlyTargetRecord,
    ResolvedBudget,
)

DayRecords = Mapping[str, DayRecord]
CalendarTargets = Mapping[str, CalendarTargetRecord]
MonthlyTargets = Mapping[str, MonthlyTargetRecord]

_EXCLUDED_DAY_TYPES = (DayType.STAT, DayType.HOLIDAY)
_WORKED_DAY_TYPES = (DayType.WEEKDAY, DayType.WEEKEND)


def _empty(source: BudgetSource) -> ResolvedBudget:
    return ResolvedBudget(maint=0.0, cons=0.0, source=source)


def _num(value: Optional[float]) -> float:
    return float(value) if value is not None else 0.0


def is_workday_eligible(day: str, day_record: Optional[DayRecord] = None) -> bool:
    """
    Whether a day takes a share of the monthly fallback target.

    A logged stat/holiday never counts; a logged weekday/weekend always does;
    anything else falls back to Monday-Friday.
    """
    day_type = day_record.day_type if day_record is not None else DayType.UNKNOWN
    if day_type in _EXCLUDED_DAY_TYPES:
        return False
    if day_type in _WORKED_DAY_TYPES:
        return True
    return is_weekday(day)


def count_eligible_workdays(month: str, day_records: Optional[DayRecords] = None) -> int:
    """Eligible workdays in a month, classifying every day of it."""
    day_records = day_records or {}
    bounds = month_bounds(month)
    return sum(
        1 for day in iterate_days(bounds.start, bounds.end)
        if is_workday_eligible(day, day_records.get(day))
    )


def monthly_daily_rate(month: str,
                       monthly_fallback: MonthlyTargets,
                       workdays: int) -> Tuple[float, float]:
    """Per-workday (maint, cons) share of a month's targets."""
    target = monthly_fallback.get(month)
    if target is None or workdays <= 0:
        return 0.0, 0.0
    return (
        _num(target.maintenance_monthly) / workdays,
        _num(target.construction_monthly) / workdays,
    )


def sheet_budget(day_record: DayRecord) -> ResolvedBudget:
    return ResolvedBudget(
        maint=_num(day_record.explicit_target_maint),
        cons=_num(day_record.explicit_target_const),
        source=BudgetSource.SHEET,
    )


def calendar_budget(record: CalendarTargetRecord) -> ResolvedBudget:
    return ResolvedBudget(
        maint=_num(record.maint_target),
        cons=_num(record.const_target),
        source=BudgetSource.CALENDAR,
    )


def resolve_day_budget(day: str,
                       day_record: Optional[DayRecord],
                       calendar: CalendarTargets,
                       monthly_fallback: MonthlyTargets,
                       day_records: Optional[DayRecords] = None) -> ResolvedBudget:
    """
    Resolve the target hours for a single day.

    Args:
        day: Day key (YYYY-MM-DD)
        day_record: The day's daily-log record, if any
        calendar: Day key -> calendar target row
        monthly_fallback: Month key -> monthly targets
        day_records: Full daily log, used to classify the rest of the month
            when building the workday denominator. Defaults to knowing only
            `day_record`.

    Returns:
        ResolvedBudget labelled with the single source used.
    """
    if day_record is not None and day_record.has_sheet_target:
        return sheet_budget(day_record)

    cal = calendar.get(day)
    if cal is not None:
        return calendar_budget(cal)

    if day_records is None:
        day_records = {day: day_record} if day_record is not None else {}

    if not is_workday_eligible(day, day_record):
        return _empty(BudgetSource.MONTHLY_AVERAGE)

    month = day[:7]
    workdays = count_eligible_workdays(month, day_records)
    maint, cons = monthly_daily_rate(month, monthly_fallback, workdays)
    return ResolvedBudget(maint=maint, cons=cons, source=BudgetSource.MONTHLY_AVERAGE)


def sum_budget_for_range(start: str,
                         end: str,
                         day_records: DayRecords,
                         calendar: CalendarTargets,
                         monthly_fallback: MonthlyTargets) -> ResolvedBudget:
    """
    Sum targets over [start, end] with range-level precedence.

    Any Sheet target anywhere in the range makes the whole range Sheet-sourced
    (days without one contribute 0). Otherwise calendar rows in the range are
    summed. Only when neither source has anything in the range is the
    monthly average summed over eligible days.
    """
    days = iterate_days(start, end)
    if len(days) == 0:
        return _empty(BudgetSource.MONTHLY_AVERAGE)

    any_sheet = False
    sheet_maint = sheet_cons = 0.0
    for day in days:
        rec = day_records.get(day)
        if rec is not None and rec.has_sheet_target:
            any_sheet = True
            sheet_maint += _num(rec.explicit_target_maint)
            sheet_cons += _num(rec.explicit_target_const)
    if any_sheet:
        return ResolvedBudget(maint=sheet_maint, cons=sheet_cons, source=BudgetSource.SHEET)

    any_calendar = False
    cal_maint = cal_cons = 0.0
    for day in days:
        cal = calendar.get(day)
        if cal is not None:
            any_calendar = True
            cal_maint += _num(cal.maint_target)
            cal_cons += _num(cal.const_target)
    if any_calendar:
        return ResolvedBudget(maint=cal_maint, cons=cal_cons, source=BudgetSource.CALENDAR)

    # Workday counts are computed once per month for this call
    rates: Dict[str, Tuple[float, float]] = {}
    maint = cons = 0.0
    for day in days:
        if not is_workday_eligible(day, day_records.get(day)):
            continue
        month = day[:7]
        if month not in rates:
            workdays = count_eligible_workdays(month, day_records)
            rates[month] = monthly_daily_rate(month, monthly_fallback, workdays)
        day_maint, day_cons = rates[month]
        maint += day_maint
        cons += day_cons
    return ResolvedBudget(maint=maint, cons=cons, source=BudgetSource.MONTHLY_AVERAGE)
