"""
Tests for budget resolution and range aggregation.

March 2026 has 22 weekdays (1st is a Sunday); February 2026 has 20.
"""
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from ops_dashboard.data.models import (
    BudgetSource,
    CalendarTargetRecord,
    DayRecord,
    DayType,
    MonthlyTargetRecord,
)
from ops_dashboard.metrics.budget import (
    count_eligible_workdays,
    is_workday_eligible,
    resolve_day_budget,
    sum_budget_for_range,
)


@pytest.fixture
def monthly():
    return {
        "2026-02": MonthlyTargetRecord(month="2026-02", maintenance_monthly=200.0, construction_monthly=400.0),
        "2026-03": MonthlyTargetRecord(month="2026-03", maintenance_monthly=220.0, construction_monthly=440.0),
    }


class TestWorkdayEligibility:
    """Tests for the monthly-average denominator."""

    def test_weekdays_in_march(self):
        assert count_eligible_workdays("2026-03") == 22

    def test_stat_day_excluded(self):
        records = {"2026-03-03": DayRecord(day_type=DayType.STAT)}
        assert count_eligible_workdays("2026-03", records) == 21

    def test_logged_weekend_included(self):
        records = {"2026-03-07": DayRecord(day_type=DayType.WEEKEND)}
        assert count_eligible_workdays("2026-03", records) == 23

    def test_unknown_falls_back_to_weekday_test(self):
        assert is_workday_eligible("2026-03-07", DayRecord()) is False
        assert is_workday_eligible("2026-03-09", DayRecord()) is True

    def test_holiday_on_weekday_ineligible(self):
        assert is_workday_eligible("2026-03-09", DayRecord(day_type=DayType.HOLIDAY)) is False


class TestResolveDayBudget:
    """Tests for single-day precedence."""

    def test_monthly_average_rate(self, monthly):
        """A plain weekday gets monthly / eligible workdays."""
        budget = resolve_day_budget("2026-03-02", None, {}, monthly)

        assert budget.source == BudgetSource.MONTHLY_AVERAGE
        assert budget.maint == pytest.approx(10.0)
        assert budget.cons == pytest.approx(20.0)
        assert budget.total == pytest.approx(30.0)

    def test_explicit_zero_is_sheet(self, monthly):
        """An explicit 0 target suppresses calendar and monthly fallback."""
        record = DayRecord(explicit_target_maint=0.0)
        calendar = {"2026-03-02": CalendarTargetRecord(day="2026-03-02", maint_target=8.0, const_target=8.0)}

        budget = resolve_day_budget("2026-03-02", record, calendar, monthly)

        assert budget.source == BudgetSource.SHEET
        assert budget.total == 0.0

    def test_one_sided_sheet_target(self, monthly):
        """The missing side of a sheet target is 0, not filled from elsewhere."""
        record = DayRecord(explicit_target_const=12.0)
        budget = resolve_day_budget("2026-03-02", record, {}, monthly)

        assert budget.source == BudgetSource.SHEET
        assert budget.maint == 0.0
        assert budget.cons == 12.0

    def test_calendar_beats_monthly(self, monthly):
        calendar = {"2026-03-02": CalendarTargetRecord(day="2026-03-02", maint_target=4.0, const_target=6.0)}
        budget = resolve_day_budget("2026-03-02", DayRecord(), calendar, monthly)

        assert budget.source == BudgetSource.CALENDAR
        assert budget.total == 10.0

    def test_weekend_without_type_is_zero(self, monthly):
        budget = resolve_day_budget("2026-03-07", None, {}, monthly)

        assert budget.source == BudgetSource.MONTHLY_AVERAGE
        assert budget.total == 0.0

    def test_stat_day_raises_rate_of_other_days(self, monthly):
        """A stat holiday shrinks the denominator for the rest of the month."""
        records = {"2026-03-03": DayRecord(day_type=DayType.STAT)}

        stat = resolve_day_budget("2026-03-03", records["2026-03-03"], {}, monthly, records)
        other = resolve_day_budget("2026-03-02", None, {}, monthly, records)

        assert stat.total == 0.0
        assert other.maint == pytest.approx(220.0 / 21)

    def test_missing_month_target_is_zero(self, monthly):
        budget = resolve_day_budget("2026-05-04", None, {}, monthly)

        assert budget.source == BudgetSource.MONTHLY_AVERAGE
        assert budget.total == 0.0

    def test_total_equals_sum(self, monthly):
        budget = resolve_day_budget("2026-03-02", None, {}, monthly)
        assert budget.total == budget.maint + budget.cons


class TestSumBudgetForRange:
    """Tests for range-level precedence."""

    def test_monthly_average_whole_month(self, monthly):
        budget = sum_budget_for_range("2026-03-01", "2026-03-31", {}, {}, monthly)

        assert budget.source == BudgetSource.MONTHLY_AVERAGE
        assert budget.maint == pytest.approx(220.0)
        assert budget.cons == pytest.approx(440.0)

    def test_range_across_months_uses_each_month_rate(self, monthly):
        # Fri Feb 27 (200/20) + Mon Mar 2 + Tue Mar 3 (220/22)
        budget = sum_budget_for_range("2026-02-27", "2026-03-03", {}, {}, monthly)

        assert budget.maint == pytest.approx(30.0)
        assert budget.cons == pytest.approx(60.0)

    def test_single_sheet_day_wins_whole_range(self, monthly):
        """One sheet target suppresses calendar rows on every other day."""
        records = {"2026-03-03": DayRecord(explicit_target_maint=5.0)}
        calendar = {
            key: CalendarTargetRecord(day=key, maint_target=8.0, const_target=8.0)
            for key in ["2026-03-02", "2026-03-04", "2026-03-05"]
        }

        budget = sum_budget_for_range("2026-03-02", "2026-03-06", records, calendar, monthly)

        assert budget.source == BudgetSource.SHEET
        assert budget.maint == 5.0
        assert budget.cons == 0.0

    def test_calendar_rows_win_over_monthly(self, monthly):
        """Days without a calendar row contribute nothing once any row exists."""
        calendar = {"2026-03-02": CalendarTargetRecord(day="2026-03-02", maint_target=4.0, const_target=6.0)}

        budget = sum_budget_for_range("2026-03-02", "2026-03-06", {}, calendar, monthly)

        assert budget.source == BudgetSource.CALENDAR
        assert budget.total == 10.0

    def test_calendar_outside_range_ignored(self, monthly):
        calendar = {"2026-04-01": CalendarTargetRecord(day="2026-04-01", maint_target=4.0)}

        budget = sum_budget_for_range("2026-03-02", "2026-03-06", {}, calendar, monthly)

        assert budget.source == BudgetSource.MONTHLY_AVERAGE
        assert budget.maint == pytest.approx(50.0)

    def test_reversed_range_is_zero(self, monthly):
        budget = sum_budget_for_range("2026-03-10", "2026-03-01", {}, {}, monthly)

        assert budget.source == BudgetSource.MONTHLY_AVERAGE
        assert budget.total == 0.0

    def test_single_day_range_matches_day_resolver(self, monthly):
        records = {"2026-03-03": DayRecord(day_type=DayType.STAT)}

        day = resolve_day_budget("2026-03-02", None, {}, monthly, records)
        rng = sum_budget_for_range("2026-03-02", "2026-03-02", records, {}, monthly)

        assert rng.total == pytest.approx(day.total)
        assert rng.source == day.source

    def test_repeat_calls_are_identical(self, monthly):
        records = {"2026-03-03": DayRecord(day_type=DayType.STAT, actual_maint=3.0)}

        first = sum_budget_for_range("2026-01-01", "2026-03-31", records, {}, monthly)
        second = sum_budget_for_range("2026-01-01", "2026-03-31", records, {}, monthly)

        assert first == second
