"""
Tests for actuals aggregation.
"""
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from ops_dashboard.data.calendar import InvalidDate
from ops_dashboard.data.models import DayRecord
from ops_dashboard.metrics.actuals import sum_actuals_for_range


@pytest.fixture
def records():
    return {
        "2026-02-28": DayRecord(actual_maint=1.0, actual_const=1.0),
        "2026-03-02": DayRecord(actual_maint=6.0, actual_const=8.0),
        "2026-03-03": DayRecord(actual_maint=4.5, actual_const=0.0),
        "2026-04-01": DayRecord(actual_maint=100.0),
    }


class TestSumActualsForRange:
    """Tests for summing recorded hours."""

    def test_sums_inside_range(self, records):
        totals = sum_actuals_for_range("2026-03-01", "2026-03-31", records)

        assert totals.maint == 10.5
        assert totals.cons == 8.0
        assert totals.total == 18.5

    def test_bounds_are_inclusive(self, records):
        totals = sum_actuals_for_range("2026-02-28", "2026-03-02", records)
        assert totals.total == 16.0

    def test_empty_range(self, records):
        totals = sum_actuals_for_range("2026-03-10", "2026-03-20", records)
        assert totals.total == 0.0

    def test_invalid_bound_rejected(self, records):
        with pytest.raises(InvalidDate):
            sum_actuals_for_range("2026-3-1", "2026-03-31", records)

    def test_pick_view(self, records):
        totals = sum_actuals_for_range("2026-03-01", "2026-03-31", records)

        assert totals.pick("maint") == 10.5
        assert totals.pick("const") == 8.0
        assert totals.pick("total") == 18.5
