"""
Tests for run-rate revenue projection.
"""
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from ops_dashboard.data.calendar import InvalidDate
from ops_dashboard.modeling.projection import project_month


class TestProjectMonth:
    """Tests for month-to-date extrapolation."""

    def test_current_month_projected(self):
        """100 by the 10th of a 30-day month projects to 300."""
        assert project_month("2026-04", 100.0, "2026-04-10") == pytest.approx(300.0)

    def test_last_day_is_unchanged(self):
        assert project_month("2026-04", 100.0, "2026-04-30") == pytest.approx(100.0)

    def test_past_month_unchanged(self):
        assert project_month("2026-03", 100.0, "2026-04-10") == 100.0

    def test_future_month_unchanged(self):
        assert project_month("2026-05", 0.0, "2026-04-10") == 0.0

    def test_invalid_month_key(self):
        with pytest.raises(InvalidDate):
            project_month("April", 100.0, "2026-04-10")
