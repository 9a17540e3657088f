"""
Tests for coverage classification.
"""
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from ops_dashboard.metrics.coverage import (
    PERIOD_TRACKING_POLICY,
    SHORT_HORIZON_POLICY,
    CoverageBand,
    CoveragePolicy,
    classify,
    coverage_ratio,
)


class TestCoverageRatio:
    """Tests for actual / target."""

    def test_ratio(self):
        assert coverage_ratio(45.0, 50.0) == pytest.approx(0.9)

    def test_zero_target_has_no_ratio(self):
        assert coverage_ratio(10.0, 0.0) is None


class TestClassify:
    """Tests for band cut points under each policy."""

    def test_no_ratio(self):
        assert classify(None).band == CoverageBand.NONE

    def test_same_ratio_differs_by_policy(self):
        """0.94 is on track short-horizon but behind for period tracking."""
        assert classify(0.94, SHORT_HORIZON_POLICY).band == CoverageBand.ON_TRACK
        assert classify(0.94, PERIOD_TRACKING_POLICY).band == CoverageBand.BEHIND

    def test_short_horizon_cut_points(self):
        assert classify(0.74, SHORT_HORIZON_POLICY).band == CoverageBand.BEHIND
        assert classify(0.75, SHORT_HORIZON_POLICY).band == CoverageBand.CLOSE
        assert classify(0.90, SHORT_HORIZON_POLICY).band == CoverageBand.ON_TRACK

    def test_period_cut_points(self):
        assert classify(0.95, PERIOD_TRACKING_POLICY).band == CoverageBand.CLOSE
        assert classify(1.0, PERIOD_TRACKING_POLICY).band == CoverageBand.ON_TRACK

    def test_default_policy_is_short_horizon(self):
        assert classify(0.8).band == CoverageBand.CLOSE

    def test_status_carries_ratio_and_color(self):
        status = classify(0.5)
        assert status.ratio == 0.5
        assert status.color.startswith("#")

    def test_inverted_policy_rejected(self):
        with pytest.raises(ValueError):
            CoveragePolicy(name="bad", behind_below=1.0, on_track_at=0.5)
