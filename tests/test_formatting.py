"""
Tests for display formatting.
"""
import numpy as np
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from ops_dashboard.metrics.coverage import BAND_COLORS, CoverageBand
from ops_dashboard.ui.formatting import (
    band_color,
    fmt_currency,
    fmt_hours,
    fmt_hours0,
    fmt_ratio_pct,
    fmt_signed,
)


class TestFormatters:
    """Tests for number formatters."""

    def test_hours(self):
        assert fmt_hours(1234.56) == "1,234.6"
        assert fmt_hours0(1234.56) == "1,235"

    def test_missing_values(self):
        assert fmt_hours(None) == "—"
        assert fmt_ratio_pct(np.nan) == "—"

    def test_currency(self):
        assert fmt_currency(12500) == "$12,500"

    def test_signed(self):
        assert fmt_signed(2.5) == "+2.5"
        assert fmt_signed(0) == "+0.0"
        assert fmt_signed(-3) == "-3.0"

    def test_ratio_pct(self):
        assert fmt_ratio_pct(0.953) == "95.3%"


class TestBandColor:
    """Tests for band colours."""

    def test_known_band(self):
        assert band_color("behind") == BAND_COLORS[CoverageBand.BEHIND]

    def test_unknown_band_is_grey(self):
        assert band_color(None) == BAND_COLORS[CoverageBand.NONE]
        assert band_color("mystery") == BAND_COLORS[CoverageBand.NONE]
