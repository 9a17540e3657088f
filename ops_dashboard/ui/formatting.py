"""
Consistent number and display formatting.
"""
import pandas as pd
from typing import Union, Optional

from ops_dashboard.metrics.coverage import BAND_COLORS, CoverageBand

Number = Union[float, int, None]


def _missing(value: Number) -> bool:
    return value is None or pd.isna(value)


# =============================================================================
# NUMBER FORMATTERS
# =============================================================================

def fmt_hours(value: Number) -> str:
    """Format hours: 1,234.5"""
    if _missing(value):
        return "—"
    return f"{value:,.1f}"


def fmt_hours0(value: Number) -> str:
    """Format whole hours / counts: 1,234"""
    if _missing(value):
        return "—"
    return f"{value:,.0f}"


def fmt_currency(value: Number, decimals: int = 0) -> str:
    """Format as currency: $1,234 or $1,234.56"""
    if _missing(value):
        return "—"
    return f"${value:,.{decimals}f}"


def fmt_percent(value: Number, decimals: int = 1) -> str:
    """Format percentage: 12.3%"""
    if _missing(value):
        return "—"
    return f"{value:,.{decimals}f}%"


def fmt_ratio_pct(ratio: Optional[float], decimals: int = 1) -> str:
    """Format a 0..1 ratio as a percentage: 0.953 -> 95.3%"""
    if _missing(ratio):
        return "—"
    return fmt_percent(ratio * 100, decimals)


def fmt_signed(value: Number, decimals: int = 1) -> str:
    """Format with explicit sign: +12.5 / -3.0"""
    if _missing(value):
        return "—"
    sign = "+" if value >= 0 else ""
    return f"{sign}{value:,.{decimals}f}"


# =============================================================================
# STATUS
# =============================================================================

def band_color(band: Union[CoverageBand, str, None]) -> str:
    """Hex colour for a coverage band; unknown bands are grey."""
    try:
        return BAND_COLORS[CoverageBand(band)]
    except ValueError:
        return BAND_COLORS[CoverageBand.NONE]


def band_dot(band: Union[CoverageBand, str, None]) -> str:
    """Return colored status dot HTML."""
    return f'<span style="color: {band_color(band)}; font-size: 1.2em;">●</span>'
