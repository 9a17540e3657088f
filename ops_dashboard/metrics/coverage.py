"""
Coverage classification: actual vs target ratio into a traffic-light band.

Two policies are in use:
- short horizon (daily table, monthly hours coverage): 0.75 / 0.90
- period tracking (MTD / YTD cards): 0.95 / 1.0
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ops_dashboard.config import config


class CoverageBand(str, Enum):
    NONE = "none"
    BEHIND = "behind"
    CLOSE = "close"
    ON_TRACK = "on_track"


BAND_COLORS = {
    CoverageBand.NONE: "#6c757d",
    CoverageBand.BEHIND: "#dc3545",
    CoverageBand.CLOSE: "#ffc107",
    CoverageBand.ON_TRACK: "#28a745",
}


@dataclass(frozen=True)
class CoveragePolicy:
    """ratio < behind_below → behind; < on_track_at → close; else on track."""
    name: str
    behind_below: float
    on_track_at: float

    def __post_init__(self):
        if self.behind_below > self.on_track_at:
            raise ValueError(
                f"{self.name}: behind cut point {self.behind_below} exceeds on-track cut point {self.on_track_at}"
            )


@dataclass(frozen=True)
class CoverageStatus:
    band: CoverageBand
    ratio: Optional[float] = None

    @property
    def color(self) -> str:
        return BAND_COLORS[self.band]


SHORT_HORIZON_POLICY = CoveragePolicy(
    name="short_horizon",
    behind_below=config.short_horizon_behind,
    on_track_at=config.short_horizon_on_track,
)

PERIOD_TRACKING_POLICY = CoveragePolicy(
    name="period_tracking",
    behind_below=config.period_behind,
    on_track_at=config.period_on_track,
)


def coverage_ratio(actual: float, target: float) -> Optional[float]:
    """actual / target, or None when there is no target."""
    if not target:
        return None
    return actual / target


def classify(ratio: Optional[float], policy: CoveragePolicy = SHORT_HORIZON_POLICY) -> CoverageStatus:
    """Map a coverage ratio to a band under the given policy."""
    if ratio is None:
        return CoverageStatus(band=CoverageBand.NONE, ratio=None)
    if ratio < policy.behind_below:
        band = CoverageBand.BEHIND
    elif ratio < policy.on_track_at:
        band = CoverageBand.CLOSE
    else:
        band = CoverageBand.ON_TRACK
    return CoverageStatus(band=band, ratio=ratio)
