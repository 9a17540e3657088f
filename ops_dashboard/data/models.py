"""
Typed records exchanged between loaders, the budget engine and the UI.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class DayType(str, Enum):
    WEEKDAY = "weekday"
    WEEKEND = "weekend"
    STAT = "stat"
    HOLIDAY = "holiday"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, raw) -> "DayType":
        """
        Case-insensitive lookup; blanks and unrecognized labels are UNKNOWN.

        Labels such as "Stat Holiday" or "Public holiday" map to STAT and
        HOLIDAY so they stay out of the workday count.
        """
        if isinstance(raw, DayType):
            return raw
        text = str(raw or "").strip().lower()
        for member in cls:
            if member.value == text:
                return member
        if "stat" in text:
            return cls.STAT
        if "holiday" in text:
            return cls.HOLIDAY
        return cls.UNKNOWN


class BudgetSource(str, Enum):
    SHEET = "Sheet"
    CALENDAR = "Calendar"
    MONTHLY_AVERAGE = "MonthlyAverage"


@dataclass(frozen=True)
class DayRecord:
    """One day from the ops daily log. None targets mean 'not entered'."""
    day_type: DayType = DayType.UNKNOWN
    explicit_target_maint: Optional[float] = None
    explicit_target_const: Optional[float] = None
    actual_maint: float = 0.0
    actual_const: float = 0.0
    missed_tickets: float = 0.0
    safety_incidents: float = 0.0
    notes: str = ""

    @property
    def has_sheet_target(self) -> bool:
        return self.explicit_target_maint is not None or self.explicit_target_const is not None


@dataclass(frozen=True)
class CalendarTargetRecord:
    day: str
    maint_target: float = 0.0
    const_target: float = 0.0


@dataclass(frozen=True)
class MonthlyTargetRecord:
    month: str
    maintenance_monthly: float = 0.0
    construction_monthly: float = 0.0
    maintenance_revenue: float = 0.0
    construction_revenue: float = 0.0


@dataclass(frozen=True)
class PipelineOpportunity:
    division: str
    status: str
    start_month: str
    weighted_hours: float = 0.0
    weighted_dollars: float = 0.0
    estimated_dollars: float = 0.0


@dataclass(frozen=True)
class WorkTicket:
    division: str
    status: str
    scheduled_day: str
    estimated_hours: float = 0.0


@dataclass(frozen=True)
class CapacityRecord:
    month: str
    construction_capacity: float = 0.0
    maintenance_capacity: float = 0.0


@dataclass(frozen=True)
class RevenueActual:
    constr: float = 0.0
    maint: float = 0.0

    @property
    def total(self) -> float:
        return self.constr + self.maint


@dataclass(frozen=True)
class DivisionTotals:
    maint: float = 0.0
    cons: float = 0.0

    @property
    def total(self) -> float:
        return self.maint + self.cons

    def pick(self, view: str) -> float:
        """Value for a KPI view: 'maint', 'const' or 'total'."""
        if view == "maint":
            return self.maint
        if view == "const":
            return self.cons
        return self.total


@dataclass(frozen=True)
class ResolvedBudget(DivisionTotals):
    source: BudgetSource = BudgetSource.MONTHLY_AVERAGE
