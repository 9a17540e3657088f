"""
Calendar arithmetic on day keys (YYYY-MM-DD) and month keys (YYYY-MM).

Keys are zero-padded and fixed width, so string comparison matches
chronological order.
"""
from __future__ import annotations

import re
from calendar import monthrange
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterator, List, Tuple, Union

import pandas as pd

DateLike = Union[date, datetime, pd.Timestamp, str]

_DAY_KEY_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_MONTH_KEY_RE = re.compile(r"^(\d{4})-(\d{2})$")


class InvalidDate(ValueError):
    """Raised when a date or key cannot be interpreted exactly."""
    pass


@dataclass(frozen=True)
class MonthBounds:
    start: str
    end: str


def parse_day_key(text: str) -> date:
    """Parse a strict YYYY-MM-DD key into a date."""
    if not isinstance(text, str):
        raise InvalidDate(f"Expected YYYY-MM-DD string, got {text!r}")
    m = _DAY_KEY_RE.match(text)
    if not m:
        raise InvalidDate(f"Malformed day key: {text!r}")
    try:
        return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError as e:
        raise InvalidDate(f"Invalid calendar date: {text!r}") from e


def parse_month_key(text: str) -> Tuple[int, int]:
    """Parse a strict YYYY-MM key into (year, month)."""
    if not isinstance(text, str):
        raise InvalidDate(f"Expected YYYY-MM string, got {text!r}")
    m = _MONTH_KEY_RE.match(text)
    if not m:
        raise InvalidDate(f"Malformed month key: {text!r}")
    year, month = int(m.group(1)), int(m.group(2))
    if not 1 <= month <= 12 or year < 1:
        raise InvalidDate(f"Invalid month: {text!r}")
    return year, month


def to_date(value: DateLike) -> date:
    """Coerce a supported date-like value to a date, or raise InvalidDate."""
    if isinstance(value, pd.Timestamp):
        if pd.isna(value):
            raise InvalidDate("NaT is not a date")
        return value.date()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return parse_day_key(value)
    raise InvalidDate(f"Unsupported date value: {value!r}")


def day_key(value: DateLike) -> str:
    """Format a date as YYYY-MM-DD."""
    return to_date(value).isoformat()


def month_key(value: DateLike) -> str:
    """Format a date's month as YYYY-MM."""
    d = to_date(value)
    return f"{d.year:04d}-{d.month:02d}"


def days_in_month(mk: str) -> int:
    year, month = parse_month_key(mk)
    return monthrange(year, month)[1]


def month_bounds(mk: str) -> MonthBounds:
    """First and last day keys of a month."""
    year, month = parse_month_key(mk)
    last = monthrange(year, month)[1]
    return MonthBounds(
        start=date(year, month, 1).isoformat(),
        end=date(year, month, last).isoformat(),
    )


def year_bounds(value: DateLike) -> MonthBounds:
    """Jan 1 and Dec 31 of the year containing value."""
    year = to_date(value).year
    return MonthBounds(start=f"{year:04d}-01-01", end=f"{year:04d}-12-31")


def is_weekday(value: DateLike) -> bool:
    """Monday-Friday."""
    return to_date(value).weekday() < 5


def shift_day(value: DateLike, days: int) -> str:
    return (to_date(value) + timedelta(days=days)).isoformat()


class DayRange:
    """
    Inclusive range of day keys.

    Iterable any number of times; each iteration starts from `start`.
    """

    def __init__(self, start: DateLike, end: DateLike):
        self._start = to_date(start)
        self._end = to_date(end)

    @property
    def start(self) -> str:
        return self._start.isoformat()

    @property
    def end(self) -> str:
        return self._end.isoformat()

    def __iter__(self) -> Iterator[str]:
        current = self._start
        while current <= self._end:
            yield current.isoformat()
            current += timedelta(days=1)

    def __len__(self) -> int:
        return max((self._end - self._start).days + 1, 0)

    def __repr__(self) -> str:
        return f"DayRange({self.start!r}, {self.end!r})"


def iterate_days(start: DateLike, end: DateLike) -> DayRange:
    """Lazy, restartable sequence of day keys from start to end inclusive."""
    return DayRange(start, end)


def month_keys_between(start_mk: str, end_mk: str) -> List[str]:
    """All month keys from start_mk to end_mk inclusive (empty if reversed)."""
    year, month = parse_month_key(start_mk)
    end_year, end_month = parse_month_key(end_mk)
    keys = []
    while (year, month) <= (end_year, end_month):
        keys.append(f"{year:04d}-{month:02d}")
        month += 1
        if month > 12:
            year, month = year + 1, 1
    return keys
