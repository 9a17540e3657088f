"""
Schema validation, column alias mapping and record normalization.

Raw sheets arrive with loosely named headers; everything here turns them into
the typed records the budget engine consumes.
"""
from __future__ import annotations

import numbers
import re
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import pandas as pd

from ops_dashboard.config import COLUMN_ALIASES, OPTIONAL_COLUMNS, REQUIRED_COLUMNS
from ops_dashboard.data.calendar import InvalidDate, day_key, month_key
from ops_dashboard.data.models import (
    CalendarTargetRecord,
    CapacityRecord,
    DayRecord,
    DayType,
    MonthlyTargetRecord,
    PipelineOpportunity,
    WorkTicket,
)


class SchemaValidationError(Exception):
    """Raised when required columns are missing."""
    pass


_MONTHS = ["jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec"]
_EXCEL_EPOCH = date(1899, 12, 30)


# =============================================================================
# COLUMN RESOLUTION
# =============================================================================

def normalise_header(name: Any) -> str:
    """Lowercase, strip BOM/dots, collapse whitespace."""
    s = str(name or "").replace("\ufeff", "").strip().lower().replace(".", "")
    return re.sub(r"\s+", " ", s)


def resolve_columns(df: pd.DataFrame, table_name: str) -> Dict[str, str]:
    """
    Map canonical column names to the actual headers present in df.

    Returns {canonical: actual_header} for every canonical column found.
    """
    aliases = COLUMN_ALIASES.get(table_name, {})
    by_norm = {}
    for col in df.columns:
        by_norm.setdefault(normalise_header(col), col)

    resolved = {}
    for canonical, candidates in aliases.items():
        for cand in candidates:
            actual = by_norm.get(normalise_header(cand))
            if actual is not None:
                resolved[canonical] = actual
                break
    return resolved


def validate_required_columns(df: pd.DataFrame, table_name: str) -> Tuple[bool, List[str]]:
    """
    Validate that required columns exist in dataframe.
    Returns (is_valid, missing_columns).
    """
    if table_name not in REQUIRED_COLUMNS:
        return True, []

    resolved = resolve_columns(df, table_name)
    missing = [col for col in REQUIRED_COLUMNS[table_name] if col not in resolved]

    return len(missing) == 0, missing


def check_optional_columns(df: pd.DataFrame, table_name: str) -> List[str]:
    """
    Check which optional columns are missing.
    Returns list of missing optional columns.
    """
    if table_name not in OPTIONAL_COLUMNS:
        return []

    resolved = resolve_columns(df, table_name)
    return [col for col in OPTIONAL_COLUMNS[table_name] if col not in resolved]


def validate_schema(df: pd.DataFrame, table_name: str, strict: bool = True) -> Dict:
    """
    Full schema validation.

    Args:
        df: DataFrame to validate
        table_name: Name of table for column requirements lookup
        strict: If True, raise error on missing required columns

    Returns:
        Dict with validation results
    """
    is_valid, missing_required = validate_required_columns(df, table_name)
    missing_optional = check_optional_columns(df, table_name)

    result = {
        "is_valid": is_valid,
        "missing_required": missing_required,
        "missing_optional": missing_optional,
        "total_columns": len(df.columns),
        "total_rows": len(df),
    }

    if strict and not is_valid:
        raise SchemaValidationError(
            f"Missing required columns in {table_name}: {missing_required}"
        )

    return result


# =============================================================================
# VALUE PARSERS
# =============================================================================

def _is_blank(v: Any) -> bool:
    if v is None:
        return True
    try:
        if pd.isna(v):
            return True
    except (TypeError, ValueError):
        pass
    return str(v).strip() == ""


def parse_number_loose(v: Any) -> float:
    """Number from a cell; commas/spaces ignored, blanks and '-' are 0."""
    if _is_blank(v):
        return 0.0
    s = re.sub(r"[\s,]", "", str(v))
    if s == "-":
        return 0.0
    try:
        n = float(s)
    except ValueError:
        return 0.0
    return n if pd.notna(n) and abs(n) != float("inf") else 0.0


def parse_currency(v: Any) -> float:
    """Like parse_number_loose, also stripping '$'."""
    if _is_blank(v):
        return 0.0
    return parse_number_loose(str(v).replace("$", ""))


def parse_optional_number(v: Any) -> Optional[float]:
    """None for blank cells; an explicit 0 stays 0."""
    if _is_blank(v):
        return None
    return parse_number_loose(v)


def parse_date_any(v: Any) -> Optional[date]:
    """
    Parse ISO dates, M/D/YY, M/D/YYYY, datetimes and Excel serial numbers.
    Returns None when nothing matches.
    """
    if _is_blank(v):
        return None
    if isinstance(v, pd.Timestamp):
        return v.date()
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    if isinstance(v, numbers.Real) and not isinstance(v, bool):
        # Excel serial day number
        if 1 <= v < 2958466:
            return _EXCEL_EPOCH + timedelta(days=int(v))
        return None

    s = str(v).strip()
    m = re.match(r"^(\d{4})-(\d{2})-(\d{2})(?:[T ].*)?$", s)
    if m:
        try:
            return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
        except ValueError:
            return None

    m = re.match(r"^(\d{1,2})/(\d{1,2})/(\d{2}|\d{4})$", s)
    if m:
        year = int(m.group(3))
        if len(m.group(3)) == 2:
            year += 2000
        try:
            return date(year, int(m.group(1)), int(m.group(2)))
        except ValueError:
            return None

    return None


def month_key_from_label(label: Any) -> Optional[str]:
    """
    Month key from target-sheet labels: 'Jan-26', '26-Jan', '2026-03', '2026/3'.
    """
    if isinstance(label, (pd.Timestamp, datetime, date)) and not _is_blank(label):
        return month_key(label)
    s = str(label or "").strip()
    if not s:
        return None

    m = re.match(r"^([A-Za-z]{3,})\.?[-\s]?(\d{2})$", s)
    if m:
        mon = m.group(1)[:3].lower()
        if mon in _MONTHS:
            return f"{2000 + int(m.group(2))}-{_MONTHS.index(mon) + 1:02d}"

    m = re.match(r"^(\d{2})[-\s]?([A-Za-z]{3,})\.?$", s)
    if m:
        mon = m.group(2)[:3].lower()
        if mon in _MONTHS:
            return f"{2000 + int(m.group(1))}-{_MONTHS.index(mon) + 1:02d}"

    m = re.match(r"^(\d{4})[-/](\d{1,2})$", s)
    if m:
        year, month = int(m.group(1)), int(m.group(2))
        if year >= 2000 and 1 <= month <= 12:
            return f"{year}-{month:02d}"

    d = parse_date_any(s)
    if d is not None:
        return month_key(d)
    return None


# =============================================================================
# FRAME → RECORDS
# =============================================================================

def _cell(row: Mapping[str, Any], cols: Mapping[str, str], canonical: str) -> Any:
    actual = cols.get(canonical)
    return row.get(actual) if actual is not None else None


def targets_from_frame(df: pd.DataFrame) -> Dict[str, MonthlyTargetRecord]:
    """Monthly targets keyed by month; unrecognized month labels are skipped."""
    cols = resolve_columns(df, "targets")
    if "month" not in cols:
        return {}

    out = {}
    for row in df.to_dict("records"):
        mk = month_key_from_label(row.get(cols["month"]))
        if not mk:
            continue
        out[mk] = MonthlyTargetRecord(
            month=mk,
            maintenance_monthly=parse_number_loose(_cell(row, cols, "maintenance_hours")),
            construction_monthly=parse_number_loose(_cell(row, cols, "construction_hours")),
            maintenance_revenue=parse_currency(_cell(row, cols, "maintenance_revenue")),
            construction_revenue=parse_currency(_cell(row, cols, "construction_revenue")),
        )
    return dict(sorted(out.items()))


def calendar_from_frame(df: pd.DataFrame) -> Dict[str, CalendarTargetRecord]:
    """Per-day calendar targets keyed by day."""
    cols = resolve_columns(df, "calendar")
    if "date" not in cols or not ({"maintenance_hours", "construction_hours"} & cols.keys()):
        return {}

    out = {}
    for row in df.to_dict("records"):
        d = parse_date_any(row.get(cols["date"]))
        if d is None:
            continue
        key = day_key(d)
        out[key] = CalendarTargetRecord(
            day=key,
            maint_target=parse_number_loose(_cell(row, cols, "maintenance_hours")),
            const_target=parse_number_loose(_cell(row, cols, "construction_hours")),
        )
    return dict(sorted(out.items()))


def pipeline_from_frame(df: pd.DataFrame) -> List[PipelineOpportunity]:
    """Pipeline opportunities; blank rows and rows without a start date dropped."""
    cols = resolve_columns(df, "pipeline")
    out = []
    for row in df.to_dict("records"):
        if all(_is_blank(v) for v in row.values()):
            continue
        start = parse_date_any(_cell(row, cols, "start_date"))
        if start is None:
            continue
        out.append(PipelineOpportunity(
            division=str(_cell(row, cols, "division") or "").strip(),
            status=str(_cell(row, cols, "status") or "").strip(),
            start_month=month_key(start),
            weighted_hours=parse_number_loose(_cell(row, cols, "weighted_hours")),
            weighted_dollars=parse_currency(_cell(row, cols, "weighted_dollars")),
            estimated_dollars=parse_currency(_cell(row, cols, "estimated_dollars")),
        ))
    return out


def tickets_from_frame(df: pd.DataFrame) -> List[WorkTicket]:
    """Work tickets with a scheduled date and positive estimated hours."""
    cols = resolve_columns(df, "work_tickets")
    out = []
    for row in df.to_dict("records"):
        scheduled = parse_date_any(_cell(row, cols, "scheduled_date"))
        hours = parse_number_loose(_cell(row, cols, "estimated_hours"))
        if scheduled is None or hours <= 0:
            continue
        out.append(WorkTicket(
            division=str(_cell(row, cols, "division") or "").strip(),
            status=str(_cell(row, cols, "status") or "").strip(),
            scheduled_day=day_key(scheduled),
            estimated_hours=hours,
        ))
    return out


def capacity_from_frame(df: pd.DataFrame, month_keys: Optional[Iterable[str]] = None) -> Dict[str, CapacityRecord]:
    """Monthly capacity; restricted to month_keys when given."""
    cols = resolve_columns(df, "capacity")
    if "month" not in cols:
        return {}
    wanted = set(month_keys) if month_keys is not None else None

    out = {}
    for row in df.to_dict("records"):
        mk = month_key_from_label(row.get(cols["month"]))
        if not mk or (wanted is not None and mk not in wanted):
            continue
        out[mk] = CapacityRecord(
            month=mk,
            construction_capacity=parse_number_loose(_cell(row, cols, "construction_capacity")),
            maintenance_capacity=parse_number_loose(_cell(row, cols, "maintenance_capacity")),
        )
    return out


def day_records_from_rows(rows: Iterable[Mapping[str, Any]]) -> Dict[str, DayRecord]:
    """
    Daily-log rows (as served by the sheet endpoint) keyed by day.

    Rows that are not objects, or whose Date does not start with YYYY-MM-DD,
    are skipped. Later rows for the same day replace earlier ones.
    """
    out = {}
    for r in rows:
        if not isinstance(r, dict):
            continue
        key = str(r.get("Date") or "")[:10]
        try:
            day_key(key)
        except InvalidDate:
            continue
        out[key] = DayRecord(
            day_type=DayType.parse(r.get("DayType")),
            explicit_target_maint=parse_optional_number(r.get("TargetMaint")),
            explicit_target_const=parse_optional_number(r.get("TargetConst")),
            actual_maint=parse_number_loose(r.get("ActualMaint")),
            actual_const=parse_number_loose(r.get("ActualConst")),
            missed_tickets=parse_number_loose(r.get("MissedTickets")),
            safety_incidents=parse_number_loose(r.get("SafetyIncidents")),
            notes=str(r.get("Notes") or ""),
        )
    return out
