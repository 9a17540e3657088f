"""
Data loading utilities with Streamlit caching.

Every loader returns typed records. Failures are raised as SourceLoadError and
turned into an empty source at the boundary (`safe_load`).
"""
from __future__ import annotations

import io
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, TypeVar

import pandas as pd
import requests
import streamlit as st

from ops_dashboard.config import config, DATA_FILES, REVENUE_LOG_COLUMNS
from ops_dashboard.data.calendar import month_key
from ops_dashboard.data.models import (
    CalendarTargetRecord,
    CapacityRecord,
    DayRecord,
    MonthlyTargetRecord,
    PipelineOpportunity,
    RevenueActual,
    WorkTicket,
)
from ops_dashboard.data.schema import (
    calendar_from_frame,
    capacity_from_frame,
    day_records_from_rows,
    parse_currency,
    parse_date_any,
    pipeline_from_frame,
    targets_from_frame,
    tickets_from_frame,
    validate_schema,
)
from ops_dashboard.data.semantic import is_construction_division, is_maintenance_division
from ops_dashboard.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class SourceLoadError(Exception):
    """Raised when a data source cannot be read or parsed."""
    pass


@dataclass
class SourceStatus:
    """Outcome of loading one source, for status pills."""
    name: str
    ok: bool
    count: int = 0
    message: str = ""

    @property
    def label(self) -> str:
        if self.ok:
            return f"Loaded ({self.count})"
        return f"Failed: {self.message}" if self.message else "Offline"


def safe_load(name: str, loader: Callable[[], T], empty: T) -> Tuple[T, SourceStatus]:
    """
    Run a loader; on failure log and fall back to an empty source.
    """
    try:
        result = loader()
    except (SourceLoadError, OSError, ValueError) as e:
        logger.warning(f"{name} unavailable, treating as empty: {e}")
        return empty, SourceStatus(name=name, ok=False, message=str(e))

    count = len(result) if hasattr(result, "__len__") else 0
    logger.info(f"{name} loaded: {count} records")
    return result, SourceStatus(name=name, ok=True, count=count)


# =============================================================================
# FILE READING
# =============================================================================

def data_path(key: str) -> Path:
    return config.data_dir / DATA_FILES[key]


def read_table_text(text: str) -> pd.DataFrame:
    """Parse delimited text; tab-delimited when the header line has a tab."""
    text = text.lstrip("\ufeff")
    first_line = text.splitlines()[0] if text.strip() else ""
    sep = "\t" if "\t" in first_line else ","
    df = pd.read_csv(io.StringIO(text), sep=sep, dtype=str, keep_default_na=False, skip_blank_lines=True)
    df.columns = [str(c).strip() for c in df.columns]
    return df


def read_table(path: Path) -> pd.DataFrame:
    """Load a CSV/TSV or the first sheet of an XLSX workbook."""
    if not path.exists():
        raise SourceLoadError(f"File not found: {path}")

    try:
        if path.suffix.lower() in (".xlsx", ".xlsm"):
            df = pd.read_excel(path, sheet_name=0, engine="openpyxl")
            df.columns = [str(c).strip() for c in df.columns]
            return df
        return read_table_text(path.read_text(encoding="utf-8-sig"))
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError, zipfile.BadZipFile) as e:
        raise SourceLoadError(f"Could not parse {path.name}: {e}") from e


# =============================================================================
# TABULAR SOURCES
# =============================================================================

@st.cache_data(ttl=config.cache_ttl_seconds)
def load_targets(path: Optional[Path] = None) -> Dict[str, MonthlyTargetRecord]:
    """Load monthly hours/revenue targets."""
    df = read_table(path or data_path("targets"))
    validate_schema(df, "targets", strict=False)
    targets = targets_from_frame(df)
    if not targets:
        raise SourceLoadError("No months recognized in targets file")
    return targets


@st.cache_data(ttl=config.cache_ttl_seconds)
def load_calendar(path: Optional[Path] = None) -> Dict[str, CalendarTargetRecord]:
    """Load the per-day target calendar."""
    df = read_table(path or data_path("calendar"))
    return calendar_from_frame(df)


@st.cache_data(ttl=config.cache_ttl_seconds)
def load_pipeline(path: Optional[Path] = None) -> List[PipelineOpportunity]:
    """Load pipeline opportunities."""
    df = read_table(path or data_path("pipeline"))
    return pipeline_from_frame(df)


@st.cache_data(ttl=config.cache_ttl_seconds)
def load_work_tickets(path: Optional[Path] = None) -> List[WorkTicket]:
    """Load scheduled work tickets from the workbook."""
    df = read_table(path or data_path("work_tickets"))
    if len(df) == 0:
        return []
    return tickets_from_frame(df)


@st.cache_data(ttl=config.cache_ttl_seconds)
def load_capacity(month_keys: Tuple[str, ...], path: Optional[Path] = None) -> Dict[str, CapacityRecord]:
    """Load monthly crew capacity for the tracked months."""
    df = read_table(path or data_path("capacity"))
    return capacity_from_frame(df, month_keys)


# =============================================================================
# REMOTE SOURCES
# =============================================================================

def _get(url: str, params: Optional[Dict[str, Any]] = None,
         session: Optional[requests.Session] = None) -> requests.Response:
    http = session or requests
    try:
        res = http.get(url, params=params, timeout=config.request_timeout_seconds,
                       headers={"Cache-Control": "no-store"})
        res.raise_for_status()
    except requests.RequestException as e:
        raise SourceLoadError(f"Request to {url} failed: {e}") from e
    return res


def fetch_daily_log(start: str,
                    end: str,
                    session: Optional[requests.Session] = None) -> Dict[str, DayRecord]:
    """
    Fetch the ops daily log for [start, end] from the sheet endpoint.

    Callers should request a whole calendar year so month-level workday
    counts see every logged day type.
    """
    if not config.daily_log_configured:
        raise SourceLoadError("Daily log endpoint not configured (DAILY_LOG_URL)")

    params = {"tab": config.daily_log_tab, "start": start, "end": end}
    if config.daily_log_api_key:
        params["key"] = config.daily_log_api_key

    res = _get(config.daily_log_url, params=params, session=session)
    try:
        data = res.json()
    except ValueError as e:
        raise SourceLoadError(f"Daily log endpoint returned non-JSON: {e}") from e

    rows = data.get("rows") if isinstance(data, dict) else None
    if not isinstance(rows, list):
        rows = []
    return day_records_from_rows(rows)


@st.cache_data(ttl=config.cache_ttl_seconds)
def load_daily_log(start: str, end: str) -> Dict[str, DayRecord]:
    """Cached daily log for [start, end]."""
    return fetch_daily_log(start, end)


def revenue_from_frame(df: pd.DataFrame, month_keys: Iterable[str], mode: str) -> Dict[str, RevenueActual]:
    """
    Month-bucketed actual revenue from a logbook sheet.

    rows_with_division: one row per transaction, division classified by
    keyword; rows with no recognizable division are ignored.
    separate_columns: one row per month with a column per division.
    """
    totals = {mk: [0.0, 0.0] for mk in month_keys}
    cols = REVENUE_LOG_COLUMNS

    for row in df.to_dict("records"):
        mk = str(row.get(cols["month"]) or "").strip()
        if mode == "separate_columns":
            if mk not in totals:
                continue
            totals[mk][0] += parse_currency(row.get(cols["construction_actual"]))
            totals[mk][1] += parse_currency(row.get(cols["maintenance_actual"]))
            continue

        if not mk:
            d = parse_date_any(row.get(cols["date"]))
            if d is not None:
                mk = month_key(d)
        if mk not in totals:
            continue

        amount = parse_currency(row.get(cols["amount"]))
        division = row.get(cols["division"])
        if is_construction_division(division):
            totals[mk][0] += amount
        elif is_maintenance_division(division):
            totals[mk][1] += amount

    return {mk: RevenueActual(constr=c, maint=m) for mk, (c, m) in totals.items()}


def load_revenue_logbook(month_keys: Iterable[str],
                         session: Optional[requests.Session] = None) -> Dict[str, RevenueActual]:
    """Actual revenue per tracked month; zeros when no logbook is configured."""
    month_keys = list(month_keys)
    if not config.revenue_log_configured:
        return {mk: RevenueActual() for mk in month_keys}

    res = _get(config.revenue_log_url, session=session)
    df = read_table_text(res.text)
    return revenue_from_frame(df, month_keys, config.revenue_log_mode)


@st.cache_data(ttl=config.cache_ttl_seconds)
def load_revenue_actuals(month_keys: Tuple[str, ...]) -> Dict[str, RevenueActual]:
    """Cached logbook actuals for the tracked months."""
    return load_revenue_logbook(month_keys)


# =============================================================================
# STATUS
# =============================================================================

def get_data_status() -> Dict[str, Any]:
    """Get status of all data files and remote endpoints."""
    status = {"files": {}, "remote": {}}

    for key in DATA_FILES:
        path = data_path(key)
        status["files"][key] = {
            "path": str(path),
            "exists": path.exists(),
        }

    status["remote"]["daily_log"] = {"configured": config.daily_log_configured}
    status["remote"]["revenue_log"] = {"configured": config.revenue_log_configured}
    return status
