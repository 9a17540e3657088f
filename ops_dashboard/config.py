"""
Application configuration management.
"""
import os
from pathlib import Path
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()


def _default_data_dir() -> Path:
    env_dir = os.getenv("DATA_DIR")
    if env_dir:
        return Path(env_dir)
    return Path("./data")


def _env_float(name: str, default: float) -> float:
    return float(os.getenv(name, str(default)))


@dataclass
class AppConfig:
    """Application configuration with environment overrides."""

    # Paths
    data_dir: Path = field(default_factory=_default_data_dir)

    # Environment
    app_env: str = field(default_factory=lambda: os.getenv("APP_ENV", "dev"))

    # Cache settings
    cache_ttl_seconds: int = field(default_factory=lambda: int(os.getenv("CACHE_TTL_SECONDS", "3600")))

    # Remote daily log (Apps Script endpoint ending in /exec)
    daily_log_url: str = field(default_factory=lambda: os.getenv("DAILY_LOG_URL", "").strip())
    daily_log_api_key: str = field(default_factory=lambda: os.getenv("DAILY_LOG_API_KEY", "").strip())
    daily_log_tab: str = field(default_factory=lambda: os.getenv("DAILY_LOG_TAB", "OpsDailyLog"))

    # Published revenue logbook CSV
    revenue_log_url: str = field(default_factory=lambda: os.getenv("REVENUE_LOG_URL", "").strip())
    revenue_log_mode: str = field(default_factory=lambda: os.getenv("REVENUE_LOG_MODE", "rows_with_division"))

    request_timeout_seconds: float = field(default_factory=lambda: _env_float("REQUEST_TIMEOUT_SECONDS", 15.0))

    # Business logic defaults
    pipeline_horizon_month: int = field(default_factory=lambda: int(os.getenv("PIPELINE_HORIZON_MONTH", "11")))
    two_week_days: int = 14

    # Coverage cut points
    short_horizon_behind: float = field(default_factory=lambda: _env_float("SHORT_HORIZON_BEHIND", 0.75))
    short_horizon_on_track: float = field(default_factory=lambda: _env_float("SHORT_HORIZON_ON_TRACK", 0.90))
    period_behind: float = field(default_factory=lambda: _env_float("PERIOD_BEHIND", 0.95))
    period_on_track: float = field(default_factory=lambda: _env_float("PERIOD_ON_TRACK", 1.0))

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
    log_file: Path = field(default_factory=lambda: Path(os.getenv("LOG_FILE", "logs/ops_dashboard.log")))

    @property
    def daily_log_configured(self) -> bool:
        return bool(self.daily_log_url) and "PASTE_" not in self.daily_log_url

    @property
    def revenue_log_configured(self) -> bool:
        return bool(self.revenue_log_url) and "PASTE_" not in self.revenue_log_url

    @property
    def is_prod(self) -> bool:
        return self.app_env.lower() == "prod"


# Global config instance
config = AppConfig()


# Data file names (relative to data_dir)
DATA_FILES = {
    "targets": "targets.csv",
    "calendar": "calendar.csv",
    "pipeline": "pipeline.csv",
    "work_tickets": "work_tickets.xlsx",
    "capacity": "capacity.csv",
}

# Header aliases per table, matched case-insensitively after trimming.
# The first alias found in the file wins.
COLUMN_ALIASES = {
    "targets": {
        "month": ["month"],
        "construction_hours": ["construction hours", "constructionhours"],
        "construction_revenue": ["construction revenue"],
        "maintenance_hours": ["maintenance hours", "maintenancehours"],
        "maintenance_revenue": ["maintenance revenue"],
    },
    "calendar": {
        "date": ["date", "day"],
        "maintenance_hours": ["maintenancehours", "maintenance hours", "maint hours", "maint target"],
        "construction_hours": ["constructionhours", "construction hours", "const hours", "const target"],
    },
    "pipeline": {
        "division": ["division name", "division"],
        "status": ["opp status", "status"],
        "start_date": ["start date"],
        "weighted_dollars": ["weighted pipeline", "weighted $"],
        "estimated_dollars": ["estimated $", "estimated dollars"],
        "weighted_hours": ["weighted hours"],
    },
    "work_tickets": {
        "status": ["status", "abr status", "ticket status", "work status"],
        "scheduled_date": ["sched date", "scheduled date", "schedule date", "start date", "due date", "date"],
        "estimated_hours": ["est hrs", "estimated hours", "hours", "labor hours"],
        "division": ["division", "division name", "department", "service"],
    },
    "capacity": {
        "month": ["month"],
        "construction_capacity": ["constcap", "construction capacity"],
        "maintenance_capacity": ["maintcap", "maintenance capacity"],
    },
}

# Required columns (hard fail in strict mode)
REQUIRED_COLUMNS = {
    "targets": ["month"],
    "calendar": ["date"],
    "pipeline": ["division", "status", "start_date", "weighted_hours"],
    "work_tickets": ["scheduled_date", "estimated_hours"],
    "capacity": ["month"],
}

# Optional columns (soft warn if missing)
OPTIONAL_COLUMNS = {
    "targets": ["construction_hours", "construction_revenue", "maintenance_hours", "maintenance_revenue"],
    "calendar": ["maintenance_hours", "construction_hours"],
    "pipeline": ["weighted_dollars", "estimated_dollars"],
    "work_tickets": ["status", "division"],
    "capacity": ["construction_capacity", "maintenance_capacity"],
}

# Division / status keywords
MAINT_KEYWORDS = ["maintenance", "commercial maintenance", "residential maintenance", "irrigation", "lighting"]
CONSTRUCTION_KEYWORDS = ["construction"]
WON_STATUS_WORDS = ["won", "closed won", "sold"]
LOST_STATUS_WORDS = ["lost", "closed lost"]
TICKET_ACTIVE_STATUS_WORDS = ["open", "scheduled"]

# Revenue logbook columns
REVENUE_LOG_COLUMNS = {
    "date": "Date",
    "month": "Month",
    "amount": "Amount",
    "division": "Division",
    "construction_actual": "Construction Actual Revenue",
    "maintenance_actual": "Maintenance Actual Revenue",
}
