"""
Semantic layer: division scopes and status vocabularies.

CRITICAL: All division/status checks must use these helpers so that tickets,
pipeline and revenue logbook rows are classified the same way.
"""
from typing import Iterable, List, Sequence, TypeVar

from ops_dashboard.config import (
    CONSTRUCTION_KEYWORDS,
    LOST_STATUS_WORDS,
    MAINT_KEYWORDS,
    TICKET_ACTIVE_STATUS_WORDS,
    WON_STATUS_WORDS,
)

T = TypeVar("T")

# =============================================================================
# DIVISION SCOPES
# =============================================================================
# all → construction | maintenance

SCOPES = ["all", "construction", "maintenance"]


def _norm(value) -> str:
    return str(value or "").strip().lower()


def _contains_any(text: str, words: Sequence[str]) -> bool:
    return any(w in text for w in words)


def is_construction_division(name) -> bool:
    return _contains_any(_norm(name), CONSTRUCTION_KEYWORDS)


def is_maintenance_division(name) -> bool:
    """Maintenance keywords, excluding anything that reads as construction."""
    s = _norm(name)
    return _contains_any(s, MAINT_KEYWORDS) and not is_construction_division(s)


def in_scope(name, scope: str) -> bool:
    """Whether a division name belongs to a view scope."""
    if scope == "construction":
        return is_construction_division(name)
    if scope == "maintenance":
        return is_maintenance_division(name)
    return is_construction_division(name) or is_maintenance_division(name)


def filter_division(items: Iterable[T], scope: str) -> List[T]:
    """Keep items (with a `.division` attribute) belonging to scope."""
    return [it for it in items if in_scope(getattr(it, "division", ""), scope)]


# =============================================================================
# STATUS VOCABULARIES
# =============================================================================

def is_won_status(status) -> bool:
    return _contains_any(_norm(status), WON_STATUS_WORDS)


def is_lost_status(status) -> bool:
    return _contains_any(_norm(status), LOST_STATUS_WORDS) and not is_won_status(status)


def is_open_status(status) -> bool:
    """Pipeline opportunity that is neither won nor lost."""
    return not is_won_status(status) and not is_lost_status(status)


def is_ticket_active(status) -> bool:
    return _contains_any(_norm(status), TICKET_ACTIVE_STATUS_WORDS)
