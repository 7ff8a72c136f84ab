"""Filter Normalizer — parses raw list-endpoint query strings into a typed FilterCriteria.

Invariants:
    - normalize_filters is PURE: tenant and current instant are arguments
    - Tenant identity comes only from TenantContext (never from query parameters)
    - Non-numeric numbers ("NaN", "undefined", "") are ABSENT, never zero
    - Numbers outside the signed 64-bit range raise InvalidFilterError
    - List filters must decode to a JSON array, else InvalidFilterError
    - Unknown `due` keywords raise InvalidFilterError instead of being ignored
    - FilterCriteria is immutable and never persisted

Design Decisions:
    - Ids stay as raw strings here; conversion to UUID (and InvalidIdError) belongs
      to the predicate builder, which knows which field an id is destined for
    - Status arrives as a positional boolean array (see STATUS_FILTER_ORDER)
"""

import json
import math
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime

from iperformance.core.domain_types import (
    DueBucket, EpochMillis, RecordStatus, STATUS_FILTER_ORDER, TenantContext,
)
from iperformance.core.due_buckets import SUNDAY, resolve_due_window
from iperformance.core.errors import InvalidFilterError

ABSENT_MARKERS: frozenset[str] = frozenset({"", "undefined", "null", "NaN"})
LIST_FILTERS: tuple[str, ...] = (
    "users", "teams", "status", "categories", "weights",
    "goals", "objectives", "tasks",
)
ARCHIVED_VIEW = "archived"
INT64_MIN: int = -(2 ** 63)
INT64_MAX: int = 2 ** 63 - 1


@dataclass(frozen=True)
class FilterCriteria:
    """Typed, per-request filter value object."""
    tenant: TenantContext
    page_index: int = 0
    search: str | None = None
    start_date: EpochMillis | None = None
    end_date: EpochMillis | None = None
    due: DueBucket | None = None
    due_window: tuple[EpochMillis, EpochMillis] | None = None
    priority: str | None = None
    statuses: tuple[RecordStatus, ...] = ()
    users: tuple[object, ...] = ()
    teams: tuple[object, ...] = ()
    goals: tuple[object, ...] = ()
    objectives: tuple[object, ...] = ()
    tasks: tuple[object, ...] = ()
    categories: tuple[object, ...] = ()
    weights: tuple[object, ...] = ()
    period: str | None = None
    archived: bool = False


def parse_optional_int(raw: str | None, name: str = "number") -> int | None:
    """Decimal string → int; anything non-numeric is treated as absent."""
    if raw is None:
        return None
    text = raw.strip()
    if text in ABSENT_MARKERS:
        return None
    try:
        number = int(text)
    except ValueError:
        try:
            value = float(text)
        except ValueError:
            return None
        if not math.isfinite(value):
            return None
        number = int(value)
    if not INT64_MIN <= number <= INT64_MAX:
        raise InvalidFilterError(f"{name} is out of range", name)
    return number


def parse_optional_text(raw: str | None) -> str | None:
    """Trimmed text; empty or "undefined"/"null" markers are absent."""
    if raw is None:
        return None
    text = raw.strip()
    return None if text in ABSENT_MARKERS else text


def parse_json_list(raw: str | None, name: str) -> list:
    """JSON-encoded array; absent → []; malformed or non-array → InvalidFilterError."""
    if raw is None or raw.strip() == "":
        return []
    try:
        value = json.loads(raw)
    except (ValueError, TypeError):
        raise InvalidFilterError(f"{name} filter must be an array", name)
    if not isinstance(value, list):
        raise InvalidFilterError(f"{name} filter must be an array", name)
    return value


def expand_status_flags(flags: list) -> tuple[RecordStatus, ...]:
    """Positional boolean slots → selected status labels (missing slots are false)."""
    return tuple(
        status for i, status in enumerate(STATUS_FILTER_ORDER)
        if i < len(flags) and flags[i]
    )


def parse_due(raw: str | None) -> DueBucket | None:
    text = parse_optional_text(raw)
    if text is None:
        return None
    try:
        return DueBucket(text)
    except ValueError:
        allowed = ", ".join(b.value for b in DueBucket)
        raise InvalidFilterError(f"due must be one of: {allowed}", "due")


def normalize_filters(
    params: Mapping[str, str | None],
    tenant: TenantContext,
    now: datetime,
    first_weekday: int = SUNDAY,
) -> FilterCriteria:
    """Raw query parameters → FilterCriteria. Raises InvalidFilterError."""
    lists = {name: parse_json_list(params.get(name), name) for name in LIST_FILTERS}

    page_index = parse_optional_int(params.get("count"), "count")
    if page_index is None or page_index < 0:
        page_index = 0

    start_date = parse_optional_int(params.get("startDate"), "startDate")
    end_date = parse_optional_int(params.get("endDate"), "endDate")
    due = parse_due(params.get("due"))
    due_window = resolve_due_window(due, now, first_weekday) if due else None

    return FilterCriteria(
        tenant=tenant,
        page_index=page_index,
        search=parse_optional_text(params.get("search")),
        start_date=EpochMillis(start_date) if start_date is not None else None,
        end_date=EpochMillis(end_date) if end_date is not None else None,
        due=due,
        due_window=due_window,
        priority=parse_optional_text(params.get("priority")),
        statuses=expand_status_flags(lists["status"]),
        users=tuple(lists["users"]),
        teams=tuple(lists["teams"]),
        goals=tuple(lists["goals"]),
        objectives=tuple(lists["objectives"]),
        tasks=tuple(lists["tasks"]),
        categories=tuple(lists["categories"]),
        weights=tuple(lists["weights"]),
        period=parse_optional_text(params.get("period")),
        archived=params.get("view") == ARCHIVED_VIEW,
    )
