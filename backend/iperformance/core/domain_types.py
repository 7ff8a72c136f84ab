"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - TenantContext is immutable and constructed only from the authenticated request
    - RecordStatus is the single source of truth for status labels
    - STATUS_FILTER_ORDER fixes the positional meaning of the status filter array
    - Every EntityKind has exactly one human-code prefix

Design Decisions:
    - str Enums: serialize to JSON without custom encoders, compare equal to DB strings
    - EpochMillis as NewType: timestamps are stored as integer milliseconds end to end
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

CompanyDomain = NewType("CompanyDomain", str)
EpochMillis = NewType("EpochMillis", int)


@dataclass(frozen=True)
class TenantContext:
    """Authenticated {companyDomain, userId} pair every core operation requires."""
    company_domain: CompanyDomain
    user_id: UUID


# ─── Enums ───────────────────────────────────────────────────────

class RecordStatus(str, Enum):
    """Lifecycle states shared by tasks, goals, objectives, risks, challenges, periods."""
    NOT_STARTED = "Not started"
    IN_PROGRESS = "In progress"
    IN_REVIEW = "In review"
    COMPLETED = "Completed"


# Slot i of the client's boolean status array selects STATUS_FILTER_ORDER[i]
STATUS_FILTER_ORDER: tuple[RecordStatus, ...] = (
    RecordStatus.COMPLETED,
    RecordStatus.IN_REVIEW,
    RecordStatus.IN_PROGRESS,
    RecordStatus.NOT_STARTED,
)


class Criticality(str, Enum):
    """Risk criticality levels."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class DueBucket(str, Enum):
    """Named relative date windows accepted by the `due` filter."""
    TODAY = "Due today"
    THIS_WEEK = "Due this week"
    THIS_MONTH = "Due this month"
    FOR_REVIEW = "Due for review"


class EntityKind(str, Enum):
    """Record kinds that mint human codes and appear in bulk operations."""
    TASK = "task"
    GOAL = "goal"
    OBJECTIVE = "objective"
    RISK = "risk"
    CHALLENGE = "challenge"
    PERIOD = "period"


CODE_PREFIXES: dict[EntityKind, str] = {
    EntityKind.TASK: "TS",
    EntityKind.GOAL: "GL",
    EntityKind.OBJECTIVE: "OB",
    EntityKind.RISK: "RK",
    EntityKind.CHALLENGE: "CH",
    EntityKind.PERIOD: "PR",
}


def format_code(kind: EntityKind, seq: int) -> str:
    """Human code for the seq-th record of a kind, e.g. TS-42."""
    return f"{CODE_PREFIXES[kind]}-{seq}"
