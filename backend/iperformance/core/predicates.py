"""Predicate Builder — FilterCriteria → engine-neutral conjunction of field constraints.

Invariants:
    - build_predicate is PURE: no IO, no clock, same input → same predicate
    - The tenant constraint is always present (Predicate.tenant is mandatory)
    - `archived` is always asserted explicitly, never left to a stored default
    - Task profiles always assert is_subtask = False and a period selection
    - Every id is converted to UUID; a malformed id raises InvalidIdError, never dropped
    - Search is a literal case-insensitive substring match, not a pattern

Design Decisions:
    - One ListingProfile per record kind maps filter names to field names; a filter
      whose profile entry is None is not supported by that kind and is ignored
    - Field names are logical (ORM attribute names); services/query_compiler.py
      resolves them, so the builder stays storage-agnostic
    - Tasks read endDate as a whole UTC day (bound snapped to 23:59:59.999);
      other kinds compare the raw millisecond bound
    - Op.IN means "field value is a member of the set"; for multi-valued fields
      (owners, collaborators) it means "any member is in the set"
"""

from dataclasses import dataclass
from enum import Enum
from uuid import UUID

from iperformance.core.domain_types import DueBucket, RecordStatus
from iperformance.core.due_buckets import end_of_utc_day
from iperformance.core.errors import InvalidIdError
from iperformance.core.filter_criteria import FilterCriteria


class Op(str, Enum):
    """Comparison operators understood by every predicate compiler."""
    EQ = "eq"
    IS_NULL = "is_null"
    GTE = "gte"
    LTE = "lte"
    IN = "in"
    ICONTAINS = "icontains"


@dataclass(frozen=True)
class Clause:
    """Single field constraint."""
    field: str
    op: Op
    value: object = None


@dataclass(frozen=True)
class AnyOf:
    """Disjunction of clauses (used for free-text search)."""
    clauses: tuple[Clause, ...]


@dataclass(frozen=True)
class Predicate:
    """Tenant-scoped conjunction of constraints."""
    tenant: str
    clauses: tuple[Clause | AnyOf, ...] = ()

    def fields(self) -> set[str]:
        """Field names constrained by this predicate (for tests and logging)."""
        names: set[str] = set()
        for clause in self.clauses:
            if isinstance(clause, AnyOf):
                names.update(c.field for c in clause.clauses)
            else:
                names.add(clause.field)
        return names


@dataclass(frozen=True)
class ListingProfile:
    """Which field each filter targets for one record kind (None = unsupported)."""
    name: str
    search_fields: tuple[str, ...] = ("code", "title")
    users: str | None = None
    teams: str | None = None
    goals: str | None = None
    objectives: str | None = None
    tasks: str | None = None
    categories: str | None = None
    weights: str | None = None
    priority: str | None = "priority"
    status: str | None = "status"
    reviewers: str | None = None
    top_level_only: bool = False
    period_scoped: bool = False
    end_date_whole_day: bool = False


TASK_PROFILE = ListingProfile(
    name="tasks",
    users="owners",
    goals="goal_id",
    objectives="objective_id",
    weights="weight_id",
    reviewers="reviewers",
    top_level_only=True,
    period_scoped=True,
    end_date_whole_day=True,
)
GOAL_PROFILE = ListingProfile(
    name="goals",
    users="collaborators",
    teams="teams",
    categories="category_id",
)
OBJECTIVE_PROFILE = ListingProfile(
    name="objectives",
    users="collaborators",
    teams="teams",
    goals="goal_id",
)
RISK_PROFILE = ListingProfile(
    name="risks",
    users="reported_by",
    tasks="task_id",
    priority="criticality",
)
CHALLENGE_PROFILE = ListingProfile(
    name="challenges",
    users="reported_by",
    tasks="task_id",
    priority=None,
)


def to_uuid(value: object, field: str) -> UUID:
    """Coerce a raw id to UUID or raise InvalidIdError."""
    if isinstance(value, UUID):
        return value
    if not isinstance(value, str):
        raise InvalidIdError(value, field)
    try:
        return UUID(value)
    except ValueError:
        raise InvalidIdError(value, field)


def _id_set(field: str, raw_ids: tuple[object, ...], filter_name: str) -> Clause:
    return Clause(field, Op.IN, tuple(to_uuid(v, filter_name) for v in raw_ids))


def _search_clause(criteria: FilterCriteria, profile: ListingProfile) -> AnyOf:
    return AnyOf(tuple(
        Clause(name, Op.ICONTAINS, criteria.search) for name in profile.search_fields
    ))


def _date_clauses(criteria: FilterCriteria, profile: ListingProfile) -> list[Clause]:
    clauses: list[Clause] = []
    if criteria.start_date is not None:
        clauses.append(Clause("start_date", Op.GTE, criteria.start_date))
    if criteria.due_window is not None:
        window_start, window_end = criteria.due_window
        clauses.append(Clause("end_date", Op.GTE, window_start))
        clauses.append(Clause("end_date", Op.LTE, window_end))
    if criteria.end_date is not None:
        end = criteria.end_date
        if profile.end_date_whole_day:
            end = end_of_utc_day(end)
        clauses.append(Clause("end_date", Op.LTE, end))
    return clauses


def _period_clause(criteria: FilterCriteria) -> Clause | None:
    """Explicit period, or unassigned backlog; archived view without period spans all."""
    if criteria.archived and criteria.period is None:
        return None
    if criteria.period is None:
        return Clause("period_id", Op.IS_NULL)
    return Clause("period_id", Op.EQ, to_uuid(criteria.period, "period"))


def _id_filter_clauses(
    criteria: FilterCriteria, profile: ListingProfile, review_bucket: bool,
) -> list[Clause]:
    clauses: list[Clause] = []
    pairs = (
        ("users", profile.users, criteria.users),
        ("teams", profile.teams, criteria.teams),
        ("goals", profile.goals, criteria.goals),
        ("objectives", profile.objectives, criteria.objectives),
        ("tasks", profile.tasks, criteria.tasks),
        ("categories", profile.categories, criteria.categories),
        ("weights", profile.weights, criteria.weights),
    )
    for filter_name, field, raw_ids in pairs:
        if field is None or not raw_ids:
            continue
        # the review bucket scopes by reviewer instead of owner
        if filter_name == "users" and review_bucket:
            continue
        clauses.append(_id_set(field, raw_ids, filter_name))
    return clauses


def build_predicate(criteria: FilterCriteria, profile: ListingProfile) -> Predicate:
    """Compose every present filter into one tenant-scoped predicate."""
    review_bucket = (
        criteria.due is DueBucket.FOR_REVIEW and profile.reviewers is not None
    )
    clauses: list[Clause | AnyOf] = []

    if profile.top_level_only:
        clauses.append(Clause("is_subtask", Op.EQ, False))

    if criteria.search:
        clauses.append(_search_clause(criteria, profile))

    clauses.extend(_id_filter_clauses(criteria, profile, review_bucket))
    clauses.extend(_date_clauses(criteria, profile))

    if criteria.priority and profile.priority:
        clauses.append(Clause(profile.priority, Op.ICONTAINS, criteria.priority))

    if profile.status and criteria.statuses:
        clauses.append(Clause(
            profile.status, Op.IN, tuple(s.value for s in criteria.statuses),
        ))

    if review_bucket:
        clauses.append(Clause(
            profile.status or "status", Op.IN, (RecordStatus.IN_REVIEW.value,),
        ))
        clauses.append(Clause(
            profile.reviewers, Op.IN, (criteria.tenant.user_id,),
        ))

    if profile.period_scoped:
        period = _period_clause(criteria)
        if period is not None:
            clauses.append(period)

    clauses.append(Clause("archived", Op.EQ, criteria.archived))

    return Predicate(
        tenant=criteria.tenant.company_domain, clauses=tuple(clauses),
    )
