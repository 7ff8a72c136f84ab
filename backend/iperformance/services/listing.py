"""Listing Service — normalized filters → tenant-scoped, paginated, joined result page.

Invariants:
    - Page and count queries share the exact same compiled predicate
    - Count ignores offset/limit; the page is bounded by the configured page size
    - Order is created_at DESC, id DESC so concatenated pages never duplicate or skip rows
    - Child collections are attached after paging, in one batched query per join

Design Decisions:
    - ListingKind bundles model, filter profile, serializer, and joins per record kind
    - Page and count run sequentially on the request session: an AsyncSession is not
      safe for concurrent use, and read skew between them is acceptable
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from iperformance.core.filter_criteria import FilterCriteria
from iperformance.core.pagination import PageResult, page_window
from iperformance.core.predicates import (
    CHALLENGE_PROFILE, GOAL_PROFILE, OBJECTIVE_PROFILE, RISK_PROFILE, TASK_PROFILE,
    Clause, ListingProfile, Op, build_predicate,
)
from iperformance.models import Challenge, Goal, Objective, Risk, Task
from iperformance.schemas.common import dump_record
from iperformance.schemas.goal import GoalResponse, ObjectiveResponse
from iperformance.schemas.report import ChallengeResponse, RiskResponse
from iperformance.schemas.task import TaskResponse
from iperformance.services.aggregation import ChildJoin, attach_children
from iperformance.services.query_compiler import compile_predicate, ordering

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ListingKind:
    """Everything needed to list one record kind."""
    response_key: str
    model: type
    profile: ListingProfile
    serialize: Callable[[object], dict]
    joins: tuple[ChildJoin, ...] = ()


def serialize_task(row) -> dict:
    return dump_record(TaskResponse, row)


def serialize_goal(row) -> dict:
    return dump_record(GoalResponse, row)


def serialize_objective(row) -> dict:
    return dump_record(ObjectiveResponse, row)


def serialize_risk(row) -> dict:
    return dump_record(RiskResponse, row)


def serialize_challenge(row) -> dict:
    return dump_record(ChallengeResponse, row)


SUBTASKS_JOIN = ChildJoin("subtasks", Task, "parent_id", serialize_task)
OBJECTIVE_TASKS_JOIN = ChildJoin(
    "tasks", Task, "objective_id", serialize_task,
    extra=(Clause("is_subtask", Op.EQ, False),),
)
GOAL_OBJECTIVES_JOIN = ChildJoin(
    "objectives", Objective, "goal_id", serialize_objective,
)

TASKS = ListingKind("tasks", Task, TASK_PROFILE, serialize_task, (SUBTASKS_JOIN,))
GOALS = ListingKind(
    "goals", Goal, GOAL_PROFILE, serialize_goal, (GOAL_OBJECTIVES_JOIN,),
)
OBJECTIVES = ListingKind(
    "objectives", Objective, OBJECTIVE_PROFILE, serialize_objective,
    (OBJECTIVE_TASKS_JOIN,),
)
RISKS = ListingKind("risks", Risk, RISK_PROFILE, serialize_risk)
CHALLENGES = ListingKind("challenges", Challenge, CHALLENGE_PROFILE, serialize_challenge)


async def list_records(
    db: AsyncSession, kind: ListingKind, criteria: FilterCriteria, page_size: int,
) -> PageResult:
    """Run one filtered page plus the total match count for a record kind."""
    predicate = build_predicate(criteria, kind.profile)
    conditions = compile_predicate(kind.model, predicate)
    window = page_window(criteria.page_index, page_size)

    page_stmt = (
        select(kind.model)
        .where(*conditions)
        .order_by(*ordering(kind.model))
        .offset(window.offset)
        .limit(window.limit)
    )
    rows = list((await db.execute(page_stmt)).scalars().all())

    count_stmt = select(func.count()).select_from(kind.model).where(*conditions)
    total = (await db.execute(count_stmt)).scalar_one()

    items = [kind.serialize(r) for r in rows]
    await attach_children(db, predicate.tenant, rows, items, kind.joins)

    logger.info(
        f"Listed {len(items)} {kind.response_key}",
        extra={
            "company_domain": predicate.tenant,
            "entity": kind.response_key,
            "total_row_count": total,
        },
    )
    return PageResult(items=items, total_row_count=total)
