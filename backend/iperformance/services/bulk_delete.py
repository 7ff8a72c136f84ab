"""Bulk Delete Service — set-based, tenant-scoped deletes with explicit per-kind cascades.

Invariants:
    - Only ids that exist inside the tenant are deleted; the rest are reported, not raised
    - One DELETE per table touched, never one per id
    - Cascades are explicit statements (no FK ON DELETE), run in the same transaction:
        tasks      → their subtasks and member rows; risks/challenges unlinked
        objectives → their tasks (with subtasks); owning goals recomputed
        goals      → objectives and tasks unlinked
        periods    → tasks returned to the backlog
"""

import logging
from collections.abc import Awaitable, Callable
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from iperformance.core.bulk_delete import DeleteOutcome, classify, split_ids
from iperformance.core.domain_types import EntityKind, TenantContext
from iperformance.infrastructure.database import commit
from iperformance.models import (
    Challenge, Goal, GoalMember, Objective, ObjectiveMember, Period, Risk, Task,
    TaskMember,
)
from iperformance.services.rollup_service import recompute_goal

logger = logging.getLogger(__name__)

Cascade = Callable[[AsyncSession, str, set[UUID]], Awaitable[None]]


def _unlink(model, column: str, domain: str, ids: set[UUID]):
    key = getattr(model, column)
    return (
        update(model)
        .where(model.company_domain == domain, key.in_(ids))
        .values({column: None})
        .execution_options(synchronize_session=False)
    )


async def _purge_tasks(db: AsyncSession, domain: str, task_ids: set[UUID]) -> None:
    """Delete tasks plus their subtasks and members; unlink reports pointing at them."""
    subtask_ids = set((await db.execute(
        select(Task.id).where(Task.company_domain == domain, Task.parent_id.in_(task_ids)),
    )).scalars().all())
    doomed = task_ids | subtask_ids
    await db.execute(delete(TaskMember).where(TaskMember.record_id.in_(doomed)))
    await db.execute(
        delete(Task).where(Task.company_domain == domain, Task.id.in_(doomed)),
    )
    await db.execute(_unlink(Risk, "task_id", domain, doomed))
    await db.execute(_unlink(Challenge, "task_id", domain, doomed))


async def _cascade_tasks(db: AsyncSession, domain: str, ids: set[UUID]) -> None:
    await _purge_tasks(db, domain, ids)


async def _cascade_objectives(db: AsyncSession, domain: str, ids: set[UUID]) -> None:
    goal_ids = set((await db.execute(
        select(Objective.goal_id).where(
            Objective.company_domain == domain, Objective.id.in_(ids),
        ),
    )).scalars().all())
    task_ids = set((await db.execute(
        select(Task.id).where(Task.company_domain == domain, Task.objective_id.in_(ids)),
    )).scalars().all())
    if task_ids:
        await _purge_tasks(db, domain, task_ids)
    # removed here so the goal rollup below no longer counts them
    await db.execute(delete(ObjectiveMember).where(ObjectiveMember.record_id.in_(ids)))
    await db.execute(
        delete(Objective).where(Objective.company_domain == domain, Objective.id.in_(ids)),
    )
    for goal_id in goal_ids:
        if goal_id:
            await recompute_goal(db, domain, goal_id)


async def _cascade_goals(db: AsyncSession, domain: str, ids: set[UUID]) -> None:
    await db.execute(_unlink(Objective, "goal_id", domain, ids))
    await db.execute(_unlink(Task, "goal_id", domain, ids))
    await db.execute(delete(GoalMember).where(GoalMember.record_id.in_(ids)))


async def _cascade_periods(db: AsyncSession, domain: str, ids: set[UUID]) -> None:
    await db.execute(_unlink(Task, "period_id", domain, ids))


CASCADES: dict[EntityKind, tuple[type, Cascade | None]] = {
    EntityKind.TASK: (Task, _cascade_tasks),
    EntityKind.OBJECTIVE: (Objective, _cascade_objectives),
    EntityKind.GOAL: (Goal, _cascade_goals),
    EntityKind.PERIOD: (Period, _cascade_periods),
    EntityKind.RISK: (Risk, None),
    EntityKind.CHALLENGE: (Challenge, None),
}


async def bulk_delete(
    db: AsyncSession, tenant: TenantContext, kind: EntityKind, raw_ids: list,
) -> DeleteOutcome:
    """Delete every existing id of one kind; classify each requested id."""
    model, cascade = CASCADES[kind]
    domain = tenant.company_domain
    valid, malformed = split_ids(raw_ids)

    existing: set[UUID] = set()
    if valid:
        existing = set((await db.execute(
            select(model.id).where(
                model.company_domain == domain, model.id.in_(set(valid.values())),
            ),
        )).scalars().all())

    if existing:
        if cascade is not None:
            await cascade(db, domain, existing)
        await db.execute(
            delete(model).where(model.company_domain == domain, model.id.in_(existing)),
        )
        await commit(db)

    outcome = classify(raw_ids, valid, existing)
    logger.info(
        f"Bulk delete of {kind.value}s: {outcome.summary()}",
        extra={
            "company_domain": domain,
            "entity": kind.value,
            "deleted": len(existing),
        },
    )
    if malformed:
        logger.warning(
            f"Malformed ids in bulk delete: {malformed}",
            extra={"company_domain": domain, "entity": kind.value},
        )
    return outcome
