"""Rollup Service — recomputes objective and goal status/progress after task or objective writes.

Invariants:
    - Objective state derives from its top-level (non-subtask) tasks
    - Goal state derives from its objectives
    - Recomputing an objective always cascades to its goal
    - Never commits: runs inside the caller's unit of work (autoflush sees pending writes)
    - A missing objective/goal is logged and skipped, not raised (the write already happened)
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from iperformance.core.status_rollup import compute_rollup
from iperformance.models import Goal, Objective, Task

logger = logging.getLogger(__name__)


async def recompute_goal(db: AsyncSession, company_domain: str, goal_id: UUID) -> None:
    goal = (await db.execute(
        select(Goal).where(Goal.id == goal_id, Goal.company_domain == company_domain),
    )).scalar_one_or_none()
    if goal is None:
        logger.warning(
            f"Goal {goal_id} not found for rollup",
            extra={"company_domain": company_domain, "entity": "goal"},
        )
        return
    children = (await db.execute(
        select(Objective.status, Objective.progress).where(
            Objective.company_domain == company_domain,
            Objective.goal_id == goal_id,
        ),
    )).all()
    rollup = compute_rollup((status, progress) for status, progress in children)
    goal.status = rollup.status.value
    goal.progress = rollup.progress


async def recompute_objective(
    db: AsyncSession, company_domain: str, objective_id: UUID,
) -> None:
    objective = (await db.execute(
        select(Objective).where(
            Objective.id == objective_id,
            Objective.company_domain == company_domain,
        ),
    )).scalar_one_or_none()
    if objective is None:
        logger.warning(
            f"Objective {objective_id} not found for rollup",
            extra={"company_domain": company_domain, "entity": "objective"},
        )
        return
    children = (await db.execute(
        select(Task.status, Task.progress).where(
            Task.company_domain == company_domain,
            Task.objective_id == objective_id,
            Task.is_subtask.is_(False),
        ),
    )).all()
    rollup = compute_rollup((status, progress) for status, progress in children)
    objective.status = rollup.status.value
    objective.progress = rollup.progress
    if objective.goal_id:
        await recompute_goal(db, company_domain, objective.goal_id)


async def recompute_objectives(
    db: AsyncSession, company_domain: str, objective_ids: set[UUID | None],
) -> None:
    for objective_id in objective_ids:
        if objective_id:
            await recompute_objective(db, company_domain, objective_id)
