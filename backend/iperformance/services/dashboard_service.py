"""Dashboard Service — tenant-scoped status counts behind the dashboard figures.

Invariants:
    - Every count is scoped to the tenant; no figure ever mixes companies
    - Task figures use top-level tasks inside the DashboardWindow, archived ones included
    - Challenge and risk figures cover the whole tenant (the window applies to tasks only)
    - Counting is one GROUP BY per figure, never a row-by-row scan
"""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from iperformance.core.dashboard import (
    TOP_LIMIT, TOP_PRIORITY, DashboardWindow, status_breakdown, summary_items, top_record,
)
from iperformance.core.domain_types import TenantContext
from iperformance.models import Challenge, Goal, Objective, Risk, Task
from iperformance.services.query_compiler import ordering


class DashboardService:
    def __init__(self, db: AsyncSession, tenant: TenantContext):
        self.db = db
        self.tenant = tenant

    def _task_conditions(self, window: DashboardWindow) -> list:
        conditions = [
            Task.company_domain == self.tenant.company_domain,
            Task.is_subtask.is_(False),
        ]
        if window.period_id is not None:
            conditions.append(Task.period_id == window.period_id)
        if window.start_date is not None:
            conditions.append(Task.start_date >= window.start_date)
        if window.end_date is not None:
            conditions.append(Task.end_date <= window.end_date)
        return conditions

    async def _status_counts(self, model, *conditions) -> dict[str | None, int]:
        result = await self.db.execute(
            select(model.status, func.count())
            .where(model.company_domain == self.tenant.company_domain, *conditions)
            .group_by(model.status),
        )
        return {status: count for status, count in result.all()}

    async def summary(self, window: DashboardWindow) -> dict:
        tasks = await self._status_counts(Task, *self._task_conditions(window))
        challenges = await self._status_counts(Challenge)
        risks = await self._status_counts(Risk)
        return {"summary": summary_items(tasks, challenges, risks)}

    async def progress(self, window: DashboardWindow) -> dict:
        tasks = await self._status_counts(Task, *self._task_conditions(window))
        return status_breakdown(tasks)

    async def _task_counts_by(
        self, foreign_key: str, parent_ids: list[UUID], window: DashboardWindow,
    ) -> dict[UUID, dict[str | None, int]]:
        key = getattr(Task, foreign_key)
        result = await self.db.execute(
            select(key, Task.status, func.count())
            .where(key.in_(parent_ids), *self._task_conditions(window))
            .group_by(key, Task.status),
        )
        grouped: dict[UUID, dict[str | None, int]] = {}
        for parent_id, status, count in result.all():
            grouped.setdefault(parent_id, {})[status] = count
        return grouped

    async def _top(self, model, foreign_key: str, window: DashboardWindow) -> list[dict]:
        rows = (await self.db.execute(
            select(model)
            .where(
                model.company_domain == self.tenant.company_domain,
                model.priority == TOP_PRIORITY,
            )
            .order_by(*ordering(model))
            .limit(TOP_LIMIT),
        )).scalars().all()
        if not rows:
            return []
        counts = await self._task_counts_by(foreign_key, [r.id for r in rows], window)
        return [
            top_record(r.id, r.title, r.priority, counts.get(r.id, {})) for r in rows
        ]

    async def top_goals(self, window: DashboardWindow) -> list[dict]:
        return await self._top(Goal, "goal_id", window)

    async def top_objectives(self, window: DashboardWindow) -> list[dict]:
        return await self._top(Objective, "objective_id", window)
