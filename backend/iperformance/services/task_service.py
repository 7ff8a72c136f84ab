"""Task Service — task/subtask writes with parent and objective status propagation.

Invariants:
    - A new task's owners default to its creator
    - Subtask creation pushes the caller-supplied parentStatus/parentProgress onto the parent
    - Objective status/progress is recomputed server-side after every task write
    - Changing a task's reviewers copies the new reviewer set to all of its subtasks
    - Moving tasks sets period_id, un-archives them, and adopts the period's dates
    - Every lookup is tenant-scoped; another tenant's id behaves like a missing id

Design Decisions:
    - Parent-missing on subtask create is a partial failure: the subtask is committed
      first, then NotFoundError("Parent task not found") is raised (404)
    - The parent's status is trusted from the caller rather than derived from subtasks
"""

import logging
from uuid import UUID

from sqlalchemy import func, select, update

from iperformance.core.domain_types import EntityKind
from iperformance.core.errors import ErrorContext, NotFoundError
from iperformance.core.predicates import Clause, Op
from iperformance.infrastructure.database import commit, flush
from iperformance.models import Period, Task
from iperformance.models.task import OWNER, REVIEWER
from iperformance.schemas.task import (
    PARENT_FIELDS, MoveTasksRequest, TaskCreate, TaskUpdate,
)
from iperformance.services.counters import next_code
from iperformance.services.listing import TASKS, serialize_task
from iperformance.services.query_compiler import compile_clause
from iperformance.services.record_service import RecordService
from iperformance.services.records import apply_changes, get_or_404, to_columns
from iperformance.services.rollup_service import recompute_objectives

logger = logging.getLogger(__name__)


class TaskService(RecordService):
    kind = EntityKind.TASK
    label = "Task"
    listing = TASKS

    def _parent_not_found(self, subtask_id: UUID) -> NotFoundError:
        return NotFoundError(
            "Parent task not found",
            ErrorContext(
                company_domain=self.tenant.company_domain,
                entity="task",
                debug_info={"subtaskId": str(subtask_id)},
            ),
        )

    async def _find(self, task_id: UUID) -> Task | None:
        result = await self.db.execute(
            select(Task).where(
                Task.id == task_id,
                Task.company_domain == self.tenant.company_domain,
            ),
        )
        return result.scalar_one_or_none()

    def build(self, body: TaskCreate) -> Task:
        data = body.model_dump(exclude=PARENT_FIELDS | {"owners", "reviewers"})
        task = Task(**to_columns(data), is_subtask=body.parent_id is not None)
        task.members = []
        task.set_members(OWNER, body.owners or [self.tenant.user_id])
        task.set_members(REVIEWER, body.reviewers)
        return task

    async def create(self, body: TaskCreate) -> dict:
        """Create a task; with parentId, create a subtask and update its parent."""
        if body.parent_id is None:
            task = await super().create(body)
            return {"task": await self.serialize(task)}
        return await self._create_subtask(body)

    async def after_write(self, row: Task, previous: dict) -> None:
        objectives = {row.objective_id, previous.get("objective_id")}
        await recompute_objectives(self.db, self.tenant.company_domain, objectives)

    async def _create_subtask(self, body: TaskCreate) -> dict:
        subtask = self.build(body)
        subtask.company_domain = self.tenant.company_domain
        subtask.user_id = self.tenant.user_id
        subtask.code = await next_code(self.db, self.tenant, self.kind)
        self.db.add(subtask)
        await flush(self.db)

        parent = await self._find(body.parent_id)
        if parent is None:
            await commit(self.db)
            logger.warning(
                f"Subtask {subtask.code} created but parent {body.parent_id} is missing",
                extra={"company_domain": self.tenant.company_domain, "entity": "task"},
            )
            raise self._parent_not_found(subtask.id)

        subtask.parent_id = parent.id
        parent.status = body.parent_status.value
        parent.progress = body.parent_progress
        await flush(self.db)
        await recompute_objectives(
            self.db, self.tenant.company_domain, {parent.objective_id},
        )
        await commit(self.db)
        return {"parentId": str(parent.id), "subtask": serialize_task(subtask)}

    async def update(self, task_id: UUID, body: TaskUpdate) -> dict:
        """Partial update; optional parentId/parentStatus/parentProgress update the parent."""
        task = await self.fetch(task_id)
        changes = body.model_dump(exclude_unset=True)
        old_objective = task.objective_id
        old_reviewers = set(task.reviewers)

        apply_changes(task, changes, PARENT_FIELDS)
        await flush(self.db)
        if body.reviewers is not None and set(body.reviewers) != old_reviewers:
            await self._copy_reviewers(task)

        objectives = {task.objective_id, old_objective}
        parent_missing = False
        if body.parent_id is not None:
            parent = await self._find(body.parent_id)
            if parent is None:
                parent_missing = True
            else:
                if body.parent_status is not None:
                    parent.status = body.parent_status.value
                if body.parent_progress is not None:
                    parent.progress = body.parent_progress
                objectives.add(parent.objective_id)

        await flush(self.db)
        await recompute_objectives(self.db, self.tenant.company_domain, objectives)
        await commit(self.db)
        if parent_missing:
            raise self._parent_not_found(task.id)
        return {
            "message": "Updated successfully!",
            "updatedTask": await self.serialize(task),
        }

    async def _copy_reviewers(self, task: Task) -> None:
        result = await self.db.execute(
            select(Task).where(
                Task.company_domain == self.tenant.company_domain,
                Task.parent_id == task.id,
            ),
        )
        for subtask in result.scalars().all():
            subtask.set_members(REVIEWER, task.reviewers)

    async def move(self, body: MoveTasksRequest) -> dict:
        """Assign tasks to a period (or the backlog); unknown ids are reported back."""
        values: dict = {"period_id": body.period_id, "archived": False}
        if body.period_id is not None:
            period = await get_or_404(
                self.db, Period, self.tenant, body.period_id, "Period",
            )
            if period.start_date is not None:
                values["start_date"] = period.start_date
            if period.end_date is not None:
                values["end_date"] = period.end_date

        found = set((await self.db.execute(
            select(Task.id).where(
                Task.company_domain == self.tenant.company_domain,
                Task.id.in_(body.ids),
            ),
        )).scalars().all())
        if found:
            await self.db.execute(
                update(Task)
                .where(Task.company_domain == self.tenant.company_domain, Task.id.in_(found))
                .values(**values)
                .execution_options(synchronize_session=False),
            )
            await commit(self.db)
        logger.info(
            f"Moved {len(found)} tasks to period {body.period_id}",
            extra={"company_domain": self.tenant.company_domain, "entity": "task"},
        )
        return {
            "message": "Tasks moved successfully!",
            "ids": [str(i) for i in body.ids if i in found],
            "errorIds": [str(i) for i in body.ids if i not in found],
        }

    async def count_for_owner(self, owner_id: UUID) -> int:
        """Active (non-archived) top-level tasks owned by one user."""
        stmt = select(func.count()).select_from(Task).where(
            Task.company_domain == self.tenant.company_domain,
            Task.is_subtask.is_(False),
            Task.archived.is_(False),
            compile_clause(Task, Clause("owners", Op.IN, (owner_id,))),
        )
        return (await self.db.execute(stmt)).scalar_one()
