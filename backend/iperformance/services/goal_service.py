"""Goal & Objective Services — plan records whose status rolls up from their children.

Invariants:
    - Objective writes recompute the objective's goal (old and new goal on re-link)
    - Goal reads and updates return the goal with its objectives attached
    - Archiving is a bulk flag flip, never a delete
"""

from uuid import UUID

from iperformance.core.domain_types import EntityKind
from iperformance.infrastructure.database import commit
from iperformance.services.listing import GOALS, OBJECTIVES
from iperformance.services.record_service import RecordService
from iperformance.services.rollup_service import recompute_goal, recompute_objective


class GoalService(RecordService):
    kind = EntityKind.GOAL
    label = "Goal"
    listing = GOALS


class ObjectiveService(RecordService):
    kind = EntityKind.OBJECTIVE
    label = "Objective"
    listing = OBJECTIVES

    async def after_write(self, row, previous: dict) -> None:
        domain = self.tenant.company_domain
        old_goal = previous.get("goal_id")
        if old_goal and old_goal != row.goal_id:
            await recompute_goal(self.db, domain, old_goal)
        if "status" in previous or "goal_id" in previous or not previous:
            if row.goal_id:
                await recompute_goal(self.db, domain, row.goal_id)

    async def recompute(self, objective_id: UUID) -> dict:
        """Force a rollup of one objective from its tasks."""
        row = await self.fetch(objective_id)
        await recompute_objective(self.db, self.tenant.company_domain, row.id)
        await commit(self.db)
        return await self.serialize(row)
