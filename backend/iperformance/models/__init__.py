"""ORM Models — SQLAlchemy declarative models for all tenant-scoped entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Every table except members carries company_domain; members inherit the parent's tenant
    - Cross-record references (goal_id, objective_id, period_id, parent_id, task_id)
      have no FK cascade: unlinking and child deletion are done explicitly by services

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all / autogenerate
"""

from iperformance.models.counter import Counter  # noqa: F401
from iperformance.models.period import Period  # noqa: F401
from iperformance.models.goal import Goal, GoalMember  # noqa: F401
from iperformance.models.objective import Objective, ObjectiveMember  # noqa: F401
from iperformance.models.task import Task, TaskMember  # noqa: F401
from iperformance.models.risk import Risk  # noqa: F401
from iperformance.models.challenge import Challenge  # noqa: F401
