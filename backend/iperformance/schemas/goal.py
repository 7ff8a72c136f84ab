"""Goal and Objective Schemas — create/update bodies and responses.

Invariants:
    - progress is server-computed (objective/goal rollup) and not accepted on create
"""

from uuid import UUID

from pydantic import Field, field_validator

from iperformance.core.domain_types import RecordStatus
from iperformance.schemas.common import (
    CamelModel, PartialUpdate, RecordResponse, TitledCreate, strip_title,
)


class _PlanFields(CamelModel):
    description: str | None = None
    priority: str | None = Field(None, max_length=50)
    start_date: int | None = None
    end_date: int | None = None
    collaborators: list[UUID] | None = None
    teams: list[UUID] | None = None


class GoalCreate(TitledCreate, _PlanFields):
    status: RecordStatus = RecordStatus.NOT_STARTED
    category_id: UUID | None = None


class GoalUpdate(PartialUpdate, _PlanFields):
    title: str | None = Field(None, min_length=1, max_length=500)
    status: RecordStatus | None = None
    category_id: UUID | None = None
    archived: bool | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str | None) -> str | None:
        return strip_title(v) if v is not None else v


class GoalResponse(RecordResponse):
    description: str | None = None
    category_id: UUID | None = None
    priority: str | None = None
    progress: float = 0
    collaborators: list[UUID] = Field(default_factory=list)
    teams: list[UUID] = Field(default_factory=list)


class ObjectiveCreate(TitledCreate, _PlanFields):
    status: RecordStatus = RecordStatus.NOT_STARTED
    goal_id: UUID | None = None


class ObjectiveUpdate(PartialUpdate, _PlanFields):
    title: str | None = Field(None, min_length=1, max_length=500)
    status: RecordStatus | None = None
    goal_id: UUID | None = None
    archived: bool | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str | None) -> str | None:
        return strip_title(v) if v is not None else v


class ObjectiveResponse(RecordResponse):
    goal_id: UUID | None = None
    description: str | None = None
    priority: str | None = None
    progress: float = 0
    collaborators: list[UUID] = Field(default_factory=list)
    teams: list[UUID] = Field(default_factory=list)
