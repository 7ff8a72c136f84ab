"""Task Schemas — create/update bodies, including the subtask parent-propagation fields.

Invariants:
    - parentId on create requires parentStatus and parentProgress (pushed to the parent)
    - parentStatus/parentProgress are never written to the subtask itself
    - progress and parentProgress are percentages (0–100)
"""

from uuid import UUID

from pydantic import Field, field_validator, model_validator

from iperformance.core.domain_types import RecordStatus
from iperformance.schemas.common import (
    CamelModel, PartialUpdate, RecordResponse, TitledCreate, strip_title,
)

PARENT_FIELDS = frozenset({"parent_id", "parent_status", "parent_progress"})


class _TaskFields(CamelModel):
    description: str | None = None
    priority: str | None = Field(None, max_length=50)
    weight_id: UUID | None = None
    progress: float | None = Field(None, ge=0, le=100)
    planned_effort: float | None = Field(None, ge=0)
    effort_spent: float | None = Field(None, ge=0)
    budget: float | None = Field(None, ge=0)
    goal_id: UUID | None = None
    objective_id: UUID | None = None
    period_id: UUID | None = None
    start_date: int | None = None
    end_date: int | None = None
    parent_id: UUID | None = None
    parent_status: RecordStatus | None = None
    parent_progress: float | None = Field(None, ge=0, le=100)


class TaskCreate(TitledCreate, _TaskFields):
    """Task or subtask creation."""
    status: RecordStatus = RecordStatus.NOT_STARTED
    priority: str | None = Field("Medium", max_length=50)
    owners: list[UUID] = Field(default_factory=list)
    reviewers: list[UUID] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_parent_fields(self):
        if self.parent_id and self.parent_status is None:
            raise ValueError("subtask creation requires parentStatus")
        if self.parent_id and self.parent_progress is None:
            raise ValueError("subtask creation requires parentProgress")
        return self


class TaskUpdate(PartialUpdate, _TaskFields):
    """Partial task update. Only fields present in the body are written."""
    title: str | None = Field(None, min_length=1, max_length=500)
    status: RecordStatus | None = None
    owners: list[UUID] | None = None
    reviewers: list[UUID] | None = None
    archived: bool | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str | None) -> str | None:
        return strip_title(v) if v is not None else v


class MoveTasksRequest(CamelModel):
    """Move tasks into a period (or back to the backlog with periodId null)."""
    ids: list[UUID] = Field(min_length=1)
    period_id: UUID | None = None


class TaskResponse(RecordResponse):
    """Public task representation (subtasks attached by the listing)."""
    description: str | None = None
    priority: str | None = None
    weight_id: UUID | None = None
    progress: float | None = None
    planned_effort: float | None = None
    effort_spent: float | None = None
    budget: float | None = None
    goal_id: UUID | None = None
    objective_id: UUID | None = None
    period_id: UUID | None = None
    parent_id: UUID | None = None
    is_subtask: bool = False
    owners: list[UUID] = Field(default_factory=list)
    reviewers: list[UUID] = Field(default_factory=list)
