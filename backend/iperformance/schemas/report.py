"""Risk and Challenge Schemas — reported items linked to tasks.

Invariants:
    - Risks never take the "In review" status
    - reportedBy/createdBy are server-assigned from the tenant context
"""

from uuid import UUID

from pydantic import Field, field_validator

from iperformance.core.domain_types import Criticality, RecordStatus
from iperformance.schemas.common import (
    CamelModel, PartialUpdate, RecordResponse, TitledCreate, strip_title,
)


def _reject_in_review(v: RecordStatus | None) -> RecordStatus | None:
    if v is RecordStatus.IN_REVIEW:
        raise ValueError("risks cannot be 'In review'")
    return v


class _ReportFields(CamelModel):
    description: str | None = None
    task_id: UUID | None = None
    start_date: int | None = None
    end_date: int | None = None


class ChallengeCreate(TitledCreate, _ReportFields):
    status: RecordStatus = RecordStatus.NOT_STARTED


class ChallengeUpdate(PartialUpdate, _ReportFields):
    title: str | None = Field(None, min_length=1, max_length=500)
    status: RecordStatus | None = None
    archived: bool | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str | None) -> str | None:
        return strip_title(v) if v is not None else v


class ChallengeResponse(RecordResponse):
    description: str | None = None
    task_id: UUID | None = None
    reported_by: UUID | None = None
    created_by: UUID | None = None


class RiskCreate(ChallengeCreate):
    criticality: Criticality | None = None
    mitigation: str = ""

    @field_validator("status")
    @classmethod
    def check_status(cls, v: RecordStatus) -> RecordStatus:
        return _reject_in_review(v)


class RiskUpdate(ChallengeUpdate):
    not_null = PartialUpdate.not_null | {"mitigation"}

    criticality: Criticality | None = None
    mitigation: str | None = None

    @field_validator("status")
    @classmethod
    def check_status(cls, v: RecordStatus | None) -> RecordStatus | None:
        return _reject_in_review(v)


class RiskResponse(ChallengeResponse):
    criticality: str | None = None
    mitigation: str = ""
