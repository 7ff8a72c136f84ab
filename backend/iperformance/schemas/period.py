"""Period Schemas — planning windows that tasks are assigned to."""

from uuid import UUID

from pydantic import ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from iperformance.core.domain_types import RecordStatus
from iperformance.schemas.common import CamelModel, PartialUpdate


class PeriodCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    description: str = ""
    status: RecordStatus = RecordStatus.NOT_STARTED
    date_range: str = ""
    start_date: int | None = None
    end_date: int | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class PeriodUpdate(PartialUpdate):
    not_null = frozenset({"name", "description", "status", "date_range"})

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    status: RecordStatus | None = None
    date_range: str | None = None
    start_date: int | None = None
    end_date: int | None = None


class PeriodResponse(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True,
    )

    id: UUID
    company_domain: str
    code: str
    name: str
    description: str = ""
    status: str
    date_range: str = ""
    start_date: int | None = None
    end_date: int | None = None
    days_left: int | None = None
    created_at: int
    updated_at: int | None = None
