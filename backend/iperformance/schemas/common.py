"""Common Schemas — camelCase base model, shared record fields, and bulk request bodies.

Invariants:
    - CamelModel accepts both camelCase aliases and snake_case names on input
    - dump_record() is the single ORM row → JSON dict conversion
    - Update bodies may omit any field but cannot null a non-nullable column
"""

from typing import ClassVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for every API schema: camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RecordResponse(CamelModel):
    """Fields shared by every listable record."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True,
    )

    id: UUID
    company_domain: str
    user_id: UUID | None = None
    code: str
    title: str
    status: str | None = None
    start_date: int | None = None
    end_date: int | None = None
    archived: bool = False
    created_at: int


def dump_record(schema: type[BaseModel], row: object) -> dict:
    """Serialize an ORM row through a response schema to a JSON-ready dict."""
    return schema.model_validate(row).model_dump(mode="json", by_alias=True)


def strip_title(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("title cannot be empty or whitespace")
    return v


class TitledCreate(CamelModel):
    """Create body base — validates title length and whitespace."""
    title: str = Field(min_length=1, max_length=500)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return strip_title(v)


class PartialUpdate(CamelModel):
    """Update body base: fields in not_null may be omitted but never sent as null."""
    not_null: ClassVar[frozenset[str]] = frozenset({"title", "archived"})

    @model_validator(mode="after")
    def reject_nulls(self):
        nulls = sorted(
            name for name in self.model_fields_set & self.not_null
            if getattr(self, name) is None
        )
        if nulls:
            raise ValueError(f"{', '.join(nulls)} cannot be null")
        return self


class BulkDeleteRequest(BaseModel):
    """Bulk delete body. Items stay untyped so malformed ids are reported per id."""
    ids: list | None = None


class ArchiveRequest(CamelModel):
    """Bulk archive/unarchive body."""
    ids: list[UUID] = Field(min_length=1)
    archived: bool = True
