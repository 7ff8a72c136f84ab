"""Risk ORM — a reported risk, optionally linked to a task.

Invariants:
    - reported_by and created_by are the creating user
    - criticality ∈ {Low, Medium, High} (validated at the schema boundary)
"""

import uuid

from sqlalchemy import Index, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from iperformance.db.base import Base
from iperformance.models.listable import ListableMixin


class Risk(ListableMixin, Base):
    """Risk entity."""
    __tablename__ = "risks"
    __table_args__ = (
        UniqueConstraint("company_domain", "code", name="uq_risks_tenant_code"),
        UniqueConstraint("company_domain", "title", name="uq_risks_tenant_title"),
        Index("ix_risks_tenant_created", "company_domain", "created_at"),
    )

    criticality: Mapped[str | None] = mapped_column(String(20), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    mitigation: Mapped[str] = mapped_column(Text, nullable=False, default="")
    task_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    reported_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    created_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
