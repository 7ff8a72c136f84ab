"""Challenge ORM — an impediment reported against work, optionally linked to a task.

Invariants:
    - reported_by and created_by are the creating user
"""

import uuid

from sqlalchemy import Index, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from iperformance.db.base import Base
from iperformance.models.listable import ListableMixin


class Challenge(ListableMixin, Base):
    """Challenge entity."""
    __tablename__ = "challenges"
    __table_args__ = (
        UniqueConstraint("company_domain", "code", name="uq_challenges_tenant_code"),
        UniqueConstraint("company_domain", "title", name="uq_challenges_tenant_title"),
        Index("ix_challenges_tenant_created", "company_domain", "created_at"),
    )

    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    task_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    reported_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    created_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
