"""Objective ORM — a measurable step toward a goal, owning a set of tasks.

Invariants:
    - goal_id optional; when set, the goal's rollup is recomputed after writes
    - status and progress are recomputed from the objective's top-level tasks
    - Deleting an objective deletes its tasks explicitly (services/bulk_delete.py)
"""

import uuid

from sqlalchemy import Float, ForeignKey, Index, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from iperformance.db.base import Base
from iperformance.models.goal import COLLABORATOR, TEAM
from iperformance.models.listable import ListableMixin


class ObjectiveMember(Base):
    """Collaborator or team attached to an objective."""
    __tablename__ = "objective_members"
    __table_args__ = (Index("ix_objective_members_role_member", "role", "member_id"),)

    record_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("objectives.id"), primary_key=True,
    )
    role: Mapped[str] = mapped_column(String(20), primary_key=True)
    member_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)


class Objective(ListableMixin, Base):
    """Objective entity."""
    __tablename__ = "objectives"
    __table_args__ = (
        UniqueConstraint("company_domain", "code", name="uq_objectives_tenant_code"),
        UniqueConstraint("company_domain", "title", name="uq_objectives_tenant_title"),
        Index("ix_objectives_tenant_created", "company_domain", "created_at"),
    )
    __member_roles__ = {"collaborators": COLLABORATOR, "teams": TEAM}
    __member_model__ = ObjectiveMember

    goal_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    priority: Mapped[str | None] = mapped_column(String(50), nullable=True)
    progress: Mapped[float] = mapped_column(Float, nullable=False, default=0)

    members: Mapped[list[ObjectiveMember]] = relationship(
        ObjectiveMember, cascade="all, delete-orphan", lazy="selectin",
    )

    @property
    def collaborators(self) -> list[uuid.UUID]:
        return self.member_ids(COLLABORATOR)

    @property
    def teams(self) -> list[uuid.UUID]:
        return self.member_ids(TEAM)

    def set_members(self, role: str, member_ids: list[uuid.UUID]) -> None:
        kept = [m for m in self.members if m.role != role]
        self.members = kept + [
            ObjectiveMember(role=role, member_id=mid)
            for mid in dict.fromkeys(member_ids)
        ]
