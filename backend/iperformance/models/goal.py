"""Goal ORM — a company goal broken down into objectives.

Invariants:
    - Objectives reference their goal via objectives.goal_id (joined at read time)
    - collaborators/teams are member rows (role "collaborator" / "team")
    - status and progress are recomputed from objectives after objective writes
"""

import uuid

from sqlalchemy import Float, ForeignKey, Index, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from iperformance.db.base import Base
from iperformance.models.listable import ListableMixin

COLLABORATOR = "collaborator"
TEAM = "team"


class GoalMember(Base):
    """Collaborator or team attached to a goal."""
    __tablename__ = "goal_members"
    __table_args__ = (Index("ix_goal_members_role_member", "role", "member_id"),)

    record_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("goals.id"), primary_key=True,
    )
    role: Mapped[str] = mapped_column(String(20), primary_key=True)
    member_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)


class Goal(ListableMixin, Base):
    """Goal entity."""
    __tablename__ = "goals"
    __table_args__ = (
        UniqueConstraint("company_domain", "code", name="uq_goals_tenant_code"),
        UniqueConstraint("company_domain", "title", name="uq_goals_tenant_title"),
        Index("ix_goals_tenant_created", "company_domain", "created_at"),
    )
    __member_roles__ = {"collaborators": COLLABORATOR, "teams": TEAM}
    __member_model__ = GoalMember

    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    priority: Mapped[str | None] = mapped_column(String(50), nullable=True)
    progress: Mapped[float] = mapped_column(Float, nullable=False, default=0)

    members: Mapped[list[GoalMember]] = relationship(
        GoalMember, cascade="all, delete-orphan", lazy="selectin",
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
            GoalMember(role=role, member_id=mid) for mid in dict.fromkeys(member_ids)
        ]
