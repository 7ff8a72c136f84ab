"""Task ORM — a unit of work, optionally a subtask of another task.

Invariants:
    - parent_id set ⇒ is_subtask; a subtask created against a missing parent keeps
      is_subtask with parent_id NULL
    - Deleting a task deletes its subtasks explicitly (no FK cascade)
    - period_id NULL means the task sits in the backlog
    - owners/reviewers are member rows (role "owner" / "reviewer")
    - title and code are unique per tenant

Design Decisions:
    - progress stored as Float: the client sends fractional percentages
    - members loaded with selectin: serializing a page never issues per-row queries
"""

import uuid

from sqlalchemy import (
    Boolean, Float, ForeignKey, Index, String, Text, UniqueConstraint, Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from iperformance.db.base import Base
from iperformance.models.listable import ListableMixin

OWNER = "owner"
REVIEWER = "reviewer"


class TaskMember(Base):
    """Owner or reviewer of a task."""
    __tablename__ = "task_members"
    __table_args__ = (Index("ix_task_members_role_member", "role", "member_id"),)

    record_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("tasks.id"), primary_key=True,
    )
    role: Mapped[str] = mapped_column(String(20), primary_key=True)
    member_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)


class Task(ListableMixin, Base):
    """Task entity."""
    __tablename__ = "tasks"
    __table_args__ = (
        UniqueConstraint("company_domain", "code", name="uq_tasks_tenant_code"),
        UniqueConstraint("company_domain", "title", name="uq_tasks_tenant_title"),
        Index("ix_tasks_tenant_created", "company_domain", "created_at"),
        Index("ix_tasks_tenant_period", "company_domain", "period_id"),
        Index("ix_tasks_parent", "parent_id"),
    )
    __member_roles__ = {"owners": OWNER, "reviewers": REVIEWER}
    __member_model__ = TaskMember

    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    priority: Mapped[str | None] = mapped_column(
        String(50), nullable=True, default="Medium",
    )
    weight_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    progress: Mapped[float | None] = mapped_column(Float, nullable=True)
    planned_effort: Mapped[float | None] = mapped_column(Float, nullable=True)
    effort_spent: Mapped[float | None] = mapped_column(Float, nullable=True)
    budget: Mapped[float | None] = mapped_column(Float, nullable=True)
    goal_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    objective_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    period_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    parent_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    is_subtask: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )

    members: Mapped[list[TaskMember]] = relationship(
        TaskMember, cascade="all, delete-orphan", lazy="selectin",
    )

    @property
    def owners(self) -> list[uuid.UUID]:
        return self.member_ids(OWNER)

    @property
    def reviewers(self) -> list[uuid.UUID]:
        return self.member_ids(REVIEWER)

    def set_members(self, role: str, member_ids: list[uuid.UUID]) -> None:
        """Replace every member of one role, keeping the other role untouched."""
        kept = [m for m in self.members if m.role != role]
        self.members = kept + [
            TaskMember(role=role, member_id=mid) for mid in dict.fromkeys(member_ids)
        ]
