"""Listable Record Columns — shared columns of every filtered/paginated record kind.

Invariants:
    - company_domain is non-nullable and indexed together with created_at
    - code is assigned once at creation (services/counters.py) and never updated
    - created_at is epoch milliseconds and the default sort key
    - archived defaults to False but list queries always assert it explicitly

Design Decisions:
    - Mixin over joined-table inheritance: each kind keeps its own table and constraints
    - Member rows (owners, collaborators, teams) live in per-kind member tables so
      "any member in set" filters compile to an indexed subquery on every backend
"""

import uuid

from sqlalchemy import BigInteger, Boolean, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from iperformance.core.domain_types import RecordStatus
from iperformance.db.base import now_millis


class ListableMixin:
    """Columns shared by tasks, goals, objectives, risks, and challenges."""

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    company_domain: Mapped[str] = mapped_column(String(255), nullable=False)
    user_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    code: Mapped[str] = mapped_column(String(32), nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    status: Mapped[str | None] = mapped_column(
        String(20), nullable=True, default=RecordStatus.NOT_STARTED.value,
    )
    start_date: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    end_date: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    archived: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    created_at: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=now_millis,
    )

    # logical field name → member role; kinds with member tables override both
    __member_roles__ = {}
    __member_model__ = None

    def member_ids(self, role: str) -> list[uuid.UUID]:
        return [m.member_id for m in getattr(self, "members", []) if m.role == role]
