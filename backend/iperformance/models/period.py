"""Period ORM — a planning window (sprint) that tasks are assigned to.

Invariants:
    - name and code are unique per tenant
    - status "Completed" is reached only through the completion cascade
    - days_left is recomputed whenever both dates are present after an update
"""

import uuid

from sqlalchemy import BigInteger, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from iperformance.core.domain_types import RecordStatus
from iperformance.db.base import Base, now_millis


class Period(Base):
    """Period entity."""
    __tablename__ = "periods"
    __table_args__ = (
        UniqueConstraint("company_domain", "name", name="uq_periods_tenant_name"),
        UniqueConstraint("company_domain", "code", name="uq_periods_tenant_code"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    company_domain: Mapped[str] = mapped_column(String(255), nullable=False)
    user_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    code: Mapped[str] = mapped_column(String(32), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=RecordStatus.NOT_STARTED.value,
    )
    date_range: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    start_date: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    end_date: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    days_left: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=now_millis,
    )
    updated_at: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
