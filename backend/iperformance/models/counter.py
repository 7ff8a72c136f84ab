"""Counter ORM — per-tenant, per-kind monotonically increasing sequence for human codes.

Invariants:
    - (company_domain, counter_id) is the primary key: one sequence per tenant and kind
    - seq only ever increases, via a single atomic upsert-increment statement
"""

from sqlalchemy import BigInteger, String
from sqlalchemy.orm import Mapped, mapped_column

from iperformance.db.base import Base


class Counter(Base):
    """Human-code sequence."""
    __tablename__ = "counters"

    company_domain: Mapped[str] = mapped_column(String(255), primary_key=True)
    counter_id: Mapped[str] = mapped_column(String(50), primary_key=True)
    seq: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
