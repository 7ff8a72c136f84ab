"""Period Service — planning window lifecycle and the completion cascade.

Invariants:
    - Period names and codes are unique per tenant (duplicate → DuplicateKeyError, 409)
    - days_left is recomputed on update only when both dates are present afterwards
    - Completion runs in ONE transaction: the period becomes Completed, its Completed
      tasks are archived in place, every other task returns to the backlog
    - Completion is idempotent: a second run finds nothing left to move

Design Decisions:
    - "active" is the first period (newest first) whose status is In progress;
      no active period is an empty object, not a 404
    - Today's start comes from the configured business timezone
"""

import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from iperformance.core.domain_types import EntityKind, RecordStatus, TenantContext
from iperformance.core.due_buckets import day_window, to_epoch_millis
from iperformance.core.period_schedule import compute_days_left
from iperformance.core.predicates import to_uuid
from iperformance.db.base import now_millis
from iperformance.infrastructure.database import commit
from iperformance.models import Period, Task
from iperformance.schemas.common import dump_record
from iperformance.schemas.period import PeriodCreate, PeriodResponse, PeriodUpdate
from iperformance.services.counters import next_code
from iperformance.services.records import get_or_404, to_columns

logger = logging.getLogger(__name__)

ACTIVE = "active"


def serialize_period(row: Period) -> dict:
    return dump_record(PeriodResponse, row)


class PeriodService:
    def __init__(self, db: AsyncSession, tenant: TenantContext):
        self.db = db
        self.tenant = tenant

    async def create(self, body: PeriodCreate) -> dict:
        period = Period(
            **to_columns(body.model_dump()),
            company_domain=self.tenant.company_domain,
            user_id=self.tenant.user_id,
            code=await next_code(self.db, self.tenant, EntityKind.PERIOD),
        )
        self.db.add(period)
        await commit(self.db)
        logger.info(
            f"Created period {period.code}",
            extra={"company_domain": self.tenant.company_domain, "entity": "period"},
        )
        return serialize_period(period)

    async def list_all(self) -> list[dict]:
        result = await self.db.execute(
            select(Period)
            .where(Period.company_domain == self.tenant.company_domain)
            .order_by(Period.created_at.desc(), Period.id.desc()),
        )
        return [serialize_period(p) for p in result.scalars().all()]

    async def get(self, period_ref: str) -> dict:
        """Period by id, or the active (In progress) period when period_ref is "active"."""
        if period_ref == ACTIVE:
            result = await self.db.execute(
                select(Period)
                .where(
                    Period.company_domain == self.tenant.company_domain,
                    Period.status == RecordStatus.IN_PROGRESS.value,
                )
                .order_by(Period.created_at.desc(), Period.id.desc())
                .limit(1),
            )
            period = result.scalar_one_or_none()
            return serialize_period(period) if period else {}
        return serialize_period(await self._fetch(to_uuid(period_ref, "periodId")))

    async def _fetch(self, period_id: UUID) -> Period:
        return await get_or_404(self.db, Period, self.tenant, period_id, "Period")

    async def update(self, period_id: UUID, body: PeriodUpdate, now: datetime) -> dict:
        period = await self._fetch(period_id)
        for field, value in to_columns(body.model_dump(exclude_unset=True)).items():
            setattr(period, field, value)
        if period.start_date is not None and period.end_date is not None:
            today_start = to_epoch_millis(day_window(now)[0])
            period.days_left = compute_days_left(
                period.start_date, period.end_date, today_start,
            )
        period.updated_at = now_millis()
        await commit(self.db)
        return serialize_period(period)

    async def complete(self, period_id: UUID) -> dict:
        """Mark a period Completed; archive its finished tasks, release the rest."""
        period = await self._fetch(period_id)
        domain = self.tenant.company_domain
        period.status = RecordStatus.COMPLETED.value
        period.updated_at = now_millis()

        archived = await self.db.execute(
            update(Task)
            .where(
                Task.company_domain == domain,
                Task.period_id == period.id,
                Task.status == RecordStatus.COMPLETED.value,
            )
            .values(archived=True)
            .execution_options(synchronize_session=False),
        )
        released = await self.db.execute(
            update(Task)
            .where(
                Task.company_domain == domain,
                Task.period_id == period.id,
                or_(
                    Task.status.is_(None),
                    Task.status != RecordStatus.COMPLETED.value,
                ),
            )
            .values(period_id=None)
            .execution_options(synchronize_session=False),
        )
        await commit(self.db)
        logger.info(
            f"Completed period {period.code}: archived {archived.rowcount}, "
            f"released {released.rowcount} tasks",
            extra={"company_domain": domain, "entity": "period", "record_id": str(period.id)},
        )
        return {
            "message": "Period completed successfully!",
            "period": serialize_period(period),
            "archivedTasks": archived.rowcount,
            "movedToBacklog": released.rowcount,
        }
