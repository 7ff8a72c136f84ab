"""Record Service — tenant-scoped create/get/update shared by every listable record kind.

Invariants:
    - Creation always stamps company_domain, user_id, and a freshly minted human code
    - code and company_domain are never taken from a request body
    - Reads include the kind's child joins, so a single record matches its list shape
    - after_write runs before commit, inside the same unit of work
    - Archiving is a bulk flag flip inside the tenant, never a delete

Design Decisions:
    - Subclasses customize through build()/after_write() hooks instead of
      re-implementing the create/update flow
"""

import logging
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from iperformance.core.domain_types import EntityKind, TenantContext
from iperformance.infrastructure.database import commit, flush
from iperformance.services.aggregation import attach_children
from iperformance.services.counters import next_code
from iperformance.services.listing import ListingKind
from iperformance.services.records import apply_changes, get_or_404, to_columns

logger = logging.getLogger(__name__)


class RecordService:
    """Create/get/update for one record kind within one tenant."""

    kind: EntityKind
    label: str
    listing: ListingKind

    def __init__(self, db: AsyncSession, tenant: TenantContext):
        self.db = db
        self.tenant = tenant

    @property
    def model(self):
        return self.listing.model

    async def serialize(self, row) -> dict:
        """Record dict with the kind's child collections attached."""
        items = [self.listing.serialize(row)]
        await attach_children(
            self.db, self.tenant.company_domain, [row], items, self.listing.joins,
        )
        return items[0]

    async def fetch(self, record_id: UUID):
        return await get_or_404(self.db, self.model, self.tenant, record_id, self.label)

    async def get(self, record_id: UUID) -> dict:
        return await self.serialize(await self.fetch(record_id))

    def build(self, body: BaseModel):
        """New ORM row from a create body (member fields set via set_members)."""
        roles = getattr(self.model, "__member_roles__", {})
        data = body.model_dump(exclude=set(roles))
        row = self.model(**to_columns(data))
        for field, role in roles.items():
            row.set_members(role, getattr(body, field, None) or [])
        return row

    async def after_write(self, row, previous: dict) -> None:
        """Hook for cascades; previous holds pre-update values of changed fields."""

    async def create(self, body: BaseModel):
        row = self.build(body)
        row.company_domain = self.tenant.company_domain
        row.user_id = self.tenant.user_id
        row.code = await next_code(self.db, self.tenant, self.kind)
        self.db.add(row)
        await flush(self.db)
        await self.after_write(row, {})
        await commit(self.db)
        logger.info(
            f"Created {self.label} {row.code}",
            extra={"company_domain": self.tenant.company_domain, "entity": self.kind.value},
        )
        return row

    async def set_archived(self, ids: list[UUID], archived: bool) -> int:
        """Bulk archive flag flip inside the tenant; returns the number of rows changed."""
        result = await self.db.execute(
            update(self.model)
            .where(
                self.model.company_domain == self.tenant.company_domain,
                self.model.id.in_(ids),
            )
            .values(archived=archived)
            .execution_options(synchronize_session=False),
        )
        await commit(self.db)
        logger.info(
            f"Set archived={archived} on {result.rowcount} {self.label} records",
            extra={"company_domain": self.tenant.company_domain, "entity": self.kind.value},
        )
        return result.rowcount

    async def update(self, record_id: UUID, body: BaseModel, skip: frozenset[str] = frozenset()):
        row = await self.fetch(record_id)
        changes = body.model_dump(exclude_unset=True)
        previous = {f: getattr(row, f, None) for f in changes if f not in skip}
        apply_changes(row, changes, skip)
        await flush(self.db)
        await self.after_write(row, previous)
        await commit(self.db)
        return row
