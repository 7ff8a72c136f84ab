"""Record Helpers — tenant-scoped lookup and partial-update application shared by services.

Invariants:
    - get_or_404 never returns a row from another tenant
    - apply_changes writes only keys present in the update payload
    - Member-backed fields (owners, collaborators, …) are replaced as whole sets
"""

from enum import Enum
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from iperformance.core.domain_types import TenantContext
from iperformance.core.errors import ErrorContext, NotFoundError


def to_columns(data: dict) -> dict:
    """Enum members → their stored string values; everything else unchanged."""
    return {k: (v.value if isinstance(v, Enum) else v) for k, v in data.items()}


async def get_or_404(
    db: AsyncSession, model, tenant: TenantContext, record_id: UUID, label: str,
):
    """Fetch one record inside the tenant or raise NotFoundError."""
    result = await db.execute(
        select(model).where(
            model.id == record_id,
            model.company_domain == tenant.company_domain,
        ),
    )
    row = result.scalar_one_or_none()
    if row is None:
        raise NotFoundError(
            f"{label} not found",
            ErrorContext(company_domain=tenant.company_domain, entity=label),
        )
    return row


def apply_changes(row, changes: dict, skip: frozenset[str] = frozenset()) -> None:
    """Write a partial update onto an ORM row; member roles go through set_members."""
    roles = getattr(type(row), "__member_roles__", {})
    for field, value in to_columns(changes).items():
        if field in skip:
            continue
        if field in roles:
            if value is not None:
                row.set_members(roles[field], value)
            continue
        setattr(row, field, value)
