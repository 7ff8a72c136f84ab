"""Period Routes — planning windows, the active period, and period completion.

Invariants:
    - GET /periods/active returns {} when no period is In progress
    - POST /periods/{id}/complete archives finished tasks and releases the rest atomically
"""

from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from iperformance.api.dependencies import get_tenant_context
from iperformance.config import Settings, get_settings
from iperformance.core.bulk_delete import resolve_requested_ids
from iperformance.core.domain_types import EntityKind, TenantContext
from iperformance.infrastructure.database import get_db
from iperformance.schemas.common import BulkDeleteRequest
from iperformance.schemas.period import PeriodCreate, PeriodUpdate
from iperformance.services.bulk_delete import bulk_delete
from iperformance.services.period_service import PeriodService

router = APIRouter(prefix="/api/v1/periods", tags=["periods"])


@router.get("")
async def list_periods(
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    return {"periods": await PeriodService(db, tenant).list_all()}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_period(
    body: PeriodCreate,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    return await PeriodService(db, tenant).create(body)


@router.delete("")
async def delete_periods(
    body: BulkDeleteRequest | None = Body(None),
    ids: str | None = Query(None),
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """Bulk delete; tasks in deleted periods return to the backlog."""
    raw_ids = resolve_requested_ids(body.ids if body else None, ids)
    outcome = await bulk_delete(db, tenant, EntityKind.PERIOD, raw_ids)
    return outcome.to_response()


@router.get("/{period_ref}")
async def get_period(
    period_ref: str,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """Period by id, or "active" for the period currently In progress."""
    return await PeriodService(db, tenant).get(period_ref)


@router.patch("/{period_id}")
async def update_period(
    period_id: UUID,
    body: PeriodUpdate,
    tenant: TenantContext = Depends(get_tenant_context),
    settings: Settings = Depends(get_settings),
    db: AsyncSession = Depends(get_db),
):
    return await PeriodService(db, tenant).update(period_id, body, settings.local_now())


@router.post("/{period_id}/complete")
async def complete_period(
    period_id: UUID,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    return await PeriodService(db, tenant).complete(period_id)
