"""Risk Routes — reported risks with criticality: listing, CRUD, and bulk delete."""

from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from iperformance.api.dependencies import get_filter_criteria, get_tenant_context
from iperformance.config import Settings, get_settings
from iperformance.core.bulk_delete import resolve_requested_ids
from iperformance.core.domain_types import EntityKind, TenantContext
from iperformance.core.filter_criteria import FilterCriteria
from iperformance.infrastructure.database import get_db
from iperformance.schemas.common import BulkDeleteRequest
from iperformance.schemas.report import RiskCreate, RiskUpdate
from iperformance.services.bulk_delete import bulk_delete
from iperformance.services.listing import RISKS, list_records
from iperformance.services.report_service import RiskService

router = APIRouter(prefix="/api/v1/risks", tags=["risks"])


@router.get("")
async def list_risks(
    criteria: FilterCriteria = Depends(get_filter_criteria),
    settings: Settings = Depends(get_settings),
    db: AsyncSession = Depends(get_db),
):
    page = await list_records(db, RISKS, criteria, settings.page_size)
    return page.to_response(RISKS.response_key)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_risk(
    body: RiskCreate,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    service = RiskService(db, tenant)
    return await service.serialize(await service.create(body))


@router.delete("")
async def delete_risks(
    body: BulkDeleteRequest | None = Body(None),
    ids: str | None = Query(None),
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    raw_ids = resolve_requested_ids(body.ids if body else None, ids)
    outcome = await bulk_delete(db, tenant, EntityKind.RISK, raw_ids)
    return outcome.to_response()


@router.get("/{risk_id}")
async def get_risk(
    risk_id: UUID,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    return await RiskService(db, tenant).get(risk_id)


@router.patch("/{risk_id}")
async def update_risk(
    risk_id: UUID,
    body: RiskUpdate,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    service = RiskService(db, tenant)
    return await service.serialize(await service.update(risk_id, body))
