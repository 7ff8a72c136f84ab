"""Objective Routes — listing with tasks attached, CRUD, archive, rollup, and bulk delete."""

from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from iperformance.api.dependencies import get_filter_criteria, get_tenant_context
from iperformance.config import Settings, get_settings
from iperformance.core.bulk_delete import resolve_requested_ids
from iperformance.core.domain_types import EntityKind, TenantContext
from iperformance.core.filter_criteria import FilterCriteria
from iperformance.infrastructure.database import get_db
from iperformance.schemas.common import ArchiveRequest, BulkDeleteRequest
from iperformance.schemas.goal import ObjectiveCreate, ObjectiveUpdate
from iperformance.services.bulk_delete import bulk_delete
from iperformance.services.goal_service import ObjectiveService
from iperformance.services.listing import OBJECTIVES, list_records

router = APIRouter(prefix="/api/v1/objectives", tags=["objectives"])


@router.get("")
async def list_objectives(
    criteria: FilterCriteria = Depends(get_filter_criteria),
    settings: Settings = Depends(get_settings),
    db: AsyncSession = Depends(get_db),
):
    page = await list_records(db, OBJECTIVES, criteria, settings.page_size)
    return page.to_response(OBJECTIVES.response_key)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_objective(
    body: ObjectiveCreate,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    service = ObjectiveService(db, tenant)
    return await service.serialize(await service.create(body))


@router.delete("")
async def delete_objectives(
    body: BulkDeleteRequest | None = Body(None),
    ids: str | None = Query(None),
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """Bulk delete; tasks under deleted objectives are deleted too."""
    raw_ids = resolve_requested_ids(body.ids if body else None, ids)
    outcome = await bulk_delete(db, tenant, EntityKind.OBJECTIVE, raw_ids)
    return outcome.to_response()


@router.patch("/archive")
async def archive_objectives(
    body: ArchiveRequest,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    updated = await ObjectiveService(db, tenant).set_archived(body.ids, body.archived)
    return {"message": "Objectives updated successfully!", "updated": updated}


@router.get("/{objective_id}")
async def get_objective(
    objective_id: UUID,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    return await ObjectiveService(db, tenant).get(objective_id)


@router.patch("/{objective_id}")
async def update_objective(
    objective_id: UUID,
    body: ObjectiveUpdate,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    service = ObjectiveService(db, tenant)
    return await service.serialize(await service.update(objective_id, body))


@router.post("/{objective_id}/recompute")
async def recompute_objective(
    objective_id: UUID,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """Re-derive status and progress from the objective's tasks."""
    return await ObjectiveService(db, tenant).recompute(objective_id)
