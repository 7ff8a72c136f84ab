"""Goal Routes — listing with objectives attached, CRUD, archive, and bulk delete."""

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
from iperformance.schemas.goal import GoalCreate, GoalUpdate
from iperformance.services.bulk_delete import bulk_delete
from iperformance.services.goal_service import GoalService
from iperformance.services.listing import GOALS, list_records

router = APIRouter(prefix="/api/v1/goals", tags=["goals"])


@router.get("")
async def list_goals(
    criteria: FilterCriteria = Depends(get_filter_criteria),
    settings: Settings = Depends(get_settings),
    db: AsyncSession = Depends(get_db),
):
    page = await list_records(db, GOALS, criteria, settings.page_size)
    return page.to_response(GOALS.response_key)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_goal(
    body: GoalCreate,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    service = GoalService(db, tenant)
    return await service.serialize(await service.create(body))


@router.delete("")
async def delete_goals(
    body: BulkDeleteRequest | None = Body(None),
    ids: str | None = Query(None),
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """Bulk delete; objectives and tasks of deleted goals are unlinked."""
    raw_ids = resolve_requested_ids(body.ids if body else None, ids)
    outcome = await bulk_delete(db, tenant, EntityKind.GOAL, raw_ids)
    return outcome.to_response()


@router.patch("/archive")
async def archive_goals(
    body: ArchiveRequest,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    updated = await GoalService(db, tenant).set_archived(body.ids, body.archived)
    return {"message": "Goals updated successfully!", "updated": updated}


@router.get("/{goal_id}")
async def get_goal(
    goal_id: UUID,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    return await GoalService(db, tenant).get(goal_id)


@router.patch("/{goal_id}")
async def update_goal(
    goal_id: UUID,
    body: GoalUpdate,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """Update a goal; the response carries its objectives."""
    service = GoalService(db, tenant)
    return await service.serialize(await service.update(goal_id, body))
