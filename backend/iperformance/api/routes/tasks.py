"""Task Routes — listing, CRUD, subtask creation, move, archive, and bulk delete.

Invariants:
    - Every handler runs with an authenticated TenantContext
    - List responses are {tasks: [...], meta: {totalRowCount}}
    - Static paths (/archive, /move, /count) are declared before /{task_id}
"""

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
from iperformance.schemas.task import MoveTasksRequest, TaskCreate, TaskUpdate
from iperformance.services.bulk_delete import bulk_delete
from iperformance.services.listing import TASKS, list_records
from iperformance.services.task_service import TaskService

router = APIRouter(prefix="/api/v1/tasks", tags=["tasks"])


@router.get("")
async def list_tasks(
    criteria: FilterCriteria = Depends(get_filter_criteria),
    settings: Settings = Depends(get_settings),
    db: AsyncSession = Depends(get_db),
):
    """Filtered, paginated top-level tasks with their subtasks."""
    page = await list_records(db, TASKS, criteria, settings.page_size)
    return page.to_response(TASKS.response_key)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_task(
    body: TaskCreate,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """Create a task, or a subtask when parentId is given."""
    return await TaskService(db, tenant).create(body)


@router.delete("")
async def delete_tasks(
    body: BulkDeleteRequest | None = Body(None),
    ids: str | None = Query(None),
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """Bulk delete; subtasks of deleted tasks go with them."""
    raw_ids = resolve_requested_ids(body.ids if body else None, ids)
    outcome = await bulk_delete(db, tenant, EntityKind.TASK, raw_ids)
    return outcome.to_response()


@router.patch("/archive")
async def archive_tasks(
    body: ArchiveRequest,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    updated = await TaskService(db, tenant).set_archived(body.ids, body.archived)
    return {"message": "Tasks updated successfully!", "updated": updated}


@router.patch("/move")
async def move_tasks(
    body: MoveTasksRequest,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """Move tasks into a period, or back to the backlog."""
    return await TaskService(db, tenant).move(body)


@router.get("/count/{owner_id}")
async def count_tasks(
    owner_id: UUID,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    return {"count": await TaskService(db, tenant).count_for_owner(owner_id)}


@router.get("/{task_id}")
async def get_task(
    task_id: UUID,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    return await TaskService(db, tenant).get(task_id)


@router.patch("/{task_id}")
async def update_task(
    task_id: UUID,
    body: TaskUpdate,
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    return await TaskService(db, tenant).update(task_id, body)
