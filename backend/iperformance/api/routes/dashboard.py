"""Dashboard Routes — completion summary, task status breakdown, and top goals/objectives."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from iperformance.api.dependencies import get_dashboard_window, get_tenant_context
from iperformance.core.dashboard import DashboardWindow
from iperformance.core.domain_types import TenantContext
from iperformance.infrastructure.database import get_db
from iperformance.services.dashboard_service import DashboardService

router = APIRouter(prefix="/api/v1/dashboard", tags=["dashboard"])


@router.get("/summary")
async def get_summary(
    window: DashboardWindow = Depends(get_dashboard_window),
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """Completion rates of tasks, challenges, and risks."""
    return await DashboardService(db, tenant).summary(window)


@router.get("/progress")
async def get_progress(
    window: DashboardWindow = Depends(get_dashboard_window),
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    return await DashboardService(db, tenant).progress(window)


@router.get("/top-goals")
async def get_top_goals(
    window: DashboardWindow = Depends(get_dashboard_window),
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    return await DashboardService(db, tenant).top_goals(window)


@router.get("/top-objectives")
async def get_top_objectives(
    window: DashboardWindow = Depends(get_dashboard_window),
    tenant: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    return await DashboardService(db, tenant).top_objectives(window)
