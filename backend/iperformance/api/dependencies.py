"""Request Dependencies — tenant context, normalized list filters, and the dashboard window.

Invariants:
    - Tenant identity comes only from the authentication headers, never from query params
    - Missing domain or a malformed user id → TenantContextMissingError (401)
    - Filter windows use the configured timezone and first day of week
"""

from uuid import UUID

from fastapi import Depends, Header, Request

from iperformance.config import Settings, get_settings
from iperformance.core.dashboard import DashboardWindow, parse_dashboard_window
from iperformance.core.domain_types import CompanyDomain, TenantContext
from iperformance.core.errors import TenantContextMissingError
from iperformance.core.filter_criteria import FilterCriteria, normalize_filters


def get_tenant_context(
    x_company_domain: str | None = Header(None),
    x_user_id: str | None = Header(None),
) -> TenantContext:
    """Authenticated tenant, set upstream by the auth gateway."""
    domain = (x_company_domain or "").strip()
    if not domain:
        raise TenantContextMissingError()
    try:
        user_id = UUID(x_user_id or "")
    except ValueError:
        raise TenantContextMissingError()
    return TenantContext(company_domain=CompanyDomain(domain), user_id=user_id)


def get_filter_criteria(
    request: Request,
    tenant: TenantContext = Depends(get_tenant_context),
    settings: Settings = Depends(get_settings),
) -> FilterCriteria:
    """Raw query string → FilterCriteria (InvalidFilterError → 400)."""
    return normalize_filters(
        dict(request.query_params),
        tenant,
        settings.local_now(),
        settings.first_day_of_week,
    )


def get_dashboard_window(request: Request) -> DashboardWindow:
    return parse_dashboard_window(dict(request.query_params))
