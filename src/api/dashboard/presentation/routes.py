"""HTTP routes for the client dashboard."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from access.dependencies.tenant_context import require_tenant_context
from dashboard.presentation.models import (
    DashboardResponse,
    FeatureSectionResponse,
    LinkedAccount,
)
from shared_kernel.tenant_context import Permission, TenantContext

router = APIRouter(
    prefix="/dashboard",
    tags=["dashboard"],
)


def _require(context: TenantContext, permission: Permission) -> None:
    if not context.allows(permission):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"{permission.value.replace('_', ' ').title()} is not enabled "
            "for your account",
        )


@router.get("")
async def get_dashboard(
    context: Annotated[TenantContext, Depends(require_tenant_context)],
) -> DashboardResponse:
    """Summary of the active tenant.

    Raises:
        HTTPException: 404 if the account is not linked to a tenant
        HTTPException: 403 if the grant does not include the dashboard
    """
    _require(context, Permission.DASHBOARD)
    return DashboardResponse.from_context(context)


@router.get("/billing")
async def get_billing(
    context: Annotated[TenantContext, Depends(require_tenant_context)],
) -> FeatureSectionResponse:
    _require(context, Permission.BILLING)
    return FeatureSectionResponse(
        tenant_id=context.tenant_id,
        feature=Permission.BILLING.value,
        account=LinkedAccount(
            linked=context.billing_customer_ref is not None,
            reference=context.billing_customer_ref,
        ),
    )


@router.get("/analytics")
async def get_analytics(
    context: Annotated[TenantContext, Depends(require_tenant_context)],
) -> FeatureSectionResponse:
    _require(context, Permission.ANALYTICS)
    return FeatureSectionResponse(
        tenant_id=context.tenant_id,
        feature=Permission.ANALYTICS.value,
        account=LinkedAccount(
            linked=context.analytics_site_ref is not None,
            reference=context.analytics_site_ref,
        ),
    )


@router.get("/uptime")
async def get_uptime(
    context: Annotated[TenantContext, Depends(require_tenant_context)],
) -> FeatureSectionResponse:
    _require(context, Permission.UPTIME)
    return FeatureSectionResponse(
        tenant_id=context.tenant_id,
        feature=Permission.UPTIME.value,
        account=LinkedAccount(
            linked=context.uptime_monitor_ref is not None,
            reference=context.uptime_monitor_ref,
        ),
    )
