"""HTTP routes for site health."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from access.dependencies.tenant_context import require_tenant_context
from shared_kernel.tenant_context import Permission, TenantContext
from site_health.application import SiteCheckService
from site_health.dependencies import get_site_check_service, require_cron_secret
from site_health.ports.exceptions import SiteCheckStoreUnavailableError
from site_health.presentation.models import BatchSummaryResponse, SiteCheckResponse

router = APIRouter(tags=["site-health"])


@router.post(
    "/cron/site-checks",
    dependencies=[Depends(require_cron_secret)],
)
async def run_site_checks(
    service: Annotated[SiteCheckService, Depends(get_site_check_service)],
) -> BatchSummaryResponse:
    """Check the website of every active tenant (called by the scheduler).

    Raises:
        HTTPException: 401 if the cron secret is wrong
        HTTPException: 503 if the targets could not be read
        HTTPException: 500 if the batch could not run at all
    """
    try:
        summary = await service.run_batch()
    except SiteCheckStoreUnavailableError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service temporarily unavailable",
        ) from e
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Site check batch failed",
        )
    return BatchSummaryResponse.from_domain(summary)


@router.get("/site-health")
async def get_site_health(
    context: Annotated[TenantContext, Depends(require_tenant_context)],
    service: Annotated[SiteCheckService, Depends(get_site_check_service)],
) -> SiteCheckResponse | None:
    """Latest check of the active tenant's website, or null if never checked.

    Raises:
        HTTPException: 403 if the grant does not include site health
        HTTPException: 503 if the site check store is unavailable
    """
    if not context.allows(Permission.SITE_HEALTH):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Site health is not enabled for your account",
        )
    try:
        check = await service.latest_for_tenant(context.tenant_id)
    except SiteCheckStoreUnavailableError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service temporarily unavailable",
        ) from e
    return SiteCheckResponse.from_domain(check) if check is not None else None
