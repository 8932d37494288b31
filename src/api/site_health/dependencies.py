"""FastAPI dependencies for site health."""

import hmac
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import get_session
from infrastructure.settings import CronSettings, get_cron_settings
from site_health.application import SiteCheckService
from site_health.infrastructure.http_prober import HttpSiteProber
from site_health.infrastructure.site_check_repository import (
    SiteCheckRepository,
    TenantSiteTargetSource,
)
from site_health.ports.prober import ISiteProber


def get_site_prober(
    settings: Annotated[CronSettings, Depends(get_cron_settings)],
) -> ISiteProber:
    return HttpSiteProber(timeout_seconds=settings.probe_timeout_seconds)


def get_site_check_service(
    session: Annotated[AsyncSession, Depends(get_session)],
    prober: Annotated[ISiteProber, Depends(get_site_prober)],
) -> SiteCheckService:
    return SiteCheckService(
        target_source=TenantSiteTargetSource(session),
        repository=SiteCheckRepository(session),
        prober=prober,
        session=session,
    )


def require_cron_secret(
    settings: Annotated[CronSettings, Depends(get_cron_settings)],
    authorization: Annotated[str | None, Header()] = None,
) -> None:
    """Accept only ``Authorization: Bearer <cron secret>``.

    Raises:
        HTTPException 503: If no cron secret is configured
        HTTPException 401: If the bearer value does not match
    """
    secret = settings.secret.get_secret_value()
    if not secret:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Cron secret not configured",
        )
    scheme, _, provided = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not hmac.compare_digest(
        provided.strip().encode("utf-8"), secret.encode("utf-8")
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
