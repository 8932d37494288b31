"""PostgreSQL implementations of the site health repositories."""

from __future__ import annotations

import functools
from typing import Any, Awaitable, Callable, TypeVar

from sqlalchemy import column, select, table
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from site_health.domain import SiteCheck, SiteTarget
from site_health.infrastructure.models import SiteCheckModel
from site_health.infrastructure.observability import (
    DefaultSiteCheckRepositoryProbe,
    SiteCheckRepositoryProbe,
)
from site_health.ports.exceptions import SiteCheckStoreUnavailableError
from site_health.ports.repositories import ISiteCheckRepository, ISiteTargetSource

T = TypeVar("T")

# Read-only view of the tenants table owned by the access context
_tenants = table(
    "tenants",
    column("id"),
    column("website_url"),
    column("is_active"),
)


def _translate_store_errors(
    method: Callable[..., Awaitable[T]],
) -> Callable[..., Awaitable[T]]:
    """Surface database and connection faults as SiteCheckStoreUnavailableError."""

    @functools.wraps(method)
    async def wrapper(self: Any, *args: Any, **kwargs: Any) -> T:
        try:
            return await method(self, *args, **kwargs)
        except (SQLAlchemyError, OSError) as e:
            self._probe.store_unavailable(operation=method.__name__, error=str(e))
            raise SiteCheckStoreUnavailableError("Site check store unavailable") from e

    return wrapper


class SiteCheckRepository(ISiteCheckRepository):
    """Stores one row per site check."""

    def __init__(
        self,
        session: AsyncSession,
        probe: SiteCheckRepositoryProbe | None = None,
    ) -> None:
        self._session = session
        self._probe = probe or DefaultSiteCheckRepositoryProbe()

    @_translate_store_errors
    async def save(self, check: SiteCheck) -> None:
        self._session.add(
            SiteCheckModel(
                id=check.id,
                tenant_id=check.tenant_id,
                url=check.url,
                status=check.status,
                http_status=check.http_status,
                response_time_ms=check.response_time_ms,
                checked_at=check.checked_at,
            )
        )
        await self._session.flush()

    @_translate_store_errors
    async def latest_for_tenant(self, tenant_id: str) -> SiteCheck | None:
        stmt = (
            select(SiteCheckModel)
            .where(SiteCheckModel.tenant_id == tenant_id)
            .order_by(SiteCheckModel.checked_at.desc(), SiteCheckModel.id.desc())
            .limit(1)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if model is None:
            return None
        return SiteCheck(
            id=model.id,
            tenant_id=model.tenant_id,
            url=model.url,
            status=model.status,
            http_status=model.http_status,
            response_time_ms=model.response_time_ms,
            checked_at=model.checked_at,
        )


class TenantSiteTargetSource(ISiteTargetSource):
    """Reads check targets straight from the tenants table."""

    def __init__(
        self,
        session: AsyncSession,
        probe: SiteCheckRepositoryProbe | None = None,
    ) -> None:
        self._session = session
        self._probe = probe or DefaultSiteCheckRepositoryProbe()

    @_translate_store_errors
    async def list_targets(self) -> list[SiteTarget]:
        stmt = (
            select(_tenants.c.id, _tenants.c.website_url)
            .where(
                _tenants.c.is_active.is_(True),
                _tenants.c.website_url.is_not(None),
                _tenants.c.website_url != "",
            )
            .order_by(_tenants.c.id)
        )
        result = await self._session.execute(stmt)
        return [
            SiteTarget(tenant_id=row.id, website_url=row.website_url)
            for row in result.all()
        ]
