"""Integration tests for site check persistence and target selection."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession
from ulid import ULID

from access.domain.aggregates import Tenant
from access.infrastructure.tenant_repository import TenantRepository
from site_health.domain import SiteCheck, SiteTarget
from site_health.infrastructure.site_check_repository import (
    SiteCheckRepository,
    TenantSiteTargetSource,
)

pytestmark = pytest.mark.integration


@pytest.mark.asyncio
async def test_targets_are_active_tenants_with_a_website(async_session: AsyncSession):
    with_site = Tenant.create(name="Acme", website_url="https://acme.example")
    without_site = Tenant.create(name="Globex")
    archived = Tenant.create(name="Initech", website_url="https://initech.example")
    archived.archive()
    tenants = TenantRepository(async_session)
    async with async_session.begin():
        for tenant in (with_site, without_site, archived):
            await tenants.save(tenant)

    targets = await TenantSiteTargetSource(async_session).list_targets()

    assert targets == [
        SiteTarget(tenant_id=with_site.id.value, website_url="https://acme.example")
    ]


@pytest.mark.asyncio
async def test_latest_check_wins(async_session: AsyncSession):
    tenant = Tenant.create(name="Acme", website_url="https://acme.example")
    target = SiteTarget(tenant_id=tenant.id.value, website_url="https://acme.example")
    older = SiteCheck(
        id=str(ULID()),
        tenant_id=target.tenant_id,
        url=target.website_url,
        status="connection refused",
        checked_at=datetime.now(UTC) - timedelta(hours=1),
    )
    newer = SiteCheck.invalid_url(target)
    repo = SiteCheckRepository(async_session)
    async with async_session.begin():
        await TenantRepository(async_session).save(tenant)
        await repo.save(older)
        await repo.save(newer)

    latest = await repo.latest_for_tenant(tenant.id.value)

    assert latest is not None
    assert latest.id == newer.id
    assert latest.status == "invalid_url"


@pytest.mark.asyncio
async def test_never_checked_tenant_has_no_latest(async_session: AsyncSession):
    assert await SiteCheckRepository(async_session).latest_for_tenant("missing") is None
