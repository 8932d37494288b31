"""PostgreSQL implementation of ITenantRepository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from access.domain.aggregates import Tenant
from access.domain.value_objects import TenantId
from access.infrastructure.models import TenantModel
from access.infrastructure.observability import (
    DefaultTenantRepositoryProbe,
    TenantRepositoryProbe,
)
from access.infrastructure.store_errors import translate_store_errors
from access.ports.repositories import ITenantRepository


class TenantRepository(ITenantRepository):
    """Repository managing PostgreSQL storage for Tenant aggregates."""

    def __init__(
        self,
        session: AsyncSession,
        probe: TenantRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with database session.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultTenantRepositoryProbe()

    @translate_store_errors
    async def save(self, tenant: Tenant) -> None:
        """Insert or update the tenant row."""
        stmt = select(TenantModel).where(TenantModel.id == tenant.id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            model = TenantModel(id=tenant.id.value)
            self._session.add(model)

        model.name = tenant.name
        model.is_active = tenant.is_active
        model.billing_customer_ref = tenant.billing_customer_ref
        model.analytics_site_ref = tenant.analytics_site_ref
        model.uptime_monitor_ref = tenant.uptime_monitor_ref
        model.website_url = tenant.website_url

        await self._session.flush()
        self._probe.tenant_saved(tenant.id.value)

    @translate_store_errors
    async def get_by_id(self, tenant_id: TenantId) -> Tenant | None:
        stmt = select(TenantModel).where(TenantModel.id == tenant_id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        self._probe.tenant_retrieved(model.id)
        return self._to_domain(model)

    @translate_store_errors
    async def list_by_ids(self, tenant_ids: list[TenantId]) -> list[Tenant]:
        if not tenant_ids:
            return []
        stmt = (
            select(TenantModel)
            .where(TenantModel.id.in_([t.value for t in tenant_ids]))
            .order_by(TenantModel.id)
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    @translate_store_errors
    async def list_all(self, include_archived: bool = False) -> list[Tenant]:
        stmt = select(TenantModel).order_by(TenantModel.name, TenantModel.id)
        if not include_archived:
            stmt = stmt.where(TenantModel.is_active.is_(True))
        result = await self._session.execute(stmt)
        tenants = [self._to_domain(model) for model in result.scalars().all()]

        self._probe.tenants_listed(len(tenants))
        return tenants

    @staticmethod
    def _to_domain(model: TenantModel) -> Tenant:
        return Tenant(
            id=TenantId(value=model.id),
            name=model.name,
            is_active=model.is_active,
            billing_customer_ref=model.billing_customer_ref,
            analytics_site_ref=model.analytics_site_ref,
            uptime_monitor_ref=model.uptime_monitor_ref,
            website_url=model.website_url,
        )
