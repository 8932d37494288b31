"""Tenant administration service.

Administrators create, edit, archive and restore tenants. Archiving is a
soft flag flip; a tenant's grants stop conferring access while it is
archived and work again once it is restored.
"""

from __future__ import annotations

from collections.abc import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from access.application.observability import (
    DefaultTenantServiceProbe,
    TenantServiceProbe,
)
from access.application.services._authorization import require_admin
from access.domain.aggregates import Principal, Tenant
from access.domain.value_objects import TenantId
from access.ports.exceptions import TenantNotFoundError
from access.ports.repositories import ITenantRepository


class TenantService:
    """Application service for tenant administration.

    All operations are checked against the effective principal, so an
    impersonating administrator has no administrative rights until the
    impersonation is stopped.
    """

    def __init__(
        self,
        tenant_repository: ITenantRepository,
        session: AsyncSession,
        probe: TenantServiceProbe | None = None,
    ):
        self._tenant_repository = tenant_repository
        self._session = session
        self._probe = probe or DefaultTenantServiceProbe()

    async def create_tenant(
        self,
        actor: Principal,
        name: str,
        billing_customer_ref: str | None = None,
        analytics_site_ref: str | None = None,
        uptime_monitor_ref: str | None = None,
        website_url: str | None = None,
    ) -> Tenant:
        """Create a new active tenant.

        Raises:
            PermissionDeniedError: If actor is not an administrator
            ValueError: If the name is blank
        """
        require_admin(actor)
        tenant = Tenant.create(
            name=name,
            billing_customer_ref=billing_customer_ref,
            analytics_site_ref=analytics_site_ref,
            uptime_monitor_ref=uptime_monitor_ref,
            website_url=website_url,
        )
        try:
            async with self._session.begin():
                await self._tenant_repository.save(tenant)
        except Exception as e:
            self._probe.tenant_operation_failed("create_tenant", str(e))
            raise

        self._probe.tenant_created(tenant.id.value, tenant.name)
        return tenant

    async def get_tenant(self, actor: Principal, tenant_id: TenantId) -> Tenant:
        """Fetch one tenant, archived or not.

        Raises:
            PermissionDeniedError: If actor is not an administrator
            TenantNotFoundError: If the tenant does not exist
        """
        require_admin(actor)
        tenant = await self._tenant_repository.get_by_id(tenant_id)
        if tenant is None:
            raise TenantNotFoundError(f"Tenant {tenant_id} not found")
        return tenant

    async def list_tenants(
        self, actor: Principal, include_archived: bool = False
    ) -> list[Tenant]:
        require_admin(actor)
        return await self._tenant_repository.list_all(include_archived=include_archived)

    async def update_tenant(
        self,
        actor: Principal,
        tenant_id: TenantId,
        name: str | None = None,
        billing_customer_ref: str | None = None,
        analytics_site_ref: str | None = None,
        uptime_monitor_ref: str | None = None,
        website_url: str | None = None,
    ) -> Tenant:
        """Update descriptive fields of a tenant.

        Raises:
            PermissionDeniedError: If actor is not an administrator
            TenantNotFoundError: If the tenant does not exist
            ValueError: If the new name is blank
        """
        require_admin(actor)

        def apply(tenant: Tenant) -> None:
            tenant.update_details(
                name=name,
                billing_customer_ref=billing_customer_ref,
                analytics_site_ref=analytics_site_ref,
                uptime_monitor_ref=uptime_monitor_ref,
                website_url=website_url,
            )

        tenant = await self._mutate("update_tenant", tenant_id, apply)
        self._probe.tenant_updated(tenant.id.value)
        return tenant

    async def archive_tenant(self, actor: Principal, tenant_id: TenantId) -> Tenant:
        """Archive a tenant, suspending all of its grants."""
        require_admin(actor)
        tenant = await self._mutate("archive_tenant", tenant_id, Tenant.archive)
        self._probe.tenant_archived(tenant.id.value)
        return tenant

    async def restore_tenant(self, actor: Principal, tenant_id: TenantId) -> Tenant:
        """Restore an archived tenant."""
        require_admin(actor)
        tenant = await self._mutate("restore_tenant", tenant_id, Tenant.restore)
        self._probe.tenant_restored(tenant.id.value)
        return tenant

    async def _mutate(
        self,
        operation: str,
        tenant_id: TenantId,
        change: Callable[[Tenant], None],
    ) -> Tenant:
        try:
            async with self._session.begin():
                tenant = await self._tenant_repository.get_by_id(tenant_id)
                if tenant is None:
                    raise TenantNotFoundError(f"Tenant {tenant_id} not found")
                change(tenant)
                await self._tenant_repository.save(tenant)
        except Exception as e:
            self._probe.tenant_operation_failed(operation, str(e))
            raise
        return tenant
