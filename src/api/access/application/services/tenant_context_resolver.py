"""Tenant context resolution.

The resolver is the single entry point feature code uses to learn which
tenant a request acts for and with which permissions. It is built once per
request; results are cached on the instance, keyed by principal ID.

Callers pass the *effective* principal ID, so an impersonating
administrator resolves exactly the tenants of the impersonated principal.
"""

from __future__ import annotations

from access.application.observability import (
    DefaultTenantContextProbe,
    TenantContextProbe,
)
from access.application.services.access_grant_service import AccessGrantService
from access.application.services.active_tenant_selector import ActiveTenantSelector
from access.application.value_objects import AccessibleTenant
from access.domain.exceptions import PermissionDeniedError
from access.domain.value_objects import TenantId
from access.ports.repositories import ITenantRepository
from shared_kernel.tenant_context import TenantContext


class TenantContextResolver:
    """Resolves the active tenant context for a principal."""

    def __init__(
        self,
        grant_service: AccessGrantService,
        tenant_repository: ITenantRepository,
        selector: ActiveTenantSelector,
        probe: TenantContextProbe | None = None,
    ):
        self._grant_service = grant_service
        self._tenant_repository = tenant_repository
        self._selector = selector
        self._probe = probe or DefaultTenantContextProbe()
        self._cache: dict[str, TenantContext | None] = {}

    async def resolve_context(self, principal_id: str) -> TenantContext | None:
        """Resolve the active tenant and its permissions.

        Returns:
            The resolved context, or None when the principal has no usable
            grant (an unlinked account)

        Raises:
            UpstreamUnavailableError: If the grant store cannot be reached
        """
        if principal_id in self._cache:
            return self._cache[principal_id]

        context = await self._resolve(principal_id)
        self._cache[principal_id] = context
        return context

    async def has_access(self, principal_id: str, tenant_id: str) -> bool:
        """True iff the principal holds a usable grant on the tenant."""
        try:
            parsed = TenantId.from_string(tenant_id)
        except ValueError:
            return False
        return await self._grant_service.has_access(principal_id, parsed)

    async def switch_active_tenant(self, principal_id: str, tenant_id: str) -> None:
        """Make ``tenant_id`` the principal's active tenant.

        The preference is only written after the grant check passes.

        Raises:
            PermissionDeniedError: If the principal has no usable grant on
                the tenant
        """
        if not await self.has_access(principal_id, tenant_id):
            self._probe.switch_denied(principal_id, tenant_id)
            raise PermissionDeniedError(f"No access to tenant {tenant_id}")

        self._selector.remember(tenant_id)
        self._cache.pop(principal_id, None)
        self._probe.active_tenant_switched(principal_id, tenant_id)

    async def list_accessible_tenants(
        self, principal_id: str
    ) -> list[AccessibleTenant]:
        """List the tenants the principal may switch to, ordered by ID."""
        grants = await self._grant_service.grants_for(principal_id)
        tenants = await self._tenant_repository.list_by_ids(
            [grant.tenant_id for grant in grants]
        )
        return [
            AccessibleTenant(tenant_id=tenant.id.value, name=tenant.name)
            for tenant in tenants
            if tenant.is_active
        ]

    async def _resolve(self, principal_id: str) -> TenantContext | None:
        grants = await self._grant_service.grants_for(principal_id)
        selected = self._selector.select(principal_id, grants)
        if selected is None:
            self._probe.no_grants(principal_id)
            return None

        tenant = await self._tenant_repository.get_by_id(selected.tenant_id)
        if tenant is None or not tenant.is_active:
            # Archived between the two reads
            self._probe.no_grants(principal_id)
            return None

        self._probe.context_resolved(principal_id, tenant.id.value)
        return TenantContext(
            tenant_id=tenant.id.value,
            tenant_name=tenant.name,
            permissions=selected.permissions,
            billing_customer_ref=tenant.billing_customer_ref,
            analytics_site_ref=tenant.analytics_site_ref,
            uptime_monitor_ref=tenant.uptime_monitor_ref,
            website_url=tenant.website_url,
        )
