"""Access grant service: the grant store's read API and its administration.

``grants_for`` and ``has_access`` are what tenant resolution builds on.
They never raise for absence; store faults surface as
UpstreamUnavailableError from the repository.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from access.application.observability import (
    AccessGrantServiceProbe,
    DefaultAccessGrantServiceProbe,
)
from access.application.services._authorization import require_admin
from access.application.services._pending_grants import link_pending_grants
from access.application.value_objects import TenantGrant
from access.domain.aggregates import AccessGrant, Principal
from access.domain.value_objects import GrantId, TenantId
from access.ports.exceptions import AccessGrantNotFoundError, TenantNotFoundError
from access.ports.repositories import IAccessGrantRepository, ITenantRepository
from shared_kernel.tenant_context import PermissionBundle


class AccessGrantService:
    """Application service for access grants."""

    def __init__(
        self,
        grant_repository: IAccessGrantRepository,
        tenant_repository: ITenantRepository,
        session: AsyncSession,
        probe: AccessGrantServiceProbe | None = None,
    ):
        """Initialize AccessGrantService with dependencies.

        Args:
            grant_repository: Repository for grant persistence
            tenant_repository: Repository used to validate target tenants
            session: Database session for transaction management
            probe: Optional domain probe for observability
        """
        self._grant_repository = grant_repository
        self._tenant_repository = tenant_repository
        self._session = session
        self._probe = probe or DefaultAccessGrantServiceProbe()

    async def grants_for(self, principal_id: str) -> list[TenantGrant]:
        """Return the principal's usable grants, ordered by tenant ID.

        Only active grants on active tenants are returned. An empty list
        means the principal is not linked to any tenant.
        """
        grants = await self._grant_repository.list_usable_for_principal(principal_id)
        return sorted(
            (
                TenantGrant(tenant_id=grant.tenant_id, permissions=grant.permissions)
                for grant in grants
            ),
            key=lambda g: g.tenant_id.value,
        )

    async def has_access(self, principal_id: str, tenant_id: TenantId) -> bool:
        """True iff a usable grant exists for exactly this pair."""
        grants = await self._grant_repository.list_usable_for_principal(principal_id)
        return any(grant.tenant_id == tenant_id for grant in grants)

    async def claim_pending_grants(self, principal: Principal) -> int:
        """Link grants added for the principal's email before they signed up.

        Runs on sign-in so a contact invited by email gets access on the
        first request. Must be the first database work of the request.

        Returns:
            Number of grants linked
        """
        if not principal.email:
            return 0

        async with self._session.begin():
            linked, skipped = await link_pending_grants(
                self._grant_repository, principal
            )

        if linked or skipped:
            self._probe.pending_grants_linked(principal.id, linked, skipped)
        return linked

    async def list_grants_for_tenant(
        self, actor: Principal, tenant_id: TenantId
    ) -> list[AccessGrant]:
        """List every grant of a tenant (admin only).

        Raises:
            PermissionDeniedError: If actor is not an administrator
            TenantNotFoundError: If the tenant does not exist
        """
        require_admin(actor)
        tenant = await self._tenant_repository.get_by_id(tenant_id)
        if tenant is None:
            raise TenantNotFoundError(f"Tenant {tenant_id} not found")
        return await self._grant_repository.list_for_tenant(tenant_id)

    async def add_grant(
        self,
        actor: Principal,
        tenant_id: TenantId,
        principal_id: str | None,
        permissions: PermissionBundle | None = None,
        email: str | None = None,
        name: str | None = None,
        role_label: str | None = None,
    ) -> AccessGrant:
        """Grant a principal access to a tenant (admin only).

        Without a principal_id the grant is pending on ``email`` until its
        owner signs in.

        Raises:
            PermissionDeniedError: If actor is not an administrator
            ValueError: If neither principal_id nor email is given
            TenantNotFoundError: If the tenant does not exist
            DuplicateAccessGrantError: If the principal (or pending email)
                already has a grant
        """
        require_admin(actor)
        grant = AccessGrant.create(
            tenant_id=tenant_id,
            principal_id=principal_id,
            permissions=permissions,
            email=email,
            name=name,
            role_label=role_label,
        )
        try:
            async with self._session.begin():
                tenant = await self._tenant_repository.get_by_id(tenant_id)
                if tenant is None:
                    raise TenantNotFoundError(f"Tenant {tenant_id} not found")
                await self._grant_repository.save(grant)
        except Exception as e:
            self._probe.grant_operation_failed("add_grant", tenant_id.value, str(e))
            raise

        self._probe.grant_added(grant.id.value, tenant_id.value, grant.principal_id)
        return grant

    async def update_grant(
        self,
        actor: Principal,
        tenant_id: TenantId,
        grant_id: GrantId,
        permissions: PermissionBundle | None = None,
        is_active: bool | None = None,
        email: str | None = None,
        name: str | None = None,
        role_label: str | None = None,
    ) -> AccessGrant:
        """Change a grant's permissions, active flag or contact details.

        ``None`` arguments leave the corresponding field unchanged.

        Raises:
            PermissionDeniedError: If actor is not an administrator
            AccessGrantNotFoundError: If the grant does not exist in the tenant
        """
        require_admin(actor)
        try:
            async with self._session.begin():
                grant = await self._get_tenant_grant(tenant_id, grant_id)
                if permissions is not None:
                    grant.change_permissions(permissions)
                if is_active is True:
                    grant.activate()
                elif is_active is False:
                    grant.deactivate()
                grant.update_contact(email=email, name=name, role_label=role_label)
                await self._grant_repository.save(grant)
        except Exception as e:
            self._probe.grant_operation_failed("update_grant", tenant_id.value, str(e))
            raise

        self._probe.grant_updated(grant.id.value, tenant_id.value)
        return grant

    async def remove_grant(
        self, actor: Principal, tenant_id: TenantId, grant_id: GrantId
    ) -> None:
        """Delete a grant (admin only).

        Raises:
            PermissionDeniedError: If actor is not an administrator
            AccessGrantNotFoundError: If the grant does not exist in the tenant
        """
        require_admin(actor)
        try:
            async with self._session.begin():
                grant = await self._get_tenant_grant(tenant_id, grant_id)
                await self._grant_repository.delete(grant)
        except Exception as e:
            self._probe.grant_operation_failed("remove_grant", tenant_id.value, str(e))
            raise

        self._probe.grant_removed(grant_id.value, tenant_id.value)

    async def _get_tenant_grant(
        self, tenant_id: TenantId, grant_id: GrantId
    ) -> AccessGrant:
        grant = await self._grant_repository.get_by_id(grant_id)
        if grant is None or grant.tenant_id != tenant_id:
            raise AccessGrantNotFoundError(
                f"Grant {grant_id} not found in tenant {tenant_id}"
            )
        return grant
