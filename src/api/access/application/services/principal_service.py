"""Principal directory service.

Lists principals and assigns roles through the identity provider, and
keeps the local directory and grant contact details in step with
identity-provider webhook events.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from access.application.observability import (
    DefaultPrincipalServiceProbe,
    PrincipalServiceProbe,
)
from access.application.services._authorization import require_admin
from access.application.services._pending_grants import link_pending_grants
from access.domain.aggregates import Principal
from access.domain.value_objects import PrincipalRole
from access.ports.identity import IIdentityProvider
from access.ports.repositories import IAccessGrantRepository, IPrincipalRepository


class PrincipalService:
    """Application service for the principal directory."""

    def __init__(
        self,
        identity_provider: IIdentityProvider,
        principal_repository: IPrincipalRepository,
        grant_repository: IAccessGrantRepository,
        session: AsyncSession,
        probe: PrincipalServiceProbe | None = None,
    ):
        self._identity_provider = identity_provider
        self._principal_repository = principal_repository
        self._grant_repository = grant_repository
        self._session = session
        self._probe = probe or DefaultPrincipalServiceProbe()

    async def list_principals(self, actor: Principal) -> list[Principal]:
        """List all principals, sorted by name then email (admin only).

        Raises:
            PermissionDeniedError: If actor is not an administrator
            UpstreamUnavailableError: If the identity provider is unreachable
        """
        require_admin(actor)
        principals = await self._identity_provider.list_principals()
        return sorted(principals, key=lambda p: (p.name.lower(), p.email.lower(), p.id))

    async def set_role(
        self, real: Principal, target_id: str, role: PrincipalRole
    ) -> None:
        """Assign a role to a principal.

        Checked against the real principal, never the impersonated one.

        Raises:
            PermissionDeniedError: If the real principal is not an admin
            PrincipalNotFoundError: If the identity provider does not know
                the target
            UpstreamUnavailableError: If the identity provider is unreachable
        """
        require_admin(real)
        await self._identity_provider.update_role(target_id, role)
        self._probe.role_assigned(real.id, target_id, role.value)

    async def sync_principal(self, principal: Principal) -> None:
        """Apply an identity-provider create/update event.

        Upserts the directory row, refreshes the denormalized email and
        name on every grant the principal holds, and links grants that were
        added for the principal's email before the account existed.
        """
        async with self._session.begin():
            await self._principal_repository.save(principal)
            grants = await self._grant_repository.list_for_principal(principal.id)
            for grant in grants:
                grant.update_contact(
                    email=principal.email or None,
                    name=principal.name or None,
                )
                await self._grant_repository.save(grant)
            linked, _ = await link_pending_grants(self._grant_repository, principal)

        self._probe.principal_synced(principal.id, len(grants), linked)
