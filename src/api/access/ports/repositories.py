"""Repository protocols (ports) for the access bounded context.

Implementations persist aggregates in PostgreSQL. Every method raises
UpstreamUnavailableError when the store cannot be reached; absence is
reported as None or an empty list, never as an exception.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from access.domain.aggregates import AccessGrant, Principal, Tenant
from access.domain.value_objects import GrantId, TenantId


@runtime_checkable
class ITenantRepository(Protocol):
    """Repository for Tenant aggregate persistence."""

    async def save(self, tenant: Tenant) -> None:
        """Persist a tenant aggregate (insert or update)."""
        ...

    async def get_by_id(self, tenant_id: TenantId) -> Tenant | None:
        """Retrieve a tenant by ID, archived or not."""
        ...

    async def list_by_ids(self, tenant_ids: list[TenantId]) -> list[Tenant]:
        """Retrieve the tenants with the given IDs, ordered by ID.

        Unknown IDs are skipped.
        """
        ...

    async def list_all(self, include_archived: bool = False) -> list[Tenant]:
        """List tenants ordered by name.

        Args:
            include_archived: Also return tenants with is_active false
        """
        ...


@runtime_checkable
class IAccessGrantRepository(Protocol):
    """Repository for AccessGrant aggregate persistence."""

    async def save(self, grant: AccessGrant) -> None:
        """Persist a grant (insert or update).

        Raises:
            DuplicateAccessGrantError: If another grant exists for the same
                tenant and principal (or, while pending, the same email)
        """
        ...

    async def get_by_id(self, grant_id: GrantId) -> AccessGrant | None:
        ...

    async def get_for_pair(
        self, tenant_id: TenantId, principal_id: str
    ) -> AccessGrant | None:
        """Retrieve the grant for exactly this tenant and principal."""
        ...

    async def list_usable_for_principal(self, principal_id: str) -> list[AccessGrant]:
        """List grants that currently confer access.

        A grant is usable when it is active and its tenant is active.
        Results are ordered by tenant ID.
        """
        ...

    async def list_for_tenant(self, tenant_id: TenantId) -> list[AccessGrant]:
        """List every grant of a tenant, active or not, oldest first."""
        ...

    async def list_for_principal(self, principal_id: str) -> list[AccessGrant]:
        """List every grant held by a principal, active or not."""
        ...

    async def list_pending_for_email(self, email: str) -> list[AccessGrant]:
        """List grants still waiting for the owner of ``email`` (case-insensitive)."""
        ...

    async def delete(self, grant: AccessGrant) -> bool:
        """Delete a grant.

        Returns:
            True if deleted, False if not found
        """
        ...


@runtime_checkable
class IPrincipalRepository(Protocol):
    """Local directory of principals, fed by identity-provider webhooks."""

    async def save(self, principal: Principal) -> None:
        """Insert or update the directory row for a principal."""
        ...

    async def get_by_id(self, principal_id: str) -> Principal | None:
        ...
