"""Repository protocols for site health."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from site_health.domain import SiteCheck, SiteTarget


@runtime_checkable
class ISiteCheckRepository(Protocol):
    """Persists site check results."""

    async def save(self, check: SiteCheck) -> None:
        ...

    async def latest_for_tenant(self, tenant_id: str) -> SiteCheck | None:
        """Most recent check of a tenant, or None if never checked."""
        ...


@runtime_checkable
class ISiteTargetSource(Protocol):
    """Lists the websites due for checking."""

    async def list_targets(self) -> list[SiteTarget]:
        """Active tenants with a website URL, ordered by tenant ID."""
        ...
