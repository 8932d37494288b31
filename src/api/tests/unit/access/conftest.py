"""Shared fixtures for access context unit tests.

The in-memory repositories and stores implement the access ports so the
application services can be exercised end to end without a database.
"""

from __future__ import annotations

import pytest

from access.domain.aggregates import AccessGrant, Principal, Tenant
from access.domain.impersonation import ImpersonationSnapshot
from access.domain.value_objects import GrantId, PrincipalRole, TenantId
from access.ports.exceptions import DuplicateAccessGrantError


class InMemoryTenantRepository:
    def __init__(self) -> None:
        self.tenants: dict[str, Tenant] = {}

    def add(self, tenant: Tenant) -> Tenant:
        self.tenants[tenant.id.value] = tenant
        return tenant

    async def save(self, tenant: Tenant) -> None:
        self.tenants[tenant.id.value] = tenant

    async def get_by_id(self, tenant_id: TenantId) -> Tenant | None:
        return self.tenants.get(tenant_id.value)

    async def list_by_ids(self, tenant_ids: list[TenantId]) -> list[Tenant]:
        wanted = {t.value for t in tenant_ids}
        return [
            self.tenants[key] for key in sorted(self.tenants) if key in wanted
        ]

    async def list_all(self, include_archived: bool = False) -> list[Tenant]:
        tenants = sorted(self.tenants.values(), key=lambda t: t.name)
        if include_archived:
            return tenants
        return [t for t in tenants if t.is_active]


class InMemoryAccessGrantRepository:
    def __init__(self, tenants: InMemoryTenantRepository) -> None:
        self._tenants = tenants
        self.grants: dict[str, AccessGrant] = {}

    def add(self, grant: AccessGrant) -> AccessGrant:
        self.grants[grant.id.value] = grant
        return grant

    async def save(self, grant: AccessGrant) -> None:
        for other in self.grants.values():
            if other.id == grant.id or other.tenant_id != grant.tenant_id:
                continue
            if grant.principal_id is not None and other.principal_id == grant.principal_id:
                raise DuplicateAccessGrantError("duplicate grant")
            if (
                grant.is_pending
                and other.is_pending
                and (other.email or "").lower() == (grant.email or "").lower()
            ):
                raise DuplicateAccessGrantError("duplicate pending grant")
        self.grants[grant.id.value] = grant

    async def get_by_id(self, grant_id: GrantId) -> AccessGrant | None:
        return self.grants.get(grant_id.value)

    async def get_for_pair(
        self, tenant_id: TenantId, principal_id: str
    ) -> AccessGrant | None:
        for grant in self.grants.values():
            if grant.tenant_id == tenant_id and grant.principal_id == principal_id:
                return grant
        return None

    async def list_usable_for_principal(self, principal_id: str) -> list[AccessGrant]:
        usable = []
        for grant in self.grants.values():
            tenant = self._tenants.tenants.get(grant.tenant_id.value)
            if (
                grant.principal_id == principal_id
                and grant.is_active
                and tenant is not None
                and tenant.is_active
            ):
                usable.append(grant)
        return sorted(usable, key=lambda g: g.tenant_id.value)

    async def list_for_tenant(self, tenant_id: TenantId) -> list[AccessGrant]:
        return [g for g in self.grants.values() if g.tenant_id == tenant_id]

    async def list_for_principal(self, principal_id: str) -> list[AccessGrant]:
        return [g for g in self.grants.values() if g.principal_id == principal_id]

    async def list_pending_for_email(self, email: str) -> list[AccessGrant]:
        wanted = email.strip().lower()
        pending = [
            g
            for g in self.grants.values()
            if g.is_pending and (g.email or "").lower() == wanted
        ]
        return sorted(pending, key=lambda g: g.tenant_id.value)

    async def delete(self, grant: AccessGrant) -> bool:
        return self.grants.pop(grant.id.value, None) is not None


class InMemoryPreferenceStore:
    def __init__(self, value: str | None = None) -> None:
        self.value = value
        self.writes: list[str] = []

    def read(self) -> str | None:
        return self.value

    def write(self, tenant_id: str) -> None:
        self.writes.append(tenant_id)
        self.value = tenant_id

    def clear(self) -> None:
        self.value = None


class InMemoryImpersonationStore:
    def __init__(self, snapshot: ImpersonationSnapshot | None = None) -> None:
        self.snapshot = snapshot

    def load(self) -> ImpersonationSnapshot | None:
        return self.snapshot

    def save(self, snapshot: ImpersonationSnapshot) -> None:
        self.snapshot = snapshot

    def clear(self) -> None:
        self.snapshot = None


def make_principal(
    principal_id: str, role: PrincipalRole = PrincipalRole.CLIENT
) -> Principal:
    return Principal(
        id=principal_id,
        email=f"{principal_id}@example.com",
        name=principal_id.upper(),
        role=role,
    )


@pytest.fixture
def tenant_repo() -> InMemoryTenantRepository:
    return InMemoryTenantRepository()


@pytest.fixture
def grant_repo(tenant_repo: InMemoryTenantRepository) -> InMemoryAccessGrantRepository:
    return InMemoryAccessGrantRepository(tenant_repo)


@pytest.fixture
def preference_store() -> InMemoryPreferenceStore:
    return InMemoryPreferenceStore()


@pytest.fixture
def admin() -> Principal:
    return make_principal("a1", PrincipalRole.ADMIN)


@pytest.fixture
def client_principal() -> Principal:
    return make_principal("u1")


@pytest.fixture
def principal_factory():
    """Build principals by id and role."""
    return make_principal


@pytest.fixture
def impersonation_store() -> InMemoryImpersonationStore:
    return InMemoryImpersonationStore()
