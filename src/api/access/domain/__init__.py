"""Domain layer for the access context."""

from access.domain.aggregates import AccessGrant, Principal, Tenant
from access.domain.impersonation import (
    Impersonating,
    ImpersonationSnapshot,
    ImpersonationState,
    NotImpersonating,
)
from access.domain.value_objects import GrantId, PrincipalRole, TenantId

__all__ = [
    "AccessGrant",
    "GrantId",
    "Impersonating",
    "ImpersonationSnapshot",
    "ImpersonationState",
    "NotImpersonating",
    "Principal",
    "PrincipalRole",
    "Tenant",
    "TenantId",
]
