"""Application-layer value objects for the access bounded context.

These represent the authentication context of a request and read-only
views handed to the presentation layer.
"""

from __future__ import annotations

from dataclasses import dataclass

from access.domain.aggregates import Principal
from access.domain.impersonation import ImpersonationSnapshot
from access.domain.value_objects import PrincipalRole, TenantId
from shared_kernel.tenant_context import Permission, PermissionBundle, TenantContext


@dataclass(frozen=True)
class RequestPrincipal:
    """The principals behind one request.

    ``real`` is who authenticated. ``effective`` is who the request acts
    as: the impersonation target while an administrator impersonates,
    otherwise the real principal. Role checks and tenant resolution use
    ``effective``; stopping impersonation and assigning roles use ``real``.
    """

    real: Principal
    effective: Principal
    impersonation: ImpersonationSnapshot | None = None

    @property
    def is_impersonating(self) -> bool:
        return self.impersonation is not None


@dataclass(frozen=True)
class TenantGrant:
    """A usable grant reduced to what resolution needs."""

    tenant_id: TenantId
    permissions: PermissionBundle


@dataclass(frozen=True)
class AccessibleTenant:
    """A tenant the principal may switch to."""

    tenant_id: str
    name: str


@dataclass(frozen=True)
class FeatureAccess:
    """Navigation and feature flags for the effective principal.

    Derived purely from the effective role and the resolved tenant
    context, so an impersonating administrator sees exactly what the
    target would see.
    """

    admin_area: bool
    staff_area: bool
    dashboard: bool
    billing: bool
    analytics: bool
    uptime: bool
    support: bool
    site_health: bool

    @classmethod
    def compute(
        cls, role: PrincipalRole, context: TenantContext | None
    ) -> FeatureAccess:
        def allowed(permission: Permission) -> bool:
            return context is not None and context.allows(permission)

        return cls(
            admin_area=role == PrincipalRole.ADMIN,
            staff_area=role.is_staff,
            dashboard=allowed(Permission.DASHBOARD),
            billing=allowed(Permission.BILLING),
            analytics=allowed(Permission.ANALYTICS),
            uptime=allowed(Permission.UPTIME),
            support=allowed(Permission.SUPPORT),
            site_health=allowed(Permission.SITE_HEALTH),
        )
