"""Resolved tenant context shared across bounded contexts.

These are pure value objects. Resolution (grant lookup, active-tenant
selection, impersonation) lives in the access bounded context; feature
areas only ever consume the result.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from enum import StrEnum


class Permission(StrEnum):
    """Feature areas a tenant contact can be allowed into."""

    DASHBOARD = "dashboard"
    BILLING = "billing"
    ANALYTICS = "analytics"
    UPTIME = "uptime"
    SUPPORT = "support"
    SITE_HEALTH = "site_health"


@dataclass(frozen=True)
class PermissionBundle:
    """Feature flags carried by an access grant.

    Every flag defaults to True, matching how new contacts are created.
    """

    dashboard: bool = True
    billing: bool = True
    analytics: bool = True
    uptime: bool = True
    support: bool = True
    site_health: bool = True

    @classmethod
    def none(cls) -> PermissionBundle:
        """A bundle that allows nothing."""
        return cls(**{permission.value: False for permission in Permission})

    def allows(self, permission: Permission) -> bool:
        return bool(getattr(self, permission.value))

    def with_changes(self, **flags: bool) -> PermissionBundle:
        """Return a copy with the given flags replaced.

        Raises:
            ValueError: If a flag name is not a known permission
        """
        unknown = set(flags) - {p.value for p in Permission}
        if unknown:
            raise ValueError(f"Unknown permissions: {sorted(unknown)}")
        return replace(self, **flags)

    def as_dict(self) -> dict[str, bool]:
        return asdict(self)


@dataclass(frozen=True)
class TenantContext:
    """The tenant a request acts for, with the permissions of its grant.

    Attributes:
        tenant_id: Active tenant ID (ULID string)
        tenant_name: Display name of the tenant
        permissions: Permission bundle from the principal's grant
        billing_customer_ref: Linked billing customer, if any
        analytics_site_ref: Linked analytics site, if any
        uptime_monitor_ref: Linked uptime monitor, if any
        website_url: Tenant website, if any
    """

    tenant_id: str
    tenant_name: str
    permissions: PermissionBundle
    billing_customer_ref: str | None = None
    analytics_site_ref: str | None = None
    uptime_monitor_ref: str | None = None
    website_url: str | None = None

    def allows(self, permission: Permission) -> bool:
        return self.permissions.allows(permission)
