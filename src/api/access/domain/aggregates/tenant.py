"""Tenant aggregate for the access context."""

from __future__ import annotations

from dataclasses import dataclass

from access.domain.value_objects import TenantId


@dataclass
class Tenant:
    """Tenant aggregate representing one client organization.

    Business rules:
    - Tenants are never hard-deleted from the portal; archiving flips
      ``is_active`` and suspends every grant on the tenant
    - A tenant name must not be blank
    """

    id: TenantId
    name: str
    is_active: bool = True
    billing_customer_ref: str | None = None
    analytics_site_ref: str | None = None
    uptime_monitor_ref: str | None = None
    website_url: str | None = None

    @classmethod
    def create(
        cls,
        name: str,
        billing_customer_ref: str | None = None,
        analytics_site_ref: str | None = None,
        uptime_monitor_ref: str | None = None,
        website_url: str | None = None,
    ) -> Tenant:
        """Factory method for creating a new, active tenant.

        Raises:
            ValueError: If the name is blank
        """
        tenant = cls(
            id=TenantId.generate(),
            name=_require_name(name),
            billing_customer_ref=_blank_to_none(billing_customer_ref),
            analytics_site_ref=_blank_to_none(analytics_site_ref),
            uptime_monitor_ref=_blank_to_none(uptime_monitor_ref),
            website_url=_blank_to_none(website_url),
        )
        return tenant

    def update_details(
        self,
        name: str | None = None,
        billing_customer_ref: str | None = None,
        analytics_site_ref: str | None = None,
        uptime_monitor_ref: str | None = None,
        website_url: str | None = None,
    ) -> None:
        """Update descriptive fields.

        ``None`` leaves a field unchanged; an empty string clears an
        optional reference.
        """
        if name is not None:
            self.name = _require_name(name)
        if billing_customer_ref is not None:
            self.billing_customer_ref = _blank_to_none(billing_customer_ref)
        if analytics_site_ref is not None:
            self.analytics_site_ref = _blank_to_none(analytics_site_ref)
        if uptime_monitor_ref is not None:
            self.uptime_monitor_ref = _blank_to_none(uptime_monitor_ref)
        if website_url is not None:
            self.website_url = _blank_to_none(website_url)

    def archive(self) -> None:
        """Archive the tenant. Idempotent."""
        self.is_active = False

    def restore(self) -> None:
        """Restore an archived tenant. Idempotent."""
        self.is_active = True


def _require_name(name: str) -> str:
    stripped = name.strip()
    if not stripped:
        raise ValueError("Tenant name must not be blank")
    return stripped


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None
