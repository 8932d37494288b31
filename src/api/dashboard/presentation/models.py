"""Pydantic models for dashboard responses."""

from __future__ import annotations

from pydantic import BaseModel, Field

from shared_kernel.tenant_context import Permission, TenantContext


class LinkedAccount(BaseModel):
    """A third-party account linked to the tenant."""

    linked: bool
    reference: str | None = None


class DashboardResponse(BaseModel):
    """Summary of the active tenant.

    A section is null when the principal's grant does not allow it.
    """

    tenant_id: str
    tenant_name: str
    website_url: str | None = None
    billing: LinkedAccount | None = None
    analytics: LinkedAccount | None = None
    uptime: LinkedAccount | None = None
    support: bool = Field(..., description="Support requests allowed")
    site_health: bool = Field(..., description="Site health visible")

    @classmethod
    def from_context(cls, context: TenantContext) -> DashboardResponse:
        def section(
            permission: Permission, reference: str | None
        ) -> LinkedAccount | None:
            if not context.allows(permission):
                return None
            return LinkedAccount(linked=reference is not None, reference=reference)

        return cls(
            tenant_id=context.tenant_id,
            tenant_name=context.tenant_name,
            website_url=context.website_url,
            billing=section(Permission.BILLING, context.billing_customer_ref),
            analytics=section(Permission.ANALYTICS, context.analytics_site_ref),
            uptime=section(Permission.UPTIME, context.uptime_monitor_ref),
            support=context.allows(Permission.SUPPORT),
            site_health=context.allows(Permission.SITE_HEALTH),
        )


class FeatureSectionResponse(BaseModel):
    """One gated dashboard section."""

    tenant_id: str
    feature: str
    account: LinkedAccount
