"""Pydantic models for tenant and grant administration."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from access.domain.aggregates import AccessGrant, Tenant
from access.presentation.models import PermissionsModel


class CreateTenantRequest(BaseModel):
    """Request model for creating a tenant."""

    name: str = Field(..., description="Tenant name", min_length=1, max_length=255)
    billing_customer_ref: str | None = Field(default=None, max_length=255)
    analytics_site_ref: str | None = Field(default=None, max_length=255)
    uptime_monitor_ref: str | None = Field(default=None, max_length=255)
    website_url: str | None = Field(default=None, max_length=2048)


class UpdateTenantRequest(BaseModel):
    """Request model for updating a tenant.

    Omitted fields are left unchanged; an empty string clears a reference.
    """

    name: str | None = Field(default=None, min_length=1, max_length=255)
    billing_customer_ref: str | None = Field(default=None, max_length=255)
    analytics_site_ref: str | None = Field(default=None, max_length=255)
    uptime_monitor_ref: str | None = Field(default=None, max_length=255)
    website_url: str | None = Field(default=None, max_length=2048)


class TenantResponse(BaseModel):
    """Response model for tenant."""

    id: str = Field(..., description="Tenant ID (ULID format)")
    name: str = Field(..., description="Tenant name")
    is_active: bool = Field(..., description="False when archived")
    billing_customer_ref: str | None = None
    analytics_site_ref: str | None = None
    uptime_monitor_ref: str | None = None
    website_url: str | None = None

    @classmethod
    def from_domain(cls, tenant: Tenant) -> TenantResponse:
        """Convert domain Tenant aggregate to API response."""
        return cls(
            id=tenant.id.value,
            name=tenant.name,
            is_active=tenant.is_active,
            billing_customer_ref=tenant.billing_customer_ref,
            analytics_site_ref=tenant.analytics_site_ref,
            uptime_monitor_ref=tenant.uptime_monitor_ref,
            website_url=tenant.website_url,
        )


class CreateAccessGrantRequest(BaseModel):
    """Request model for granting a principal access to a tenant.

    Omit principal_id to invite by email; the grant stays pending until a
    principal signs in with that email.
    """

    principal_id: str | None = Field(default=None, min_length=1, max_length=255)
    permissions: PermissionsModel = Field(default_factory=PermissionsModel)
    email: str | None = Field(default=None, max_length=320)
    name: str | None = Field(default=None, max_length=255)
    role_label: str | None = Field(
        default=None, max_length=255, description="Contact's role at the client"
    )


class UpdateAccessGrantRequest(BaseModel):
    """Request model for changing a grant. Omitted fields are unchanged."""

    permissions: PermissionsModel | None = None
    is_active: bool | None = None
    email: str | None = Field(default=None, max_length=320)
    name: str | None = Field(default=None, max_length=255)
    role_label: str | None = Field(default=None, max_length=255)


class AccessGrantResponse(BaseModel):
    """Response model for an access grant."""

    id: str
    tenant_id: str
    principal_id: str | None
    pending: bool = False
    is_active: bool
    permissions: PermissionsModel
    email: str | None = None
    name: str | None = None
    role_label: str | None = None
    created_at: datetime

    @classmethod
    def from_domain(cls, grant: AccessGrant) -> AccessGrantResponse:
        return cls(
            id=grant.id.value,
            tenant_id=grant.tenant_id.value,
            principal_id=grant.principal_id,
            pending=grant.is_pending,
            is_active=grant.is_active,
            permissions=PermissionsModel.from_domain(grant.permissions),
            email=grant.email,
            name=grant.name,
            role_label=grant.role_label,
            created_at=grant.created_at,
        )
