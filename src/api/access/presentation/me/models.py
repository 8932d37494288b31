"""Pydantic models for the /me endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from access.application.value_objects import AccessibleTenant
from access.presentation.models import (
    FeatureAccessResponse,
    PrincipalResponse,
    TenantContextResponse,
)


class MeResponse(BaseModel):
    """Who the request is from and who it acts as."""

    real: PrincipalResponse
    effective: PrincipalResponse
    impersonating: bool
    impersonation_started_at: datetime | None = None
    active_tenant: TenantContextResponse | None = Field(
        default=None,
        description="Null when the effective principal is not linked to a tenant",
    )
    features: FeatureAccessResponse


class AccessibleTenantResponse(BaseModel):
    """A tenant the effective principal may switch to."""

    tenant_id: str
    name: str
    active: bool

    @classmethod
    def from_domain(
        cls, tenant: AccessibleTenant, active_tenant_id: str | None
    ) -> AccessibleTenantResponse:
        return cls(
            tenant_id=tenant.tenant_id,
            name=tenant.name,
            active=tenant.tenant_id == active_tenant_id,
        )


class SwitchActiveTenantRequest(BaseModel):
    """Request model for switching the active tenant."""

    tenant_id: str = Field(..., min_length=1, max_length=64)
