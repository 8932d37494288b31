"""Pydantic models shared by access routes."""

from __future__ import annotations

from pydantic import BaseModel, Field

from access.application.value_objects import FeatureAccess
from access.domain.aggregates import Principal
from shared_kernel.tenant_context import PermissionBundle, TenantContext


class PrincipalResponse(BaseModel):
    """Response model for a principal."""

    id: str = Field(..., description="External identity-provider ID")
    email: str
    name: str
    role: str = Field(..., description="admin, staff or client")

    @classmethod
    def from_domain(cls, principal: Principal) -> PrincipalResponse:
        return cls(
            id=principal.id,
            email=principal.email,
            name=principal.name,
            role=principal.role.value,
        )


class PermissionsModel(BaseModel):
    """Permission flags of an access grant."""

    dashboard: bool = True
    billing: bool = True
    analytics: bool = True
    uptime: bool = True
    support: bool = True
    site_health: bool = True

    @classmethod
    def from_domain(cls, permissions: PermissionBundle) -> PermissionsModel:
        return cls(**permissions.as_dict())

    def to_domain(self) -> PermissionBundle:
        return PermissionBundle(**self.model_dump())


class TenantContextResponse(BaseModel):
    """The tenant a request acts for."""

    tenant_id: str
    tenant_name: str
    permissions: PermissionsModel

    @classmethod
    def from_domain(cls, context: TenantContext) -> TenantContextResponse:
        return cls(
            tenant_id=context.tenant_id,
            tenant_name=context.tenant_name,
            permissions=PermissionsModel.from_domain(context.permissions),
        )


class FeatureAccessResponse(BaseModel):
    """Navigation flags for the effective principal."""

    admin_area: bool
    staff_area: bool
    dashboard: bool
    billing: bool
    analytics: bool
    uptime: bool
    support: bool
    site_health: bool

    @classmethod
    def from_domain(cls, features: FeatureAccess) -> FeatureAccessResponse:
        return cls(
            admin_area=features.admin_area,
            staff_area=features.staff_area,
            dashboard=features.dashboard,
            billing=features.billing,
            analytics=features.analytics,
            uptime=features.uptime,
            support=features.support,
            site_health=features.site_health,
        )
