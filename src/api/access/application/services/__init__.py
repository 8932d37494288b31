"""Application services for the access bounded context."""

from access.application.services.access_grant_service import AccessGrantService
from access.application.services.active_tenant_selector import ActiveTenantSelector
from access.application.services.impersonation_service import ImpersonationService
from access.application.services.principal_service import PrincipalService
from access.application.services.tenant_context_resolver import (
    TenantContextResolver,
)
from access.application.services.tenant_service import TenantService

__all__ = [
    "AccessGrantService",
    "ActiveTenantSelector",
    "ImpersonationService",
    "PrincipalService",
    "TenantContextResolver",
    "TenantService",
]
