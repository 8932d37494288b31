"""HTTP routes for the current principal."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from access.application.services import TenantContextResolver
from access.application.value_objects import FeatureAccess, RequestPrincipal
from access.dependencies.impersonation import get_request_principal
from access.dependencies.tenant_context import (
    get_tenant_context,
    get_tenant_context_resolver,
)
from access.ports.exceptions import PermissionDeniedError, UpstreamUnavailableError
from access.presentation.me.models import (
    AccessibleTenantResponse,
    MeResponse,
    SwitchActiveTenantRequest,
)
from access.presentation.models import (
    FeatureAccessResponse,
    PrincipalResponse,
    TenantContextResponse,
)
from shared_kernel.tenant_context import TenantContext

router = APIRouter(
    prefix="/me",
    tags=["me"],
)


@router.get("")
async def get_me(
    principal: Annotated[RequestPrincipal, Depends(get_request_principal)],
    context: Annotated[TenantContext | None, Depends(get_tenant_context)],
) -> MeResponse:
    """Describe the request's real and effective principal.

    Navigation flags are computed from the effective principal, so an
    impersonating administrator sees the target's navigation.
    """
    features = FeatureAccess.compute(principal.effective.role, context)
    return MeResponse(
        real=PrincipalResponse.from_domain(principal.real),
        effective=PrincipalResponse.from_domain(principal.effective),
        impersonating=principal.is_impersonating,
        impersonation_started_at=(
            principal.impersonation.started_at if principal.impersonation else None
        ),
        active_tenant=(
            TenantContextResponse.from_domain(context) if context is not None else None
        ),
        features=FeatureAccessResponse.from_domain(features),
    )


@router.get("/context")
async def get_my_context(
    context: Annotated[TenantContext | None, Depends(get_tenant_context)],
) -> TenantContextResponse | None:
    """The active tenant and its permissions, or null when unlinked."""
    if context is None:
        return None
    return TenantContextResponse.from_domain(context)


@router.get("/tenants")
async def list_my_tenants(
    principal: Annotated[RequestPrincipal, Depends(get_request_principal)],
    resolver: Annotated[TenantContextResolver, Depends(get_tenant_context_resolver)],
) -> list[AccessibleTenantResponse]:
    """List the tenants the effective principal may switch to.

    Raises:
        HTTPException: 503 if the grant store is unavailable
    """
    try:
        tenants = await resolver.list_accessible_tenants(principal.effective.id)
        context = await resolver.resolve_context(principal.effective.id)
    except UpstreamUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service temporarily unavailable",
        )

    active_tenant_id = context.tenant_id if context is not None else None
    return [
        AccessibleTenantResponse.from_domain(tenant, active_tenant_id)
        for tenant in tenants
    ]


@router.put("/active-tenant")
async def switch_active_tenant(
    request: SwitchActiveTenantRequest,
    principal: Annotated[RequestPrincipal, Depends(get_request_principal)],
    resolver: Annotated[TenantContextResolver, Depends(get_tenant_context_resolver)],
) -> TenantContextResponse:
    """Switch the active tenant of the effective principal.

    Raises:
        HTTPException: 403 if the principal has no access to the tenant
        HTTPException: 503 if the grant store is unavailable
        HTTPException: 500 for unexpected errors
    """
    try:
        await resolver.switch_active_tenant(principal.effective.id, request.tenant_id)
        context = await resolver.resolve_context(principal.effective.id)
    except PermissionDeniedError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have access to this client",
        )
    except UpstreamUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service temporarily unavailable",
        )
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to switch active tenant",
        )

    if context is None:
        # Access was revoked between the check and the re-read
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have access to this client",
        )
    return TenantContextResponse.from_domain(context)
