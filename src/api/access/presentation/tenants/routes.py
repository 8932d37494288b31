"""HTTP routes for tenant and access grant administration.

Every route is checked against the effective principal. While an
administrator impersonates a client these routes answer 403.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from access.application.services import AccessGrantService, TenantService
from access.dependencies.grant import get_access_grant_service
from access.dependencies.impersonation import get_effective_principal
from access.dependencies.tenant import get_tenant_service
from access.domain.aggregates import Principal
from access.domain.value_objects import GrantId, TenantId
from access.ports.exceptions import (
    AccessGrantNotFoundError,
    DuplicateAccessGrantError,
    PermissionDeniedError,
    TenantNotFoundError,
    UpstreamUnavailableError,
)
from access.presentation.tenants.models import (
    AccessGrantResponse,
    CreateAccessGrantRequest,
    CreateTenantRequest,
    TenantResponse,
    UpdateAccessGrantRequest,
    UpdateTenantRequest,
)

router = APIRouter(
    prefix="/admin/tenants",
    tags=["admin"],
)


def _parse_tenant_id(tenant_id: str) -> TenantId:
    try:
        return TenantId.from_string(tenant_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid tenant ID format: {e}",
        ) from e


def _parse_grant_id(grant_id: str) -> GrantId:
    try:
        return GrantId.from_string(grant_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid grant ID format: {e}",
        ) from e


def _to_http_error(e: Exception, failure: str) -> HTTPException:
    """Translate a service exception to the matching HTTP error."""
    if isinstance(e, HTTPException):
        return e
    if isinstance(e, PermissionDeniedError):
        return HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator role required",
        )
    if isinstance(e, TenantNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    if isinstance(e, AccessGrantNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    if isinstance(e, DuplicateAccessGrantError):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A grant for this principal or email already exists",
        )
    if isinstance(e, ValueError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if isinstance(e, UpstreamUnavailableError):
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service temporarily unavailable",
        )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=failure,
    )


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
)
async def create_tenant(
    request: CreateTenantRequest,
    actor: Annotated[Principal, Depends(get_effective_principal)],
    service: Annotated[TenantService, Depends(get_tenant_service)],
) -> TenantResponse:
    """Create a new tenant.

    Raises:
        HTTPException: 403 if the caller is not an administrator
        HTTPException: 400 if the name is blank
    """
    try:
        tenant = await service.create_tenant(
            actor,
            name=request.name,
            billing_customer_ref=request.billing_customer_ref,
            analytics_site_ref=request.analytics_site_ref,
            uptime_monitor_ref=request.uptime_monitor_ref,
            website_url=request.website_url,
        )
    except Exception as e:
        raise _to_http_error(e, "Failed to create tenant") from e
    return TenantResponse.from_domain(tenant)


@router.get("")
async def list_tenants(
    actor: Annotated[Principal, Depends(get_effective_principal)],
    service: Annotated[TenantService, Depends(get_tenant_service)],
    include_archived: Annotated[bool, Query()] = False,
) -> list[TenantResponse]:
    """List tenants ordered by name; archived tenants on request."""
    try:
        tenants = await service.list_tenants(actor, include_archived=include_archived)
    except Exception as e:
        raise _to_http_error(e, "Failed to list tenants") from e
    return [TenantResponse.from_domain(tenant) for tenant in tenants]


@router.get("/{tenant_id}")
async def get_tenant(
    tenant_id: str,
    actor: Annotated[Principal, Depends(get_effective_principal)],
    service: Annotated[TenantService, Depends(get_tenant_service)],
) -> TenantResponse:
    """Get tenant by ID, archived or not."""
    tenant_id_obj = _parse_tenant_id(tenant_id)
    try:
        tenant = await service.get_tenant(actor, tenant_id_obj)
    except Exception as e:
        raise _to_http_error(e, "Failed to retrieve tenant") from e
    return TenantResponse.from_domain(tenant)


@router.patch("/{tenant_id}")
async def update_tenant(
    tenant_id: str,
    request: UpdateTenantRequest,
    actor: Annotated[Principal, Depends(get_effective_principal)],
    service: Annotated[TenantService, Depends(get_tenant_service)],
) -> TenantResponse:
    """Update tenant details."""
    tenant_id_obj = _parse_tenant_id(tenant_id)
    try:
        tenant = await service.update_tenant(
            actor,
            tenant_id_obj,
            name=request.name,
            billing_customer_ref=request.billing_customer_ref,
            analytics_site_ref=request.analytics_site_ref,
            uptime_monitor_ref=request.uptime_monitor_ref,
            website_url=request.website_url,
        )
    except Exception as e:
        raise _to_http_error(e, "Failed to update tenant") from e
    return TenantResponse.from_domain(tenant)


@router.post("/{tenant_id}/archive")
async def archive_tenant(
    tenant_id: str,
    actor: Annotated[Principal, Depends(get_effective_principal)],
    service: Annotated[TenantService, Depends(get_tenant_service)],
) -> TenantResponse:
    """Archive a tenant. Its grants stop conferring access."""
    tenant_id_obj = _parse_tenant_id(tenant_id)
    try:
        tenant = await service.archive_tenant(actor, tenant_id_obj)
    except Exception as e:
        raise _to_http_error(e, "Failed to archive tenant") from e
    return TenantResponse.from_domain(tenant)


@router.post("/{tenant_id}/restore")
async def restore_tenant(
    tenant_id: str,
    actor: Annotated[Principal, Depends(get_effective_principal)],
    service: Annotated[TenantService, Depends(get_tenant_service)],
) -> TenantResponse:
    """Restore an archived tenant."""
    tenant_id_obj = _parse_tenant_id(tenant_id)
    try:
        tenant = await service.restore_tenant(actor, tenant_id_obj)
    except Exception as e:
        raise _to_http_error(e, "Failed to restore tenant") from e
    return TenantResponse.from_domain(tenant)


@router.get("/{tenant_id}/grants")
async def list_grants(
    tenant_id: str,
    actor: Annotated[Principal, Depends(get_effective_principal)],
    service: Annotated[AccessGrantService, Depends(get_access_grant_service)],
) -> list[AccessGrantResponse]:
    """List all grants of a tenant, active or not."""
    tenant_id_obj = _parse_tenant_id(tenant_id)
    try:
        grants = await service.list_grants_for_tenant(actor, tenant_id_obj)
    except Exception as e:
        raise _to_http_error(e, "Failed to list grants") from e
    return [AccessGrantResponse.from_domain(grant) for grant in grants]


@router.post(
    "/{tenant_id}/grants",
    status_code=status.HTTP_201_CREATED,
)
async def add_grant(
    tenant_id: str,
    request: CreateAccessGrantRequest,
    actor: Annotated[Principal, Depends(get_effective_principal)],
    service: Annotated[AccessGrantService, Depends(get_access_grant_service)],
) -> AccessGrantResponse:
    """Grant a principal access to a tenant.

    Raises:
        HTTPException: 404 if the tenant does not exist
        HTTPException: 400 if neither principal_id nor email is given
        HTTPException: 409 if the principal or email already has a grant
    """
    tenant_id_obj = _parse_tenant_id(tenant_id)
    try:
        grant = await service.add_grant(
            actor,
            tenant_id_obj,
            principal_id=request.principal_id,
            permissions=request.permissions.to_domain(),
            email=request.email,
            name=request.name,
            role_label=request.role_label,
        )
    except Exception as e:
        raise _to_http_error(e, "Failed to add grant") from e
    return AccessGrantResponse.from_domain(grant)


@router.patch("/{tenant_id}/grants/{grant_id}")
async def update_grant(
    tenant_id: str,
    grant_id: str,
    request: UpdateAccessGrantRequest,
    actor: Annotated[Principal, Depends(get_effective_principal)],
    service: Annotated[AccessGrantService, Depends(get_access_grant_service)],
) -> AccessGrantResponse:
    """Change a grant's permissions, active flag or contact details."""
    tenant_id_obj = _parse_tenant_id(tenant_id)
    grant_id_obj = _parse_grant_id(grant_id)
    try:
        grant = await service.update_grant(
            actor,
            tenant_id_obj,
            grant_id_obj,
            permissions=(
                request.permissions.to_domain() if request.permissions else None
            ),
            is_active=request.is_active,
            email=request.email,
            name=request.name,
            role_label=request.role_label,
        )
    except Exception as e:
        raise _to_http_error(e, "Failed to update grant") from e
    return AccessGrantResponse.from_domain(grant)


@router.delete(
    "/{tenant_id}/grants/{grant_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def remove_grant(
    tenant_id: str,
    grant_id: str,
    actor: Annotated[Principal, Depends(get_effective_principal)],
    service: Annotated[AccessGrantService, Depends(get_access_grant_service)],
) -> None:
    """Delete a grant."""
    tenant_id_obj = _parse_tenant_id(tenant_id)
    grant_id_obj = _parse_grant_id(grant_id)
    try:
        await service.remove_grant(actor, tenant_id_obj, grant_id_obj)
    except Exception as e:
        raise _to_http_error(e, "Failed to remove grant") from e
