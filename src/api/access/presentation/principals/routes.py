"""HTTP routes for the principal directory."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from access.application.services import PrincipalService
from access.application.value_objects import RequestPrincipal
from access.dependencies.impersonation import get_request_principal
from access.dependencies.principal import get_principal_service
from access.ports.exceptions import (
    PermissionDeniedError,
    PrincipalNotFoundError,
    UpstreamUnavailableError,
)
from access.presentation.models import PrincipalResponse
from access.presentation.principals.models import AssignRoleRequest

router = APIRouter(
    prefix="/admin/principals",
    tags=["admin"],
)


@router.get("")
async def list_principals(
    principal: Annotated[RequestPrincipal, Depends(get_request_principal)],
    service: Annotated[PrincipalService, Depends(get_principal_service)],
) -> list[PrincipalResponse]:
    """List all principals known to the identity provider.

    Raises:
        HTTPException: 403 if the effective principal is not an administrator
        HTTPException: 503 if the identity provider is unavailable
    """
    try:
        principals = await service.list_principals(principal.effective)
    except PermissionDeniedError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator role required",
        )
    except UpstreamUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service temporarily unavailable",
        )
    return [PrincipalResponse.from_domain(p) for p in principals]


@router.put(
    "/{principal_id}/role",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def assign_role(
    principal_id: str,
    request: AssignRoleRequest,
    principal: Annotated[RequestPrincipal, Depends(get_request_principal)],
    service: Annotated[PrincipalService, Depends(get_principal_service)],
) -> None:
    """Assign a role to a principal.

    Authorized against the real principal, so it is unaffected by
    impersonation.

    Raises:
        HTTPException: 403 if the real principal is not an administrator
        HTTPException: 404 if the principal does not exist
        HTTPException: 503 if the identity provider is unavailable
    """
    try:
        await service.set_role(principal.real, principal_id, request.role)
    except PermissionDeniedError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator role required",
        )
    except PrincipalNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Principal {principal_id} not found",
        )
    except UpstreamUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service temporarily unavailable",
        )
