"""HTTP routes for administrator impersonation.

Starting and stopping are authorized against the real principal; an
administrator who is impersonating a client can still stop.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from access.application.services import ImpersonationService
from access.application.value_objects import RequestPrincipal
from access.dependencies.authentication import get_real_principal
from access.dependencies.impersonation import (
    get_impersonation_service,
    get_request_principal,
)
from access.domain.aggregates import Principal
from access.ports.exceptions import (
    AlreadyImpersonatingError,
    PermissionDeniedError,
    PrincipalNotFoundError,
    SelfImpersonationError,
    UpstreamUnavailableError,
)
from access.presentation.impersonation.models import (
    ImpersonationStatusResponse,
    StartImpersonationRequest,
)

router = APIRouter(
    prefix="/impersonation",
    tags=["impersonation"],
)


@router.get("")
async def get_impersonation_status(
    principal: Annotated[RequestPrincipal, Depends(get_request_principal)],
) -> ImpersonationStatusResponse:
    """Report whether this browser is impersonating, and whom."""
    return ImpersonationStatusResponse.from_domain(principal)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
)
async def start_impersonation(
    request: StartImpersonationRequest,
    real: Annotated[Principal, Depends(get_real_principal)],
    service: Annotated[ImpersonationService, Depends(get_impersonation_service)],
) -> ImpersonationStatusResponse:
    """Start impersonating another principal.

    Raises:
        HTTPException: 403 if the real principal is not an administrator
        HTTPException: 404 if the target principal does not exist
        HTTPException: 409 if an impersonation is already active
        HTTPException: 422 if the target is the caller
        HTTPException: 503 if the identity provider is unavailable
        HTTPException: 500 for unexpected errors
    """
    try:
        principal = await service.start(real, request.principal_id)
        return ImpersonationStatusResponse.from_domain(principal)

    except PermissionDeniedError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only administrators can impersonate",
        )
    except PrincipalNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Principal {request.principal_id} not found",
        )
    except AlreadyImpersonatingError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        )
    except SelfImpersonationError as e:
        raise HTTPException(
            status_code=422,
            detail=str(e),
        )
    except UpstreamUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service temporarily unavailable",
        )
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to start impersonation",
        )


@router.delete("")
async def stop_impersonation(
    real: Annotated[Principal, Depends(get_real_principal)],
    service: Annotated[ImpersonationService, Depends(get_impersonation_service)],
) -> ImpersonationStatusResponse:
    """Stop impersonating and return to the real principal.

    Raises:
        HTTPException: 403 if the real principal is not an administrator
    """
    try:
        principal = service.stop(real)
    except PermissionDeniedError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only administrators can stop impersonation",
        )
    return ImpersonationStatusResponse.from_domain(principal)
