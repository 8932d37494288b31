"""Impersonation and request principal dependencies."""

from typing import Annotated

from fastapi import Depends

from access.application.services import ImpersonationService
from access.application.value_objects import RequestPrincipal
from access.dependencies.authentication import get_real_principal
from access.dependencies.identity import get_identity_provider
from access.dependencies.session_state import get_impersonation_store
from access.domain.aggregates import Principal
from access.ports.identity import IIdentityProvider
from access.ports.session_state import IImpersonationStore


def get_impersonation_service(
    store: Annotated[IImpersonationStore, Depends(get_impersonation_store)],
    identity_provider: Annotated[IIdentityProvider, Depends(get_identity_provider)],
) -> ImpersonationService:
    return ImpersonationService(store=store, identity_provider=identity_provider)


def get_request_principal(
    real: Annotated[Principal, Depends(get_real_principal)],
    service: Annotated[ImpersonationService, Depends(get_impersonation_service)],
) -> RequestPrincipal:
    """Real and effective principal of the request.

    FastAPI caches this per request, so every consumer sees the same pair.
    """
    return service.request_principal(real)


def get_effective_principal(
    principal: Annotated[RequestPrincipal, Depends(get_request_principal)],
) -> Principal:
    """The principal the request acts as (impersonation target if any)."""
    return principal.effective
