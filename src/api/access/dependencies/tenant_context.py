"""Tenant context dependencies.

Usage in FastAPI routes of any bounded context:

    @router.get("/example")
    async def example(
        context: Annotated[TenantContext, Depends(require_tenant_context)],
    ):
        if not context.allows(Permission.BILLING):
            ...
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, Response, status

from access.application.observability import DefaultTenantContextProbe
from access.application.services import (
    AccessGrantService,
    ActiveTenantSelector,
    TenantContextResolver,
)
from access.application.value_objects import RequestPrincipal
from access.dependencies.grant import get_access_grant_service
from access.dependencies.impersonation import get_request_principal
from access.dependencies.session_state import get_signing_settings
from access.dependencies.tenant import get_tenant_repository
from access.infrastructure.cookie_stores import CookieActiveTenantPreferenceStore
from access.infrastructure.tenant_repository import TenantRepository
from access.ports.exceptions import UpstreamUnavailableError
from access.ports.session_state import IActiveTenantPreferenceStore
from infrastructure.settings import SessionSettings
from shared_kernel.observability_context import ObservationContext
from shared_kernel.tenant_context import TenantContext


def get_preference_store(
    request: Request,
    response: Response,
    principal: Annotated[RequestPrincipal, Depends(get_request_principal)],
    settings: Annotated[SessionSettings, Depends(get_signing_settings)],
) -> IActiveTenantPreferenceStore:
    """Active-tenant preference of the effective principal.

    While impersonating, the target's selection is kept apart from the
    administrator's own preference.
    """
    return CookieActiveTenantPreferenceStore(
        settings=settings,
        cookies=request.cookies,
        response=response,
        owner_id=principal.effective.id,
        impersonating=principal.is_impersonating,
    )


def get_active_tenant_selector(
    preference_store: Annotated[
        IActiveTenantPreferenceStore, Depends(get_preference_store)
    ],
) -> ActiveTenantSelector:
    return ActiveTenantSelector(preference_store=preference_store)


async def claim_pending_grants(
    principal: Annotated[RequestPrincipal, Depends(get_request_principal)],
    grant_service: Annotated[AccessGrantService, Depends(get_access_grant_service)],
) -> int:
    """Link grants invited by email to the signed-in principal.

    Runs before any tenant resolution so that the first request after
    sign-up already sees the linked grants.

    Raises:
        HTTPException 503: If the grant store is unavailable
    """
    try:
        return await grant_service.claim_pending_grants(principal.real)
    except UpstreamUnavailableError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service temporarily unavailable",
        ) from e


def get_tenant_context_resolver(
    principal: Annotated[RequestPrincipal, Depends(get_request_principal)],
    _claimed: Annotated[int, Depends(claim_pending_grants)],
    grant_service: Annotated[AccessGrantService, Depends(get_access_grant_service)],
    tenant_repository: Annotated[TenantRepository, Depends(get_tenant_repository)],
    selector: Annotated[ActiveTenantSelector, Depends(get_active_tenant_selector)],
) -> TenantContextResolver:
    """Per-request resolver; its cache lives as long as the request.

    Resolution events of an impersonated request carry the administrator's id.
    """
    probe = DefaultTenantContextProbe()
    if principal.is_impersonating:
        probe = probe.with_context(ObservationContext(impersonator_id=principal.real.id))
    return TenantContextResolver(
        grant_service=grant_service,
        tenant_repository=tenant_repository,
        selector=selector,
        probe=probe,
    )


async def get_tenant_context(
    principal: Annotated[RequestPrincipal, Depends(get_request_principal)],
    resolver: Annotated[TenantContextResolver, Depends(get_tenant_context_resolver)],
) -> TenantContext | None:
    """Resolved context for the effective principal, or None when unlinked.

    Raises:
        HTTPException 503: If the grant store is unavailable
    """
    try:
        return await resolver.resolve_context(principal.effective.id)
    except UpstreamUnavailableError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service temporarily unavailable",
        ) from e


async def require_tenant_context(
    context: Annotated[TenantContext | None, Depends(get_tenant_context)],
) -> TenantContext:
    """Resolved context, or 404 when the account is not linked to a tenant."""
    if context is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Your account is not linked to a client",
        )
    return context
