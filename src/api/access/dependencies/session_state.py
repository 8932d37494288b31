"""Per-request cookie store dependencies."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, Response, status

from access.infrastructure.cookie_stores import CookieImpersonationStore
from access.ports.session_state import IImpersonationStore
from infrastructure.settings import SessionSettings, get_session_settings


def get_signing_settings(
    settings: Annotated[SessionSettings, Depends(get_session_settings)],
) -> SessionSettings:
    """Session settings, refusing cookie state while no signing key is set.

    Raises:
        HTTPException: 503 if PORTAL_SESSION_SECRET_KEY is unset
    """
    if not settings.signing_configured:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Session signing is not configured",
        )
    return settings


def get_impersonation_store(
    request: Request,
    response: Response,
    settings: Annotated[SessionSettings, Depends(get_signing_settings)],
) -> IImpersonationStore:
    """Impersonation snapshot bound to this request's cookies."""
    return CookieImpersonationStore(
        settings=settings, cookies=request.cookies, response=response
    )
