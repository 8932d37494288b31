"""Authentication dependencies.

A request is authenticated by an identity-provider token, taken from the
``Authorization: Bearer`` header or, for browser navigation, from the
``access_token`` cookie set by the login front end.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Cookie, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from access.application.observability import (
    AuthenticationProbe,
    DefaultAuthenticationProbe,
)
from access.domain.aggregates import Principal
from access.domain.value_objects import PrincipalRole
from infrastructure.settings import get_oidc_settings
from shared_kernel.auth import InvalidTokenError, JWTValidator
from shared_kernel.auth.observability import DefaultJWTValidatorProbe


bearer_scheme = HTTPBearer(
    auto_error=False,
    description="Identity-provider access token",
)


@lru_cache
def get_jwt_validator() -> JWTValidator:
    """Get cached JWT validator.

    A single instance is reused across requests so its JWKS cache is shared.
    """
    settings = get_oidc_settings()
    return JWTValidator(
        issuer_url=settings.issuer_url,
        audience=settings.effective_audience,
        probe=DefaultJWTValidatorProbe(),
        user_id_claim=settings.user_id_claim,
        email_claim=settings.email_claim,
        name_claim=settings.name_claim,
        role_claim=settings.role_claim,
    )


def get_authentication_probe() -> AuthenticationProbe:
    return DefaultAuthenticationProbe()


async def get_real_principal(
    validator: Annotated[JWTValidator, Depends(get_jwt_validator)],
    probe: Annotated[AuthenticationProbe, Depends(get_authentication_probe)],
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ] = None,
    access_token: Annotated[str | None, Cookie()] = None,
) -> Principal:
    """Authenticate the request and return the real principal.

    The header wins over the cookie when both are present.

    Raises:
        HTTPException 401: If no token is present or it fails validation
    """
    raw_token = credentials.credentials if credentials is not None else access_token
    if not raw_token:
        probe.authentication_failed(reason="Missing authorization")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        claims = await validator.validate_token(raw_token)
    except InvalidTokenError as e:
        probe.authentication_failed(reason=str(e))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    principal = Principal(
        id=claims.sub,
        email=claims.email,
        name=claims.name,
        role=PrincipalRole.from_claim(claims.role),
    )
    probe.principal_authenticated(principal_id=principal.id, role=principal.role.value)
    return principal
