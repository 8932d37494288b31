"""JWT validation for identity provider session tokens.

Validates bearer tokens against the provider's JWKS (cached for a bounded
time) and extracts the claims the portal needs to build a Principal.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any

import httpx
from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError

if TYPE_CHECKING:
    from shared_kernel.auth.observability import JWTValidatorProbe


@dataclass(frozen=True)
class TokenClaims:
    """Validated identity claims.

    ``role`` is the raw role string from the token (None when absent);
    mapping it onto portal roles is the caller's concern.
    """

    sub: str
    email: str
    name: str
    role: str | None
    raw_claims: dict[str, Any] = field(default_factory=dict, repr=False)


class InvalidTokenError(Exception):
    """Raised when JWT validation fails."""

    pass


def read_claim(claims: dict[str, Any], path: str) -> Any:
    """Read a possibly nested claim using a dotted path.

    ``read_claim(claims, "public_metadata.role")`` returns
    ``claims["public_metadata"]["role"]`` or None when any segment is missing.
    """
    value: Any = claims
    for segment in path.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(segment)
    return value


class JWTValidator:
    """Validates JWT tokens using the identity provider's JWKS.

    JWKS documents are cached for ``jwks_cache_ttl``. The cache is shared
    read-only across concurrent requests; refresh happens under a lock with a
    second validity check so only one fetch runs at a time.
    """

    def __init__(
        self,
        issuer_url: str,
        audience: str,
        probe: JWTValidatorProbe,
        user_id_claim: str = "sub",
        email_claim: str = "email",
        name_claim: str = "name",
        role_claim: str = "role",
        jwks_cache_ttl: timedelta = timedelta(hours=1),
    ):
        """Initialize the JWT validator.

        Args:
            issuer_url: The OIDC issuer URL.
            audience: Expected audience claim value.
            probe: Observability probe for logging events.
            user_id_claim: Claim holding the stable external user ID.
            email_claim: Claim holding the primary email address.
            name_claim: Claim holding the display name.
            role_claim: Dotted path of the claim holding the coarse role.
            jwks_cache_ttl: How long to cache JWKS keys.
        """
        self._issuer_url = issuer_url.rstrip("/")
        self._audience = audience
        self._probe = probe
        self._user_id_claim = user_id_claim
        self._email_claim = email_claim
        self._name_claim = name_claim
        self._role_claim = role_claim
        self._jwks_cache_ttl = jwks_cache_ttl

        self._jwks: dict[str, Any] | None = None
        self._jwks_fetched_at: datetime | None = None
        self._jwks_lock = asyncio.Lock()

    async def validate_token(self, token: str) -> TokenClaims:
        """Validate a JWT and return its identity claims.

        Args:
            token: The JWT token string.

        Returns:
            TokenClaims for the authenticated principal.

        Raises:
            InvalidTokenError: If the token is malformed, expired, or fails
                verification, or the JWKS cannot be fetched.
        """
        try:
            unverified_header = jwt.get_unverified_header(token)
        except JWTError as e:
            self._probe.token_validation_failed(reason=f"Malformed token: {e}")
            raise InvalidTokenError(f"Invalid token format: {e}") from e

        if not unverified_header:
            self._probe.token_validation_failed(reason="Missing token header")
            raise InvalidTokenError("Invalid token: missing header")

        jwks = await self._get_jwks()

        try:
            claims = jwt.decode(
                token=token,
                key=jwks,
                algorithms=["RS256"],
                audience=self._audience,
                issuer=self._issuer_url,
                options={
                    "verify_signature": True,
                    "verify_aud": True,
                    "verify_iss": True,
                    "verify_exp": True,
                    "verify_iat": True,
                },
            )
        except ExpiredSignatureError as e:
            self._probe.token_validation_failed(reason="Token expired")
            raise InvalidTokenError("Token has expired") from e
        except JWTClaimsError as e:
            error_msg = str(e).lower()
            if "audience" in error_msg:
                self._probe.token_validation_failed(reason="Invalid audience")
                raise InvalidTokenError("Invalid audience claim") from e
            if "issuer" in error_msg:
                self._probe.token_validation_failed(reason="Invalid issuer")
                raise InvalidTokenError("Invalid issuer claim") from e
            self._probe.token_validation_failed(reason=f"Claims error: {e}")
            raise InvalidTokenError(f"Invalid token claims: {e}") from e
        except JWTError as e:
            self._probe.token_validation_failed(reason=f"JWT error: {e}")
            raise InvalidTokenError(f"Invalid token: {e}") from e

        return self._to_token_claims(claims)

    def _to_token_claims(self, claims: dict[str, Any]) -> TokenClaims:
        user_id = read_claim(claims, self._user_id_claim)
        if user_id is None:
            self._probe.token_validation_failed(
                reason=f"Missing {self._user_id_claim} claim"
            )
            raise InvalidTokenError(f"Missing required claim: {self._user_id_claim}")

        email = read_claim(claims, self._email_claim) or ""
        name = read_claim(claims, self._name_claim) or ""
        role = read_claim(claims, self._role_claim)

        self._probe.token_validated(user_id=str(user_id))

        return TokenClaims(
            sub=str(user_id),
            email=str(email),
            name=str(name).strip() or str(email),
            role=str(role) if role is not None else None,
            raw_claims=claims,
        )

    async def _get_jwks(self) -> dict[str, Any]:
        """Get JWKS, fetching from the issuer if the cache expired.

        Raises:
            InvalidTokenError: If JWKS cannot be fetched.
        """
        if self._is_cache_valid():
            self._probe.jwks_cache_hit()
            return self._jwks  # type: ignore[return-value]

        async with self._jwks_lock:
            if self._is_cache_valid():
                self._probe.jwks_cache_hit()
                return self._jwks  # type: ignore[return-value]

            return await self._fetch_jwks()

    def _is_cache_valid(self) -> bool:
        if self._jwks is None or self._jwks_fetched_at is None:
            return False

        now = datetime.now(tz=timezone.utc)
        return (now - self._jwks_fetched_at) < self._jwks_cache_ttl

    async def _fetch_jwks(self) -> dict[str, Any]:
        """Fetch JWKS via the OpenID Connect discovery document.

        Raises:
            InvalidTokenError: If JWKS cannot be fetched.
        """
        try:
            async with httpx.AsyncClient() as client:
                config_response = await client.get(
                    f"{self._issuer_url}/.well-known/openid-configuration"
                )
                config_response.raise_for_status()
                jwks_uri = config_response.json().get("jwks_uri")
                if not jwks_uri:
                    self._probe.jwks_fetch_failed(
                        error="Missing jwks_uri in OpenID configuration"
                    )
                    raise InvalidTokenError(
                        "OIDC provider missing jwks_uri in configuration"
                    )

                jwks_response = await client.get(jwks_uri)
                jwks_response.raise_for_status()
                jwks = jwks_response.json()
        except httpx.HTTPError as e:
            self._probe.jwks_fetch_failed(error=str(e))
            raise InvalidTokenError(
                f"Failed to fetch JWKS from OIDC provider: {e}"
            ) from e

        self._jwks = jwks
        self._jwks_fetched_at = datetime.now(tz=timezone.utc)
        self._probe.jwks_fetched(key_count=len(jwks.get("keys", [])))
        return jwks
