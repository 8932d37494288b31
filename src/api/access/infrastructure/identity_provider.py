"""HTTP client for the identity provider's user admin API.

Speaks the Keycloak-style admin REST API: users are listed and fetched
under ``{admin_api_url}/users`` and the portal role is kept in the user
attribute named by the role claim. The client authenticates with the
client-credentials grant; the admin access token is cached until shortly
before it expires.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any

import httpx

from access.domain.aggregates import Principal
from access.domain.value_objects import PrincipalRole
from access.infrastructure.observability import (
    DefaultIdentityProviderProbe,
    IdentityProviderProbe,
)
from access.ports.exceptions import PrincipalNotFoundError, UpstreamUnavailableError
from access.ports.identity import IIdentityProvider

# Refresh the admin token this many seconds before the provider says it expires
_TOKEN_EXPIRY_MARGIN_SECONDS = 30
_PAGE_SIZE = 100


class HttpIdentityProvider(IIdentityProvider):
    """Identity provider admin client over httpx.

    Args:
        issuer_url: OIDC issuer, used to discover the token endpoint
        admin_api_url: Base URL of the user admin API
        client_id: Client with user-management rights
        client_secret: Secret of that client
        role_attribute: User attribute holding the role
        transport: Optional httpx transport (tests inject httpx.MockTransport)
        probe: Optional domain probe for observability
    """

    def __init__(
        self,
        issuer_url: str,
        admin_api_url: str,
        client_id: str,
        client_secret: str,
        role_attribute: str = "role",
        transport: httpx.AsyncBaseTransport | None = None,
        probe: IdentityProviderProbe | None = None,
    ) -> None:
        self._issuer_url = issuer_url.rstrip("/")
        self._admin_api_url = admin_api_url.rstrip("/")
        self._client_id = client_id
        self._client_secret = client_secret
        self._role_attribute = role_attribute
        self._transport = transport
        self._probe = probe or DefaultIdentityProviderProbe()

        self._token: str | None = None
        self._token_expires_at: float = 0.0
        self._token_lock = asyncio.Lock()

    async def get_principal(self, principal_id: str) -> Principal | None:
        response = await self._request("GET", f"/users/{principal_id}", "get_principal")
        if response.status_code == 404:
            return None
        self._raise_for_status(response, "get_principal")
        return self._to_principal(response.json())

    async def list_principals(self) -> list[Principal]:
        principals: list[Principal] = []
        first = 0
        while True:
            response = await self._request(
                "GET",
                "/users",
                "list_principals",
                params={"first": first, "max": _PAGE_SIZE},
            )
            self._raise_for_status(response, "list_principals")
            page = response.json()
            principals.extend(self._to_principal(user) for user in page)
            if len(page) < _PAGE_SIZE:
                break
            first += _PAGE_SIZE

        self._probe.principals_listed(len(principals))
        return principals

    async def update_role(self, principal_id: str, role: PrincipalRole) -> None:
        response = await self._request("GET", f"/users/{principal_id}", "update_role")
        if response.status_code == 404:
            raise PrincipalNotFoundError(f"Principal '{principal_id}' not found")
        self._raise_for_status(response, "update_role")

        attributes = dict(response.json().get("attributes") or {})
        attributes[self._role_attribute] = [role.value]
        response = await self._request(
            "PUT",
            f"/users/{principal_id}",
            "update_role",
            json={"attributes": attributes},
        )
        self._raise_for_status(response, "update_role")
        self._probe.role_updated(principal_id, role.value)

    def _to_principal(self, user: dict[str, Any]) -> Principal:
        attributes = user.get("attributes") or {}
        raw_role = attributes.get(self._role_attribute)
        if isinstance(raw_role, list):
            raw_role = raw_role[0] if raw_role else None

        email = user.get("email") or ""
        name = " ".join(
            part for part in (user.get("firstName"), user.get("lastName")) if part
        )
        return Principal(
            id=str(user["id"]),
            email=email,
            name=name or user.get("username") or email,
            role=PrincipalRole.from_claim(raw_role),
        )

    async def _request(
        self,
        method: str,
        path: str,
        operation: str,
        **kwargs: Any,
    ) -> httpx.Response:
        token = await self._get_admin_token()
        try:
            async with httpx.AsyncClient(
                timeout=10.0, transport=self._transport
            ) as client:
                return await client.request(
                    method,
                    f"{self._admin_api_url}{path}",
                    headers={"Authorization": f"Bearer {token}"},
                    **kwargs,
                )
        except httpx.HTTPError as e:
            self._probe.provider_unavailable(operation, str(e))
            raise UpstreamUnavailableError("Identity provider unavailable") from e

    def _raise_for_status(self, response: httpx.Response, operation: str) -> None:
        if response.is_success:
            return
        self._probe.provider_unavailable(operation, f"HTTP {response.status_code}")
        raise UpstreamUnavailableError(
            f"Identity provider returned HTTP {response.status_code}"
        )

    async def _get_admin_token(self) -> str:
        if self._token is not None and time.monotonic() < self._token_expires_at:
            return self._token

        async with self._token_lock:
            # Double-check after acquiring lock
            if self._token is not None and time.monotonic() < self._token_expires_at:
                return self._token
            return await self._fetch_admin_token()

    async def _fetch_admin_token(self) -> str:
        try:
            async with httpx.AsyncClient(
                timeout=10.0, transport=self._transport
            ) as client:
                discovery = await client.get(
                    f"{self._issuer_url}/.well-known/openid-configuration"
                )
                discovery.raise_for_status()
                token_endpoint = discovery.json()["token_endpoint"]

                response = await client.post(
                    token_endpoint,
                    data={
                        "grant_type": "client_credentials",
                        "client_id": self._client_id,
                        "client_secret": self._client_secret,
                    },
                )
                response.raise_for_status()
                body = response.json()
                token = body["access_token"]
        except (httpx.HTTPError, KeyError, ValueError) as e:
            self._probe.provider_unavailable("admin_token", str(e))
            raise UpstreamUnavailableError("Identity provider unavailable") from e

        expires_in = int(body.get("expires_in", 60))
        self._token = token
        self._token_expires_at = (
            time.monotonic() + max(expires_in - _TOKEN_EXPIRY_MARGIN_SECONDS, 0)
        )
        self._probe.admin_token_refreshed(expires_in)
        return self._token

