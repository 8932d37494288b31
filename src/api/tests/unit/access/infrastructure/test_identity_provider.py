"""Unit tests for HttpIdentityProvider using httpx.MockTransport."""

import json

import httpx
import pytest

from access.domain.value_objects import PrincipalRole
from access.infrastructure.identity_provider import HttpIdentityProvider
from access.ports.exceptions import PrincipalNotFoundError, UpstreamUnavailableError
from access.ports.identity import IIdentityProvider

ISSUER = "https://idp.example.com/realms/portal"
ADMIN_API = "https://idp.example.com/admin/realms/portal"
TOKEN_ENDPOINT = f"{ISSUER}/protocol/openid-connect/token"


def user(user_id: str, role: str | None = None, **fields) -> dict:
    body = {
        "id": user_id,
        "username": f"user-{user_id}",
        "email": f"{user_id}@example.com",
        "firstName": fields.pop("first", "Jo"),
        "lastName": fields.pop("last", "Client"),
        "attributes": {"role": [role]} if role else {},
    }
    body.update(fields)
    return body


class FakeIdentityServer:
    """Routes requests the way the provider's admin API would answer them."""

    def __init__(self) -> None:
        self.users: dict[str, dict] = {}
        self.requests: list[httpx.Request] = []
        self.token_requests = 0
        self.fail_with: Exception | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            raise self.fail_with

        path = request.url.path
        if path.endswith("/.well-known/openid-configuration"):
            return httpx.Response(200, json={"token_endpoint": TOKEN_ENDPOINT})
        if str(request.url) == TOKEN_ENDPOINT:
            self.token_requests += 1
            return httpx.Response(
                200, json={"access_token": "admin-token", "expires_in": 300}
            )

        assert request.headers["Authorization"] == "Bearer admin-token"
        if path.endswith("/users") and request.method == "GET":
            first = int(request.url.params["first"])
            size = int(request.url.params["max"])
            page = list(self.users.values())[first : first + size]
            return httpx.Response(200, json=page)

        user_id = path.rsplit("/", 1)[-1]
        if user_id not in self.users:
            return httpx.Response(404, json={"error": "User not found"})
        if request.method == "GET":
            return httpx.Response(200, json=self.users[user_id])
        if request.method == "PUT":
            self.users[user_id].update(json.loads(request.content))
            return httpx.Response(204)
        return httpx.Response(405)


@pytest.fixture
def server() -> FakeIdentityServer:
    return FakeIdentityServer()


@pytest.fixture
def provider(server) -> HttpIdentityProvider:
    return HttpIdentityProvider(
        issuer_url=ISSUER,
        admin_api_url=ADMIN_API,
        client_id="portal-admin",
        client_secret="s3cret",
        transport=httpx.MockTransport(server),
    )


class TestProtocolCompliance:
    def test_implements_protocol(self, provider):
        assert isinstance(provider, IIdentityProvider)


class TestGetPrincipal:
    @pytest.mark.asyncio
    async def test_maps_user_to_principal(self, provider, server):
        server.users["u2"] = user("u2", role="employee", first="Sam", last="Lee")

        principal = await provider.get_principal("u2")

        assert principal.id == "u2"
        assert principal.email == "u2@example.com"
        assert principal.name == "Sam Lee"
        assert principal.role == PrincipalRole.STAFF

    @pytest.mark.asyncio
    async def test_missing_role_attribute_is_client(self, provider, server):
        server.users["u3"] = user("u3")

        principal = await provider.get_principal("u3")

        assert principal.role == PrincipalRole.CLIENT

    @pytest.mark.asyncio
    async def test_unknown_user_returns_none(self, provider):
        assert await provider.get_principal("ghost") is None

    @pytest.mark.asyncio
    async def test_transport_failure_is_upstream_unavailable(self, provider, server):
        server.fail_with = httpx.ConnectError("connection refused")

        with pytest.raises(UpstreamUnavailableError):
            await provider.get_principal("u2")


class TestListPrincipals:
    @pytest.mark.asyncio
    async def test_follows_pages(self, provider, server):
        for index in range(150):
            server.users[f"u{index}"] = user(f"u{index}")

        principals = await provider.list_principals()

        assert len(principals) == 150
        user_pages = [r for r in server.requests if r.url.path.endswith("/users")]
        assert [r.url.params["first"] for r in user_pages] == ["0", "100"]

    @pytest.mark.asyncio
    async def test_admin_token_is_reused(self, provider, server):
        server.users["u1"] = user("u1")

        await provider.list_principals()
        await provider.get_principal("u1")

        assert server.token_requests == 1


class TestUpdateRole:
    @pytest.mark.asyncio
    async def test_writes_role_attribute(self, provider, server):
        server.users["u2"] = user("u2", role="client")
        server.users["u2"]["attributes"]["department"] = ["sales"]

        await provider.update_role("u2", PrincipalRole.ADMIN)

        attributes = server.users["u2"]["attributes"]
        assert attributes["role"] == ["admin"]
        assert attributes["department"] == ["sales"]

    @pytest.mark.asyncio
    async def test_unknown_user_is_not_found(self, provider):
        with pytest.raises(PrincipalNotFoundError):
            await provider.update_role("ghost", PrincipalRole.STAFF)

    @pytest.mark.asyncio
    async def test_server_error_is_upstream_unavailable(self, server):
        def failing(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/users/u2"):
                return httpx.Response(500)
            return server(request)

        provider = HttpIdentityProvider(
            issuer_url=ISSUER,
            admin_api_url=ADMIN_API,
            client_id="portal-admin",
            client_secret="s3cret",
            transport=httpx.MockTransport(failing),
        )

        with pytest.raises(UpstreamUnavailableError):
            await provider.update_role("u2", PrincipalRole.STAFF)
