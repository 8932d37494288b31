"""Unit tests for the get_real_principal dependency."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials
from fastapi.testclient import TestClient

from access.application.observability import AuthenticationProbe
from access.dependencies.authentication import (
    get_authentication_probe,
    get_jwt_validator,
    get_real_principal,
)
from access.domain.aggregates import Principal
from access.domain.value_objects import PrincipalRole
from shared_kernel.auth import InvalidTokenError, JWTValidator, TokenClaims


def bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


@pytest.fixture
def mock_jwt_validator() -> MagicMock:
    validator = MagicMock(spec=JWTValidator)
    validator.validate_token = AsyncMock(
        return_value=TokenClaims(
            sub="user_2abc",
            email="ada@agency.example",
            name="Ada",
            role="employee",
        )
    )
    return validator


@pytest.fixture
def mock_auth_probe() -> MagicMock:
    return MagicMock(spec=AuthenticationProbe)


class TestGetRealPrincipal:
    """Tests for bearer header and cookie authentication."""

    @pytest.mark.asyncio
    async def test_header_token_builds_principal(
        self, mock_jwt_validator: MagicMock, mock_auth_probe: MagicMock
    ) -> None:
        principal = await get_real_principal(
            validator=mock_jwt_validator,
            probe=mock_auth_probe,
            credentials=bearer("header.jwt.token"),
            access_token=None,
        )

        assert principal.id == "user_2abc"
        assert principal.email == "ada@agency.example"
        assert principal.role == PrincipalRole.STAFF
        mock_jwt_validator.validate_token.assert_awaited_once_with("header.jwt.token")
        mock_auth_probe.principal_authenticated.assert_called_once_with(
            principal_id="user_2abc", role="staff"
        )

    @pytest.mark.asyncio
    async def test_cookie_token_is_used_without_header(
        self, mock_jwt_validator: MagicMock, mock_auth_probe: MagicMock
    ) -> None:
        await get_real_principal(
            validator=mock_jwt_validator,
            probe=mock_auth_probe,
            credentials=None,
            access_token="cookie.jwt.token",
        )

        mock_jwt_validator.validate_token.assert_awaited_once_with("cookie.jwt.token")

    @pytest.mark.asyncio
    async def test_header_wins_over_cookie(
        self, mock_jwt_validator: MagicMock, mock_auth_probe: MagicMock
    ) -> None:
        await get_real_principal(
            validator=mock_jwt_validator,
            probe=mock_auth_probe,
            credentials=bearer("header.jwt.token"),
            access_token="cookie.jwt.token",
        )

        mock_jwt_validator.validate_token.assert_awaited_once_with("header.jwt.token")

    @pytest.mark.asyncio
    async def test_missing_token_is_401(
        self, mock_jwt_validator: MagicMock, mock_auth_probe: MagicMock
    ) -> None:
        with pytest.raises(HTTPException) as exc_info:
            await get_real_principal(
                validator=mock_jwt_validator,
                probe=mock_auth_probe,
                credentials=None,
                access_token=None,
            )

        assert exc_info.value.status_code == 401
        assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}
        mock_jwt_validator.validate_token.assert_not_called()
        mock_auth_probe.authentication_failed.assert_called_once()

    @pytest.mark.asyncio
    async def test_invalid_token_is_401(
        self, mock_jwt_validator: MagicMock, mock_auth_probe: MagicMock
    ) -> None:
        mock_jwt_validator.validate_token.side_effect = InvalidTokenError(
            "Token has expired"
        )

        with pytest.raises(HTTPException) as exc_info:
            await get_real_principal(
                validator=mock_jwt_validator,
                probe=mock_auth_probe,
                credentials=bearer("stale.jwt.token"),
                access_token=None,
            )

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Token has expired"
        mock_auth_probe.authentication_failed.assert_called_once_with(
            reason="Token has expired"
        )

    @pytest.mark.asyncio
    async def test_missing_role_maps_to_client(
        self, mock_jwt_validator: MagicMock, mock_auth_probe: MagicMock
    ) -> None:
        mock_jwt_validator.validate_token.return_value = TokenClaims(
            sub="u9", email="", name="", role=None
        )

        principal = await get_real_principal(
            validator=mock_jwt_validator,
            probe=mock_auth_probe,
            credentials=bearer("t"),
            access_token=None,
        )

        assert principal.role == PrincipalRole.CLIENT


class TestBearerSchemeOverHttp:
    """The scheme reads a plain Bearer header; no provider URLs are involved."""

    @pytest.fixture
    def client(
        self, mock_jwt_validator: MagicMock, mock_auth_probe: MagicMock
    ) -> TestClient:
        app = FastAPI()

        @app.get("/whoami")
        async def whoami(principal: Principal = Depends(get_real_principal)) -> dict:
            return {"id": principal.id}

        app.dependency_overrides[get_jwt_validator] = lambda: mock_jwt_validator
        app.dependency_overrides[get_authentication_probe] = lambda: mock_auth_probe
        return TestClient(app)

    def test_bearer_header_authenticates(
        self, client: TestClient, mock_jwt_validator: MagicMock
    ) -> None:
        response = client.get(
            "/whoami", headers={"Authorization": "Bearer header.jwt.token"}
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"id": "user_2abc"}
        mock_jwt_validator.validate_token.assert_awaited_once_with("header.jwt.token")

    def test_cookie_authenticates_without_header(self, client: TestClient) -> None:
        client.cookies.set("access_token", "cookie.jwt.token")

        response = client.get("/whoami")

        assert response.status_code == status.HTTP_200_OK

    def test_missing_credentials_is_401(self, client: TestClient) -> None:
        response = client.get("/whoami")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.headers["www-authenticate"] == "Bearer"

    def test_openapi_declares_http_bearer(self, client: TestClient) -> None:
        schemes = client.get("/openapi.json").json()["components"]["securitySchemes"]

        assert schemes == {
            "HTTPBearer": {
                "type": "http",
                "scheme": "bearer",
                "description": "Identity-provider access token",
            }
        }
