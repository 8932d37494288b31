"""Unit tests for the identity-provider webhook."""

from __future__ import annotations

import hashlib
import hmac
import json
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi import FastAPI, status
from fastapi.testclient import TestClient
from pydantic import SecretStr

from access.application.observability import DefaultWebhookProbe, WebhookProbe
from access.application.services import PrincipalService
from access.domain.aggregates import Principal
from access.domain.value_objects import PrincipalRole
from access.ports.exceptions import UpstreamUnavailableError
from access.presentation.webhooks.routes import verify_signature
from infrastructure.settings import WebhookSettings

SECRET = "whsec-test"


def _sign(body: bytes, secret: str = SECRET) -> str:
    return hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()


@pytest.fixture
def mock_service() -> AsyncMock:
    return AsyncMock(spec=PrincipalService)


@pytest.fixture
def mock_probe() -> Mock:
    return Mock(spec=WebhookProbe)


@pytest.fixture
def settings() -> WebhookSettings:
    return WebhookSettings(identity_secret=SecretStr(SECRET))


@pytest.fixture
def test_client(
    mock_service: AsyncMock, settings: WebhookSettings, mock_probe: Mock
) -> TestClient:
    from access.dependencies.principal import get_principal_service
    from access.presentation import router
    from access.presentation.webhooks.routes import get_webhook_probe
    from infrastructure.settings import get_webhook_settings

    app = FastAPI()
    app.dependency_overrides[get_webhook_settings] = lambda: settings
    app.dependency_overrides[get_principal_service] = lambda: mock_service
    app.dependency_overrides[get_webhook_probe] = lambda: mock_probe
    app.include_router(router)

    return TestClient(app)


def _post(client: TestClient, payload: dict, signature: str | None = None):
    body = json.dumps(payload).encode()
    headers = {"Content-Type": "application/json"}
    headers["X-Webhook-Signature"] = signature if signature is not None else _sign(body)
    return client.post("/webhooks/identity", content=body, headers=headers)


class TestVerifySignature:
    def test_accepts_plain_and_prefixed_hex(self) -> None:
        body = b'{"type":"ping"}'
        digest = _sign(body)

        assert verify_signature(SECRET, body, digest)
        assert verify_signature(SECRET, body, f"sha256={digest}")

    def test_rejects_wrong_secret_and_missing_values(self) -> None:
        body = b"{}"

        assert not verify_signature(SECRET, body, _sign(body, "other"))
        assert not verify_signature(SECRET, body, None)
        assert not verify_signature("", body, _sign(body, ""))


class TestIdentityWebhook:
    def test_user_created_syncs_principal(
        self, test_client: TestClient, mock_service: AsyncMock
    ) -> None:
        response = _post(
            test_client,
            {
                "type": "user.created",
                "data": {"id": "u7", "email": "u7@example.com", "role": "employee"},
            },
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"received": True, "handled": True}
        mock_service.sync_principal.assert_awaited_once_with(
            Principal(
                id="u7",
                email="u7@example.com",
                name="u7@example.com",
                role=PrincipalRole.STAFF,
            )
        )

    def test_unhandled_event_is_acknowledged(
        self, test_client: TestClient, mock_service: AsyncMock
    ) -> None:
        response = _post(test_client, {"type": "user.deleted", "data": {"id": "u7"}})

        assert response.json() == {"received": True, "handled": False}
        mock_service.sync_principal.assert_not_awaited()

    def test_bad_signature_is_401(
        self, test_client: TestClient, mock_service: AsyncMock
    ) -> None:
        response = _post(
            test_client, {"type": "user.created", "data": {"id": "u7"}}, "deadbeef"
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        mock_service.sync_principal.assert_not_awaited()

    def test_missing_user_id_is_400(self, test_client: TestClient) -> None:
        response = _post(test_client, {"type": "user.updated", "data": {}})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_non_json_body_is_400(self, test_client: TestClient) -> None:
        body = b"not json"
        response = test_client.post(
            "/webhooks/identity",
            content=body,
            headers={"X-Webhook-Signature": _sign(body)},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_unconfigured_secret_is_503(
        self, test_client: TestClient, settings: WebhookSettings
    ) -> None:
        settings.identity_secret = SecretStr("")

        response = _post(test_client, {"type": "user.created", "data": {"id": "u7"}})

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE

    def test_store_outage_is_503(
        self, test_client: TestClient, mock_service: AsyncMock
    ) -> None:
        mock_service.sync_principal.side_effect = UpstreamUnavailableError()

        response = _post(test_client, {"type": "user.created", "data": {"id": "u7"}})

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE


class TestWebhookObservability:
    def test_handled_event_is_recorded(
        self, test_client: TestClient, mock_probe: Mock
    ) -> None:
        _post(test_client, {"type": "user.updated", "data": {"id": "u7"}})

        mock_probe.event_handled.assert_called_once_with("user.updated", "u7")

    def test_ignored_event_is_recorded(
        self, test_client: TestClient, mock_probe: Mock
    ) -> None:
        _post(test_client, {"type": "session.ended", "data": {}})

        mock_probe.event_ignored.assert_called_once_with("session.ended")
        mock_probe.event_handled.assert_not_called()

    def test_bad_signature_is_recorded(
        self, test_client: TestClient, mock_probe: Mock
    ) -> None:
        _post(test_client, {"type": "user.created", "data": {"id": "u7"}}, "deadbeef")

        mock_probe.signature_rejected.assert_called_once_with()

    def test_missing_secret_is_recorded(
        self, test_client: TestClient, settings: WebhookSettings, mock_probe: Mock
    ) -> None:
        settings.identity_secret = SecretStr("")

        _post(test_client, {"type": "user.created", "data": {"id": "u7"}})

        mock_probe.secret_missing.assert_called_once_with()

    def test_invalid_payload_is_recorded(
        self, test_client: TestClient, mock_probe: Mock
    ) -> None:
        _post(test_client, {"type": "user.created", "data": {}})

        mock_probe.payload_rejected.assert_called_once_with("missing user id")

    def test_store_outage_is_recorded(
        self, test_client: TestClient, mock_service: AsyncMock, mock_probe: Mock
    ) -> None:
        mock_service.sync_principal.side_effect = UpstreamUnavailableError("db down")

        _post(test_client, {"type": "user.created", "data": {"id": "u7"}})

        mock_probe.sync_failed.assert_called_once_with("user.created", "u7", "db down")
        mock_probe.event_handled.assert_not_called()


class TestDefaultWebhookProbe:
    def test_handled_event_logs_principal(self) -> None:
        logger = Mock()
        probe = DefaultWebhookProbe(logger=logger)

        probe.event_handled("user.created", "u7")

        logger.info.assert_called_once_with(
            "identity_webhook_handled", event_type="user.created", principal_id="u7"
        )
