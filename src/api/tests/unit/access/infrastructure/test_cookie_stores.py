"""Unit tests for the signed-cookie state stores."""

import time
from datetime import UTC, datetime
from http.cookies import SimpleCookie
from unittest.mock import MagicMock

import pytest
from fastapi import Response
from itsdangerous import TimestampSigner, URLSafeTimedSerializer

from access.domain.aggregates import Principal
from access.domain.impersonation import ImpersonationSnapshot
from access.domain.value_objects import PrincipalRole
from access.infrastructure.cookie_stores import (
    CookieActiveTenantPreferenceStore,
    CookieImpersonationStore,
)
from infrastructure.settings import SessionSettings

TENANT_ID = "01HZX00000000000000000000A"


@pytest.fixture
def settings() -> SessionSettings:
    return SessionSettings(secret_key="unit-test-secret", secure_cookies=False)


@pytest.fixture
def mock_probe():
    return MagicMock()


def set_cookie_headers(response: Response) -> list[str]:
    return [
        value.decode("latin-1")
        for key, value in response.raw_headers
        if key.decode("latin-1").lower() == "set-cookie"
    ]


def cookie_jar(response: Response) -> dict[str, str]:
    """Cookies a browser would send back after receiving ``response``."""
    jar = SimpleCookie()
    for header in set_cookie_headers(response):
        jar.load(header)
    return {name: morsel.value for name, morsel in jar.items()}


def snapshot() -> ImpersonationSnapshot:
    return ImpersonationSnapshot(
        impersonator_id="a1",
        target=Principal(
            id="u2", email="u2@example.com", name="Client Two", role=PrincipalRole.CLIENT
        ),
        started_at=datetime(2026, 3, 1, 12, 30, tzinfo=UTC),
    )


class TestActiveTenantPreferenceStore:
    """Tests for CookieActiveTenantPreferenceStore."""

    def test_absent_cookie_reads_none(self, settings):
        store = CookieActiveTenantPreferenceStore(settings, {}, Response(), "u1")
        assert store.read() is None

    def test_written_value_is_read_back_by_next_request(self, settings):
        response = Response()
        CookieActiveTenantPreferenceStore(settings, {}, response, "u1").write(TENANT_ID)

        next_request = CookieActiveTenantPreferenceStore(
            settings, cookie_jar(response), Response(), "u1"
        )

        assert next_request.read() == TENANT_ID

    def test_write_is_visible_within_same_request(self, settings):
        store = CookieActiveTenantPreferenceStore(settings, {}, Response(), "u1")

        store.write(TENANT_ID)

        assert store.read() == TENANT_ID

    def test_preference_of_another_principal_reads_none(self, settings, mock_probe):
        response = Response()
        CookieActiveTenantPreferenceStore(settings, {}, response, "u1").write(TENANT_ID)

        store = CookieActiveTenantPreferenceStore(
            settings, cookie_jar(response), Response(), "u2", probe=mock_probe
        )

        assert store.read() is None
        mock_probe.cookie_rejected.assert_not_called()

    def test_cookie_is_persistent_and_http_only(self, settings):
        response = Response()
        CookieActiveTenantPreferenceStore(settings, {}, response, "u1").write(TENANT_ID)

        header = set_cookie_headers(response)[0]
        assert header.startswith("portal_active_tenant=")
        assert "HttpOnly" in header
        assert "Max-Age=2592000" in header
        assert "SameSite=lax" in header
        assert "Path=/" in header

    def test_impersonation_scope_uses_separate_session_cookie(self, settings):
        response = Response()
        CookieActiveTenantPreferenceStore(
            settings, {}, response, "u2", impersonating=True
        ).write(TENANT_ID)

        header = set_cookie_headers(response)[0]
        assert header.startswith("portal_impersonation_active_tenant=")
        assert "Max-Age" not in header

    def test_impersonation_scope_leaves_own_preference_alone(self, settings):
        own = Response()
        CookieActiveTenantPreferenceStore(settings, {}, own, "a1").write(TENANT_ID)
        cookies = cookie_jar(own)

        impersonated = Response()
        CookieActiveTenantPreferenceStore(
            settings, cookies, impersonated, "u2", impersonating=True
        ).write("01HZX00000000000000000000B")
        cookies.update(cookie_jar(impersonated))

        store = CookieActiveTenantPreferenceStore(settings, cookies, Response(), "a1")
        assert store.read() == TENANT_ID

    def test_tampered_cookie_is_ignored(self, settings, mock_probe):
        response = Response()
        CookieActiveTenantPreferenceStore(settings, {}, response, "u1").write(TENANT_ID)
        cookies = cookie_jar(response)
        cookies["portal_active_tenant"] = cookies["portal_active_tenant"][:-2] + "xx"

        store = CookieActiveTenantPreferenceStore(
            settings, cookies, Response(), "u1", probe=mock_probe
        )

        assert store.read() is None
        mock_probe.cookie_rejected.assert_called_once_with(
            "portal_active_tenant", "bad_signature"
        )

    def test_bare_tenant_id_payload_is_malformed(self, settings, mock_probe):
        serializer = URLSafeTimedSerializer(
            "unit-test-secret", salt="portal.active-tenant"
        )
        cookies = {"portal_active_tenant": serializer.dumps(TENANT_ID)}

        store = CookieActiveTenantPreferenceStore(
            settings, cookies, Response(), "u1", probe=mock_probe
        )

        assert store.read() is None
        mock_probe.cookie_rejected.assert_called_once_with("active_tenant", "malformed")

    def test_cookie_signed_with_other_key_is_ignored(self, settings):
        response = Response()
        other = SessionSettings(secret_key="another-secret", secure_cookies=False)
        CookieActiveTenantPreferenceStore(other, {}, response, "u1").write(TENANT_ID)

        store = CookieActiveTenantPreferenceStore(
            settings, cookie_jar(response), Response(), "u1"
        )

        assert store.read() is None

    def test_unset_signing_key_is_refused(self):
        with pytest.raises(ValueError):
            CookieActiveTenantPreferenceStore(
                SessionSettings(secret_key=""), {}, Response(), "u1"
            )

    def test_clear_deletes_cookie(self, settings):
        response = Response()
        store = CookieActiveTenantPreferenceStore(
            settings, {"portal_active_tenant": "whatever"}, response, "u1"
        )

        store.clear()

        assert store.read() is None
        header = set_cookie_headers(response)[0]
        assert 'portal_active_tenant=""' in header
        assert "Max-Age=0" in header


class TestImpersonationStore:
    """Tests for CookieImpersonationStore."""

    def test_snapshot_survives_round_trip(self, settings):
        response = Response()
        CookieImpersonationStore(settings, {}, response).save(snapshot())

        loaded = CookieImpersonationStore(
            settings, cookie_jar(response), Response()
        ).load()

        assert loaded == snapshot()

    def test_cookie_is_session_scoped(self, settings):
        response = Response()
        CookieImpersonationStore(settings, {}, response).save(snapshot())

        header = set_cookie_headers(response)[0]
        assert header.startswith("portal_impersonation=")
        assert "HttpOnly" in header
        assert "Max-Age" not in header

    def test_expired_signature_is_ignored(self, settings, mock_probe, monkeypatch):
        response = Response()
        five_hours_ago = int(time.time()) - 5 * 60 * 60
        monkeypatch.setattr(
            TimestampSigner, "get_timestamp", lambda self: five_hours_ago
        )
        CookieImpersonationStore(settings, {}, response).save(snapshot())
        monkeypatch.undo()

        store = CookieImpersonationStore(
            settings, cookie_jar(response), Response(), probe=mock_probe
        )

        assert store.load() is None
        mock_probe.cookie_rejected.assert_called_once_with(
            "portal_impersonation", "expired"
        )

    def test_malformed_payload_is_ignored(self, settings, mock_probe):
        serializer = URLSafeTimedSerializer(
            "unit-test-secret", salt="portal.impersonation"
        )
        cookies = {"portal_impersonation": serializer.dumps({"id": "u2"})}

        store = CookieImpersonationStore(settings, cookies, Response(), probe=mock_probe)

        assert store.load() is None
        mock_probe.cookie_rejected.assert_called_once_with("impersonation", "malformed")

    def test_preference_cookie_cannot_stand_in_for_impersonation(self, settings):
        response = Response()
        CookieActiveTenantPreferenceStore(settings, {}, response, "u1").write(TENANT_ID)
        value = cookie_jar(response)["portal_active_tenant"]

        store = CookieImpersonationStore(
            settings, {"portal_impersonation": value}, Response()
        )

        assert store.load() is None

    def test_clear_within_request_hides_incoming_snapshot(self, settings):
        response = Response()
        CookieImpersonationStore(settings, {}, response).save(snapshot())
        store = CookieImpersonationStore(settings, cookie_jar(response), Response())

        store.clear()

        assert store.load() is None
