"""Unit tests for the dashboard routes.

Every response is derived from the resolved tenant context, so the tests
only override ``get_tenant_context``.
"""

from __future__ import annotations

import pytest
from fastapi import FastAPI, status
from fastapi.testclient import TestClient

from shared_kernel.tenant_context import PermissionBundle, TenantContext


def make_context(**flags: bool) -> TenantContext:
    return TenantContext(
        tenant_id="01HTENANTAAAAAAAAAAAAAAAAA",
        tenant_name="Acme",
        permissions=PermissionBundle(**flags),
        billing_customer_ref="cus_123",
        analytics_site_ref=None,
        uptime_monitor_ref="mon_9",
        website_url="https://acme.example",
    )


@pytest.fixture
def state() -> dict:
    return {"context": make_context()}


@pytest.fixture
def test_client(state: dict) -> TestClient:
    from access.dependencies.tenant_context import get_tenant_context
    from dashboard.presentation import router

    app = FastAPI()
    app.dependency_overrides[get_tenant_context] = lambda: state["context"]
    app.include_router(router)

    return TestClient(app)


class TestGetDashboard:
    def test_all_sections_when_everything_allowed(self, test_client):
        body = test_client.get("/dashboard").json()

        assert body["tenant_name"] == "Acme"
        assert body["billing"] == {"linked": True, "reference": "cus_123"}
        assert body["analytics"] == {"linked": False, "reference": None}
        assert body["uptime"]["reference"] == "mon_9"
        assert body["support"] is True

    def test_disallowed_sections_are_hidden(self, test_client, state):
        state["context"] = make_context(billing=False, support=False)

        body = test_client.get("/dashboard").json()

        assert body["billing"] is None
        assert body["support"] is False
        assert body["uptime"] is not None

    def test_dashboard_flag_off_is_403(self, test_client, state):
        state["context"] = make_context(dashboard=False)

        response = test_client.get("/dashboard")

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_unlinked_account_is_404(self, test_client, state):
        state["context"] = None

        response = test_client.get("/dashboard")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert "not linked" in response.json()["detail"]


class TestFeatureSections:
    @pytest.mark.parametrize(
        ("path", "flag"),
        [
            ("/dashboard/billing", "billing"),
            ("/dashboard/analytics", "analytics"),
            ("/dashboard/uptime", "uptime"),
        ],
    )
    def test_flag_off_is_403(self, test_client, state, path, flag):
        state["context"] = make_context(**{flag: False})

        response = test_client.get(path)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_billing_section(self, test_client):
        body = test_client.get("/dashboard/billing").json()

        assert body == {
            "tenant_id": "01HTENANTAAAAAAAAAAAAAAAAA",
            "feature": "billing",
            "account": {"linked": True, "reference": "cus_123"},
        }

    def test_unlinked_analytics_account(self, test_client):
        body = test_client.get("/dashboard/analytics").json()

        assert body["account"]["linked"] is False

    def test_unlinked_principal_is_404(self, test_client, state):
        state["context"] = None

        assert test_client.get("/dashboard/uptime").status_code == 404
