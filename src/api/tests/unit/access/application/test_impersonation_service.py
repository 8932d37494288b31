"""Unit tests for ImpersonationService."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, Mock, create_autospec

import pytest

from access.application.observability import ImpersonationProbe
from access.application.services import (
    AccessGrantService,
    ActiveTenantSelector,
    ImpersonationService,
    TenantContextResolver,
)
from access.domain.aggregates import AccessGrant, Tenant
from access.domain.exceptions import (
    AlreadyImpersonatingError,
    PermissionDeniedError,
    SelfImpersonationError,
)
from access.domain.impersonation import ImpersonationSnapshot
from access.domain.value_objects import PrincipalRole
from access.ports.exceptions import PrincipalNotFoundError, UpstreamUnavailableError
from access.ports.identity import IIdentityProvider


@pytest.fixture
def target(principal_factory):
    return principal_factory("u2")


@pytest.fixture
def mock_identity_provider(target):
    provider = create_autospec(IIdentityProvider, instance=True)
    provider.get_principal = AsyncMock(return_value=target)
    return provider


@pytest.fixture
def mock_probe():
    return Mock(spec=ImpersonationProbe)


@pytest.fixture
def service(impersonation_store, mock_identity_provider, mock_probe):
    return ImpersonationService(
        store=impersonation_store,
        identity_provider=mock_identity_provider,
        probe=mock_probe,
    )


class TestStart:
    """Tests for ImpersonationService.start()."""

    @pytest.mark.asyncio
    async def test_admin_starts_impersonating(
        self, service, admin, target, impersonation_store, mock_probe
    ):
        principal = await service.start(admin, "u2")

        assert principal.real == admin
        assert principal.effective == target
        assert principal.is_impersonating
        assert impersonation_store.snapshot.impersonator_id == "a1"
        assert impersonation_store.snapshot.target == target
        mock_probe.impersonation_started.assert_called_once_with("a1", "u2")

    @pytest.mark.asyncio
    async def test_non_admin_is_denied(
        self, service, client_principal, impersonation_store, mock_identity_provider
    ):
        with pytest.raises(PermissionDeniedError):
            await service.start(client_principal, "u2")

        assert impersonation_store.snapshot is None
        mock_identity_provider.get_principal.assert_not_called()

    @pytest.mark.asyncio
    async def test_staff_is_denied(self, service, principal_factory):
        staff = principal_factory("s1", PrincipalRole.STAFF)

        with pytest.raises(PermissionDeniedError):
            await service.start(staff, "u2")

    @pytest.mark.asyncio
    async def test_self_impersonation_is_rejected(self, service, admin, mock_probe):
        with pytest.raises(SelfImpersonationError):
            await service.start(admin, "a1")

        mock_probe.impersonation_rejected.assert_called_once_with(
            "a1", "a1", "SelfImpersonationError"
        )

    @pytest.mark.asyncio
    async def test_unknown_target_is_not_found(
        self, service, admin, mock_identity_provider, impersonation_store
    ):
        mock_identity_provider.get_principal.return_value = None

        with pytest.raises(PrincipalNotFoundError):
            await service.start(admin, "ghost")

        assert impersonation_store.snapshot is None

    @pytest.mark.asyncio
    async def test_starting_twice_is_rejected(self, service, admin):
        await service.start(admin, "u2")

        with pytest.raises(AlreadyImpersonatingError):
            await service.start(admin, "u3")

    @pytest.mark.asyncio
    async def test_identity_provider_outage_propagates(
        self, service, admin, mock_identity_provider
    ):
        mock_identity_provider.get_principal.side_effect = UpstreamUnavailableError(
            "down"
        )

        with pytest.raises(UpstreamUnavailableError):
            await service.start(admin, "u2")


class TestStop:
    """Tests for ImpersonationService.stop()."""

    @pytest.mark.asyncio
    async def test_stop_is_checked_against_real_principal(
        self, service, admin, impersonation_store
    ):
        started = await service.start(admin, "u2")
        assert not started.effective.is_admin

        principal = service.stop(admin)

        assert principal.effective == admin
        assert not principal.is_impersonating
        assert impersonation_store.snapshot is None

    def test_stop_without_impersonation_is_noop_for_admin(
        self, service, admin, mock_probe
    ):
        principal = service.stop(admin)

        assert principal.effective == admin
        mock_probe.impersonation_stopped.assert_called_once_with("a1", None)

    def test_non_admin_cannot_stop(self, service, client_principal):
        with pytest.raises(PermissionDeniedError):
            service.stop(client_principal)


class TestRequestPrincipal:
    """Tests for ImpersonationService.request_principal()."""

    def test_no_snapshot_acts_as_real(self, service, admin):
        principal = service.request_principal(admin)

        assert principal.effective == admin
        assert principal.impersonation is None

    def test_snapshot_from_other_principal_is_ignored(
        self, service, impersonation_store, principal_factory, target, mock_probe
    ):
        impersonation_store.snapshot = ImpersonationSnapshot(
            impersonator_id="a1",
            target=target,
            started_at=datetime.now(UTC),
        )
        other_admin = principal_factory("a2", PrincipalRole.ADMIN)

        principal = service.request_principal(other_admin)

        assert principal.effective == other_admin
        mock_probe.stale_impersonation_ignored.assert_called_once_with("a2", "a1")

    def test_demoted_admin_loses_impersonation(
        self, service, impersonation_store, admin, target
    ):
        impersonation_store.snapshot = ImpersonationSnapshot(
            impersonator_id="a1",
            target=target,
            started_at=datetime.now(UTC),
        )
        demoted = admin.with_role(PrincipalRole.STAFF)

        principal = service.request_principal(demoted)

        assert principal.effective == demoted
        assert not principal.is_impersonating


class TestImpersonatedTenantScenario:
    """a1 impersonates u2: tenant resolution follows the effective principal."""

    @pytest.mark.asyncio
    async def test_accessible_tenants_follow_effective_principal(
        self,
        service,
        admin,
        tenant_repo,
        grant_repo,
        preference_store,
        mock_session,
    ):
        admin_tenant = tenant_repo.add(Tenant.create(name="Agency Internal"))
        client_tenant = tenant_repo.add(Tenant.create(name="Client Co"))
        grant_repo.add(AccessGrant.create(tenant_id=admin_tenant.id, principal_id="a1"))
        grant_repo.add(AccessGrant.create(tenant_id=client_tenant.id, principal_id="u2"))

        def new_resolver() -> TenantContextResolver:
            return TenantContextResolver(
                grant_service=AccessGrantService(
                    grant_repository=grant_repo,
                    tenant_repository=tenant_repo,
                    session=mock_session,
                ),
                tenant_repository=tenant_repo,
                selector=ActiveTenantSelector(preference_store=preference_store),
            )

        principal = await service.start(admin, "u2")
        tenants = await new_resolver().list_accessible_tenants(principal.effective.id)
        assert [t.name for t in tenants] == ["Client Co"]

        principal = service.stop(admin)
        tenants = await new_resolver().list_accessible_tenants(principal.effective.id)
        assert [t.name for t in tenants] == ["Agency Internal"]
