"""Impersonation service.

Loads the stored impersonation snapshot, applies the state machine and
produces the RequestPrincipal every other component works with.
"""

from __future__ import annotations

from access.application.observability import (
    DefaultImpersonationProbe,
    ImpersonationProbe,
)
from access.application.value_objects import RequestPrincipal
from access.domain.aggregates import Principal
from access.domain.exceptions import (
    AlreadyImpersonatingError,
    PermissionDeniedError,
    SelfImpersonationError,
)
from access.domain.impersonation import (
    Impersonating,
    ImpersonationState,
    NotImpersonating,
    state_for,
)
from access.ports.exceptions import PrincipalNotFoundError
from access.ports.identity import IIdentityProvider
from access.ports.session_state import IImpersonationStore


class ImpersonationService:
    """Application service for administrator impersonation."""

    def __init__(
        self,
        store: IImpersonationStore,
        identity_provider: IIdentityProvider,
        probe: ImpersonationProbe | None = None,
    ):
        """Initialize ImpersonationService.

        Args:
            store: Per-browser snapshot storage
            identity_provider: Used to look up impersonation targets
            probe: Optional domain probe for observability
        """
        self._store = store
        self._identity_provider = identity_provider
        self._probe = probe or DefaultImpersonationProbe()

    def state(self, real: Principal) -> ImpersonationState:
        """Current state for the real principal.

        A stored snapshot that was started by someone else, or whose
        starter is no longer an administrator, counts as not impersonating.
        """
        snapshot = self._store.load()
        state = state_for(real, snapshot)
        if snapshot is not None and not state.is_impersonating:
            self._probe.stale_impersonation_ignored(real.id, snapshot.impersonator_id)
        return state

    def request_principal(self, real: Principal) -> RequestPrincipal:
        """Build the real/effective principal pair for a request."""
        state = self.state(real)
        return RequestPrincipal(
            real=real,
            effective=state.effective_principal(real),
            impersonation=state.snapshot if isinstance(state, Impersonating) else None,
        )

    async def start(self, real: Principal, target_id: str) -> RequestPrincipal:
        """Start impersonating ``target_id``.

        Raises:
            PermissionDeniedError: If the real principal is not an admin
            SelfImpersonationError: If target is the real principal
            AlreadyImpersonatingError: If an impersonation is active
            PrincipalNotFoundError: If the identity provider does not know
                the target
            UpstreamUnavailableError: If the identity provider is unreachable
        """
        state = self.state(real)
        try:
            if not real.is_admin:
                raise PermissionDeniedError("Administrator role required")
            if state.is_impersonating:
                raise AlreadyImpersonatingError(
                    "Already impersonating; stop the current impersonation first"
                )
            if target_id == real.id:
                raise SelfImpersonationError("Cannot impersonate yourself")

            target = await self._identity_provider.get_principal(target_id)
            if target is None:
                raise PrincipalNotFoundError(f"Principal '{target_id}' not found")

            new_state = state.begin(real, target)
        except (
            PermissionDeniedError,
            AlreadyImpersonatingError,
            SelfImpersonationError,
            PrincipalNotFoundError,
        ) as e:
            self._probe.impersonation_rejected(real.id, target_id, type(e).__name__)
            raise

        self._store.save(new_state.snapshot)
        self._probe.impersonation_started(real.id, target.id)
        return RequestPrincipal(
            real=real, effective=target, impersonation=new_state.snapshot
        )

    def stop(self, real: Principal) -> RequestPrincipal:
        """Stop impersonating. Checked against the real principal.

        Raises:
            PermissionDeniedError: If the real principal is not an admin
        """
        state = self.state(real)
        try:
            new_state: NotImpersonating = state.end(real)
        except PermissionDeniedError:
            self._probe.impersonation_rejected(real.id, None, "PermissionDeniedError")
            raise

        target_id = None
        if isinstance(state, Impersonating):
            target_id = state.snapshot.target.id
        self._store.clear()
        self._probe.impersonation_stopped(real.id, target_id)
        return RequestPrincipal(
            real=real, effective=new_state.effective_principal(real)
        )
