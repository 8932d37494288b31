"""Impersonation state machine.

A browser is either in the normal state or impersonating exactly one
principal. The impersonating state carries a snapshot of the target taken
when impersonation started; the snapshot, not a fresh lookup, defines the
effective principal for the rest of the session.

Transitions:
    NotImpersonating --begin--> Impersonating
    Impersonating    --end----> NotImpersonating

Both transitions are only available to a real administrator.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from access.domain.aggregates.principal import Principal
from access.domain.exceptions import (
    AlreadyImpersonatingError,
    PermissionDeniedError,
    SelfImpersonationError,
)


@dataclass(frozen=True)
class ImpersonationSnapshot:
    """Target principal as captured when impersonation started.

    Attributes:
        impersonator_id: Real administrator who started the impersonation
        target: The principal being impersonated
        started_at: When impersonation started (UTC)
    """

    impersonator_id: str
    target: Principal
    started_at: datetime


@dataclass(frozen=True)
class NotImpersonating:
    """Normal state: the effective principal is the real principal."""

    @property
    def is_impersonating(self) -> bool:
        return False

    def effective_principal(self, real: Principal) -> Principal:
        return real

    def begin(
        self,
        real: Principal,
        target: Principal,
        now: datetime | None = None,
    ) -> Impersonating:
        """Start impersonating ``target``.

        Raises:
            PermissionDeniedError: If the real principal is not an admin
            SelfImpersonationError: If target is the real principal
        """
        _require_admin(real)
        if target.id == real.id:
            raise SelfImpersonationError("Cannot impersonate yourself")
        return Impersonating(
            ImpersonationSnapshot(
                impersonator_id=real.id,
                target=target,
                started_at=now or datetime.now(UTC),
            )
        )

    def end(self, real: Principal) -> NotImpersonating:
        """Stopping when not impersonating is a no-op for admins."""
        _require_admin(real)
        return self


@dataclass(frozen=True)
class Impersonating:
    """Impersonating state: the effective principal is the snapshot."""

    snapshot: ImpersonationSnapshot

    @property
    def is_impersonating(self) -> bool:
        return True

    def effective_principal(self, real: Principal) -> Principal:
        return self.snapshot.target

    def begin(
        self,
        real: Principal,
        target: Principal,
        now: datetime | None = None,
    ) -> Impersonating:
        _require_admin(real)
        raise AlreadyImpersonatingError(
            "Already impersonating; stop the current impersonation first"
        )

    def end(self, real: Principal) -> NotImpersonating:
        _require_admin(real)
        return NotImpersonating()


ImpersonationState = NotImpersonating | Impersonating


def state_for(
    real: Principal, snapshot: ImpersonationSnapshot | None
) -> ImpersonationState:
    """Derive the state for a request from a stored snapshot.

    Fails closed: the snapshot only counts when it was started by this
    real principal and that principal is still an administrator.
    """
    if snapshot is None:
        return NotImpersonating()
    if snapshot.impersonator_id != real.id or not real.is_admin:
        return NotImpersonating()
    return Impersonating(snapshot)


def _require_admin(real: Principal) -> None:
    if not real.is_admin:
        raise PermissionDeniedError("Administrator role required")
