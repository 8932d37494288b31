"""Per-browser state ports.

Both stores are bound to the current request: reads come from the
incoming request, writes go to the outgoing response.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from access.domain.impersonation import ImpersonationSnapshot


@runtime_checkable
class IActiveTenantPreferenceStore(Protocol):
    """Remembers which tenant a browser last acted for.

    The stored value is a hint. It is always re-validated against the
    grant store before use.
    """

    def read(self) -> str | None:
        """Return the preferred tenant ID, or None if absent or invalid."""
        ...

    def write(self, tenant_id: str) -> None:
        """Persist the preferred tenant ID."""
        ...

    def clear(self) -> None:
        ...


@runtime_checkable
class IImpersonationStore(Protocol):
    """Persists the impersonation snapshot for the current browser."""

    def load(self) -> ImpersonationSnapshot | None:
        """Return the stored snapshot, or None if absent, tampered or expired."""
        ...

    def save(self, snapshot: ImpersonationSnapshot) -> None:
        ...

    def clear(self) -> None:
        ...
