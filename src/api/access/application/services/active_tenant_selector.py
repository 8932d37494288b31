"""Active-tenant selection.

Chooses which of a principal's usable grants a request acts for:

1. no grants: nothing is selected
2. the stored preference, if it names one of the grants
3. otherwise the grant with the lexicographically smallest tenant ID
   (with a single grant, that grant)

The stored preference is only a hint. Whenever the selection differs from
it, the selection is written back so the next request starts from it.
"""

from __future__ import annotations

from collections.abc import Sequence

from access.application.observability import (
    DefaultTenantContextProbe,
    TenantContextProbe,
)
from access.application.value_objects import TenantGrant
from access.ports.session_state import IActiveTenantPreferenceStore


class ActiveTenantSelector:
    """Selects the active tenant among a principal's grants."""

    def __init__(
        self,
        preference_store: IActiveTenantPreferenceStore,
        probe: TenantContextProbe | None = None,
    ):
        self._preference_store = preference_store
        self._probe = probe or DefaultTenantContextProbe()

    def select(
        self, principal_id: str, grants: Sequence[TenantGrant]
    ) -> TenantGrant | None:
        """Select the active grant.

        Never raises for a stale or unreadable preference. A failure to
        persist the new preference is logged and ignored.
        """
        if not grants:
            return None

        preferred = self._preference_store.read()
        if preferred is not None:
            for grant in grants:
                if grant.tenant_id.value == preferred:
                    return grant
            self._probe.stale_preference_ignored(principal_id, preferred)

        selected = min(grants, key=lambda g: g.tenant_id.value)
        self._remember(principal_id, selected.tenant_id.value)
        return selected

    def remember(self, tenant_id: str) -> None:
        """Persist an explicitly chosen tenant as the preference."""
        self._preference_store.write(tenant_id)

    def _remember(self, principal_id: str, tenant_id: str) -> None:
        try:
            self._preference_store.write(tenant_id)
        except Exception as e:
            self._probe.preference_write_failed(principal_id, tenant_id, str(e))
