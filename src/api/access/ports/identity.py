"""Identity provider port.

The identity provider owns principals. The portal reads them and, for
administrators, pushes role changes back.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from access.domain.aggregates import Principal
from access.domain.value_objects import PrincipalRole


@runtime_checkable
class IIdentityProvider(Protocol):
    """Administrative access to the identity provider's user directory.

    All methods raise UpstreamUnavailableError when the provider cannot
    be reached.
    """

    async def get_principal(self, principal_id: str) -> Principal | None:
        """Look up a principal by external ID, or None if unknown."""
        ...

    async def list_principals(self) -> list[Principal]:
        """List every principal known to the provider."""
        ...

    async def update_role(self, principal_id: str, role: PrincipalRole) -> None:
        """Set the role claim of a principal.

        Raises:
            PrincipalNotFoundError: If the provider does not know the principal
        """
        ...
