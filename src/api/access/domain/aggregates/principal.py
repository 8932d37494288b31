"""Principal entity for the access context."""

from __future__ import annotations

from dataclasses import dataclass, replace

from access.domain.value_objects import PrincipalRole


@dataclass(frozen=True)
class Principal:
    """An authenticated human, owned by the external identity provider.

    The portal never creates or deletes principals; it only reads them
    and, for administrators, pushes role changes back to the provider.

    Attributes:
        id: External identity-provider subject
        email: Primary email address (may be empty)
        name: Display name (may be empty)
        role: Coarse role derived from the provider's role claim
    """

    id: str
    email: str
    name: str
    role: PrincipalRole

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Principal id must not be empty")

    @property
    def is_admin(self) -> bool:
        return self.role == PrincipalRole.ADMIN

    def with_role(self, role: PrincipalRole) -> Principal:
        return replace(self, role=role)
