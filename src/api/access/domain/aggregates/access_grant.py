"""AccessGrant aggregate for the access context."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from access.domain.value_objects import GrantId, TenantId
from shared_kernel.tenant_context import PermissionBundle


@dataclass
class AccessGrant:
    """Grant allowing one principal to act for one tenant.

    A principal holds at most one grant per tenant. Grants are the only
    source of tenant access for clients; an inactive grant confers
    nothing but is kept so it can be re-enabled with its permissions.

    The contact fields (email, name, role_label) describe the principal
    as a contact of the tenant. They are denormalized copies and may lag
    behind the identity provider.

    A grant may be added for an email before its owner has an account.
    Such a pending grant has no principal_id and confers nothing until it
    is linked to the principal who signs in with that email.
    """

    id: GrantId
    tenant_id: TenantId
    principal_id: str | None
    permissions: PermissionBundle = field(default_factory=PermissionBundle)
    is_active: bool = True
    email: str | None = None
    name: str | None = None
    role_label: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def create(
        cls,
        tenant_id: TenantId,
        principal_id: str | None,
        permissions: PermissionBundle | None = None,
        email: str | None = None,
        name: str | None = None,
        role_label: str | None = None,
    ) -> AccessGrant:
        """Factory method for a new active grant.

        Without a principal_id the grant is pending on ``email``.

        Raises:
            ValueError: If neither principal_id nor email is given
        """
        principal_id = principal_id or None
        email = email.strip() if email else None
        if principal_id is None and not email:
            raise ValueError("A grant needs a principal_id or an email")
        return cls(
            id=GrantId.generate(),
            tenant_id=tenant_id,
            principal_id=principal_id,
            permissions=permissions or PermissionBundle(),
            email=email,
            name=name,
            role_label=role_label,
        )

    @property
    def is_pending(self) -> bool:
        return self.principal_id is None

    def link(self, principal_id: str) -> None:
        """Attach a pending grant to the principal who owns its email.

        Raises:
            ValueError: If the grant is already linked or principal_id is empty
        """
        if not self.is_pending:
            raise ValueError(f"Grant {self.id} is already linked")
        if not principal_id:
            raise ValueError("principal_id must not be empty")
        self.principal_id = principal_id

    def deactivate(self) -> None:
        self.is_active = False

    def activate(self) -> None:
        self.is_active = True

    def change_permissions(self, permissions: PermissionBundle) -> None:
        self.permissions = permissions

    def update_contact(
        self,
        email: str | None = None,
        name: str | None = None,
        role_label: str | None = None,
    ) -> None:
        """Update contact details; ``None`` leaves a field unchanged."""
        if email is not None:
            self.email = email
        if name is not None:
            self.name = name
        if role_label is not None:
            self.role_label = role_label
