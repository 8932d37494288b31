"""Value objects for the access domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for identifiers and domain concepts.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from ulid import ULID


@dataclass(frozen=True)
class TenantId:
    """Identifier for a Tenant aggregate.

    Uses ULID, so the lexicographic order of IDs is also creation order.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> TenantId:
        """Generate a new TenantId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> TenantId:
        """Create TenantId from string value.

        Args:
            value: ULID string

        Returns:
            TenantId instance

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid TenantId: {value}") from e

        return cls(value=value)


@dataclass(frozen=True)
class GrantId:
    """Identifier for an AccessGrant aggregate."""

    value: str

    def __str__(self) -> str:
        return self.value

    @classmethod
    def generate(cls) -> GrantId:
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> GrantId:
        """Create GrantId from string value.

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid GrantId: {value}") from e

        return cls(value=value)


class PrincipalRole(StrEnum):
    """Coarse role of a principal, as asserted by the identity provider."""

    ADMIN = "admin"
    STAFF = "staff"
    CLIENT = "client"

    @classmethod
    def from_claim(cls, raw: str | None) -> PrincipalRole:
        """Map a raw identity-provider role string to a role.

        Staff have historically been labelled ``employee`` or
        ``team_member`` by the provider. Anything unrecognised, including
        a missing claim, maps to CLIENT.
        """
        if raw is None:
            return cls.CLIENT
        normalized = raw.strip().lower()
        if normalized == cls.ADMIN.value:
            return cls.ADMIN
        if normalized in _STAFF_ALIASES:
            return cls.STAFF
        return cls.CLIENT

    @property
    def is_staff(self) -> bool:
        """True for roles allowed into the staff area (admins included)."""
        return self in (PrincipalRole.ADMIN, PrincipalRole.STAFF)


_STAFF_ALIASES = frozenset({"staff", "employee", "team_member"})
