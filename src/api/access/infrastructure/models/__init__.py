"""SQLAlchemy ORM models for the access bounded context."""

from access.infrastructure.models.access_grant import AccessGrantModel
from access.infrastructure.models.principal import PrincipalModel
from access.infrastructure.models.tenant import TenantModel

__all__ = [
    "AccessGrantModel",
    "PrincipalModel",
    "TenantModel",
]
