"""Aggregates for the access domain."""

from access.domain.aggregates.access_grant import AccessGrant
from access.domain.aggregates.principal import Principal
from access.domain.aggregates.tenant import Tenant

__all__ = ["AccessGrant", "Principal", "Tenant"]
