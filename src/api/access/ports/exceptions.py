"""Port exceptions for the access bounded context.

These exceptions are raised by adapters and application services and
translated to HTTP responses by the presentation layer.
"""

from access.domain.exceptions import (
    AlreadyImpersonatingError,
    PermissionDeniedError,
    SelfImpersonationError,
)

__all__ = [
    "AccessGrantNotFoundError",
    "AlreadyImpersonatingError",
    "DuplicateAccessGrantError",
    "PermissionDeniedError",
    "PrincipalNotFoundError",
    "SelfImpersonationError",
    "TenantNotFoundError",
    "UnauthenticatedError",
    "UpstreamUnavailableError",
]


class UnauthenticatedError(Exception):
    """Raised when a request carries no valid identity."""

    pass


class UpstreamUnavailableError(Exception):
    """Raised when a backing store or the identity provider cannot be reached.

    Store faults are never reported as "no access"; callers see this
    error instead so a transient outage cannot silently revoke access.
    """

    pass


class DuplicateAccessGrantError(Exception):
    """Raised when a grant for the same (tenant, principal) already exists."""

    pass


class TenantNotFoundError(Exception):
    """Raised when an administrative operation targets a missing tenant."""

    pass


class AccessGrantNotFoundError(Exception):
    """Raised when an administrative operation targets a missing grant."""

    pass


class PrincipalNotFoundError(Exception):
    """Raised when the identity provider does not know a principal."""

    pass
