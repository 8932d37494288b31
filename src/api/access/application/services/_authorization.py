"""Role checks shared by administrative services."""

from access.domain.aggregates import Principal
from access.domain.exceptions import PermissionDeniedError


def require_admin(principal: Principal) -> None:
    """Raise PermissionDeniedError unless the principal is an administrator."""
    if not principal.is_admin:
        raise PermissionDeniedError("Administrator role required")
