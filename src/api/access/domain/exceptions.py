"""Domain exceptions for the access bounded context."""


class PermissionDeniedError(Exception):
    """Raised when a principal is not allowed to perform an action.

    Covers both role checks (non-admin starting impersonation) and grant
    checks (switching to a tenant without an active grant).
    """

    pass


class SelfImpersonationError(Exception):
    """Raised when an administrator tries to impersonate themselves."""

    pass


class AlreadyImpersonatingError(Exception):
    """Raised when impersonation is started while one is already active.

    The running impersonation must be stopped first.
    """

    pass
