"""Port exceptions for site health."""


class InvalidSiteUrlError(Exception):
    """Raised by a prober when a URL cannot be probed at all."""

    pass


class SiteProbeError(Exception):
    """Raised by a prober when the site could not be reached."""

    pass


class SiteCheckStoreUnavailableError(Exception):
    """Raised when the site check store cannot be reached."""

    pass
