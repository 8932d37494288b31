"""Site prober port."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from site_health.domain import ProbeResult


@runtime_checkable
class ISiteProber(Protocol):
    """Checks one website."""

    async def probe(self, url: str) -> ProbeResult:
        """Probe a URL.

        Raises:
            InvalidSiteUrlError: If the URL cannot be probed at all
            SiteProbeError: If the site could not be reached
        """
        ...
