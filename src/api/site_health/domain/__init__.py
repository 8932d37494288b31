"""Domain layer for site health."""

from site_health.domain.site_check import (
    CheckStatus,
    ProbeResult,
    SiteCheck,
    SiteTarget,
)

__all__ = ["CheckStatus", "ProbeResult", "SiteCheck", "SiteTarget"]
