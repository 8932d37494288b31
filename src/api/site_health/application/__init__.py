"""Application layer for site health."""

from site_health.application.services import BatchSummary, SiteCheckService

__all__ = ["BatchSummary", "SiteCheckService"]
