"""Pydantic models for site health responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from site_health.application import BatchSummary
from site_health.domain import SiteCheck


class BatchSummaryResponse(BaseModel):
    checked: int
    ok: int
    failed: int
    results: dict[str, str]

    @classmethod
    def from_domain(cls, summary: BatchSummary) -> BatchSummaryResponse:
        return cls(
            checked=summary.checked,
            ok=summary.ok,
            failed=summary.failed,
            results=dict(summary.results),
        )


class SiteCheckResponse(BaseModel):
    url: str
    status: str
    http_status: int | None = None
    response_time_ms: int | None = None
    checked_at: datetime

    @classmethod
    def from_domain(cls, check: SiteCheck) -> SiteCheckResponse:
        return cls(
            url=check.url,
            status=check.status,
            http_status=check.http_status,
            response_time_ms=check.response_time_ms,
            checked_at=check.checked_at,
        )
