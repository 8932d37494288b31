"""Site check entity and value objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum

from ulid import ULID

# Column width of site_checks.status
MAX_STATUS_LENGTH = 255


class CheckStatus(StrEnum):
    """Well-known statuses. Any other status is a probe error message."""

    OK = "ok"
    INVALID_URL = "invalid_url"


@dataclass(frozen=True)
class SiteTarget:
    """A tenant website due for checking."""

    tenant_id: str
    website_url: str


@dataclass(frozen=True)
class ProbeResult:
    """What a successful probe observed."""

    http_status: int
    response_time_ms: int


@dataclass(frozen=True)
class SiteCheck:
    """Outcome of checking one tenant's website once.

    ``status`` is ``ok`` when the site answered, ``invalid_url`` when the
    stored URL could not be probed at all, and otherwise the error message
    of the failed probe.
    """

    id: str
    tenant_id: str
    url: str
    status: str
    http_status: int | None = None
    response_time_ms: int | None = None
    checked_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_ok(self) -> bool:
        return self.status == CheckStatus.OK

    @classmethod
    def succeeded(cls, target: SiteTarget, result: ProbeResult) -> SiteCheck:
        return cls(
            id=str(ULID()),
            tenant_id=target.tenant_id,
            url=target.website_url,
            status=CheckStatus.OK.value,
            http_status=result.http_status,
            response_time_ms=result.response_time_ms,
        )

    @classmethod
    def invalid_url(cls, target: SiteTarget) -> SiteCheck:
        return cls(
            id=str(ULID()),
            tenant_id=target.tenant_id,
            url=target.website_url,
            status=CheckStatus.INVALID_URL.value,
        )

    @classmethod
    def failed(cls, target: SiteTarget, error: str) -> SiteCheck:
        message = error.strip() or "unknown error"
        return cls(
            id=str(ULID()),
            tenant_id=target.tenant_id,
            url=target.website_url,
            status=message[:MAX_STATUS_LENGTH],
        )
