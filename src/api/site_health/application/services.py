"""Site check batch service."""

from __future__ import annotations

from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncSession

from site_health.application.observability import (
    DefaultSiteCheckBatchProbe,
    SiteCheckBatchProbe,
)
from site_health.domain import SiteCheck, SiteTarget
from site_health.ports.exceptions import InvalidSiteUrlError, SiteProbeError
from site_health.ports.prober import ISiteProber
from site_health.ports.repositories import ISiteCheckRepository, ISiteTargetSource


@dataclass
class BatchSummary:
    """Counts of one batch run.

    ``failed`` counts tenants whose check could not be recorded at all;
    unreachable sites are recorded checks and count towards ``checked``.
    """

    checked: int = 0
    ok: int = 0
    failed: int = 0
    results: dict[str, str] = field(default_factory=dict)


class SiteCheckService:
    """Runs the periodic site check over all active tenants."""

    def __init__(
        self,
        target_source: ISiteTargetSource,
        repository: ISiteCheckRepository,
        prober: ISiteProber,
        session: AsyncSession,
        probe: SiteCheckBatchProbe | None = None,
    ):
        self._target_source = target_source
        self._repository = repository
        self._prober = prober
        self._session = session
        self._probe = probe or DefaultSiteCheckBatchProbe()

    async def run_batch(self) -> BatchSummary:
        """Check every target once, sequentially.

        Each tenant is isolated: a probe failure is recorded as the
        check's status and a storage failure only loses that tenant's
        row. No transaction is held while a site is being probed; each
        result is written in its own short transaction.
        """
        summary = BatchSummary()
        async with self._session.begin():
            targets = await self._target_source.list_targets()
        self._probe.batch_started(len(targets))

        for target in targets:
            check = await self._check(target)
            try:
                async with self._session.begin():
                    await self._repository.save(check)
            except Exception as e:
                self._probe.site_check_failed(target.tenant_id, str(e))
                summary.failed += 1
                summary.results[target.tenant_id] = "store_failed"
                continue

            summary.checked += 1
            if check.is_ok:
                summary.ok += 1
            summary.results[target.tenant_id] = check.status
            self._probe.site_checked(target.tenant_id, check.status)

        self._probe.batch_completed(summary.checked, summary.ok, summary.failed)
        return summary

    async def latest_for_tenant(self, tenant_id: str) -> SiteCheck | None:
        return await self._repository.latest_for_tenant(tenant_id)

    async def _check(self, target: SiteTarget) -> SiteCheck:
        try:
            result = await self._prober.probe(target.website_url)
        except InvalidSiteUrlError:
            return SiteCheck.invalid_url(target)
        except SiteProbeError as e:
            return SiteCheck.failed(target, str(e))
        except Exception as e:
            # Prober bugs must not abort the batch either
            return SiteCheck.failed(target, str(e) or type(e).__name__)
        return SiteCheck.succeeded(target, result)
