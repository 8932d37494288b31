"""Protocol for site check batch observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class SiteCheckBatchProbe(Protocol):
    """Domain probe for the site check batch."""

    def batch_started(self, target_count: int) -> None:
        ...

    def site_checked(self, tenant_id: str, status: str) -> None:
        ...

    def site_check_failed(self, tenant_id: str, error: str) -> None:
        """Record that checking one tenant failed outside the probe itself."""
        ...

    def batch_completed(self, checked: int, ok: int, failed: int) -> None:
        ...

    def with_context(self, context: ObservationContext) -> SiteCheckBatchProbe:
        ...


class DefaultSiteCheckBatchProbe:
    """Default implementation of SiteCheckBatchProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultSiteCheckBatchProbe:
        return DefaultSiteCheckBatchProbe(logger=self._logger, context=context)

    def batch_started(self, target_count: int) -> None:
        self._logger.info(
            "site_check_batch_started",
            target_count=target_count,
            **self._get_context_kwargs(),
        )

    def site_checked(self, tenant_id: str, status: str) -> None:
        self._logger.debug(
            "site_checked",
            tenant_id=tenant_id,
            status=status,
            **self._get_context_kwargs(),
        )

    def site_check_failed(self, tenant_id: str, error: str) -> None:
        self._logger.error(
            "site_check_failed",
            tenant_id=tenant_id,
            error=error,
            **self._get_context_kwargs(),
        )

    def batch_completed(self, checked: int, ok: int, failed: int) -> None:
        self._logger.info(
            "site_check_batch_completed",
            checked=checked,
            ok=ok,
            failed=failed,
            **self._get_context_kwargs(),
        )
