"""Domain probe for site health infrastructure."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class SiteProberProbe(Protocol):
    """Domain probe for outbound website probes."""

    def site_probed(self, url: str, http_status: int, response_time_ms: int) -> None:
        ...

    def site_unreachable(self, url: str, error: str) -> None:
        ...

    def with_context(self, context: ObservationContext) -> SiteProberProbe:
        ...


class DefaultSiteProberProbe:
    """Default implementation of SiteProberProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultSiteProberProbe:
        return DefaultSiteProberProbe(logger=self._logger, context=context)

    def site_probed(self, url: str, http_status: int, response_time_ms: int) -> None:
        self._logger.debug(
            "site_probed",
            url=url,
            http_status=http_status,
            response_time_ms=response_time_ms,
            **self._get_context_kwargs(),
        )

    def site_unreachable(self, url: str, error: str) -> None:
        self._logger.info(
            "site_unreachable",
            url=url,
            error=error,
            **self._get_context_kwargs(),
        )


class SiteCheckRepositoryProbe(Protocol):
    """Domain probe for the site check store."""

    def store_unavailable(self, operation: str, error: str) -> None:
        ...

    def with_context(self, context: ObservationContext) -> SiteCheckRepositoryProbe:
        ...


class DefaultSiteCheckRepositoryProbe:
    """Default implementation of SiteCheckRepositoryProbe using structlog."""

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

    def with_context(
        self, context: ObservationContext
    ) -> DefaultSiteCheckRepositoryProbe:
        return DefaultSiteCheckRepositoryProbe(logger=self._logger, context=context)

    def store_unavailable(self, operation: str, error: str) -> None:
        self._logger.error(
            "site_check_store_unavailable",
            operation=operation,
            error=error,
            **self._get_context_kwargs(),
        )
