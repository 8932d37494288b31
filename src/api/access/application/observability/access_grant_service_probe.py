"""Protocol for access grant service observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class AccessGrantServiceProbe(Protocol):
    """Domain probe for access grant administration."""

    def grant_added(
        self, grant_id: str, tenant_id: str, principal_id: str | None
    ) -> None:
        ...

    def grant_updated(self, grant_id: str, tenant_id: str) -> None:
        ...

    def grant_removed(self, grant_id: str, tenant_id: str) -> None:
        ...

    def grant_operation_failed(
        self, operation: str, tenant_id: str, error: str
    ) -> None:
        ...

    def pending_grants_linked(
        self, principal_id: str, linked: int, skipped: int
    ) -> None:
        """Record grants added by email that were claimed by their owner.

        ``skipped`` counts pending grants left alone because the principal
        already holds a grant on that tenant.
        """
        ...

    def with_context(self, context: ObservationContext) -> AccessGrantServiceProbe:
        ...


class DefaultAccessGrantServiceProbe:
    """Default implementation of AccessGrantServiceProbe using structlog."""

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
    ) -> DefaultAccessGrantServiceProbe:
        return DefaultAccessGrantServiceProbe(logger=self._logger, context=context)

    def grant_added(
        self, grant_id: str, tenant_id: str, principal_id: str | None
    ) -> None:
        self._logger.info(
            "access_grant_added",
            grant_id=grant_id,
            tenant_id=tenant_id,
            principal_id=principal_id,
            **self._get_context_kwargs(),
        )

    def grant_updated(self, grant_id: str, tenant_id: str) -> None:
        self._logger.info(
            "access_grant_updated",
            grant_id=grant_id,
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def grant_removed(self, grant_id: str, tenant_id: str) -> None:
        self._logger.info(
            "access_grant_removed",
            grant_id=grant_id,
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def grant_operation_failed(
        self, operation: str, tenant_id: str, error: str
    ) -> None:
        self._logger.error(
            "access_grant_operation_failed",
            operation=operation,
            tenant_id=tenant_id,
            error=error,
            **self._get_context_kwargs(),
        )

    def pending_grants_linked(
        self, principal_id: str, linked: int, skipped: int
    ) -> None:
        self._logger.info(
            "pending_access_grants_linked",
            principal_id=principal_id,
            linked=linked,
            skipped=skipped,
            **self._get_context_kwargs(),
        )
