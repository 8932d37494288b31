"""Protocol for tenant administration observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantServiceProbe(Protocol):
    """Domain probe for tenant administration."""

    def tenant_created(self, tenant_id: str, name: str) -> None:
        ...

    def tenant_updated(self, tenant_id: str) -> None:
        ...

    def tenant_archived(self, tenant_id: str) -> None:
        ...

    def tenant_restored(self, tenant_id: str) -> None:
        ...

    def tenant_operation_failed(self, operation: str, error: str) -> None:
        ...

    def with_context(self, context: ObservationContext) -> TenantServiceProbe:
        ...


class DefaultTenantServiceProbe:
    """Default implementation of TenantServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTenantServiceProbe:
        return DefaultTenantServiceProbe(logger=self._logger, context=context)

    def tenant_created(self, tenant_id: str, name: str) -> None:
        self._logger.info(
            "tenant_created",
            tenant_id=tenant_id,
            name=name,
            **self._get_context_kwargs(),
        )

    def tenant_updated(self, tenant_id: str) -> None:
        self._logger.info(
            "tenant_updated",
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def tenant_archived(self, tenant_id: str) -> None:
        self._logger.info(
            "tenant_archived",
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def tenant_restored(self, tenant_id: str) -> None:
        self._logger.info(
            "tenant_restored",
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def tenant_operation_failed(self, operation: str, error: str) -> None:
        self._logger.error(
            "tenant_operation_failed",
            operation=operation,
            error=error,
            **self._get_context_kwargs(),
        )
