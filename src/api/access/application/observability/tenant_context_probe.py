"""Protocol for tenant context resolution observability.

Covers both the active-tenant selector and the resolver, which together
decide which tenant a request acts for.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantContextProbe(Protocol):
    """Domain probe for active-tenant selection and context resolution."""

    def context_resolved(self, principal_id: str, tenant_id: str) -> None:
        ...

    def no_grants(self, principal_id: str) -> None:
        """Record that a principal has no usable grant (unlinked account)."""
        ...

    def stale_preference_ignored(self, principal_id: str, tenant_id: str) -> None:
        """Record that the stored preference no longer matches a usable grant."""
        ...

    def preference_write_failed(
        self, principal_id: str, tenant_id: str, error: str
    ) -> None:
        ...

    def active_tenant_switched(self, principal_id: str, tenant_id: str) -> None:
        ...

    def switch_denied(self, principal_id: str, tenant_id: str) -> None:
        ...

    def with_context(self, context: ObservationContext) -> TenantContextProbe:
        ...


class DefaultTenantContextProbe:
    """Default implementation of TenantContextProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultTenantContextProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantContextProbe(logger=self._logger, context=context)

    def context_resolved(self, principal_id: str, tenant_id: str) -> None:
        self._logger.debug(
            "tenant_context_resolved",
            principal_id=principal_id,
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def no_grants(self, principal_id: str) -> None:
        self._logger.info(
            "tenant_context_no_grants",
            principal_id=principal_id,
            **self._get_context_kwargs(),
        )

    def stale_preference_ignored(self, principal_id: str, tenant_id: str) -> None:
        self._logger.info(
            "active_tenant_preference_stale",
            principal_id=principal_id,
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def preference_write_failed(
        self, principal_id: str, tenant_id: str, error: str
    ) -> None:
        self._logger.warning(
            "active_tenant_preference_write_failed",
            principal_id=principal_id,
            tenant_id=tenant_id,
            error=error,
            **self._get_context_kwargs(),
        )

    def active_tenant_switched(self, principal_id: str, tenant_id: str) -> None:
        self._logger.info(
            "active_tenant_switched",
            principal_id=principal_id,
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def switch_denied(self, principal_id: str, tenant_id: str) -> None:
        self._logger.warning(
            "active_tenant_switch_denied",
            principal_id=principal_id,
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )
