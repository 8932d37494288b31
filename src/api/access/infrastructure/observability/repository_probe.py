"""Domain probes for access repository operations.

Following Domain-Oriented Observability patterns, these probes capture
domain-significant events of tenant, grant and principal persistence.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantRepositoryProbe(Protocol):
    """Domain probe for tenant repository operations."""

    def tenant_saved(self, tenant_id: str) -> None:
        ...

    def tenant_retrieved(self, tenant_id: str) -> None:
        ...

    def tenants_listed(self, count: int) -> None:
        ...

    def store_unavailable(self, operation: str, error: str) -> None:
        """Record that the database could not serve a request."""
        ...

    def with_context(self, context: ObservationContext) -> TenantRepositoryProbe:
        ...


class AccessGrantRepositoryProbe(Protocol):
    """Domain probe for access grant repository operations."""

    def grant_saved(
        self, grant_id: str, tenant_id: str, principal_id: str | None
    ) -> None:
        ...

    def grant_deleted(self, grant_id: str) -> None:
        ...

    def duplicate_grant(self, tenant_id: str, holder: str) -> None:
        """Record a second grant for the same principal (or pending email)."""
        ...

    def usable_grants_listed(self, principal_id: str, count: int) -> None:
        ...

    def store_unavailable(self, operation: str, error: str) -> None:
        ...

    def with_context(self, context: ObservationContext) -> AccessGrantRepositoryProbe:
        ...


class PrincipalRepositoryProbe(Protocol):
    """Domain probe for the principal directory."""

    def principal_saved(self, principal_id: str, role: str) -> None:
        ...

    def store_unavailable(self, operation: str, error: str) -> None:
        ...

    def with_context(self, context: ObservationContext) -> PrincipalRepositoryProbe:
        ...


class DefaultTenantRepositoryProbe:
    """Default implementation of TenantRepositoryProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTenantRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantRepositoryProbe(logger=self._logger, context=context)

    def tenant_saved(self, tenant_id: str) -> None:
        self._logger.info(
            "tenant_saved",
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def tenant_retrieved(self, tenant_id: str) -> None:
        self._logger.debug(
            "tenant_retrieved",
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def tenants_listed(self, count: int) -> None:
        self._logger.debug(
            "tenants_listed",
            count=count,
            **self._get_context_kwargs(),
        )

    def store_unavailable(self, operation: str, error: str) -> None:
        self._logger.error(
            "tenant_store_unavailable",
            operation=operation,
            error=error,
            **self._get_context_kwargs(),
        )


class DefaultAccessGrantRepositoryProbe:
    """Default implementation of AccessGrantRepositoryProbe using structlog."""

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

    def with_context(
        self, context: ObservationContext
    ) -> DefaultAccessGrantRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultAccessGrantRepositoryProbe(logger=self._logger, context=context)

    def grant_saved(
        self, grant_id: str, tenant_id: str, principal_id: str | None
    ) -> None:
        self._logger.info(
            "access_grant_saved",
            grant_id=grant_id,
            tenant_id=tenant_id,
            principal_id=principal_id,
            **self._get_context_kwargs(),
        )

    def grant_deleted(self, grant_id: str) -> None:
        self._logger.info(
            "access_grant_deleted",
            grant_id=grant_id,
            **self._get_context_kwargs(),
        )

    def duplicate_grant(self, tenant_id: str, holder: str) -> None:
        self._logger.warning(
            "duplicate_access_grant",
            tenant_id=tenant_id,
            holder=holder,
            **self._get_context_kwargs(),
        )

    def usable_grants_listed(self, principal_id: str, count: int) -> None:
        self._logger.debug(
            "usable_grants_listed",
            principal_id=principal_id,
            count=count,
            **self._get_context_kwargs(),
        )

    def store_unavailable(self, operation: str, error: str) -> None:
        self._logger.error(
            "access_grant_store_unavailable",
            operation=operation,
            error=error,
            **self._get_context_kwargs(),
        )


class DefaultPrincipalRepositoryProbe:
    """Default implementation of PrincipalRepositoryProbe using structlog."""

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
    ) -> DefaultPrincipalRepositoryProbe:
        return DefaultPrincipalRepositoryProbe(logger=self._logger, context=context)

    def principal_saved(self, principal_id: str, role: str) -> None:
        self._logger.info(
            "principal_saved",
            principal_id=principal_id,
            role=role,
            **self._get_context_kwargs(),
        )

    def store_unavailable(self, operation: str, error: str) -> None:
        self._logger.error(
            "principal_store_unavailable",
            operation=operation,
            error=error,
            **self._get_context_kwargs(),
        )
