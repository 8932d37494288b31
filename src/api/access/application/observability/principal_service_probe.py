"""Protocol for principal directory observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class PrincipalServiceProbe(Protocol):
    """Domain probe for principal directory operations."""

    def role_assigned(self, assigned_by: str, principal_id: str, role: str) -> None:
        ...

    def principal_synced(
        self, principal_id: str, grants_updated: int, grants_linked: int
    ) -> None:
        """Record that a webhook event refreshed a principal's directory data."""
        ...

    def with_context(self, context: ObservationContext) -> PrincipalServiceProbe:
        ...


class DefaultPrincipalServiceProbe:
    """Default implementation of PrincipalServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultPrincipalServiceProbe:
        return DefaultPrincipalServiceProbe(logger=self._logger, context=context)

    def role_assigned(self, assigned_by: str, principal_id: str, role: str) -> None:
        self._logger.info(
            "principal_role_assigned",
            assigned_by=assigned_by,
            principal_id=principal_id,
            role=role,
            **self._get_context_kwargs(),
        )

    def principal_synced(
        self, principal_id: str, grants_updated: int, grants_linked: int
    ) -> None:
        self._logger.info(
            "principal_synced",
            principal_id=principal_id,
            grants_updated=grants_updated,
            grants_linked=grants_linked,
            **self._get_context_kwargs(),
        )
