"""Protocol for impersonation observability.

Impersonation starts and stops are security-relevant and always logged
at info level or above.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ImpersonationProbe(Protocol):
    """Domain probe for the impersonation state machine."""

    def impersonation_started(self, impersonator_id: str, target_id: str) -> None:
        ...

    def impersonation_stopped(
        self, impersonator_id: str, target_id: str | None
    ) -> None:
        ...

    def impersonation_rejected(
        self, principal_id: str, target_id: str | None, reason: str
    ) -> None:
        ...

    def stale_impersonation_ignored(
        self, principal_id: str, impersonator_id: str
    ) -> None:
        """Record that a stored snapshot did not match the real principal."""
        ...

    def with_context(self, context: ObservationContext) -> ImpersonationProbe:
        ...


class DefaultImpersonationProbe:
    """Default implementation of ImpersonationProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultImpersonationProbe:
        """Create a new probe with observation context bound."""
        return DefaultImpersonationProbe(logger=self._logger, context=context)

    def impersonation_started(self, impersonator_id: str, target_id: str) -> None:
        self._logger.info(
            "impersonation_started",
            impersonator_id=impersonator_id,
            target_id=target_id,
            **self._get_context_kwargs(),
        )

    def impersonation_stopped(
        self, impersonator_id: str, target_id: str | None
    ) -> None:
        self._logger.info(
            "impersonation_stopped",
            impersonator_id=impersonator_id,
            target_id=target_id,
            **self._get_context_kwargs(),
        )

    def impersonation_rejected(
        self, principal_id: str, target_id: str | None, reason: str
    ) -> None:
        self._logger.warning(
            "impersonation_rejected",
            principal_id=principal_id,
            target_id=target_id,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def stale_impersonation_ignored(
        self, principal_id: str, impersonator_id: str
    ) -> None:
        self._logger.warning(
            "stale_impersonation_ignored",
            principal_id=principal_id,
            impersonator_id=impersonator_id,
            **self._get_context_kwargs(),
        )
