"""Domain probe for the identity provider admin client."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class IdentityProviderProbe(Protocol):
    """Domain probe for identity provider admin API calls."""

    def admin_token_refreshed(self, expires_in: int) -> None:
        ...

    def principals_listed(self, count: int) -> None:
        ...

    def role_updated(self, principal_id: str, role: str) -> None:
        ...

    def provider_unavailable(self, operation: str, error: str) -> None:
        ...

    def with_context(self, context: ObservationContext) -> IdentityProviderProbe:
        ...


class DefaultIdentityProviderProbe:
    """Default implementation of IdentityProviderProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultIdentityProviderProbe:
        return DefaultIdentityProviderProbe(logger=self._logger, context=context)

    def admin_token_refreshed(self, expires_in: int) -> None:
        self._logger.debug(
            "identity_admin_token_refreshed",
            expires_in=expires_in,
            **self._get_context_kwargs(),
        )

    def principals_listed(self, count: int) -> None:
        self._logger.debug(
            "identity_principals_listed",
            count=count,
            **self._get_context_kwargs(),
        )

    def role_updated(self, principal_id: str, role: str) -> None:
        self._logger.info(
            "identity_role_updated",
            principal_id=principal_id,
            role=role,
            **self._get_context_kwargs(),
        )

    def provider_unavailable(self, operation: str, error: str) -> None:
        self._logger.error(
            "identity_provider_unavailable",
            operation=operation,
            error=error,
            **self._get_context_kwargs(),
        )
