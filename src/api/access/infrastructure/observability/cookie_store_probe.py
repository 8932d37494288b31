"""Domain probe for signed cookie stores."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class CookieStoreProbe(Protocol):
    """Records rejected or malformed browser state."""

    def cookie_rejected(self, cookie: str, reason: str) -> None:
        """Record that a cookie was ignored (bad signature, expired, malformed)."""
        ...

    def with_context(self, context: ObservationContext) -> CookieStoreProbe:
        ...


class DefaultCookieStoreProbe:
    """Default implementation of CookieStoreProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultCookieStoreProbe:
        return DefaultCookieStoreProbe(logger=self._logger, context=context)

    def cookie_rejected(self, cookie: str, reason: str) -> None:
        self._logger.warning(
            "cookie_rejected",
            cookie=cookie,
            reason=reason,
            **self._get_context_kwargs(),
        )
