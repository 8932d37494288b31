"""Protocol for identity webhook observability.

Captures what happened to each delivery of the identity-provider webhook.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class WebhookProbe(Protocol):
    """Domain probe for identity webhook deliveries."""

    def secret_missing(self) -> None:
        """Record a delivery refused because no secret is configured."""
        ...

    def signature_rejected(self) -> None:
        ...

    def payload_rejected(self, reason: str) -> None:
        ...

    def event_ignored(self, event_type: str) -> None:
        ...

    def event_handled(self, event_type: str, principal_id: str) -> None:
        ...

    def sync_failed(self, event_type: str, principal_id: str, error: str) -> None:
        """Record a delivery that could not be applied to the store."""
        ...

    def with_context(self, context: ObservationContext) -> WebhookProbe:
        ...


class DefaultWebhookProbe:
    """Default implementation of WebhookProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultWebhookProbe:
        return DefaultWebhookProbe(logger=self._logger, context=context)

    def secret_missing(self) -> None:
        self._logger.error(
            "identity_webhook_secret_missing",
            **self._get_context_kwargs(),
        )

    def signature_rejected(self) -> None:
        self._logger.warning(
            "identity_webhook_signature_invalid",
            **self._get_context_kwargs(),
        )

    def payload_rejected(self, reason: str) -> None:
        self._logger.warning(
            "identity_webhook_payload_invalid",
            reason=reason,
            **self._get_context_kwargs(),
        )

    def event_ignored(self, event_type: str) -> None:
        self._logger.debug(
            "identity_webhook_ignored",
            event_type=event_type,
            **self._get_context_kwargs(),
        )

    def event_handled(self, event_type: str, principal_id: str) -> None:
        self._logger.info(
            "identity_webhook_handled",
            event_type=event_type,
            principal_id=principal_id,
            **self._get_context_kwargs(),
        )

    def sync_failed(self, event_type: str, principal_id: str, error: str) -> None:
        self._logger.error(
            "identity_webhook_sync_failed",
            event_type=event_type,
            principal_id=principal_id,
            error=error,
            **self._get_context_kwargs(),
        )
