"""Identity-provider webhook endpoint.

The provider signs each delivery with HMAC-SHA256 over the raw request
body using a shared secret, sent hex-encoded in ``X-Webhook-Signature``
(optionally prefixed with ``sha256=``). Only ``user.created`` and
``user.updated`` change anything; other event types are acknowledged and
ignored.
"""

from __future__ import annotations

import hashlib
import hmac
import json
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from pydantic import BaseModel, Field, ValidationError

from access.application.observability import DefaultWebhookProbe, WebhookProbe
from access.application.services import PrincipalService
from access.dependencies.principal import get_principal_service
from access.domain.aggregates import Principal
from access.domain.value_objects import PrincipalRole
from access.ports.exceptions import UpstreamUnavailableError
from infrastructure.settings import WebhookSettings, get_webhook_settings

router = APIRouter(
    prefix="/webhooks",
    tags=["webhooks"],
)

_HANDLED_EVENTS = frozenset({"user.created", "user.updated"})


class IdentityUserData(BaseModel):
    """User payload of an identity webhook event."""

    id: str = Field(..., min_length=1)
    email: str = ""
    name: str = ""
    role: str | None = None


class IdentityEvent(BaseModel):
    """Envelope of an identity webhook event."""

    type: str
    data: dict[str, Any] = Field(default_factory=dict)


class WebhookAck(BaseModel):
    received: bool = True
    handled: bool


def get_webhook_probe() -> WebhookProbe:
    return DefaultWebhookProbe()


def verify_signature(secret: str, body: bytes, signature: str | None) -> bool:
    """Check an HMAC-SHA256 signature over the raw body."""
    if not secret or not signature:
        return False
    provided = signature.removeprefix("sha256=").strip()
    expected = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return hmac.compare_digest(expected, provided)


@router.post("/identity")
async def identity_webhook(
    request: Request,
    settings: Annotated[WebhookSettings, Depends(get_webhook_settings)],
    service: Annotated[PrincipalService, Depends(get_principal_service)],
    probe: Annotated[WebhookProbe, Depends(get_webhook_probe)],
    x_webhook_signature: Annotated[
        str | None, Header(alias="X-Webhook-Signature")
    ] = None,
) -> WebhookAck:
    """Apply a user create/update event from the identity provider.

    Raises:
        HTTPException: 503 if no webhook secret is configured
        HTTPException: 401 if the signature is missing or wrong
        HTTPException: 400 if the payload is not a valid event
    """
    secret = settings.identity_secret.get_secret_value()
    if not secret:
        probe.secret_missing()
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Webhook not configured",
        )

    raw_body = await request.body()
    if not verify_signature(secret, raw_body, x_webhook_signature):
        probe.signature_rejected()
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid webhook signature",
        )

    try:
        event = IdentityEvent.model_validate(json.loads(raw_body))
    except (ValueError, ValidationError) as e:
        probe.payload_rejected("not a valid event")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Request body is not a valid event",
        ) from e

    if event.type not in _HANDLED_EVENTS:
        probe.event_ignored(event.type)
        return WebhookAck(handled=False)

    try:
        user = IdentityUserData.model_validate(event.data)
    except ValidationError as e:
        probe.payload_rejected("missing user id")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Event data is missing the user id",
        ) from e

    principal = Principal(
        id=user.id,
        email=user.email,
        name=user.name or user.email,
        role=PrincipalRole.from_claim(user.role),
    )
    try:
        await service.sync_principal(principal)
    except UpstreamUnavailableError as e:
        probe.sync_failed(event.type, user.id, str(e))
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service temporarily unavailable",
        ) from e

    probe.event_handled(event.type, user.id)
    return WebhookAck(handled=True)
