"""Observation context bound to domain probes.

Probes merge the context into every event they emit, so log lines carry
the request's principal, impersonator and tenant without each call site
passing them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ObservationContext:
    """Immutable context containing metadata for observability.

    Attributes:
        request_id: Unique identifier for the current request/operation.
        principal_id: Effective principal performing the operation.
        impersonator_id: Real administrator when the request is impersonated.
        tenant_id: Active tenant (if resolved).
        extra: Additional contextual metadata.

    Example:
        context = ObservationContext(principal_id="user_123", tenant_id="01H...")
        probe = DefaultTenantContextProbe().with_context(context)
    """

    request_id: str | None = None
    principal_id: str | None = None
    impersonator_id: str | None = None
    tenant_id: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging.

        Only includes non-None values to keep logs clean.
        """
        result: dict[str, Any] = {}
        if self.request_id is not None:
            result["request_id"] = self.request_id
        if self.principal_id is not None:
            result["principal_id"] = self.principal_id
        if self.impersonator_id is not None:
            result["impersonator_id"] = self.impersonator_id
        if self.tenant_id is not None:
            result["tenant_id"] = self.tenant_id
        result.update(self.extra)
        return result
