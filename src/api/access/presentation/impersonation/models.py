"""Pydantic models for impersonation requests and responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from access.application.value_objects import RequestPrincipal
from access.presentation.models import PrincipalResponse


class StartImpersonationRequest(BaseModel):
    """Request model for starting impersonation."""

    principal_id: str = Field(
        ..., description="Principal to impersonate", min_length=1, max_length=255
    )


class ImpersonationStatusResponse(BaseModel):
    """Current impersonation state of the browser."""

    impersonating: bool
    real: PrincipalResponse
    effective: PrincipalResponse
    started_at: datetime | None = None

    @classmethod
    def from_domain(cls, principal: RequestPrincipal) -> ImpersonationStatusResponse:
        return cls(
            impersonating=principal.is_impersonating,
            real=PrincipalResponse.from_domain(principal.real),
            effective=PrincipalResponse.from_domain(principal.effective),
            started_at=(
                principal.impersonation.started_at
                if principal.impersonation is not None
                else None
            ),
        )
