"""Pydantic models for principal directory requests."""

from __future__ import annotations

from pydantic import BaseModel, Field

from access.domain.value_objects import PrincipalRole


class AssignRoleRequest(BaseModel):
    """Request model for assigning a role to a principal."""

    role: PrincipalRole = Field(..., description="admin, staff or client")
