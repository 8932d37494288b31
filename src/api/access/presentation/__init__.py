"""Access presentation layer, organized by aggregate.

Each package contains its own routes and models.
"""

from __future__ import annotations

from fastapi import APIRouter

from access.presentation import impersonation, me, principals, tenants, webhooks

router = APIRouter()

router.include_router(me.router)
router.include_router(impersonation.router)
router.include_router(tenants.router)
router.include_router(principals.router)
router.include_router(webhooks.router)

__all__ = ["router"]
