"""Routes for tenant and access grant administration."""

from access.presentation.tenants.routes import router

__all__ = ["router"]
