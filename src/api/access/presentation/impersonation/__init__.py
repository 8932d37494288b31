"""Routes for administrator impersonation."""

from access.presentation.impersonation.routes import router

__all__ = ["router"]
