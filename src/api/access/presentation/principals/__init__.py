"""Routes for the principal directory."""

from access.presentation.principals.routes import router

__all__ = ["router"]
