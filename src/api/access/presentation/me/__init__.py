"""Routes for the current principal and their active tenant."""

from access.presentation.me.routes import router

__all__ = ["router"]
