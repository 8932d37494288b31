"""Dashboard presentation layer."""

from dashboard.presentation.routes import router

__all__ = ["router"]
