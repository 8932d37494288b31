"""Site health presentation layer."""

from site_health.presentation.routes import router

__all__ = ["router"]
