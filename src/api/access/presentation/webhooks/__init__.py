"""Inbound identity-provider webhooks."""

from access.presentation.webhooks.routes import router

__all__ = ["router"]
