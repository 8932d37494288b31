"""Ports (interfaces) for the access bounded context."""
