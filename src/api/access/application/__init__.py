"""Application layer for the access bounded context."""
