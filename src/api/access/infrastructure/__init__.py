"""Infrastructure adapters for the access bounded context."""
