"""Infrastructure adapters for site health."""
