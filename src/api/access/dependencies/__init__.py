"""FastAPI dependency wiring for the access bounded context.

These dependencies are the sanctioned way for routes in any context to
obtain the request principal and the resolved tenant context.
"""
