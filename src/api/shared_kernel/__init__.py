"""Shared kernel.

Value objects and adapters that more than one bounded context depends on:
the resolved tenant context, identity token validation and the observation
context carried by domain probes. Keep it small; anything owned by a single
context belongs in that context.
"""
