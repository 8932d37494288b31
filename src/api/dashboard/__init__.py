"""Client dashboard feature area.

Reads only through the resolved tenant context; every section is gated by
the matching permission flag of the principal's grant.
"""
