"""Access bounded context.

Owns who may act for which tenant: access grants, active-tenant selection,
administrator impersonation and the tenant context resolver built on them.
"""
