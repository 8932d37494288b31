"""Linking of grants that were added by email before their owner signed up."""

from __future__ import annotations

from access.domain.aggregates import Principal
from access.ports.repositories import IAccessGrantRepository


async def link_pending_grants(
    repository: IAccessGrantRepository, principal: Principal
) -> tuple[int, int]:
    """Attach every grant pending on the principal's email to the principal.

    Must run inside the caller's transaction. A pending grant on a tenant
    where the principal already holds a grant stays pending.

    Returns:
        (linked, skipped) counts
    """
    if not principal.email:
        return 0, 0

    linked = skipped = 0
    for grant in await repository.list_pending_for_email(principal.email):
        if await repository.get_for_pair(grant.tenant_id, principal.id) is not None:
            skipped += 1
            continue
        grant.link(principal.id)
        await repository.save(grant)
        linked += 1
    return linked, skipped
