"""PostgreSQL implementation of IPrincipalRepository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from access.domain.aggregates import Principal
from access.domain.value_objects import PrincipalRole
from access.infrastructure.models import PrincipalModel
from access.infrastructure.observability import (
    DefaultPrincipalRepositoryProbe,
    PrincipalRepositoryProbe,
)
from access.infrastructure.store_errors import translate_store_errors
from access.ports.repositories import IPrincipalRepository


class PrincipalRepository(IPrincipalRepository):
    """Directory rows mirroring the identity provider's users."""

    def __init__(
        self,
        session: AsyncSession,
        probe: PrincipalRepositoryProbe | None = None,
    ) -> None:
        self._session = session
        self._probe = probe or DefaultPrincipalRepositoryProbe()

    @translate_store_errors
    async def save(self, principal: Principal) -> None:
        stmt = select(PrincipalModel).where(PrincipalModel.id == principal.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            model = PrincipalModel(id=principal.id)
            self._session.add(model)

        model.email = principal.email
        model.name = principal.name
        model.role = principal.role.value

        await self._session.flush()
        self._probe.principal_saved(principal.id, principal.role.value)

    @translate_store_errors
    async def get_by_id(self, principal_id: str) -> Principal | None:
        stmt = select(PrincipalModel).where(PrincipalModel.id == principal_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return Principal(
            id=model.id,
            email=model.email,
            name=model.name,
            role=PrincipalRole.from_claim(model.role),
        )
