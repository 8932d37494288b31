"""Principal directory dependencies."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from access.application.services import PrincipalService
from access.dependencies.grant import get_access_grant_repository
from access.dependencies.identity import get_identity_provider
from access.infrastructure.access_grant_repository import AccessGrantRepository
from access.infrastructure.principal_repository import PrincipalRepository
from access.ports.identity import IIdentityProvider
from infrastructure.database.dependencies import get_session


def get_principal_repository(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> PrincipalRepository:
    return PrincipalRepository(session=session)


def get_principal_service(
    identity_provider: Annotated[IIdentityProvider, Depends(get_identity_provider)],
    principal_repository: Annotated[
        PrincipalRepository, Depends(get_principal_repository)
    ],
    grant_repository: Annotated[
        AccessGrantRepository, Depends(get_access_grant_repository)
    ],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> PrincipalService:
    return PrincipalService(
        identity_provider=identity_provider,
        principal_repository=principal_repository,
        grant_repository=grant_repository,
        session=session,
    )
