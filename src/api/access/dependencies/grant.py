"""Access grant repository and service dependencies."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from access.application.services import AccessGrantService
from access.dependencies.tenant import get_tenant_repository
from access.infrastructure.access_grant_repository import AccessGrantRepository
from access.infrastructure.tenant_repository import TenantRepository
from infrastructure.database.dependencies import get_session


def get_access_grant_repository(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> AccessGrantRepository:
    return AccessGrantRepository(session=session)


def get_access_grant_service(
    grant_repository: Annotated[
        AccessGrantRepository, Depends(get_access_grant_repository)
    ],
    tenant_repository: Annotated[TenantRepository, Depends(get_tenant_repository)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> AccessGrantService:
    return AccessGrantService(
        grant_repository=grant_repository,
        tenant_repository=tenant_repository,
        session=session,
    )
