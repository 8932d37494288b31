"""Tenant repository and service dependencies."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from access.application.services import TenantService
from access.infrastructure.tenant_repository import TenantRepository
from infrastructure.database.dependencies import get_session


def get_tenant_repository(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> TenantRepository:
    return TenantRepository(session=session)


def get_tenant_service(
    tenant_repository: Annotated[TenantRepository, Depends(get_tenant_repository)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> TenantService:
    """Get TenantService instance.

    Args:
        tenant_repository: Tenant repository sharing the request session
        session: Async database session for transaction management

    Returns:
        TenantService instance
    """
    return TenantService(tenant_repository=tenant_repository, session=session)
