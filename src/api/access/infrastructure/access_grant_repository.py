"""PostgreSQL implementation of IAccessGrantRepository.

Usable grants are resolved with a join on tenants so that archiving a
tenant suspends its grants without touching the grant rows.
"""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from access.domain.aggregates import AccessGrant
from access.domain.value_objects import GrantId, TenantId
from access.infrastructure.models import AccessGrantModel, TenantModel
from access.infrastructure.observability import (
    AccessGrantRepositoryProbe,
    DefaultAccessGrantRepositoryProbe,
)
from access.infrastructure.store_errors import translate_store_errors
from access.ports.exceptions import DuplicateAccessGrantError
from access.ports.repositories import IAccessGrantRepository
from shared_kernel.tenant_context import PermissionBundle


class AccessGrantRepository(IAccessGrantRepository):
    """Repository managing PostgreSQL storage for AccessGrant aggregates."""

    def __init__(
        self,
        session: AsyncSession,
        probe: AccessGrantRepositoryProbe | None = None,
    ) -> None:
        self._session = session
        self._probe = probe or DefaultAccessGrantRepositoryProbe()

    @translate_store_errors
    async def save(self, grant: AccessGrant) -> None:
        """Insert or update a grant.

        Raises:
            DuplicateAccessGrantError: If another grant exists for the same
                tenant and principal, or for the same tenant and email while
                pending
        """
        if grant.principal_id is not None:
            existing = await self._get_pair_model(grant.tenant_id, grant.principal_id)
        else:
            existing = await self._get_pending_model(grant.tenant_id, grant.email or "")
        if existing is not None and existing.id != grant.id.value:
            raise self._duplicate(grant)

        try:
            stmt = select(AccessGrantModel).where(AccessGrantModel.id == grant.id.value)
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()

            if model is None:
                model = AccessGrantModel(
                    id=grant.id.value,
                    tenant_id=grant.tenant_id.value,
                    principal_id=grant.principal_id,
                    created_at=grant.created_at,
                )
                self._session.add(model)

            model.principal_id = grant.principal_id
            model.is_active = grant.is_active
            model.allow_dashboard = grant.permissions.dashboard
            model.allow_billing = grant.permissions.billing
            model.allow_analytics = grant.permissions.analytics
            model.allow_uptime = grant.permissions.uptime
            model.allow_support = grant.permissions.support
            model.allow_site_health = grant.permissions.site_health
            model.email = grant.email
            model.name = grant.name
            model.role_label = grant.role_label

            await self._session.flush()
        except IntegrityError as e:
            # Concurrent insert of the same pair or pending email
            if "uq_access_grants_tenant_" in str(e):
                raise self._duplicate(grant) from e
            raise

        self._probe.grant_saved(
            grant.id.value, grant.tenant_id.value, grant.principal_id
        )

    @translate_store_errors
    async def get_by_id(self, grant_id: GrantId) -> AccessGrant | None:
        stmt = select(AccessGrantModel).where(AccessGrantModel.id == grant_id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model is not None else None

    @translate_store_errors
    async def get_for_pair(
        self, tenant_id: TenantId, principal_id: str
    ) -> AccessGrant | None:
        model = await self._get_pair_model(tenant_id, principal_id)
        return self._to_domain(model) if model is not None else None

    @translate_store_errors
    async def list_usable_for_principal(self, principal_id: str) -> list[AccessGrant]:
        stmt = (
            select(AccessGrantModel)
            .join(TenantModel, TenantModel.id == AccessGrantModel.tenant_id)
            .where(
                AccessGrantModel.principal_id == principal_id,
                AccessGrantModel.is_active.is_(True),
                TenantModel.is_active.is_(True),
            )
            .order_by(AccessGrantModel.tenant_id)
        )
        result = await self._session.execute(stmt)
        grants = [self._to_domain(model) for model in result.scalars().all()]

        self._probe.usable_grants_listed(principal_id, len(grants))
        return grants

    @translate_store_errors
    async def list_for_tenant(self, tenant_id: TenantId) -> list[AccessGrant]:
        stmt = (
            select(AccessGrantModel)
            .where(AccessGrantModel.tenant_id == tenant_id.value)
            .order_by(AccessGrantModel.created_at, AccessGrantModel.id)
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    @translate_store_errors
    async def list_for_principal(self, principal_id: str) -> list[AccessGrant]:
        stmt = (
            select(AccessGrantModel)
            .where(AccessGrantModel.principal_id == principal_id)
            .order_by(AccessGrantModel.tenant_id)
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    @translate_store_errors
    async def list_pending_for_email(self, email: str) -> list[AccessGrant]:
        stmt = (
            select(AccessGrantModel)
            .where(
                AccessGrantModel.principal_id.is_(None),
                func.lower(AccessGrantModel.email) == email.strip().lower(),
            )
            .order_by(AccessGrantModel.tenant_id)
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    @translate_store_errors
    async def delete(self, grant: AccessGrant) -> bool:
        stmt = select(AccessGrantModel).where(AccessGrantModel.id == grant.id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return False

        await self._session.delete(model)
        await self._session.flush()

        self._probe.grant_deleted(grant.id.value)
        return True

    async def _get_pair_model(
        self, tenant_id: TenantId, principal_id: str
    ) -> AccessGrantModel | None:
        stmt = select(AccessGrantModel).where(
            AccessGrantModel.tenant_id == tenant_id.value,
            AccessGrantModel.principal_id == principal_id,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def _get_pending_model(
        self, tenant_id: TenantId, email: str
    ) -> AccessGrantModel | None:
        stmt = select(AccessGrantModel).where(
            AccessGrantModel.tenant_id == tenant_id.value,
            AccessGrantModel.principal_id.is_(None),
            func.lower(AccessGrantModel.email) == email.lower(),
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def _duplicate(self, grant: AccessGrant) -> DuplicateAccessGrantError:
        holder = grant.principal_id or grant.email or ""
        self._probe.duplicate_grant(grant.tenant_id.value, holder)
        return DuplicateAccessGrantError(
            f"'{holder}' already has a grant for tenant '{grant.tenant_id.value}'"
        )

    @staticmethod
    def _to_domain(model: AccessGrantModel) -> AccessGrant:
        return AccessGrant(
            id=GrantId(value=model.id),
            tenant_id=TenantId(value=model.tenant_id),
            principal_id=model.principal_id,
            is_active=model.is_active,
            permissions=PermissionBundle(
                dashboard=model.allow_dashboard,
                billing=model.allow_billing,
                analytics=model.allow_analytics,
                uptime=model.allow_uptime,
                support=model.allow_support,
                site_health=model.allow_site_health,
            ),
            email=model.email,
            name=model.name,
            role_label=model.role_label,
            created_at=model.created_at,
        )
