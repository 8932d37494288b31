"""SQLAlchemy ORM model for the access_grants table."""

from sqlalchemy import Boolean, ForeignKey, Index, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from infrastructure.database.models import Base, TimestampMixin


class AccessGrantModel(Base, TimestampMixin):
    """ORM model for access_grants table.

    Notes:
    - principal_id is VARCHAR(255) to hold external identity-provider IDs;
      there is no foreign key because principals live in the provider.
      It is NULL for a grant still pending on its email
    - tenant_id references tenants.id with CASCADE delete
    - (tenant_id, principal_id) is unique: one grant per pair; pending
      grants are unique per (tenant_id, lower(email))
    - each permission flag is its own column
    """

    __tablename__ = "access_grants"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    tenant_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    principal_id: Mapped[str | None] = mapped_column(
        String(255), nullable=True, index=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    allow_dashboard: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    allow_billing: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    allow_analytics: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    allow_uptime: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    allow_support: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    allow_site_health: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )

    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    role_label: Mapped[str | None] = mapped_column(String(255), nullable=True)

    tenant = relationship("TenantModel", back_populates="grants")

    __table_args__ = (
        UniqueConstraint(
            "tenant_id",
            "principal_id",
            name="uq_access_grants_tenant_principal",
        ),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<AccessGrantModel(id={self.id}, tenant_id={self.tenant_id}, "
            f"principal_id={self.principal_id}, is_active={self.is_active})>"
        )


Index(
    "uq_access_grants_tenant_pending_email",
    AccessGrantModel.tenant_id,
    func.lower(AccessGrantModel.email),
    unique=True,
    postgresql_where=AccessGrantModel.principal_id.is_(None),
)
Index(
    "ix_access_grants_pending_email",
    func.lower(AccessGrantModel.email),
    postgresql_where=AccessGrantModel.principal_id.is_(None),
)
