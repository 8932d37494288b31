"""SQLAlchemy ORM model for the tenants table."""

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from infrastructure.database.models import Base, TimestampMixin


class TenantModel(Base, TimestampMixin):
    """ORM model for tenants table.

    Tenants are client organizations. Archiving sets is_active to false;
    rows are only removed by direct database maintenance, which cascades
    to the tenant's grants.
    """

    __tablename__ = "tenants"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, index=True
    )
    billing_customer_ref: Mapped[str | None] = mapped_column(
        String(255), nullable=True
    )
    analytics_site_ref: Mapped[str | None] = mapped_column(String(255), nullable=True)
    uptime_monitor_ref: Mapped[str | None] = mapped_column(String(255), nullable=True)
    website_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)

    # Relationships
    grants = relationship(
        "AccessGrantModel",
        back_populates="tenant",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<TenantModel(id={self.id}, name={self.name}, "
            f"is_active={self.is_active})>"
        )
