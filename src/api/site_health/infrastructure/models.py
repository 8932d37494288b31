"""SQLAlchemy ORM model for the site_checks table."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base


class SiteCheckModel(Base):
    """ORM model for site_checks table.

    One row per check. tenant_id references tenants.id with CASCADE delete.
    """

    __tablename__ = "site_checks"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    tenant_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
    )
    url: Mapped[str] = mapped_column(String(2048), nullable=False)
    status: Mapped[str] = mapped_column(String(255), nullable=False)
    http_status: Mapped[int | None] = mapped_column(Integer, nullable=True)
    response_time_ms: Mapped[int | None] = mapped_column(Integer, nullable=True)
    checked_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )

    __table_args__ = (
        Index("ix_site_checks_tenant_checked_at", "tenant_id", "checked_at"),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<SiteCheckModel(id={self.id}, tenant_id={self.tenant_id}, "
            f"status={self.status})>"
        )
