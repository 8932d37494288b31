"""SQLAlchemy ORM model for the principals table."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class PrincipalModel(Base, TimestampMixin):
    """ORM model for principals table.

    A denormalized copy of the identity provider's user directory,
    refreshed from webhook events. The provider remains authoritative.
    """

    __tablename__ = "principals"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False, default="")
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    role: Mapped[str] = mapped_column(String(32), nullable=False, default="client")

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<PrincipalModel(id={self.id}, role={self.role})>"
