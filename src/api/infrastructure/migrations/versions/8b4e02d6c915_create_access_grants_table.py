"""create access_grants table

Revision ID: 8b4e02d6c915
Revises: 3f1c9a2b7d40
Create Date: 2026-03-02 10:40:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "8b4e02d6c915"
down_revision: Union[str, Sequence[str], None] = "3f1c9a2b7d40"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_PERMISSION_COLUMNS = (
    "allow_dashboard",
    "allow_billing",
    "allow_analytics",
    "allow_uptime",
    "allow_support",
    "allow_site_health",
)


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "access_grants",
        sa.Column("id", sa.String(length=26), nullable=False),  # ULID
        sa.Column("tenant_id", sa.String(length=26), nullable=False),
        # External identity-provider ID, no FK
        sa.Column("principal_id", sa.String(length=255), nullable=False),
        sa.Column(
            "is_active", sa.Boolean(), nullable=False, server_default=sa.true()
        ),
        *[
            sa.Column(name, sa.Boolean(), nullable=False, server_default=sa.true())
            for name in _PERMISSION_COLUMNS
        ],
        sa.Column("email", sa.String(length=320), nullable=True),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("role_label", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["tenant_id"],
            ["tenants.id"],
            name="fk_access_grants_tenant_id",
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint(
            "tenant_id", "principal_id", name="uq_access_grants_tenant_principal"
        ),
    )
    op.create_index("ix_access_grants_tenant_id", "access_grants", ["tenant_id"])
    op.create_index("ix_access_grants_principal_id", "access_grants", ["principal_id"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_access_grants_principal_id", table_name="access_grants")
    op.drop_index("ix_access_grants_tenant_id", table_name="access_grants")
    op.drop_table("access_grants")
