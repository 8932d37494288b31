"""create site_checks table

Revision ID: e9a0f4b62d17
Revises: c27d51e0a3b8
Create Date: 2026-03-11 09:21:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "e9a0f4b62d17"
down_revision: Union[str, Sequence[str], None] = "c27d51e0a3b8"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "site_checks",
        sa.Column("id", sa.String(length=26), nullable=False),  # ULID
        sa.Column("tenant_id", sa.String(length=26), nullable=False),
        sa.Column("url", sa.String(length=2048), nullable=False),
        sa.Column("status", sa.String(length=255), nullable=False),
        sa.Column("http_status", sa.Integer(), nullable=True),
        sa.Column("response_time_ms", sa.Integer(), nullable=True),
        sa.Column("checked_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["tenant_id"],
            ["tenants.id"],
            name="fk_site_checks_tenant_id",
            ondelete="CASCADE",
        ),
    )
    op.create_index(
        "ix_site_checks_tenant_checked_at",
        "site_checks",
        ["tenant_id", "checked_at"],
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_site_checks_tenant_checked_at", table_name="site_checks")
    op.drop_table("site_checks")
