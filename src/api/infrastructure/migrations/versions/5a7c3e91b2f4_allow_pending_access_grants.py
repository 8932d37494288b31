"""allow_pending_access_grants

Revision ID: 5a7c3e91b2f4
Revises: e9a0f4b62d17
Create Date: 2026-03-09 14:12:00.000000

Makes access_grants.principal_id nullable so a contact can be granted
access by email before signing up. A pending grant is unique per tenant
and email (case-insensitive) and is looked up by email when its owner
first signs in.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "5a7c3e91b2f4"
down_revision: Union[str, Sequence[str], None] = "e9a0f4b62d17"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Allow email-only grants."""
    op.alter_column(
        "access_grants",
        "principal_id",
        existing_type=sa.String(255),
        nullable=True,
    )
    op.create_index(
        "uq_access_grants_tenant_pending_email",
        "access_grants",
        ["tenant_id", sa.text("lower(email)")],
        unique=True,
        postgresql_where=sa.text("principal_id IS NULL"),
    )
    op.create_index(
        "ix_access_grants_pending_email",
        "access_grants",
        [sa.text("lower(email)")],
        postgresql_where=sa.text("principal_id IS NULL"),
    )


def downgrade() -> None:
    """Drop pending grants and require a principal again."""
    op.drop_index("ix_access_grants_pending_email", table_name="access_grants")
    op.drop_index("uq_access_grants_tenant_pending_email", table_name="access_grants")
    op.execute("DELETE FROM access_grants WHERE principal_id IS NULL")
    op.alter_column(
        "access_grants",
        "principal_id",
        existing_type=sa.String(255),
        nullable=False,
    )
