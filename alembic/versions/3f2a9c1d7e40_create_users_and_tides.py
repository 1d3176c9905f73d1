"""Create users and tides tables

Revision ID: 3f2a9c1d7e40
Revises:
Create Date: 2026-01-04 21:53:09.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f2a9c1d7e40"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("verification_token", sa.String(length=64), nullable=False),
        sa.Column("is_verified", sa.Boolean(), server_default="0", nullable=False),
        sa.Column("is_subscribed", sa.Boolean(), server_default="0", nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(
        op.f("ix_users_verification_token"), "users", ["verification_token"], unique=False
    )

    # Tide prediction cache, replaced by the sync job
    op.create_table(
        "tides",
        sa.Column("prediction_time", sa.DateTime(), nullable=False),
        sa.Column("height_ft", sa.Float(), nullable=False),
        sa.Column("tide_type", sa.String(length=4), nullable=True),
        sa.Column("last_updated", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("tide_type IN ('High', 'Low')", name="ck_tides_tide_type"),
        sa.PrimaryKeyConstraint("prediction_time"),
    )


def downgrade() -> None:
    op.drop_table("tides")
    op.drop_index(op.f("ix_users_verification_token"), table_name="users")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")
