"""Create password_reset_request table

Revision ID: 002
Revises: 001
Create Date: 2026-10-17

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

revision: str = "002"
down_revision: str | None = "001"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "password_reset_request",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("otp_hash", sa.String(length=64), nullable=False),
        sa.Column("otp_expires_at", sa.DateTime(), nullable=False),
        sa.Column("verified_at", sa.DateTime(), nullable=True),
        sa.Column("reset_token_hash", sa.String(length=64), nullable=True),
        sa.Column("reset_token_expires_at", sa.DateTime(), nullable=True),
        sa.Column("used_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["user.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_password_reset_request_user_id"), "password_reset_request", ["user_id"], unique=False
    )
    op.create_index(
        op.f("ix_password_reset_request_reset_token_hash"),
        "password_reset_request",
        ["reset_token_hash"],
        unique=False,
    )
    op.create_index(
        "ix_password_reset_request_user_created", "password_reset_request", ["user_id", "created_at"], unique=False
    )


def downgrade() -> None:
    op.drop_index("ix_password_reset_request_user_created", table_name="password_reset_request")
    op.drop_index(op.f("ix_password_reset_request_reset_token_hash"), table_name="password_reset_request")
    op.drop_index(op.f("ix_password_reset_request_user_id"), table_name="password_reset_request")
    op.drop_table("password_reset_request")
