"""create users and tickets tables

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "20261019_0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            primary_key=True,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column("username", sa.String(length=30), nullable=False),
        sa.Column("email", sa.String(length=100), nullable=True),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("first_name", sa.String(length=50), nullable=True),
        sa.Column("last_name", sa.String(length=50), nullable=True),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="user"),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.UniqueConstraint("username", name="uk_users_username"),
        sa.UniqueConstraint("email", name="uk_users_email"),
        sa.CheckConstraint(
            "role IN ('user', 'moderator', 'admin')",
            name="ck_users_role_valid",
        ),
        sa.CheckConstraint(
            "status IN ('active', 'inactive')",
            name="ck_users_status_valid",
        ),
    )

    op.create_table(
        "tickets",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            primary_key=True,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("requester", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="open"),
        sa.Column("closed_by", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("solution", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column("closed_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["requester"], ["users.id"], name="fk_tickets_requester_users"
        ),
        sa.ForeignKeyConstraint(
            ["closed_by"], ["users.id"], name="fk_tickets_closed_by_users"
        ),
        sa.CheckConstraint(
            "status IN ('open', 'inprogress', 'closed', 'reopened', 'paused', 'cancelled')",
            name="ck_tickets_status_valid",
        ),
        sa.CheckConstraint(
            "(status = 'closed' AND closed_at IS NOT NULL AND closed_by IS NOT NULL) OR "
            "(status <> 'closed' AND closed_at IS NULL AND closed_by IS NULL)",
            name="ck_tickets_closed_fields_match_status",
        ),
    )

    op.create_index("idx_tickets_status", "tickets", ["status"], unique=False)
    op.create_index("idx_tickets_requester", "tickets", ["requester"], unique=False)
    op.create_index("idx_tickets_closed_by", "tickets", ["closed_by"], unique=False)


def downgrade() -> None:
    op.drop_index("idx_tickets_closed_by", table_name="tickets")
    op.drop_index("idx_tickets_requester", table_name="tickets")
    op.drop_index("idx_tickets_status", table_name="tickets")

    op.drop_table("tickets")
    op.drop_table("users")
