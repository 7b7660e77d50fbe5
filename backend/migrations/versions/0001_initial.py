"""Initial schema – staff accounts, tokens, guests and the audit tables

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-17

Creates users, refresh_tokens, guests, registration_sequences,
activity_logs and guest_registration_logs with their foreign keys and the
indexes the list endpoints filter on.
"""

from alembic import op
import sqlalchemy as sa

# Alembic revision identifiers
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

ROLES = (
    "admin", "manager", "staff", "user",
    "sales", "salescoordinator", "frontoffice", "housekeeping",
)


def _timestamp(name: str, index: bool = False) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        server_default=sa.func.now(),
        nullable=False,
        index=index,
    )


def upgrade() -> None:
    # -- users ----------------------------------------------------------
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("role", sa.Enum(*ROLES, name="user_role"), nullable=False, server_default="user"),
        sa.Column("department", sa.String(100), nullable=True),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("avatar", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # -- refresh_tokens -------------------------------------------------
    op.create_table(
        "refresh_tokens",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("token", sa.String(512), nullable=False, unique=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        _timestamp("created_at"),
    )

    # -- guests ---------------------------------------------------------
    op.create_table(
        "guests",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("reg_number", sa.String(32), nullable=False, unique=True),
        sa.Column("first_name", sa.String(255), nullable=False),
        sa.Column("middle_name", sa.String(255), nullable=True),
        sa.Column("last_name", sa.String(255), nullable=False),
        sa.Column("gender", sa.String(20), nullable=True),
        sa.Column("passport_no", sa.String(50), nullable=True),
        sa.Column("nationality", sa.String(100), nullable=True),
        sa.Column("birth_date", sa.String(20), nullable=True),
        sa.Column("check_out_date", sa.String(20), nullable=True),
        sa.Column("phone_no", sa.String(30), nullable=True),
        sa.Column("flight_number", sa.String(20), nullable=True),
        sa.Column("guest2_first_name", sa.String(255), nullable=True),
        sa.Column("guest2_middle_name", sa.String(255), nullable=True),
        sa.Column("guest2_last_name", sa.String(255), nullable=True),
        sa.Column("room_number", sa.String(20), nullable=True),
        sa.Column("image", sa.Text(), nullable=True),
        sa.Column("checked_in", sa.Boolean(), nullable=False, server_default=sa.false()),
        _timestamp("created_at", index=True),
    )

    op.create_table(
        "registration_sequences",
        sa.Column("name", sa.String(64), primary_key=True),
        sa.Column("last_value", sa.Integer(), nullable=False, server_default="0"),
    )

    # -- audit ----------------------------------------------------------
    op.create_table(
        "activity_logs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
            index=True,
        ),
        sa.Column("user_name", sa.String(255), nullable=False),
        sa.Column("action", sa.String(100), nullable=False, index=True),
        sa.Column("details", sa.Text(), nullable=True),
        sa.Column("ip_address", sa.String(45), nullable=True),
        sa.Column("user_agent", sa.Text(), nullable=True),
        _timestamp("created_at", index=True),
    )

    op.create_table(
        "guest_registration_logs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "guest_id",
            sa.Integer(),
            sa.ForeignKey("guests.id", ondelete="SET NULL"),
            nullable=True,
            index=True,
        ),
        sa.Column("guest_name", sa.String(255), nullable=False),
        sa.Column("reg_number", sa.String(32), nullable=False),
        sa.Column("ip_address", sa.String(45), nullable=True),
        sa.Column("user_agent", sa.Text(), nullable=True),
        sa.Column("action", sa.String(100), nullable=False, index=True),
        sa.Column("details", sa.Text(), nullable=True),
        _timestamp("created_at", index=True),
    )


def downgrade() -> None:
    op.drop_table("guest_registration_logs")
    op.drop_table("activity_logs")
    op.drop_table("registration_sequences")
    op.drop_table("guests")
    op.drop_table("refresh_tokens")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
    sa.Enum(name="user_role").drop(op.get_bind(), checkfirst=True)
