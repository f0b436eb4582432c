"""initial_schema

Revision ID: a0b1c2d3e4f5
Revises:
Create Date: 2026-10-19 10:00:00.000000

메일함 발급 서비스 초기 스키마.
- roles, users, user_roles
- emails, messages
- activation_codes, webhooks, api_keys, refresh_tokens
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "a0b1c2d3e4f5"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id() -> sa.Column:
    return sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()"))


def _user_fk(**kwargs) -> sa.Column:
    return sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), **kwargs)


def _created_at() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)


def _updated_at() -> sa.Column:
    return sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)


def upgrade() -> None:
    op.create_table(
        "roles",
        _id(),
        sa.Column("name", sa.String(50), nullable=False, unique=True),
        sa.Column("description", sa.String(255), nullable=True),
        _created_at(),
        _updated_at(),
    )

    op.create_table(
        "users",
        _id(),
        sa.Column("username", sa.String(50), nullable=False, unique=True),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("email", sa.String(255), nullable=True, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=True),
        sa.Column("enabled", sa.Boolean(), server_default=sa.true(), nullable=False),
        _created_at(),
        _updated_at(),
    )
    op.create_index("ix_users_enabled", "users", ["enabled"])

    op.create_table(
        "user_roles",
        sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("role_id", UUID(as_uuid=True), sa.ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
        _created_at(),
    )

    op.create_table(
        "emails",
        _id(),
        sa.Column("address", sa.String(255), nullable=False, unique=True),
        _user_fk(nullable=True),
        _created_at(),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("is_permanent", sa.Boolean(), server_default=sa.false(), nullable=False),
    )
    op.create_index("ix_emails_user_id", "emails", ["user_id"])
    op.create_index("ix_emails_expires_at", "emails", ["expires_at"])

    op.create_table(
        "messages",
        _id(),
        sa.Column("email_id", UUID(as_uuid=True), sa.ForeignKey("emails.id", ondelete="CASCADE"), nullable=False),
        sa.Column("from_address", sa.String(255), nullable=True),
        sa.Column("to_address", sa.String(255), nullable=True),
        sa.Column("subject", sa.String(998), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("html", sa.Text(), nullable=True),
        sa.Column("type", sa.String(20), nullable=True),
        sa.Column("received_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("sent_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_messages_email_id", "messages", ["email_id"])

    op.create_table(
        "activation_codes",
        _id(),
        sa.Column("code", sa.String(20), nullable=False, unique=True),
        sa.Column("status", sa.String(20), server_default="unused", nullable=False),
        sa.Column("note", sa.String(100), nullable=True),
        _created_at(),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("used_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "used_by_user_id", UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True,
        ),
    )
    op.create_index("ix_activation_codes_status", "activation_codes", ["status"])
    op.create_index("ix_activation_codes_expires_at", "activation_codes", ["expires_at"])

    op.create_table(
        "webhooks",
        _id(),
        _user_fk(nullable=False, unique=True),
        sa.Column("url", sa.String(2048), nullable=False),
        sa.Column("enabled", sa.Boolean(), server_default=sa.true(), nullable=False),
        _created_at(),
        _updated_at(),
    )

    op.create_table(
        "api_keys",
        _id(),
        _user_fk(nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("key_prefix", sa.String(16), nullable=False),
        sa.Column("key_hash", sa.String(255), nullable=False),
        sa.Column("enabled", sa.Boolean(), server_default=sa.true(), nullable=False),
        _created_at(),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("user_id", "name", name="uq_api_key_user_name"),
    )
    op.create_index("ix_api_keys_key_prefix", "api_keys", ["key_prefix"])

    op.create_table(
        "refresh_tokens",
        _id(),
        _user_fk(nullable=False),
        sa.Column("token", sa.String(512), nullable=False, unique=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        _created_at(),
    )
    op.create_index("ix_refresh_tokens_user_id", "refresh_tokens", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_refresh_tokens_user_id")
    op.drop_table("refresh_tokens")
    op.drop_index("ix_api_keys_key_prefix")
    op.drop_table("api_keys")
    op.drop_table("webhooks")
    op.drop_index("ix_activation_codes_expires_at")
    op.drop_index("ix_activation_codes_status")
    op.drop_table("activation_codes")
    op.drop_index("ix_messages_email_id")
    op.drop_table("messages")
    op.drop_index("ix_emails_expires_at")
    op.drop_index("ix_emails_user_id")
    op.drop_table("emails")
    op.drop_table("user_roles")
    op.drop_index("ix_users_enabled")
    op.drop_table("users")
    op.drop_table("roles")
