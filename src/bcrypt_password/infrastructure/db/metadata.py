"""SQLAlchemy metadata definitions for user account tables."""

from __future__ import annotations

import sqlalchemy as sa

from bcrypt_password.infrastructure.db.column_types import PasswordType

metadata = sa.MetaData()

users = sa.Table(
    "users",
    metadata,
    sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
    sa.Column("email", sa.Text(), nullable=False),
    sa.Column(
        "password_hash",
        PasswordType(),
        nullable=False,
        server_default=sa.text("''"),
    ),
    sa.Column("role", sa.Text(), nullable=False),
    sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
    sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.text("CURRENT_TIMESTAMP"),
    ),
    sa.Column(
        "updated_at",
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.text("CURRENT_TIMESTAMP"),
    ),
    sa.CheckConstraint("role IN ('admin', 'reader')", name="ck_users_role"),
    sa.UniqueConstraint("email", name="uq_users_email"),
)
