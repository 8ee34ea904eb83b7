"""SQLAlchemy adapter for user persistence."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import cast
from uuid import UUID, uuid4

import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from bcrypt_password.application.ports.user_repository_port import (
    DuplicateUserEmailError,
    UserCreateInput,
    UserRecord,
    UserRepositoryPort,
)
from bcrypt_password.domain.auth.roles import Role
from bcrypt_password.infrastructure.db.metadata import users
from bcrypt_password.infrastructure.security.password import Password

logger = logging.getLogger(__name__)

_USER_COLUMNS = (
    users.c.id,
    users.c.email,
    users.c.password_hash,
    users.c.role,
    users.c.is_active,
    users.c.created_at,
    users.c.updated_at,
)


class SqlAlchemyUserRepository(UserRepositoryPort):
    """User repository backed by SQLAlchemy async sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create_user(self, payload: UserCreateInput) -> UserRecord:
        """Insert one user and return it with the caller's password value attached."""

        user_id = uuid4()
        async with self._session_factory() as session:
            try:
                await session.execute(
                    sa.insert(users).values(
                        id=user_id,
                        email=payload.email,
                        password_hash=payload.password,
                        role=payload.role.value,
                        is_active=payload.is_active,
                    )
                )
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                raise DuplicateUserEmailError(email=payload.email) from exc

            result = await session.execute(
                sa.select(*_USER_COLUMNS).where(users.c.id == user_id).limit(1)
            )

        row = result.mappings().one()
        logger.info("user_created user_id=%s role=%s", user_id, payload.role.value)
        # Keep the in-memory plaintext so create responses can echo it back.
        return replace(_to_user_record(row), password=payload.password)

    async def get_by_id(self, *, user_id: UUID) -> UserRecord | None:
        """Return user by id, including inactive users."""

        statement = sa.select(*_USER_COLUMNS).where(users.c.id == user_id).limit(1)
        async with self._session_factory() as session:
            result = await session.execute(statement)

        row = result.mappings().first()
        if row is None:
            return None
        return _to_user_record(row)

    async def get_by_email(self, *, email: str) -> UserRecord | None:
        """Return user by normalized email, including inactive users."""

        statement = sa.select(*_USER_COLUMNS).where(users.c.email == email).limit(1)
        async with self._session_factory() as session:
            result = await session.execute(statement)

        row = result.mappings().first()
        if row is None:
            return None
        return _to_user_record(row)

    async def list_users(self) -> list[UserRecord]:
        statement = sa.select(*_USER_COLUMNS).order_by(users.c.created_at, users.c.email)
        async with self._session_factory() as session:
            result = await session.execute(statement)

        return [_to_user_record(row) for row in result.mappings().all()]

    async def update_password(self, *, user_id: UUID, password: Password) -> bool:
        statement = (
            sa.update(users)
            .where(users.c.id == user_id)
            .values(password_hash=password, updated_at=sa.func.now())
        )
        async with self._session_factory() as session:
            result = await session.execute(statement)
            await session.commit()

        updated = result.rowcount > 0
        if updated:
            logger.info(
                "user_password_updated user_id=%s cleared=%s",
                user_id,
                not password.is_set(),
            )
        return updated

    async def refresh_password(self, record: UserRecord) -> bool:
        """Load the stored hash into the record's existing password value.

        The raw column text is read without the column type so the existing
        ``Password`` is updated in place, which also discards its plaintext.
        """

        raw_hash = sa.type_coerce(users.c.password_hash, sa.Text()).label("password_hash")
        statement = sa.select(raw_hash).where(users.c.id == record.user_id).limit(1)
        async with self._session_factory() as session:
            result = await session.execute(statement)

        row = result.first()
        if row is None:
            return False
        record.password.load_from_storage(row.password_hash)
        return True


def _to_user_record(row: sa.RowMapping) -> UserRecord:
    raw_user_id = row["id"]
    user_id = raw_user_id if isinstance(raw_user_id, UUID) else UUID(str(raw_user_id))
    return UserRecord(
        user_id=user_id,
        email=cast(str, row["email"]),
        password=cast(Password, row["password_hash"]),
        role=Role(cast(str, row["role"])),
        is_active=bool(row["is_active"]),
        created_at=cast(datetime, row["created_at"]),
        updated_at=cast(datetime, row["updated_at"]),
    )
