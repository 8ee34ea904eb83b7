"""Async SQLAlchemy session factory helpers."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import Session

from bcrypt_password.infrastructure.db.metadata import metadata


def create_session_factory(database_url: str) -> async_sessionmaker[AsyncSession]:
    """Create a reusable async session factory for the provided database URL."""

    engine = create_async_engine(database_url)
    return async_sessionmaker(engine, expire_on_commit=False)


async def create_schema(session_factory: async_sessionmaker[AsyncSession]) -> None:
    """Create user tables that do not exist yet."""

    async with session_factory() as session:
        await session.run_sync(_create_all)
        await session.commit()


def _create_all(session: Session) -> None:
    metadata.create_all(session.connection())
