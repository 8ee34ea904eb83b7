"""Bootstrap helper for creating an initial admin account at startup."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from bcrypt_password.application.ports.password_hasher_port import PasswordHasherPort
from bcrypt_password.application.ports.user_repository_port import (
    DuplicateUserEmailError,
    UserCreateInput,
)
from bcrypt_password.domain.auth.credentials import normalize_user_email, validate_password_length
from bcrypt_password.domain.auth.roles import Role
from bcrypt_password.infrastructure.db.metadata import users
from bcrypt_password.infrastructure.db.user_repository import SqlAlchemyUserRepository
from bcrypt_password.infrastructure.security.password import Password

logger = logging.getLogger(__name__)


class AdminBootstrapConfigError(ValueError):
    """Raised when bootstrap-admin environment configuration is invalid."""


@dataclass(frozen=True)
class AdminBootstrapConfig:
    """Runtime configuration for one-time admin bootstrap."""

    email: str
    password: str


class AdminBootstrapOutcome(StrEnum):
    """Outcome states for initial admin bootstrap execution."""

    CREATED = "created"
    SKIPPED_USERS_PRESENT = "skipped_users_present"
    SKIPPED_CONCURRENT_INSERT = "skipped_concurrent_insert"


@dataclass(frozen=True)
class AdminBootstrapResult:
    """Result model for one initial-admin bootstrap attempt."""

    outcome: AdminBootstrapOutcome
    email: str


def resolve_admin_bootstrap_config(
    *,
    email: str | None,
    password: str | None,
    password_file: str | None,
) -> AdminBootstrapConfig | None:
    """Resolve bootstrap-admin config from env values or return None when disabled.

    The admin email enables the feature; exactly one password source must then
    be given, and the plaintext must satisfy the same length rules as any
    account password, except that it may not be empty.
    """

    if email is None:
        if password is not None or password_file is not None:
            raise AdminBootstrapConfigError(
                "BOOTSTRAP_ADMIN_EMAIL is required when bootstrap-admin variables are set"
            )
        return None

    try:
        normalized_email = normalize_user_email(email=email)
    except ValueError as exc:
        raise AdminBootstrapConfigError("BOOTSTRAP_ADMIN_EMAIL cannot be blank") from exc

    plaintext = _bootstrap_plaintext(password=password, password_file=password_file)
    if not plaintext.strip():
        raise AdminBootstrapConfigError("bootstrap admin password cannot be blank")
    try:
        validate_password_length(password=plaintext)
    except ValueError as exc:
        raise AdminBootstrapConfigError(f"bootstrap admin password is invalid: {exc}") from exc
    return AdminBootstrapConfig(email=normalized_email, password=plaintext)


def _bootstrap_plaintext(*, password: str | None, password_file: str | None) -> str:
    match (password, password_file):
        case (str(), None):
            return password
        case (None, str()):
            try:
                return Path(password_file).read_text(encoding="utf-8").strip()
            except OSError as exc:
                raise AdminBootstrapConfigError(
                    "failed to read BOOTSTRAP_ADMIN_PASSWORD_FILE"
                ) from exc
        case (None, None):
            raise AdminBootstrapConfigError(
                "set BOOTSTRAP_ADMIN_PASSWORD or BOOTSTRAP_ADMIN_PASSWORD_FILE "
                "when BOOTSTRAP_ADMIN_EMAIL is set"
            )
        case _:
            raise AdminBootstrapConfigError(
                "set only one of BOOTSTRAP_ADMIN_PASSWORD or BOOTSTRAP_ADMIN_PASSWORD_FILE"
            )


async def ensure_initial_admin_user(
    *,
    session_factory: async_sessionmaker[AsyncSession],
    password_hasher: PasswordHasherPort,
    config: AdminBootstrapConfig,
) -> AdminBootstrapResult:
    """Create initial `admin` user when user table is empty, otherwise skip.

    Hashing failures abort startup: the password comes from operator config,
    not from a request.
    """

    async with session_factory() as session:
        user_count = await _read_user_count(session)
    if user_count > 0:
        logger.info("admin_bootstrap_skipped reason=users_present")
        return AdminBootstrapResult(
            outcome=AdminBootstrapOutcome.SKIPPED_USERS_PRESENT,
            email=config.email,
        )

    password = Password(hasher=password_hasher)
    await asyncio.to_thread(password.must_update, config.password)

    repository = SqlAlchemyUserRepository(session_factory)
    try:
        await repository.create_user(
            UserCreateInput(email=config.email, password=password, role=Role.ADMIN)
        )
    except DuplicateUserEmailError:
        logger.info("admin_bootstrap_skipped reason=concurrent_insert")
        return AdminBootstrapResult(
            outcome=AdminBootstrapOutcome.SKIPPED_CONCURRENT_INSERT,
            email=config.email,
        )

    logger.info("admin_bootstrap_created")
    return AdminBootstrapResult(outcome=AdminBootstrapOutcome.CREATED, email=config.email)


async def _read_user_count(session: AsyncSession) -> int:
    """Return the total number of persisted users."""

    result = await session.execute(sa.select(sa.func.count()).select_from(users))
    return int(result.scalar_one())
