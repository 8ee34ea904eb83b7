"""Port for user persistence used by account and authentication services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID

from bcrypt_password.domain.auth.roles import Role
from bcrypt_password.infrastructure.security.password import Password


class DuplicateUserEmailError(ValueError):
    """Raised when creating a user whose email is already registered."""

    def __init__(self, *, email: str) -> None:
        super().__init__(f"user already exists: {email}")
        self.email = email


@dataclass(frozen=True)
class UserRecord:
    """User persistence model.

    ``password`` is loaded from the hash column, so its plaintext is empty
    unless the record was just created from a request in this process.
    """

    user_id: UUID
    email: str
    password: Password
    role: Role
    is_active: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class UserCreateInput:
    """Payload for inserting one user with an already-hashed password."""

    email: str
    password: Password
    role: Role = Role.READER
    is_active: bool = True


class UserRepositoryPort(Protocol):
    """User repository contract."""

    async def create_user(self, payload: UserCreateInput) -> UserRecord:
        """Insert a user or raise ``DuplicateUserEmailError``."""

    async def get_by_id(self, *, user_id: UUID) -> UserRecord | None:
        """Return user by id, including inactive users."""

    async def get_by_email(self, *, email: str) -> UserRecord | None:
        """Return user by normalized email, including inactive users."""

    async def list_users(self) -> list[UserRecord]:
        """Return users ordered by creation time then email."""

    async def update_password(self, *, user_id: UUID, password: Password) -> bool:
        """Persist the password hash; return False when the user does not exist."""

    async def refresh_password(self, record: UserRecord) -> bool:
        """Reload the stored hash into ``record.password`` in place."""
