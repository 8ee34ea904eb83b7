"""Application service for user account creation and password changes."""

from __future__ import annotations

import asyncio
from uuid import UUID

from bcrypt_password.application.dto.user_models import UserCreateRequest
from bcrypt_password.application.ports.password_hasher_port import PasswordHasherPort
from bcrypt_password.application.ports.user_repository_port import (
    UserCreateInput,
    UserRecord,
    UserRepositoryPort,
)
from bcrypt_password.domain.auth.credentials import validate_password_length
from bcrypt_password.infrastructure.security.password import Password


class UserNotFoundError(LookupError):
    """Raised when a target user cannot be found for one account action."""

    def __init__(self, *, user_id: UUID) -> None:
        super().__init__(f"user not found: {user_id}")
        self.user_id = user_id


class UserService:
    """Expose user creation and password management use-cases."""

    def __init__(
        self,
        *,
        users: UserRepositoryPort,
        password_hasher: PasswordHasherPort | None = None,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher

    async def create_user(self, *, payload: UserCreateRequest) -> UserRecord:
        """Persist a user whose password was hashed while validating the request."""

        return await self._users.create_user(
            UserCreateInput(email=payload.email, password=payload.password, role=payload.role)
        )

    async def list_users(self) -> list[UserRecord]:
        return await self._users.list_users()

    async def change_password(self, *, user_id: UUID, new_password: str) -> Password:
        """Hash ``new_password`` off the event loop and store it.

        An empty password clears the stored hash, locking the account out of
        password login. Raises ``PasswordHashingError`` for input bcrypt rejects.
        """

        validate_password_length(password=new_password)
        password = Password(hasher=self._password_hasher)
        await asyncio.to_thread(password.update, new_password)
        await self.replace_password(user_id=user_id, password=password)
        return password

    async def replace_password(self, *, user_id: UUID, password: Password) -> None:
        """Store an already-hashed password value for one user."""

        updated = await self._users.update_password(user_id=user_id, password=password)
        if not updated:
            raise UserNotFoundError(user_id=user_id)
