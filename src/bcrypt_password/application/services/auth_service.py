"""Application authentication service for credential verification."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import StrEnum

from bcrypt_password.application.ports.user_repository_port import UserRecord, UserRepositoryPort

logger = logging.getLogger(__name__)


class AuthOutcome(StrEnum):
    """Supported authentication outcomes."""

    SUCCESS = "success"
    INVALID_CREDENTIALS = "invalid_credentials"
    INACTIVE_USER = "inactive_user"


@dataclass(frozen=True)
class AuthResult:
    """Authentication result model."""

    outcome: AuthOutcome
    user: UserRecord | None = None


class AuthService:
    """Authenticate credentials against stored password hashes."""

    def __init__(self, *, users: UserRepositoryPort) -> None:
        self._users = users

    async def authenticate(self, *, email: str, password: str) -> AuthResult:
        """Authenticate user credentials, verifying the hash off the event loop."""

        user = await self._users.get_by_email(email=email)
        if user is None:
            logger.info("login_failed reason=unknown_user")
            return AuthResult(outcome=AuthOutcome.INVALID_CREDENTIALS, user=None)

        if not user.is_active:
            logger.info("login_blocked_inactive user_id=%s", user.user_id)
            return AuthResult(outcome=AuthOutcome.INACTIVE_USER, user=None)

        is_valid = await asyncio.to_thread(user.password.verify, password)
        if not is_valid:
            logger.info("login_failed reason=invalid_credentials user_id=%s", user.user_id)
            return AuthResult(outcome=AuthOutcome.INVALID_CREDENTIALS, user=None)

        logger.info("login_success user_id=%s role=%s", user.user_id, user.role.value)
        return AuthResult(outcome=AuthOutcome.SUCCESS, user=user)
