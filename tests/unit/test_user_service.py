from __future__ import annotations

from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from bcrypt_password.application.dto.user_models import UserCreateRequest
from bcrypt_password.application.ports.user_repository_port import UserCreateInput, UserRecord
from bcrypt_password.application.services.user_service import UserNotFoundError, UserService
from bcrypt_password.domain.auth.password_errors import PasswordHashingError
from bcrypt_password.domain.auth.roles import Role
from bcrypt_password.infrastructure.security.password import Password
from bcrypt_password.infrastructure.security.password_hasher import (
    BcryptPasswordHasher,
    configure_default_password_hasher,
)

FAST_HASHER = BcryptPasswordHasher(default_cost=4)


class FakeUserRepository:
    def __init__(self, *, known_ids: set[UUID] | None = None) -> None:
        self.created: list[UserCreateInput] = []
        self.stored_hashes: dict[UUID, str] = {}
        self.known_ids = known_ids or set()

    async def create_user(self, payload: UserCreateInput) -> UserRecord:
        self.created.append(payload)
        now = datetime.now(tz=UTC)
        user_id = uuid4()
        self.known_ids.add(user_id)
        self.stored_hashes[user_id] = payload.password.to_storage_value()
        return UserRecord(
            user_id=user_id,
            email=payload.email,
            password=payload.password,
            role=payload.role,
            is_active=payload.is_active,
            created_at=now,
            updated_at=now,
        )

    async def list_users(self) -> list[UserRecord]:
        return []

    async def update_password(self, *, user_id: UUID, password: Password) -> bool:
        if user_id not in self.known_ids:
            return False
        self.stored_hashes[user_id] = password.to_storage_value()
        return True


@pytest.fixture(autouse=True)
def _fast_default_hasher() -> None:
    configure_default_password_hasher(FAST_HASHER)


@pytest.mark.asyncio
async def test_create_user_persists_hash_and_keeps_plaintext_for_response() -> None:
    users = FakeUserRepository()
    service = UserService(users=users, password_hasher=FAST_HASHER)
    payload = UserCreateRequest.model_validate_json(
        '{"Email": "Reader@Example.org", "Password": "fortest"}'
    )

    record = await service.create_user(payload=payload)

    assert record.email == "reader@example.org"
    assert record.role is Role.READER
    assert record.password.plaintext == "fortest"
    stored = users.stored_hashes[record.user_id]
    assert len(stored) == 60
    assert "fortest" not in stored


@pytest.mark.asyncio
async def test_change_password_stores_new_hash() -> None:
    user_id = uuid4()
    users = FakeUserRepository(known_ids={user_id})
    service = UserService(users=users, password_hasher=FAST_HASHER)

    password = await service.change_password(user_id=user_id, new_password="new-secret")

    assert password.plaintext == "new-secret"
    stored = Password(hasher=FAST_HASHER)
    stored.load_from_storage(users.stored_hashes[user_id])
    assert stored.verify("new-secret") is True


@pytest.mark.asyncio
async def test_change_password_to_empty_clears_stored_hash() -> None:
    user_id = uuid4()
    users = FakeUserRepository(known_ids={user_id})
    service = UserService(users=users, password_hasher=FAST_HASHER)

    await service.change_password(user_id=user_id, new_password="")

    assert users.stored_hashes[user_id] == ""


@pytest.mark.asyncio
async def test_change_password_for_unknown_user_raises_not_found() -> None:
    service = UserService(users=FakeUserRepository(), password_hasher=FAST_HASHER)
    user_id = uuid4()

    with pytest.raises(UserNotFoundError) as exc_info:
        await service.change_password(user_id=user_id, new_password="new-secret")

    assert exc_info.value.user_id == user_id


@pytest.mark.asyncio
async def test_change_password_rejects_short_password_before_hashing() -> None:
    user_id = uuid4()
    users = FakeUserRepository(known_ids={user_id})
    service = UserService(users=users, password_hasher=FAST_HASHER)

    with pytest.raises(ValueError, match="6 to 72 characters"):
        await service.change_password(user_id=user_id, new_password="abc")

    assert user_id not in users.stored_hashes


@pytest.mark.asyncio
async def test_change_password_surfaces_hashing_error() -> None:
    user_id = uuid4()
    users = FakeUserRepository(known_ids={user_id})
    service = UserService(users=users, password_hasher=FAST_HASHER)

    with pytest.raises(PasswordHashingError):
        await service.change_password(user_id=user_id, new_password="é" * 40)

    assert user_id not in users.stored_hashes
