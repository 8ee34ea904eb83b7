"""Password value exposed to JSON request/response bodies."""

from __future__ import annotations

import json
from typing import Any

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

from bcrypt_password.application.ports.password_hasher_port import PasswordHasherPort
from bcrypt_password.domain.auth.password_errors import (
    PasswordDecodeError,
    PasswordHashingError,
    PasswordUpdateAborted,
)
from bcrypt_password.infrastructure.security.hashed_password import HashedPassword


class Password:
    """Hashed password plus the plaintext it was last updated with.

    ``plaintext`` only lives in memory: it is set by ``update`` and inbound JSON,
    rendered by outbound JSON (so a create flow can echo the password back), and
    wiped by every storage load. The hash is never rendered to JSON.
    """

    __slots__ = ("hashed_password", "plaintext")

    def __init__(
        self,
        hashed_password: HashedPassword | None = None,
        *,
        hasher: PasswordHasherPort | None = None,
    ) -> None:
        if hashed_password is None:
            hashed_password = HashedPassword(hasher=hasher)
        self.hashed_password = hashed_password
        self.plaintext = ""

    @classmethod
    def from_plaintext(
        cls,
        plaintext: str,
        *,
        hasher: PasswordHasherPort | None = None,
    ) -> Password:
        password = cls(hasher=hasher)
        password.update(plaintext)
        return password

    @property
    def hashed(self) -> str:
        return self.hashed_password.hashed

    def update(self, plaintext: str, cost: int | None = None) -> None:
        self.hashed_password.update(plaintext, cost)
        self.plaintext = plaintext

    def must_update(self, plaintext: str, cost: int | None = None) -> None:
        """Abort variant of ``update`` for trusted call sites only."""

        try:
            self.update(plaintext, cost)
        except PasswordHashingError as exc:
            raise PasswordUpdateAborted(str(exc)) from exc

    def verify(self, candidate: str) -> bool:
        return self.hashed_password.verify(candidate)

    def to_json(self) -> str:
        return json.dumps(self.plaintext)

    def from_json(self, payload: str | bytes) -> None:
        """Decode a bare JSON string and hash it; ``""`` clears the password."""

        try:
            value = json.loads(payload)
        except ValueError as exc:
            raise PasswordDecodeError("password payload is not valid JSON") from exc
        if not isinstance(value, str):
            raise PasswordDecodeError(
                f"password payload must be a JSON string, got {type(value).__name__}"
            )
        self.update(value)

    def load_from_storage(self, raw: object) -> None:
        self.plaintext = ""
        self.hashed_password.load_from_storage(raw)

    def to_storage_value(self) -> str:
        return self.hashed_password.to_storage_value()

    def is_set(self) -> bool:
        return self.hashed_password.is_set()

    def __str__(self) -> str:
        return str(self.hashed_password)

    def __repr__(self) -> str:
        state = "set" if self.is_set() else "empty"
        return f"Password(<{state}>)"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Password):
            return NotImplemented
        return self.hashed_password == other.hashed_password

    __hash__ = None  # type: ignore[assignment]

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        source_type: Any,
        handler: GetCoreSchemaHandler,
    ) -> core_schema.CoreSchema:
        """Validate from a strict JSON string and serialize to the plaintext."""

        from_plaintext = core_schema.no_info_after_validator_function(
            cls.from_plaintext,
            core_schema.str_schema(strict=True),
        )
        return core_schema.json_or_python_schema(
            json_schema=from_plaintext,
            python_schema=core_schema.union_schema(
                [core_schema.is_instance_schema(cls), from_plaintext]
            ),
            serialization=core_schema.plain_serializer_function_ser_schema(
                _serialize_plaintext,
                return_schema=core_schema.str_schema(),
            ),
        )


def _serialize_plaintext(value: Password) -> str:
    return value.plaintext
