"""SQLAlchemy column types persisting password values as their hash."""

from __future__ import annotations

from typing import Any

import sqlalchemy as sa
from sqlalchemy.engine import Dialect

from bcrypt_password.infrastructure.security.hashed_password import HashedPassword
from bcrypt_password.infrastructure.security.password import Password


class HashedPasswordType(sa.types.TypeDecorator[Any]):
    """Text column storing ``HashedPassword.to_storage_value()``.

    Rows come back as a fresh value populated through ``load_from_storage``,
    so a NULL column reads as an empty (never-matching) password.
    """

    impl = sa.Text
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Dialect) -> str | None:
        if value is None:
            return None
        if not isinstance(value, HashedPassword | Password):
            raise TypeError(
                f"{type(self).__name__} binds password values, got {type(value).__name__}"
            )
        return value.to_storage_value()

    def process_result_value(self, value: Any, dialect: Dialect) -> HashedPassword:
        hashed_password = HashedPassword()
        hashed_password.load_from_storage(value)
        return hashed_password


class PasswordType(HashedPasswordType):
    """Hash column that reads back as a ``Password`` with empty plaintext."""

    cache_ok = True

    def process_result_value(  # type: ignore[override]
        self,
        value: Any,
        dialect: Dialect,
    ) -> Password:
        password = Password()
        password.load_from_storage(value)
        return password
