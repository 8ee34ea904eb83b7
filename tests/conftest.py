from __future__ import annotations

from collections.abc import Iterator

import pytest

from bcrypt_password.infrastructure.security.password_hasher import (
    configure_default_password_hasher,
    get_default_password_hasher,
)


@pytest.fixture(autouse=True)
def _restore_default_password_hasher() -> Iterator[None]:
    original = get_default_password_hasher()
    yield
    configure_default_password_hasher(original)
