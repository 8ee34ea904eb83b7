"""Value type holding only the bcrypt hash of a password."""

from __future__ import annotations

from bcrypt_password.application.ports.password_hasher_port import PasswordHasherPort
from bcrypt_password.domain.auth.password_errors import (
    PasswordHashingError,
    PasswordUpdateAborted,
)
from bcrypt_password.domain.storage_values import try_read_string
from bcrypt_password.infrastructure.security.password_hasher import get_default_password_hasher


class HashedPassword:
    """Stored password hash, or ``""`` when no password is set.

    The hash is only ever produced by ``update`` (which hashes a plaintext) or
    copied verbatim by ``load_from_storage``. An empty hash never verifies,
    not even against an empty candidate.

    ``update`` and ``verify`` are CPU-bound and slow on purpose; async callers
    should run them with ``asyncio.to_thread``. Instances are not thread-safe.
    """

    __slots__ = ("hashed", "_hasher")

    def __init__(self, hashed: str = "", *, hasher: PasswordHasherPort | None = None) -> None:
        self.hashed = hashed
        self._hasher = hasher

    @property
    def hasher(self) -> PasswordHasherPort:
        if self._hasher is None:
            return get_default_password_hasher()
        return self._hasher

    def update(self, plaintext: str, cost: int | None = None) -> None:
        """Replace the hash with a fresh one for ``plaintext``.

        An empty plaintext clears the password. Raises ``PasswordHashingError``
        when bcrypt rejects the input, leaving the current hash in place.
        """

        if plaintext == "":
            self.hashed = ""
            return
        self.hashed = self.hasher.hash_password(plaintext, cost=cost)

    def must_update(self, plaintext: str, cost: int | None = None) -> None:
        """Like ``update`` but aborts with ``PasswordUpdateAborted``.

        For fixtures, migrations and startup code only; never for untrusted input.
        """

        try:
            self.update(plaintext, cost)
        except PasswordHashingError as exc:
            raise PasswordUpdateAborted(str(exc)) from exc

    def verify(self, candidate: str) -> bool:
        if self.hashed == "":
            return False
        return self.hasher.verify_password(password=candidate, password_hash=self.hashed)

    def load_from_storage(self, raw: object) -> None:
        value = try_read_string(raw)
        if value is not None:
            self.hashed = value

    def to_storage_value(self) -> str:
        return self.hashed

    def is_set(self) -> bool:
        return self.hashed != ""

    def __str__(self) -> str:
        return self.hashed

    def __repr__(self) -> str:
        state = "set" if self.is_set() else "empty"
        return f"HashedPassword(<{state}>)"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HashedPassword):
            return NotImplemented
        return self.hashed == other.hashed

    __hash__ = None  # type: ignore[assignment]
