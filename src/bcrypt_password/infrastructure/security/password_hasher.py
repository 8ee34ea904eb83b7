"""Bcrypt password hasher adapter."""

from __future__ import annotations

import logging

import bcrypt

from bcrypt_password.application.ports.password_hasher_port import PasswordHasherPort
from bcrypt_password.domain.auth.password_errors import PasswordHashingError

DEFAULT_COST = 10
MIN_COST = 4
MAX_COST = 31
MAX_PASSWORD_BYTES = 72

logger = logging.getLogger(__name__)


class BcryptPasswordHasher(PasswordHasherPort):
    """Password hashing adapter using bcrypt."""

    def __init__(self, *, default_cost: int = DEFAULT_COST) -> None:
        _check_cost(default_cost)
        self._default_cost = default_cost

    @property
    def default_cost(self) -> int:
        return self._default_cost

    def hash_password(self, password: str, *, cost: int | None = None) -> str:
        resolved_cost = self._default_cost if cost is None else cost
        _check_cost(resolved_cost)
        encoded = _encode_password(password)
        try:
            hashed = bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=resolved_cost))
        except ValueError as exc:
            logger.warning("password_hash_failed reason=primitive_error")
            raise PasswordHashingError(str(exc)) from exc
        return hashed.decode("utf-8")

    def verify_password(self, *, password: str, password_hash: str) -> bool:
        if not isinstance(password, str) or not isinstance(password_hash, str):
            return False
        try:
            encoded = password.encode("utf-8")
            encoded_hash = password_hash.encode("utf-8")
        except UnicodeEncodeError:
            return False
        if len(encoded) > MAX_PASSWORD_BYTES or b"\x00" in encoded:
            return False
        try:
            return bcrypt.checkpw(encoded, encoded_hash)
        except (TypeError, ValueError):
            return False


def _check_cost(cost: int) -> None:
    if isinstance(cost, bool) or not isinstance(cost, int):
        logger.warning("password_hash_failed reason=invalid_cost type=%s", type(cost).__name__)
        raise PasswordHashingError(f"cost must be an integer, got {type(cost).__name__}")
    if not MIN_COST <= cost <= MAX_COST:
        logger.warning("password_hash_failed reason=cost_out_of_range cost=%s", cost)
        raise PasswordHashingError(f"cost {cost} is outside {MIN_COST}..{MAX_COST}")


def _encode_password(password: str) -> bytes:
    if not isinstance(password, str):
        logger.warning("password_hash_failed reason=not_a_string type=%s", type(password).__name__)
        raise PasswordHashingError(f"password must be a string, got {type(password).__name__}")
    try:
        encoded = password.encode("utf-8")
    except UnicodeEncodeError as exc:
        logger.warning("password_hash_failed reason=invalid_utf8")
        raise PasswordHashingError("password is not valid UTF-8") from exc
    if len(encoded) > MAX_PASSWORD_BYTES:
        logger.warning("password_hash_failed reason=too_long bytes=%s", len(encoded))
        raise PasswordHashingError(f"password exceeds {MAX_PASSWORD_BYTES} bytes")
    if b"\x00" in encoded:
        logger.warning("password_hash_failed reason=nul_byte")
        raise PasswordHashingError("password may not contain NUL bytes")
    return encoded


_default_hasher: PasswordHasherPort = BcryptPasswordHasher()


def get_default_password_hasher() -> PasswordHasherPort:
    """Return the hasher used by password values built without an explicit one."""

    return _default_hasher


def configure_default_password_hasher(hasher: PasswordHasherPort) -> None:
    """Replace the process-wide hasher, e.g. with one using the configured cost."""

    global _default_hasher
    _default_hasher = hasher
