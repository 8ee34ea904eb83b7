"""Error types raised by password value operations."""

from __future__ import annotations


class PasswordHashingError(ValueError):
    """Raised when the hashing primitive rejects a plaintext or cost factor."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"password hashing failed: {reason}")
        self.reason = reason


class PasswordDecodeError(ValueError):
    """Raised when an inbound JSON payload is not a bare string."""


class PasswordUpdateAborted(RuntimeError):
    """Raised by ``must_update`` when hashing fails.

    Only trusted call sites (fixtures, migrations, startup bootstrap) should use
    the ``must_update`` variants. Request handlers must call ``update`` and
    handle ``PasswordHashingError`` instead.
    """
