"""Shared normalization helpers for user credential inputs."""

from __future__ import annotations

PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 72


def normalize_user_email(*, email: str) -> str:
    """Normalize one user email and reject blank values."""

    normalized = email.strip().lower()
    if not normalized:
        raise ValueError("email cannot be blank")
    return normalized


def validate_password_length(*, password: str) -> str:
    """Reject a non-empty plaintext outside the accepted length bounds.

    An empty password is passed through: it means "no password" and is handled
    by the password value itself.
    """

    if password and not PASSWORD_MIN_LENGTH <= len(password) <= PASSWORD_MAX_LENGTH:
        raise ValueError(
            f"password must be {PASSWORD_MIN_LENGTH} to {PASSWORD_MAX_LENGTH} characters"
        )
    return password
