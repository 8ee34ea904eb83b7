"""Pydantic models for user account and login request/response bodies."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator

from bcrypt_password.domain.auth.credentials import normalize_user_email, validate_password_length
from bcrypt_password.domain.auth.roles import Role
from bcrypt_password.infrastructure.security.password import Password


def _check_password_length(value: object) -> object:
    if isinstance(value, str):
        validate_password_length(password=value)
    return value


# Hashed during validation; length bounds apply to non-empty plaintext only.
ValidatedPassword = Annotated[Password, BeforeValidator(_check_password_length)]


class StrictModel(BaseModel):
    """Base model with strict unknown-field rejection."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class UserCreateRequest(StrictModel):
    """HTTP request model for creating one user account."""

    email: str = Field(alias="Email", min_length=1)
    password: ValidatedPassword = Field(alias="Password", default_factory=Password)
    role: Role = Field(alias="Role", default=Role.READER)

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return normalize_user_email(email=value)


class UserResponse(StrictModel):
    """HTTP response model for user account data.

    ``password`` renders the plaintext set during this request (empty for users
    loaded from the database); the stored hash is never part of the body.
    """

    id: UUID = Field(alias="Id")
    email: str = Field(alias="Email")
    password: Password = Field(alias="Password")
    role: Role = Field(alias="Role")
    is_active: bool = Field(alias="IsActive")


class PasswordChangeRequest(StrictModel):
    """HTTP request model for replacing (or clearing) a user's password."""

    password: ValidatedPassword = Field(alias="Password")


class LoginRequest(StrictModel):
    """HTTP request model for password login."""

    email: str = Field(min_length=1)
    password: str

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return normalize_user_email(email=value)


class LoginResponse(StrictModel):
    """HTTP response model for successful login."""

    user_id: UUID
    role: Role
