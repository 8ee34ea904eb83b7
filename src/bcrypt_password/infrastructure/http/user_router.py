"""HTTP routes for user accounts and password changes."""

from __future__ import annotations

import asyncio
import logging
from typing import TypeVar
from uuid import UUID

from fastapi import APIRouter, HTTPException, Request, Response
from pydantic import BaseModel, TypeAdapter, ValidationError

from bcrypt_password.application.dto.user_models import (
    PasswordChangeRequest,
    UserCreateRequest,
    UserResponse,
)
from bcrypt_password.application.ports.user_repository_port import (
    DuplicateUserEmailError,
    UserRecord,
)
from bcrypt_password.application.services.user_service import UserNotFoundError, UserService

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)
_USER_LIST_ADAPTER = TypeAdapter(list[UserResponse])


def build_user_router(*, user_service: UserService) -> APIRouter:
    """Build user account routes.

    Request bodies carrying a password are validated in a worker thread because
    validation hashes the plaintext.
    """

    router = APIRouter(prefix="/users", tags=["users"])

    @router.post("", status_code=201)
    async def create_user(request: Request) -> Response:
        payload = await _parse_off_loop(UserCreateRequest, await request.body())
        try:
            user = await user_service.create_user(payload=payload)
        except DuplicateUserEmailError as error:
            raise HTTPException(status_code=409, detail="email already registered") from error
        return _user_response(user, status_code=201)

    @router.get("")
    async def list_users() -> Response:
        users = await user_service.list_users()
        body = _USER_LIST_ADAPTER.dump_json(
            [_to_response_model(user) for user in users],
            by_alias=True,
        )
        return Response(content=body, media_type="application/json")

    @router.put("/{user_id}/password", status_code=204)
    async def change_password(user_id: UUID, request: Request) -> Response:
        payload = await _parse_off_loop(PasswordChangeRequest, await request.body())
        try:
            await user_service.replace_password(user_id=user_id, password=payload.password)
        except UserNotFoundError as error:
            raise HTTPException(status_code=404, detail="user not found") from error
        return Response(status_code=204)

    return router


async def _parse_off_loop(model: type[ModelT], raw_body: bytes) -> ModelT:
    try:
        return await asyncio.to_thread(model.model_validate_json, raw_body)
    except ValidationError as error:
        logger.info("request_rejected model=%s errors=%s", model.__name__, error.error_count())
        raise HTTPException(
            status_code=422,
            detail=error.errors(include_url=False, include_context=False, include_input=False),
        ) from error


def _to_response_model(user: UserRecord) -> UserResponse:
    return UserResponse(
        id=user.user_id,
        email=user.email,
        password=user.password,
        role=user.role,
        is_active=user.is_active,
    )


def _user_response(user: UserRecord, *, status_code: int) -> Response:
    return Response(
        content=_to_response_model(user).model_dump_json(by_alias=True),
        media_type="application/json",
        status_code=status_code,
    )
