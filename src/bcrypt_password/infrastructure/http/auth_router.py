"""HTTP route for password login."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from bcrypt_password.application.dto.user_models import LoginRequest, LoginResponse
from bcrypt_password.application.services.auth_service import AuthOutcome, AuthService


def build_auth_router(*, auth_service: AuthService) -> APIRouter:
    """Build login route bound to the provided auth service."""

    router = APIRouter(prefix="/auth", tags=["auth"])

    @router.post("/login", response_model=LoginResponse)
    async def login(payload: LoginRequest) -> LoginResponse:
        result = await auth_service.authenticate(email=payload.email, password=payload.password)
        if result.outcome is AuthOutcome.INACTIVE_USER:
            raise HTTPException(status_code=403, detail="inactive user")
        if result.outcome is not AuthOutcome.SUCCESS or result.user is None:
            raise HTTPException(status_code=401, detail="invalid credentials")
        return LoginResponse(user_id=result.user.user_id, role=result.user.role)

    return router
