"""api entrypoint and HTTP route wiring."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from bcrypt_password.application.services.auth_service import AuthService
from bcrypt_password.application.services.user_service import UserService
from bcrypt_password.config.settings import Settings, load_settings
from bcrypt_password.infrastructure.db.admin_bootstrap import (
    ensure_initial_admin_user,
    resolve_admin_bootstrap_config,
)
from bcrypt_password.infrastructure.db.session import create_schema, create_session_factory
from bcrypt_password.infrastructure.db.user_repository import SqlAlchemyUserRepository
from bcrypt_password.infrastructure.http.auth_router import build_auth_router
from bcrypt_password.infrastructure.http.user_router import build_user_router
from bcrypt_password.infrastructure.logging import configure_logging
from bcrypt_password.infrastructure.security.password_hasher import (
    BcryptPasswordHasher,
    configure_default_password_hasher,
)

API_HOST = "0.0.0.0"
API_PORT = 8000
logger = logging.getLogger(__name__)


def create_app(
    *,
    settings: Settings | None = None,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> FastAPI:
    """Create FastAPI app for user accounts and login."""

    if settings is None:
        settings = load_settings()
    configure_logging(level=settings.log_level)

    password_hasher = BcryptPasswordHasher(default_cost=settings.password_bcrypt_cost)
    configure_default_password_hasher(password_hasher)

    bootstrap_config = resolve_admin_bootstrap_config(
        email=settings.bootstrap_admin_email,
        password=settings.bootstrap_admin_password,
        password_file=settings.bootstrap_admin_password_file,
    )
    if session_factory is None:
        session_factory = create_session_factory(settings.database_url)
    resolved_session_factory = session_factory

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        await create_schema(resolved_session_factory)
        if bootstrap_config is not None:
            result = await ensure_initial_admin_user(
                session_factory=resolved_session_factory,
                password_hasher=password_hasher,
                config=bootstrap_config,
            )
            logger.info("admin_bootstrap_result outcome=%s", result.outcome.value)
        yield

    users = SqlAlchemyUserRepository(session_factory)
    app = FastAPI(lifespan=lifespan)
    app.include_router(build_auth_router(auth_service=AuthService(users=users)))
    app.include_router(
        build_user_router(user_service=UserService(users=users, password_hasher=password_hasher))
    )
    return app


def run_asgi_server(*, host: str = API_HOST, port: int = API_PORT) -> None:
    """Run the api as a long-lived ASGI process using application factory mode."""

    uvicorn.run(
        "apps.api.main:create_app",
        host=host,
        port=port,
        factory=True,
    )


def main() -> None:
    """Run api runtime process."""

    run_asgi_server()


if __name__ == "__main__":
    main()
