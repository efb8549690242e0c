"""Main entry point for the social network service."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from social_network.api import api_router
from social_network.core.logging import configure_logging
from social_network.core.security import PasswordHasher
from social_network.core.settings import Settings, get_settings
from social_network.db.session import build_engine, build_session_factory, create_tables
from social_network.middleware import (
    ErrorHandlerMiddleware,
    RateLimitMiddleware,
    RequestLoggingMiddleware,
    validation_exception_handler,
)
from social_network.services.broadcast import BroadcastDispatcher
from social_network.services.email import EmailSender, EmailSenderProtocol
from social_network.services.rate_limit import RateLimiter
from social_network.services.tokens import TokenService

logger = logging.getLogger(__name__)

DESCRIPTION = "Social network API with posts, comments and an admin dashboard"


async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Report database failures as 500 without leaking driver details."""
    logger.error(
        "Database error: %s",
        exc,
        exc_info=True,
        extra={"path": request.url.path, "method": request.method},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Database error"},
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings: Settings = app.state.settings
    if settings.create_tables:
        create_tables(app.state.engine)
    logger.info(
        "Starting server",
        extra={"host": settings.app_host, "port": settings.app_port},
    )
    yield
    logger.info("Shutting down server")
    await app.state.broadcaster.drain()
    logger.info("Server shutdown complete")


def create_app(
    settings: Settings | None = None,
    *,
    engine: Engine | None = None,
    email_sender: EmailSenderProtocol | None = None,
) -> FastAPI:
    """Build the application and wire its services onto ``app.state``.

    Args:
        settings: Configuration to use; read from the environment when omitted.
        engine: Database engine to bind sessions to; built from
            ``settings.database_url`` when omitted.
        email_sender: Outbound mail transport; SMTP from settings when omitted.
    """
    if settings is None:
        settings = get_settings()
    if engine is None:
        engine = build_engine(settings.database_url, echo=settings.sql_debug)
    sender = email_sender if email_sender is not None else EmailSender(settings)
    limiter = RateLimiter(max_visitors=settings.rate_limit_max_visitors)

    app = FastAPI(
        title=settings.app_name,
        description=DESCRIPTION,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.token_service = TokenService(settings.secret_key, settings.jwt_algorithm)
    app.state.password_hasher = PasswordHasher(settings.bcrypt_rounds)
    app.state.rate_limiter = limiter
    app.state.email_sender = sender
    app.state.broadcaster = BroadcastDispatcher(sender)

    # Starlette runs the last-added middleware first: logging wraps recovery,
    # which wraps throttling.
    app.add_middleware(RateLimitMiddleware, limiter=limiter)
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)

    app.include_router(api_router)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint to verify the service is running."""
        return {"status": "ok"}

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint with basic information about the API."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "description": DESCRIPTION,
            "docs": "/docs",
        }

    return app


def main() -> None:
    import uvicorn

    settings = get_settings()
    configure_logging(settings)
    uvicorn.run(
        create_app(settings),
        host=settings.app_host,
        port=settings.app_port,
        timeout_graceful_shutdown=settings.shutdown_grace_seconds,
        log_config=None,
    )


if __name__ == "__main__":
    main()
