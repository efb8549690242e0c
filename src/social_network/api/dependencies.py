"""Shared API dependencies for authentication and common functionality.

Two gates protect routes: `require_jwt` admits any valid, unexpired token and
`require_admin` additionally demands the admin claim. Both expect an
``Authorization: Bearer <token>`` header. `resolve_user_id` is the non-gating
variant for handlers that need to know who is calling.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security.utils import get_authorization_scheme_param
from sqlalchemy.orm import Session

from social_network.core.security import PasswordHasher
from social_network.core.settings import Settings
from social_network.db.session import get_db
from social_network.services.broadcast import BroadcastDispatcher
from social_network.services.email import EmailSenderProtocol
from social_network.services.tokens import (
    InvalidTokenError,
    MissingTokenError,
    TokenClaims,
    TokenError,
    TokenService,
)

logger = logging.getLogger(__name__)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_email_sender(request: Request) -> EmailSenderProtocol:
    return request.app.state.email_sender


def get_broadcaster(request: Request) -> BroadcastDispatcher:
    return request.app.state.broadcaster


SettingsDep = Annotated[Settings, Depends(get_settings_dep)]
TokenServiceDep = Annotated[TokenService, Depends(get_token_service)]
PasswordHasherDep = Annotated[PasswordHasher, Depends(get_password_hasher)]
EmailSenderDep = Annotated[EmailSenderProtocol, Depends(get_email_sender)]
BroadcasterDep = Annotated[BroadcastDispatcher, Depends(get_broadcaster)]


def extract_bearer_token(authorization: str | None) -> str:
    """Return the token from an ``Authorization`` header value.

    Raises:
        MissingTokenError: If the header is absent or empty.
        InvalidTokenError: If the scheme is not ``Bearer`` or no token follows it.
    """
    if not authorization or not authorization.strip():
        raise MissingTokenError()
    scheme, token = get_authorization_scheme_param(authorization)
    if scheme.lower() != "bearer" or not token:
        raise InvalidTokenError()
    return token


def authenticate(request: Request, token_service: TokenService) -> TokenClaims:
    """Verify the caller's bearer token and return its claims."""
    token = extract_bearer_token(request.headers.get("Authorization"))
    return token_service.verify(token)


def resolve_user_id(request: Request, token_service: TokenService) -> int:
    """Return the caller's user id without deciding on an HTTP status.

    Raises:
        MissingTokenError: No token was provided.
        InvalidTokenError: The token failed verification.
    """
    return authenticate(request, token_service).subject_id


def _unauthorized(request: Request, err: TokenError) -> HTTPException:
    detail = "No token provided" if isinstance(err, MissingTokenError) else "Invalid token"
    logger.warning(
        "Rejected request: %s",
        err,
        extra={"path": request.url.path, "method": request.method},
    )
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def require_jwt(request: Request, token_service: TokenServiceDep) -> TokenClaims:
    """Gate admitting any validly signed, unexpired token."""
    try:
        return authenticate(request, token_service)
    except TokenError as err:
        raise _unauthorized(request, err) from err


def require_admin(request: Request, token_service: TokenServiceDep) -> TokenClaims:
    """Gate admitting only tokens that carry the admin claim."""
    claims = require_jwt(request, token_service)
    if not claims.is_admin:
        logger.warning(
            "Admin access required",
            extra={"path": request.url.path, "user_id": claims.subject_id},
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return claims


def get_current_user_id(request: Request, token_service: TokenServiceDep) -> int:
    """Resolve the caller's id for handlers scoped to their own data."""
    try:
        return resolve_user_id(request, token_service)
    except TokenError as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        ) from err


CurrentUserIdDep = Annotated[int, Depends(get_current_user_id)]
