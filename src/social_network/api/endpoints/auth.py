"""Registration, email verification and login endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status
from sqlalchemy.exc import IntegrityError

from social_network.api.dependencies import (
    EmailSenderDep,
    PasswordHasherDep,
    SessionDep,
    TokenServiceDep,
)
from social_network.core.security import MalformedHashError
from social_network.models import PendingVerification, User
from social_network.schemas.user import (
    LoginRequest,
    LoginResponse,
    RegisteredUser,
    RegisterRequest,
    RegisterResponse,
    StatusResponse,
    VerifyRequest,
)
from social_network.utils.validators import generate_code, is_alpha, is_valid_email

logger = logging.getLogger(__name__)

router = APIRouter(tags=["authentication"])

VERIFICATION_SUBJECT = "Verification Code"


def _invalid_credentials() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid credentials",
    )


@router.post(
    "/register",
    summary="Create an account pending email verification",
    status_code=status.HTTP_201_CREATED,
    response_model=RegisterResponse,
)
async def register_user(
    payload: RegisterRequest,
    db: SessionDep,
    hasher: PasswordHasherDep,
    email_sender: EmailSenderDep,
) -> RegisterResponse:
    """Register an inactive account and mail it a verification code."""
    if not is_valid_email(payload.email) or not is_alpha(payload.username):
        logger.warning(
            "Invalid input format",
            extra={"email": payload.email, "username": payload.username},
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid input format",
        )

    if db.query(User.id).filter(User.email == payload.email).first() is not None:
        logger.warning("Email already registered", extra={"email": payload.email})
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered",
        )

    user = User(
        username=payload.username,
        email=payload.email,
        password=await hasher.hash_async(payload.password),
        is_admin=False,
        is_active=False,
    )
    code = generate_code()
    db.add(user)
    db.add(PendingVerification(email=payload.email, code=code))
    try:
        db.commit()
    except IntegrityError as err:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered",
        ) from err
    db.refresh(user)

    logger.info(
        "User registered successfully",
        extra={"user_id": user.id, "username": user.username, "email": user.email},
    )

    sent = await email_sender.send(
        user.email,
        VERIFICATION_SUBJECT,
        f"Verify your email via this 4-digit code: {code}",
    )
    if not sent:
        logger.error("Failed to send verification email", extra={"email": user.email})

    return RegisterResponse(user=RegisteredUser.model_validate(user))


@router.post(
    "/verify",
    summary="Activate an account with its emailed code",
    response_model=StatusResponse,
)
async def verify_email(payload: VerifyRequest, db: SessionDep) -> StatusResponse:
    """Check the code for `email` and activate the matching account."""
    pending = (
        db.query(PendingVerification)
        .filter(
            PendingVerification.email == payload.email,
            PendingVerification.code == payload.code,
        )
        .first()
    )
    if pending is None:
        logger.warning("Invalid verification code", extra={"email": payload.email})
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Invalid verification code",
        )

    user = db.query(User).filter(User.email == payload.email).first()
    if user is None:
        logger.warning("Verification code has no account", extra={"email": payload.email})
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Invalid verification code",
        )

    user.is_active = True
    db.query(PendingVerification).filter(PendingVerification.email == payload.email).delete()
    db.commit()

    logger.info("User verified successfully", extra={"user_id": user.id, "email": user.email})
    return StatusResponse()


@router.post(
    "/login",
    summary="Exchange email and password for a token",
    response_model=LoginResponse,
)
async def login_user(
    payload: LoginRequest,
    db: SessionDep,
    hasher: PasswordHasherDep,
    token_service: TokenServiceDep,
) -> LoginResponse:
    """Authenticate a verified account and issue a 24-hour token."""
    user = db.query(User).filter(User.email == payload.email).first()
    if user is None:
        logger.warning("Invalid credentials", extra={"email": payload.email})
        raise _invalid_credentials()

    try:
        matches = await hasher.verify_async(payload.password, user.password)
    except MalformedHashError:
        logger.error("Stored password digest is malformed", extra={"user_id": user.id})
        raise _invalid_credentials() from None
    if not matches:
        logger.warning("Invalid credentials", extra={"email": payload.email})
        raise _invalid_credentials()

    if not user.is_active:
        logger.warning("Email not verified", extra={"email": payload.email})
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email not verified",
        )

    token = token_service.issue(user.id, user.is_admin)
    logger.info(
        "User logged in successfully",
        extra={"user_id": user.id, "email": user.email, "is_admin": user.is_admin},
    )
    return LoginResponse(token=token, user_id=user.id, is_admin=user.is_admin)
