"""User-related Pydantic schemas."""

from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from social_network.core.security import MAX_PASSWORD_BYTES


def _check_password_length(v: str) -> str:
    if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return v


Password = Annotated[str, Field(min_length=1), AfterValidator(_check_password_length)]


class RegisterRequest(BaseModel):
    """Schema for account registration."""

    username: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., max_length=255)
    password: Password


class RegisteredUser(BaseModel):
    id: int
    username: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class RegisterResponse(BaseModel):
    """Registration result; no token is issued until the email is verified."""

    status: str = "success"
    user: RegisteredUser


class VerifyRequest(BaseModel):
    """Email address plus the 4-digit code mailed to it."""

    email: str
    code: int


class StatusResponse(BaseModel):
    status: str = "success"


class MessageResponse(BaseModel):
    message: str


class LoginRequest(BaseModel):
    """Schema for login submissions."""

    email: str
    password: str


class LoginResponse(BaseModel):
    """Response returned after successful login."""

    status: str = "success"
    token: str = Field(..., description="Signed identity token, sent back as a Bearer token")
    user_id: int
    is_admin: bool


class UserResponse(BaseModel):
    """Public view of an account."""

    id: int
    username: str
    email: str
    is_admin: bool

    model_config = ConfigDict(from_attributes=True)


class UserProfileResponse(BaseModel):
    username: str
    email: str
    is_admin: bool

    model_config = ConfigDict(from_attributes=True)


class ProfileUpdateRequest(BaseModel):
    """New username and password for the calling user."""

    username: str = Field(..., min_length=1, max_length=255)
    password: Password


class AdminUserUpdateRequest(BaseModel):
    """Admin edit of another account's username and email."""

    id: int = Field(..., ge=1)
    username: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=1, max_length=255)
