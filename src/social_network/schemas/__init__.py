"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .admin import AdminStats, BroadcastResponse
from .post import (
    CommentCreate,
    CommentDelete,
    CommentResponse,
    CommentUpdate,
    PostCreate,
    PostDelete,
    PostResponse,
    PostUpdate,
    UserPostResponse,
)
from .user import (
    AdminUserUpdateRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    ProfileUpdateRequest,
    RegisteredUser,
    RegisterRequest,
    RegisterResponse,
    StatusResponse,
    UserProfileResponse,
    UserResponse,
    VerifyRequest,
)

__all__ = [
    "AdminStats", "BroadcastResponse",
    "CommentCreate", "CommentDelete", "CommentResponse", "CommentUpdate",
    "PostCreate", "PostDelete", "PostResponse", "PostUpdate", "UserPostResponse",
    "AdminUserUpdateRequest", "LoginRequest", "LoginResponse", "MessageResponse",
    "ProfileUpdateRequest", "RegisteredUser", "RegisterRequest", "RegisterResponse",
    "StatusResponse", "UserProfileResponse", "UserResponse", "VerifyRequest",
]
