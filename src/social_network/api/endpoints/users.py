"""User profile endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import desc

from social_network.api.dependencies import (
    CurrentUserIdDep,
    PasswordHasherDep,
    SessionDep,
    require_jwt,
)
from social_network.models import Post, User
from social_network.schemas.post import UserPostResponse
from social_network.schemas.user import (
    MessageResponse,
    ProfileUpdateRequest,
    UserProfileResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/user-profile",
    tags=["users"],
    dependencies=[Depends(require_jwt)],
)


@router.get("/data", response_model=UserProfileResponse)
async def get_user_data(
    db: SessionDep,
    user_id: int = Query(..., alias="id", description="Account to look up"),
) -> User:
    """Return the public profile of an account."""
    user = db.get(User, user_id)
    if user is None:
        logger.warning("User not found", extra={"user_id": user_id})
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    logger.info("User data retrieved successfully", extra={"user_id": user_id})
    return user


@router.post("/edit", response_model=MessageResponse)
async def update_own_profile(
    payload: ProfileUpdateRequest,
    db: SessionDep,
    hasher: PasswordHasherDep,
    user_id: CurrentUserIdDep,
) -> MessageResponse:
    """Change the caller's username and password."""
    user = db.get(User, user_id)
    if user is None:
        logger.warning("User not found for update", extra={"user_id": user_id})
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    user.username = payload.username
    user.password = await hasher.hash_async(payload.password)
    db.commit()

    logger.info(
        "User updated successfully",
        extra={"user_id": user_id, "username": payload.username},
    )
    return MessageResponse(message="User updated successfully")


@router.get("/posts", response_model=list[UserPostResponse])
async def list_user_posts(
    db: SessionDep,
    user_id: int = Query(..., alias="id", description="Author whose posts to list"),
) -> list[Post]:
    """List an author's posts, newest first."""
    posts = (
        db.query(Post)
        .filter(Post.user_id == user_id)
        .order_by(desc(Post.created_at), desc(Post.id))
        .all()
    )
    logger.info(
        "User posts retrieved successfully",
        extra={"user_id": user_id, "count": len(posts)},
    )
    return posts
