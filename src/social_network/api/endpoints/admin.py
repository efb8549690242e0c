"""Admin dashboard endpoints; every route requires the admin claim."""

from __future__ import annotations

import logging
import re
import tempfile
from datetime import UTC, datetime, timedelta
from pathlib import Path

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from sqlalchemy import func, select, union

from social_network.api.dependencies import (
    BroadcasterDep,
    SessionDep,
    SettingsDep,
    require_admin,
)
from social_network.models import Comment, Post, User
from social_network.schemas.admin import AdminStats, BroadcastResponse
from social_network.schemas.user import AdminUserUpdateRequest, MessageResponse, UserResponse
from social_network.utils.validators import is_valid_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])

ACTIVE_WINDOW = timedelta(hours=24)
_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


@router.get("/stats", response_model=AdminStats)
async def get_stats(db: SessionDep) -> AdminStats:
    """Return totals and the number of users active in the last 24 hours."""
    cutoff = datetime.now(UTC) - ACTIVE_WINDOW
    recent_authors = union(
        select(Post.user_id).where(Post.created_at > cutoff),
        select(Comment.user_id).where(Comment.created_at > cutoff),
    ).subquery()

    stats = AdminStats(
        total_users=db.scalar(select(func.count()).select_from(User)) or 0,
        total_posts=db.scalar(select(func.count()).select_from(Post)) or 0,
        total_comments=db.scalar(select(func.count()).select_from(Comment)) or 0,
        active_users_24h=db.scalar(select(func.count()).select_from(recent_authors)) or 0,
    )
    logger.info("Admin stats retrieved successfully", extra=stats.model_dump())
    return stats


@router.get("/users", response_model=list[UserResponse])
async def list_users(db: SessionDep) -> list[User]:
    users = db.query(User).order_by(User.id).all()
    logger.info("Users fetched successfully", extra={"user_count": len(users)})
    return users


@router.delete("/users/delete", response_model=MessageResponse)
async def delete_user(
    db: SessionDep,
    user_id: str | None = Query(None, alias="id"),
) -> MessageResponse:
    """Delete an account together with its posts and comments."""
    if not user_id:
        logger.warning("Missing user ID in delete request")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing user ID")
    try:
        target_id = int(user_id)
    except ValueError as err:
        logger.warning("Invalid user ID format", extra={"user_id": user_id})
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid user ID"
        ) from err

    user = db.get(User, target_id)
    if user is None:
        logger.warning("User not found for deletion", extra={"user_id": target_id})
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    db.delete(user)
    db.commit()
    logger.info("User deleted successfully", extra={"user_id": target_id})
    return MessageResponse(message="User deleted successfully")


@router.post("/users/edit", response_model=MessageResponse)
async def edit_user(payload: AdminUserUpdateRequest, db: SessionDep) -> MessageResponse:
    """Change another account's username and email."""
    if not is_valid_email(payload.email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid email")

    user = db.get(User, payload.id)
    if user is None:
        logger.warning("User not found for update", extra={"user_id": payload.id})
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    clash = (
        db.query(User.id)
        .filter(User.email == payload.email, User.id != payload.id)
        .first()
    )
    if clash is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="Email already registered"
        )

    user.username = payload.username
    user.email = payload.email
    db.commit()
    logger.info(
        "User updated successfully",
        extra={"user_id": payload.id, "username": payload.username, "email": payload.email},
    )
    return MessageResponse(message="User updated successfully")


async def _save_attachment(upload: UploadFile, max_bytes: int) -> Path:
    """Copy an uploaded file to a temporary path the broadcast task can read."""
    data = await upload.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="Attachment too large",
        )
    safe_name = _UNSAFE_FILENAME_CHARS.sub("_", Path(upload.filename or "attachment").name)
    with tempfile.NamedTemporaryFile(
        prefix="broadcast-", suffix=f"-{safe_name}", delete=False
    ) as out:
        out.write(data)
    return Path(out.name)


@router.post("/broadcast-to-selected", response_model=BroadcastResponse)
async def broadcast_to_selected(
    broadcaster: BroadcasterDep,
    settings: SettingsDep,
    subject: str = Form(..., min_length=1),
    body: str = Form(...),
    users: list[str] = Form([], alias="users[]"),
    attachment: UploadFile | None = File(None),
) -> BroadcastResponse:
    """Email the selected addresses in the background and return immediately."""
    if not users:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="No recipients selected"
        )

    attachment_path = None
    if attachment is not None and attachment.filename:
        attachment_path = await _save_attachment(attachment, settings.broadcast_max_upload_bytes)

    broadcaster.dispatch(users, subject, body, attachment_path)
    return BroadcastResponse()
