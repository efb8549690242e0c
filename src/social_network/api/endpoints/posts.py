"""Feed endpoints: users, posts and comments behind the JWT gate."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from datetime import date as date_type

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import desc

from social_network.api.dependencies import CurrentUserIdDep, SessionDep, require_jwt
from social_network.models import Comment, Post, User
from social_network.schemas.post import (
    CommentCreate,
    CommentDelete,
    CommentResponse,
    CommentUpdate,
    PostCreate,
    PostDelete,
    PostResponse,
    PostUpdate,
)
from social_network.schemas.user import StatusResponse, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/index", tags=["feed"], dependencies=[Depends(require_jwt)])


@router.get("/users", response_model=list[UserResponse])
async def list_users(db: SessionDep) -> list[User]:
    """List every account."""
    users = db.query(User).order_by(User.id).all()
    logger.info("Users fetched successfully", extra={"count": len(users)})
    return users


@router.get("/posts", response_model=list[PostResponse])
async def list_posts(
    db: SessionDep,
    keyword: str | None = Query(None, description="Case-insensitive text filter"),
    user_id: int | None = Query(None, description="Only posts by this author"),
    date: date_type | None = Query(None, description="Only posts created on this day"),
    username: str | None = Query(None, description="Case-insensitive author name filter"),
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
) -> list[Post]:
    """List posts newest first with optional filters and pagination."""
    query = db.query(Post).join(User, Post.user_id == User.id)

    if keyword:
        query = query.filter(Post.content.ilike(f"%{keyword}%"))
    if user_id is not None:
        query = query.filter(Post.user_id == user_id)
    if date is not None:
        day_start = datetime(date.year, date.month, date.day, tzinfo=UTC)
        query = query.filter(
            Post.created_at >= day_start,
            Post.created_at < day_start + timedelta(days=1),
        )
    if username:
        query = query.filter(User.username.ilike(f"%{username}%"))

    posts = (
        query.order_by(desc(Post.created_at), desc(Post.id))
        .limit(page_size)
        .offset((page - 1) * page_size)
        .all()
    )
    logger.info(
        "Posts fetched successfully",
        extra={"count": len(posts), "page": page, "page_size": page_size},
    )
    return posts


@router.post("/posts/create", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(payload: PostCreate, db: SessionDep, user_id: CurrentUserIdDep) -> Post:
    """Publish a post authored by the caller."""
    post = Post(user_id=user_id, content=payload.content)
    db.add(post)
    db.commit()
    db.refresh(post)
    logger.info("Post created successfully", extra={"post_id": post.id, "user_id": user_id})
    return post


@router.put("/posts/update", response_model=StatusResponse)
async def update_post(
    payload: PostUpdate, db: SessionDep, user_id: CurrentUserIdDep
) -> StatusResponse:
    """Edit one of the caller's own posts."""
    post = db.query(Post).filter(Post.id == payload.id, Post.user_id == user_id).first()
    if post is None:
        logger.warning(
            "Post not found or unauthorized modification attempt",
            extra={"post_id": payload.id, "user_id": user_id},
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Post not found or you don't have permission to edit it",
        )
    post.content = payload.content
    db.commit()
    logger.info("Post updated successfully", extra={"post_id": post.id, "user_id": user_id})
    return StatusResponse()


@router.delete("/posts/delete", response_model=StatusResponse)
async def delete_post(
    payload: PostDelete, db: SessionDep, user_id: CurrentUserIdDep
) -> StatusResponse:
    """Delete one of the caller's own posts along with its comments."""
    post = db.query(Post).filter(Post.id == payload.id, Post.user_id == user_id).first()
    if post is None:
        logger.warning(
            "Post not found or unauthorized deletion attempt",
            extra={"post_id": payload.id, "user_id": user_id},
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Post not found or you don't have permission to delete it",
        )
    db.delete(post)
    db.commit()
    logger.info("Post deleted successfully", extra={"post_id": payload.id, "user_id": user_id})
    return StatusResponse()


@router.get("/comments", response_model=list[CommentResponse])
async def list_comments(
    db: SessionDep,
    post_id: int | None = Query(None, description="Only comments on this post"),
) -> list[Comment]:
    """List comments oldest first."""
    query = db.query(Comment)
    if post_id is not None:
        query = query.filter(Comment.post_id == post_id)
    comments = query.order_by(Comment.created_at, Comment.id).all()
    logger.info("Comments fetched successfully", extra={"count": len(comments)})
    return comments


@router.post(
    "/comments/create", response_model=CommentResponse, status_code=status.HTTP_201_CREATED
)
async def create_comment(
    payload: CommentCreate, db: SessionDep, user_id: CurrentUserIdDep
) -> Comment:
    """Comment on an existing post as the caller."""
    if db.get(Post, payload.post_id) is None:
        logger.warning("Comment on missing post", extra={"post_id": payload.post_id})
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")

    comment = Comment(post_id=payload.post_id, user_id=user_id, content=payload.content)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    logger.info(
        "Comment created successfully",
        extra={"comment_id": comment.id, "post_id": comment.post_id, "user_id": user_id},
    )
    return comment


@router.put("/comments/update", response_model=StatusResponse)
async def update_comment(
    payload: CommentUpdate, db: SessionDep, user_id: CurrentUserIdDep
) -> StatusResponse:
    """Edit one of the caller's own comments."""
    comment = (
        db.query(Comment).filter(Comment.id == payload.id, Comment.user_id == user_id).first()
    )
    if comment is None:
        logger.warning(
            "Comment not found or unauthorized modification attempt",
            extra={"comment_id": payload.id, "user_id": user_id},
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Comment not found or you don't have permission to edit it",
        )
    comment.content = payload.content
    db.commit()
    logger.info("Comment updated successfully", extra={"comment_id": comment.id})
    return StatusResponse()


@router.delete("/comments/delete", response_model=StatusResponse)
async def delete_comment(
    payload: CommentDelete, db: SessionDep, user_id: CurrentUserIdDep
) -> StatusResponse:
    """Delete a comment.

    The comment's author may delete it, and so may the author of the post it
    belongs to.
    """
    comment = db.get(Comment, payload.id)
    if comment is None or user_id not in (comment.user_id, comment.post.user_id):
        logger.warning(
            "Comment not found or unauthorized deletion attempt",
            extra={"comment_id": payload.id, "user_id": user_id},
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Comment not found or you don't have permission to delete it",
        )
    db.delete(comment)
    db.commit()
    logger.info("Comment deleted successfully", extra={"comment_id": payload.id})
    return StatusResponse()
