"""SQLAlchemy models for the social network."""

from .post import Comment, Post
from .user import PendingVerification, User

__all__ = [
    "Comment", "Post",
    "PendingVerification", "User",
]
