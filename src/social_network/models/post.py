"""SQLAlchemy models for posts and comments."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, Text, func
from sqlalchemy.orm import Mapped, backref, mapped_column, relationship

from social_network.db.session import Base
from social_network.models.user import User


class Post(Base):
    """Top-level text post written by a user."""

    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    author: Mapped[User] = relationship(
        User,
        lazy="joined",
        backref=backref("posts", cascade="all, delete-orphan"),
    )

    @property
    def username(self) -> str:
        return self.author.username


class Comment(Base):
    """Reply attached to a post."""

    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    author: Mapped[User] = relationship(
        User,
        lazy="joined",
        backref=backref("comments", cascade="all, delete-orphan"),
    )
    post: Mapped[Post] = relationship(
        Post,
        backref=backref("comments", cascade="all, delete-orphan"),
    )

    @property
    def username(self) -> str:
        return self.author.username
