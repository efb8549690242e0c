"""Post and comment Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PostCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=5000)


class PostUpdate(BaseModel):
    id: int
    content: str = Field(..., min_length=1, max_length=5000)


class PostDelete(BaseModel):
    id: int


class PostResponse(BaseModel):
    """Post as shown in the feed."""

    id: int
    user_id: int
    username: str
    content: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserPostResponse(BaseModel):
    content: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CommentCreate(BaseModel):
    post_id: int
    content: str = Field(..., min_length=1, max_length=5000)


class CommentUpdate(BaseModel):
    id: int
    content: str = Field(..., min_length=1, max_length=5000)


class CommentDelete(BaseModel):
    id: int


class CommentResponse(BaseModel):
    id: int
    post_id: int
    user_id: int
    username: str
    content: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
