"""Admin dashboard schemas."""

from pydantic import BaseModel


class AdminStats(BaseModel):
    total_users: int
    total_posts: int
    total_comments: int
    active_users_24h: int


class BroadcastResponse(BaseModel):
    success: bool = True
    message: str = "Emails are being sent"
