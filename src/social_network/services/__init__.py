"""Service layer: tokens, rate limiting, email and broadcasts."""

from .broadcast import BroadcastDispatcher
from .email import EmailSender, EmailSenderProtocol
from .rate_limit import RateLimiter, VisitorRecord
from .tokens import (
    InvalidSignatureError,
    InvalidTokenError,
    MissingTokenError,
    TokenClaims,
    TokenError,
    TokenExpiredError,
    TokenService,
    UnexpectedSigningMethodError,
)

__all__ = [
    "BroadcastDispatcher",
    "EmailSender", "EmailSenderProtocol",
    "RateLimiter", "VisitorRecord",
    "InvalidSignatureError", "InvalidTokenError", "MissingTokenError", "TokenClaims",
    "TokenError", "TokenExpiredError", "TokenService", "UnexpectedSigningMethodError",
]
