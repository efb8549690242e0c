"""HTTP middleware: request logging, error recovery and rate limiting."""

from .error_handler import ErrorHandlerMiddleware, validation_exception_handler
from .rate_limit import RateLimitMiddleware
from .request_logging import RequestLoggingMiddleware, client_address

__all__ = [
    "ErrorHandlerMiddleware",
    "RateLimitMiddleware",
    "RequestLoggingMiddleware",
    "client_address",
    "validation_exception_handler",
]
