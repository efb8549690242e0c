"""HTTP API for the social network service."""

from .router import api_router

__all__ = ["api_router"]
