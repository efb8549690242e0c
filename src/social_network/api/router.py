"""API router wiring.

Composes the ``/api`` surface from the endpoint modules. Each sub-router
declares its own prefix, tags and access gate.
"""
from __future__ import annotations

from typing import Final

from fastapi import APIRouter

from .endpoints import admin_router, auth_router, posts_router, users_router

api_router: Final[APIRouter] = APIRouter(prefix="/api")
api_router.include_router(auth_router)
api_router.include_router(posts_router)
api_router.include_router(users_router)
api_router.include_router(admin_router)

__all__ = ["api_router"]
