# src/momlink/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    groups_router,
    matching_router,
    messages_router,
    profiles_router,
)

__all__ = [
    "profiles_router",
    "matching_router",
    "messages_router",
    "groups_router",
]
