# src/momlink/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .groups import router as groups_router
from .matching import router as matching_router
from .messages import router as messages_router
from .profiles import router as profiles_router

__all__ = [
    "profiles_router",
    "matching_router",
    "messages_router",
    "groups_router",
]
