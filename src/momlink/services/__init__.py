# src/momlink/services/__init__.py
"""Business logic services for the MomLink application.

Each module exposes plain functions taking a SQLAlchemy ``Session`` first;
they commit their own writes and announce them on the change feed.
"""

from . import candidates, conversations, groups, live, profiles, realtime, swipes

__all__ = [
    "candidates",
    "conversations",
    "groups",
    "live",
    "profiles",
    "realtime",
    "swipes",
]
