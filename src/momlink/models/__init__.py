# src/momlink/models/__init__.py
"""SQLAlchemy models for the MomLink application."""

from .group import Group, GroupMember, GroupMessage
from .matching import Match, Swipe
from .message import Message
from .profile import Kid, Profile, UserInterest

__all__ = [
    "Group", "GroupMember", "GroupMessage",
    "Match", "Swipe",
    "Message",
    "Kid", "Profile", "UserInterest",
]
