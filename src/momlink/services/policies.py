"""Access policies enforced on top of the relational store.

These mirror the store-side row policies of the hosted backend: direct
messages only flow between matched members, group chat is reserved for
active members, and group administration for admins.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from momlink.models import GroupMember, Match
from momlink.models.group import ACTIVE_ROLES, ROLE_ADMIN
from momlink.services.errors import UnauthorizedError


def canonical_pair(user_a: str, user_b: str) -> tuple[str, str]:
    """Order two identifiers so a symmetric relationship maps to one row."""
    return (user_a, user_b) if user_a < user_b else (user_b, user_a)


def find_match(db: Session, user_a: str, user_b: str) -> Match | None:
    """Return the Match between two members regardless of argument order."""
    user1_id, user2_id = canonical_pair(user_a, user_b)
    return (
        db.query(Match)
        .filter(Match.user1_id == user1_id, Match.user2_id == user2_id)
        .first()
    )


def require_match(db: Session, sender_id: str, recipient_id: str) -> Match:
    """Reject direct messages between members who are not matched."""
    match = find_match(db, sender_id, recipient_id) if sender_id != recipient_id else None
    if match is None:
        raise UnauthorizedError("Messages can only be sent to matched members")
    return match


def get_membership(db: Session, user_id: str, group_id: int) -> GroupMember | None:
    """Return the caller's membership row in a group, if any."""
    return (
        db.query(GroupMember)
        .filter(GroupMember.group_id == group_id, GroupMember.user_id == user_id)
        .first()
    )


def require_active_member(db: Session, user_id: str, group_id: int) -> GroupMember:
    """Require an admin or member role; pending requests do not count."""
    membership = get_membership(db, user_id, group_id)
    if membership is None or membership.role not in ACTIVE_ROLES:
        raise UnauthorizedError("Only group members can access the group chat")
    return membership


def require_group_admin(db: Session, user_id: str, group_id: int) -> GroupMember:
    """Require the admin role in the group."""
    membership = get_membership(db, user_id, group_id)
    if membership is None or membership.role != ROLE_ADMIN:
        raise UnauthorizedError("Only group admins can perform this action")
    return membership
