"""Group membership and the group message gateway.

Joining is idempotent and, unless approval is switched on, makes the caller
a member straight away. Reading and posting in a group chat require an
active role (admin or member); soft-deleted messages never leave this module.
"""

from __future__ import annotations

import logging

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from momlink.core.settings import settings
from momlink.db.time import utcnow
from momlink.models import Group, GroupMember, GroupMessage, Profile
from momlink.models.group import (
    ACTIVE_ROLES,
    GROUP_TYPE_INTEREST_BASED,
    GROUP_TYPE_SEASON_OF_LIFE,
    ROLE_ADMIN,
    ROLE_MEMBER,
    ROLE_PENDING,
)
from momlink.schemas.group import GroupCreate, GroupMessageView, GroupWithMembership, SenderSummary
from momlink.services.errors import NotFoundError, store_call
from momlink.services.policies import get_membership, require_active_member, require_group_admin
from momlink.services.realtime import ChangeEvent, commit_and_publish, event_for
from momlink.services.validation import check_content

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_GROUPS",
    "approve_member",
    "create_group",
    "get_group",
    "join_group",
    "leave_group",
    "list_group_messages",
    "list_groups",
    "seed_default_groups",
    "send_group_message",
    "soft_delete_group_message",
]

DEFAULT_GROUPS: tuple[dict[str, object], ...] = (
    {"name": "Expecting Moms", "description": "For moms-to-be to connect and share the journey",
     "group_type": GROUP_TYPE_SEASON_OF_LIFE, "category": "Expecting"},
    {"name": "Newborn (0-1yr)", "description": "Navigate the newborn phase together",
     "group_type": GROUP_TYPE_SEASON_OF_LIFE, "category": "Newborn", "min_age": 0, "max_age": 1},
    {"name": "Toddler (1-3yr)", "description": "Toddler tips, tantrums, and triumphs",
     "group_type": GROUP_TYPE_SEASON_OF_LIFE, "category": "Toddler", "min_age": 1, "max_age": 3},
    {"name": "Preschool (3-5yr)", "description": "Preschool prep and playdate planning",
     "group_type": GROUP_TYPE_SEASON_OF_LIFE, "category": "Preschool", "min_age": 3, "max_age": 5},
    {"name": "School Age (5-12yr)", "description": "Elementary and middle school years",
     "group_type": GROUP_TYPE_SEASON_OF_LIFE, "category": "School Age", "min_age": 5, "max_age": 12},
    {"name": "Teens (13-18yr)", "description": "Surviving and thriving through the teen years",
     "group_type": GROUP_TYPE_SEASON_OF_LIFE, "category": "Teens", "min_age": 13, "max_age": 18},
    {"name": "Grown Kids (18+)", "description": "Empty nest and adult children",
     "group_type": GROUP_TYPE_SEASON_OF_LIFE, "category": "Grown Kids", "min_age": 18},
    {"name": "Working Moms", "description": "Balancing career and motherhood",
     "group_type": GROUP_TYPE_INTEREST_BASED, "category": "Working Moms", "interest": "working_mom"},
    {"name": "Stay-at-Home Moms", "description": "Full-time parenting community",
     "group_type": GROUP_TYPE_INTEREST_BASED, "category": "Stay-at-Home Moms",
     "interest": "stay_at_home"},
    {"name": "Homeschooling Families", "description": "Resources and support for homeschoolers",
     "group_type": GROUP_TYPE_INTEREST_BASED, "category": "Homeschooling",
     "interest": "homeschooling"},
    {"name": "Single Parents", "description": "Support network for single moms and dads",
     "group_type": GROUP_TYPE_INTEREST_BASED, "category": "Single Parents",
     "interest": "single_parent"},
    {"name": "Fitness & Wellness", "description": "Health-focused moms",
     "group_type": GROUP_TYPE_INTEREST_BASED, "category": "Fitness & Wellness",
     "interest": "fitness"},
    {"name": "Arts & Crafts", "description": "Creative projects and DIY ideas",
     "group_type": GROUP_TYPE_INTEREST_BASED, "category": "Arts & Crafts",
     "interest": "arts_crafts"},
)


def _sender_summary(profile: Profile | None) -> SenderSummary:
    if profile is None:
        return SenderSummary(name=None, profile_photo_url=None)
    return SenderSummary(name=profile.name, profile_photo_url=profile.profile_photo_url)


def _to_view(message: GroupMessage, sender: Profile | None) -> GroupMessageView:
    return GroupMessageView(
        id=message.id,
        group_id=message.group_id,
        sender_id=message.sender_id,
        content=message.content,
        created_at=message.created_at,
        sender=_sender_summary(sender),
    )


@store_call
def get_group(db: Session, group_id: int) -> Group:
    """Return a group or raise NotFoundError."""
    group = db.get(Group, group_id)
    if group is None:
        raise NotFoundError("Group not found")
    return group


@store_call
def list_groups(
    db: Session,
    user_id: str,
    city_filter: str | None = None,
) -> list[GroupWithMembership]:
    """List groups annotated with the caller's membership.

    With ``city_filter`` only groups in that city and groups without a city
    are returned. Any membership row, pending included, counts as
    ``is_member``; ``member_count`` only counts admins and members.
    """
    query = db.query(Group)
    if city_filter:
        query = query.filter(or_(Group.city == city_filter, Group.city.is_(None)))
    groups = query.order_by(Group.created_at, Group.id).all()
    if not groups:
        return []

    joined = {
        row.group_id
        for row in db.query(GroupMember.group_id).filter(GroupMember.user_id == user_id).all()
    }
    counts: dict[int, int] = dict(
        db.query(GroupMember.group_id, func.count(GroupMember.id))
        .filter(GroupMember.role.in_(ACTIVE_ROLES))
        .group_by(GroupMember.group_id)
        .all()
    )

    return [
        GroupWithMembership.model_validate(group).model_copy(
            update={"member_count": counts.get(group.id, 0), "is_member": group.id in joined}
        )
        for group in groups
    ]


@store_call
def create_group(db: Session, creator_id: str, data: GroupCreate) -> Group:
    """Create a group; the creator becomes its admin."""
    if db.get(Profile, creator_id) is None:
        raise NotFoundError("Profile not found")

    group = Group(
        name=data.name,
        description=data.description,
        group_type=data.group_type,
        category=data.category,
        city=data.city,
        min_age=data.min_age,
        max_age=data.max_age,
        interest=data.interest,
        cover_photo_url=data.cover_photo_url,
        created_by=creator_id,
    )
    db.add(group)
    db.flush()
    admin = GroupMember(group_id=group.id, user_id=creator_id, role=ROLE_ADMIN)
    db.add(admin)
    db.flush()
    commit_and_publish(db, [event_for(group, "insert"), event_for(admin, "insert")])
    logger.info("Group %d (%s) created by %s", group.id, group.name, creator_id)
    return group


@store_call
def join_group(db: Session, user_id: str, group_id: int) -> GroupMember:
    """Add the caller to a group. Joining twice returns the existing membership."""
    get_group(db, group_id)
    if db.get(Profile, user_id) is None:
        raise NotFoundError("Profile not found")

    existing = get_membership(db, user_id, group_id)
    if existing is not None:
        logger.debug("User %s already in group %d as %s", user_id, group_id, existing.role)
        return existing

    role = ROLE_PENDING if settings.group_join_requires_approval else ROLE_MEMBER
    membership = GroupMember(group_id=group_id, user_id=user_id, role=role)
    try:
        with db.begin_nested():
            db.add(membership)
    except IntegrityError:
        raced = get_membership(db, user_id, group_id)
        if raced is None:
            raise
        return raced

    commit_and_publish(db, [event_for(membership, "insert")])
    logger.info("User %s joined group %d as %s", user_id, group_id, role)
    return membership


@store_call
def leave_group(db: Session, user_id: str, group_id: int) -> bool:
    """Remove the caller's membership.

    Returns:
        True if a membership was removed, False if there was none.
    """
    membership = get_membership(db, user_id, group_id)
    if membership is None:
        return False

    event = event_for(membership, "delete")
    db.delete(membership)
    db.flush()
    commit_and_publish(db, [event])
    logger.info("User %s left group %d", user_id, group_id)
    return True


@store_call
def approve_member(db: Session, admin_id: str, group_id: int, user_id: str) -> GroupMember:
    """Promote a pending join request to a full membership (admins only)."""
    require_group_admin(db, admin_id, group_id)
    membership = get_membership(db, user_id, group_id)
    if membership is None:
        raise NotFoundError("Membership request not found")

    if membership.role == ROLE_PENDING:
        membership.role = ROLE_MEMBER
        db.flush()
        commit_and_publish(db, [event_for(membership, "update")])
        logger.info("User %s approved into group %d by %s", user_id, group_id, admin_id)
    return membership


@store_call
def send_group_message(
    db: Session,
    user_id: str,
    group_id: int,
    content: str,
) -> GroupMessageView:
    """Post to a group chat and return the message with sender display fields.

    Raises:
        ValidationError: If the content is empty or longer than the limit
        NotFoundError: If the group does not exist
        UnauthorizedError: If the caller is not an active member
    """
    check_content(content)
    get_group(db, group_id)
    require_active_member(db, user_id, group_id)

    message = GroupMessage(group_id=group_id, sender_id=user_id, content=content)
    db.add(message)
    db.flush()
    events: list[ChangeEvent] = [event_for(message, "insert")]
    sender = db.get(Profile, user_id)
    view = _to_view(message, sender)
    commit_and_publish(db, events)
    return view


@store_call
def list_group_messages(db: Session, group_id: int) -> list[GroupMessageView]:
    """Return the visible messages of a group, oldest first."""
    rows = (
        db.query(GroupMessage, Profile)
        .outerjoin(Profile, Profile.id == GroupMessage.sender_id)
        .filter(GroupMessage.group_id == group_id, GroupMessage.deleted_at.is_(None))
        .order_by(GroupMessage.created_at.asc(), GroupMessage.id.asc())
        .all()
    )
    return [_to_view(message, sender) for message, sender in rows]


@store_call
def soft_delete_group_message(
    db: Session,
    actor_id: str,
    group_id: int,
    message_id: int,
) -> GroupMessage:
    """Hide a group message from every read path (admins only).

    The row is kept with ``deleted_at``/``deleted_by`` set. Deleting an
    already deleted message leaves the original markers untouched.
    """
    require_group_admin(db, actor_id, group_id)
    message = (
        db.query(GroupMessage)
        .filter(GroupMessage.id == message_id, GroupMessage.group_id == group_id)
        .first()
    )
    if message is None:
        raise NotFoundError("Message not found")

    if not message.is_deleted:
        message.deleted_at = utcnow()
        message.deleted_by = actor_id
        db.flush()
        commit_and_publish(db, [event_for(message, "update")])
        logger.info("Group message %d soft-deleted by %s", message_id, actor_id)
    return message


@store_call
def seed_default_groups(db: Session) -> int:
    """Insert the stock season-of-life and interest groups into an empty table.

    Returns:
        Number of groups inserted.
    """
    if db.query(Group.id).first() is not None:
        return 0
    for seed in DEFAULT_GROUPS:
        db.add(Group(**seed))
    db.commit()
    logger.info("Seeded %d default groups", len(DEFAULT_GROUPS))
    return len(DEFAULT_GROUPS)
