"""Direct messaging and the conversation aggregator.

A conversation is never stored. It is derived per match from the messages
exchanged between the two participants: the latest message and the number
of messages the other party sent that the caller has not read yet.
"""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session

from momlink.db.time import ensure_utc, utcnow
from momlink.models import Match, Message, Profile
from momlink.schemas.message import ConversationSummary, MessageResponse
from momlink.schemas.profile import ParticipantSummary
from momlink.services.errors import NotFoundError, store_call
from momlink.services.policies import require_match
from momlink.services.realtime import commit_and_publish, event_for
from momlink.services.validation import check_content

logger = logging.getLogger(__name__)

__all__ = [
    "get_thread",
    "get_total_unread_count",
    "list_conversations",
    "mark_message_read",
    "mark_thread_read",
    "send_message",
    "thread_filter",
]


def thread_filter(user_a: str, user_b: str):  # type: ignore[no-untyped-def]
    """SQL condition selecting messages exchanged between two members."""
    return or_(
        and_(Message.sender_id == user_a, Message.recipient_id == user_b),
        and_(Message.sender_id == user_b, Message.recipient_id == user_a),
    )


def _unread_from(db: Session, sender_id: str, recipient_id: str) -> int:
    return (
        db.query(func.count(Message.id))
        .filter(
            Message.sender_id == sender_id,
            Message.recipient_id == recipient_id,
            Message.read_at.is_(None),
        )
        .scalar()
        or 0
    )


def _last_message(db: Session, user_a: str, user_b: str) -> Message | None:
    return (
        db.query(Message)
        .filter(thread_filter(user_a, user_b))
        .order_by(Message.created_at.desc(), Message.id.desc())
        .first()
    )


def _participant(profile: Profile | None, user_id: str) -> ParticipantSummary:
    if profile is None:
        return ParticipantSummary(id=user_id, name=None, profile_photo_url=None)
    return ParticipantSummary.model_validate(profile)


def _sort_key(summary: ConversationSummary) -> tuple[int, datetime, int]:
    # Conversations with messages first, newest activity first; fresh
    # matches after them, newest match first.
    if summary.last_message is not None:
        return (1, ensure_utc(summary.last_message.created_at), summary.last_message.id)
    return (0, ensure_utc(summary.matched_at), summary.match_id)


@store_call
def send_message(db: Session, sender_id: str, recipient_id: str, content: str) -> Message:
    """Send a direct message to a matched member.

    Raises:
        ValidationError: If the content is empty or longer than the limit
        NotFoundError: If the recipient has no profile
        UnauthorizedError: If the two members are not matched
    """
    check_content(content)
    if db.get(Profile, recipient_id) is None:
        raise NotFoundError("Recipient not found")
    require_match(db, sender_id, recipient_id)

    message = Message(sender_id=sender_id, recipient_id=recipient_id, content=content)
    db.add(message)
    db.flush()
    commit_and_publish(db, [event_for(message, "insert")])
    return message


@store_call
def list_conversations(db: Session, user_id: str) -> list[ConversationSummary]:
    """Return one summary per match of ``user_id``.

    Matches without any message are included with no last message and a
    zero unread count. Ordering is by latest message time, newest first,
    followed by message-less matches ordered by match time, newest first.
    """
    matches = (
        db.query(Match)
        .filter(or_(Match.user1_id == user_id, Match.user2_id == user_id))
        .all()
    )
    if not matches:
        return []

    other_ids = {match.other_party(user_id) for match in matches}
    profiles = {
        profile.id: profile
        for profile in db.query(Profile).filter(Profile.id.in_(other_ids)).all()
    }

    # One query pair per match; fine for the list sizes members accumulate.
    summaries: list[ConversationSummary] = []
    for match in matches:
        other_id = match.other_party(user_id)
        last = _last_message(db, user_id, other_id)
        summaries.append(
            ConversationSummary(
                match_id=match.id,
                other_user=_participant(profiles.get(other_id), other_id),
                last_message=MessageResponse.model_validate(last) if last is not None else None,
                unread_count=_unread_from(db, other_id, user_id),
                matched_at=match.created_at,
            )
        )

    summaries.sort(key=_sort_key, reverse=True)
    return summaries


@store_call
def get_total_unread_count(db: Session, user_id: str) -> int:
    """Return the number of unread direct messages addressed to ``user_id``."""
    return (
        db.query(func.count(Message.id))
        .filter(Message.recipient_id == user_id, Message.read_at.is_(None))
        .scalar()
        or 0
    )


@store_call
def mark_thread_read(db: Session, other_user_id: str, user_id: str) -> int:
    """Mark every unread message from ``other_user_id`` to ``user_id`` as read.

    Already-read messages keep their original ``read_at``.

    Returns:
        Number of messages that were newly marked read.
    """
    unread = (
        db.query(Message)
        .filter(
            Message.sender_id == other_user_id,
            Message.recipient_id == user_id,
            Message.read_at.is_(None),
        )
        .all()
    )
    if not unread:
        return 0

    now = utcnow()
    for message in unread:
        message.read_at = now
    db.flush()
    commit_and_publish(db, [event_for(message, "update") for message in unread])
    logger.debug("Marked %d messages from %s to %s as read", len(unread), other_user_id, user_id)
    return len(unread)


@store_call
def mark_message_read(db: Session, message_id: int, user_id: str) -> Message:
    """Mark a single received message as read.

    Raises:
        NotFoundError: If the message does not exist or was not sent to ``user_id``
    """
    message = (
        db.query(Message)
        .filter(Message.id == message_id, Message.recipient_id == user_id)
        .first()
    )
    if message is None:
        raise NotFoundError("Message not found")

    if message.read_at is None:
        message.read_at = utcnow()
        db.flush()
        commit_and_publish(db, [event_for(message, "update")])
    return message


@store_call
def get_thread(db: Session, user_id: str, other_user_id: str) -> list[Message]:
    """Return the full message history between two members, oldest first."""
    return (
        db.query(Message)
        .filter(thread_filter(user_id, other_user_id))
        .order_by(Message.created_at.asc(), Message.id.asc())
        .all()
    )
