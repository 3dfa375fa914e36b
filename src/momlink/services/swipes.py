"""Swipe recording and mutual-match detection.

A swipe is written once per ordered (swiper, target) pair. A right swipe
that finds the reverse right swipe materializes the Match for the pair under
its canonical ordering. Neither step takes a lock: the unique constraints on
``swipes`` and ``matches`` turn concurrent or repeated calls into no-ops.
"""

from __future__ import annotations

import logging

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from momlink.models import Match, Message, Profile, Swipe
from momlink.models.matching import SWIPE_DIRECTIONS, SWIPE_LEFT, SWIPE_RIGHT
from momlink.services.conversations import thread_filter
from momlink.services.errors import (
    NotFoundError,
    UnauthorizedError,
    ValidationError,
    store_call,
)
from momlink.services.policies import canonical_pair, find_match
from momlink.services.realtime import ChangeEvent, commit_and_publish, event_for

logger = logging.getLogger(__name__)

__all__ = [
    "get_match_between",
    "list_matches",
    "materialize_match",
    "record_swipe",
    "unmatch",
]


def _insert_swipe(db: Session, swiper_id: str, target_id: str, direction: str) -> Swipe | None:
    """Insert a swipe, returning None if the pair was already swiped."""
    existing = (
        db.query(Swipe.id)
        .filter(Swipe.swiper_id == swiper_id, Swipe.swiped_id == target_id)
        .first()
    )
    if existing is not None:
        return None

    swipe = Swipe(swiper_id=swiper_id, swiped_id=target_id, direction=direction)
    try:
        with db.begin_nested():
            db.add(swipe)
    except IntegrityError:
        # A concurrent call for the same pair got there first.
        raced = (
            db.query(Swipe.id)
            .filter(Swipe.swiper_id == swiper_id, Swipe.swiped_id == target_id)
            .first()
        )
        if raced is None:
            raise
        return None
    return swipe


def _has_reverse_like(db: Session, swiper_id: str, target_id: str) -> bool:
    return (
        db.query(Swipe.id)
        .filter(
            Swipe.swiper_id == target_id,
            Swipe.swiped_id == swiper_id,
            Swipe.direction == SWIPE_RIGHT,
        )
        .first()
        is not None
    )


def materialize_match(db: Session, user_a: str, user_b: str) -> tuple[Match, bool]:
    """Insert the canonical Match for a pair, tolerating an existing row.

    Returns:
        The Match and whether this call created it.
    """
    user1_id, user2_id = canonical_pair(user_a, user_b)
    match = Match(user1_id=user1_id, user2_id=user2_id)
    try:
        with db.begin_nested():
            db.add(match)
    except IntegrityError:
        existing = find_match(db, user1_id, user2_id)
        if existing is None:
            raise
        return existing, False
    return match, True


@store_call
def record_swipe(db: Session, swiper_id: str, target_id: str, direction: str) -> Match | None:
    """Persist a swipe and return the Match it completes, if any.

    Args:
        db: Database session
        swiper_id: Member making the decision
        target_id: Member being swiped on
        direction: ``"left"`` (pass) or ``"right"`` (like)

    Returns:
        The Match when this right swipe completed a mutual like, otherwise None.
        A repeated swipe on the same target is a no-op and returns None.

    Raises:
        ValidationError: If ``direction`` is not left/right
        NotFoundError: If either profile does not exist
    """
    if direction not in SWIPE_DIRECTIONS:
        raise ValidationError(f"direction must be one of {', '.join(SWIPE_DIRECTIONS)}")
    if swiper_id == target_id:
        logger.warning("Rejected self-swipe by %s", swiper_id)
        return None

    if db.get(Profile, swiper_id) is None or db.get(Profile, target_id) is None:
        raise NotFoundError("Profile not found")

    swipe = _insert_swipe(db, swiper_id, target_id, direction)
    if swipe is None:
        logger.debug("Duplicate swipe %s -> %s ignored", swiper_id, target_id)
        return None

    events: list[ChangeEvent] = [event_for(swipe, "insert")]

    if direction == SWIPE_LEFT or not _has_reverse_like(db, swiper_id, target_id):
        commit_and_publish(db, events)
        return None

    match, created = materialize_match(db, swiper_id, target_id)
    if created:
        events.append(event_for(match, "insert"))
        logger.info("Match %d created between %s and %s", match.id, match.user1_id, match.user2_id)
    commit_and_publish(db, events)
    return match


@store_call
def list_matches(db: Session, user_id: str) -> list[Match]:
    """Return every match the member participates in, newest first."""
    return (
        db.query(Match)
        .filter(or_(Match.user1_id == user_id, Match.user2_id == user_id))
        .order_by(Match.created_at.desc(), Match.id.desc())
        .all()
    )


@store_call
def get_match_between(db: Session, user_a: str, user_b: str) -> Match | None:
    """Return the match between two members, in either argument order."""
    return find_match(db, user_a, user_b)


@store_call
def unmatch(db: Session, user_id: str, match_id: int) -> None:
    """Hard-delete a match and the direct messages exchanged under it.

    Raises:
        NotFoundError: If the match does not exist
        UnauthorizedError: If the caller is not one of the participants
    """
    match = db.get(Match, match_id)
    if match is None:
        raise NotFoundError("Match not found")
    if not match.involves(user_id):
        raise UnauthorizedError("Only a participant can remove a match")

    events = [event_for(match, "delete")]
    messages = (
        db.query(Message)
        .filter(thread_filter(match.user1_id, match.user2_id))
        .all()
    )
    for message in messages:
        events.append(event_for(message, "delete"))
        db.delete(message)
    db.delete(match)
    db.flush()
    logger.info("Match %d removed by %s (%d messages deleted)", match_id, user_id, len(messages))
    commit_and_publish(db, events)
