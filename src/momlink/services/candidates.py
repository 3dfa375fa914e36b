"""Candidate filter for the discovery deck.

Candidates are public profiles the requester has not swiped on yet, taken
from the requester's city first and from anywhere when the city has nobody
left, so sparse markets never show an empty deck.
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Query, Session, selectinload

from momlink.core.settings import settings
from momlink.models import Profile, Swipe
from momlink.models.profile import VISIBILITY_PUBLIC
from momlink.schemas.matching import CandidateProfile
from momlink.services.errors import NotFoundError, store_call
from momlink.services.validation import check_limit

logger = logging.getLogger(__name__)

__all__ = ["get_candidates", "swiped_ids"]


def swiped_ids(db: Session, user_id: str) -> set[str]:
    """Return every profile id ``user_id`` has swiped on, in either direction."""
    rows = db.query(Swipe.swiped_id).filter(Swipe.swiper_id == user_id).all()
    return {row.swiped_id for row in rows}


def _candidate_query(db: Session, exclude: set[str]) -> Query[Profile]:
    return (
        db.query(Profile)
        .options(selectinload(Profile.kids), selectinload(Profile.interests))
        .filter(
            Profile.id.not_in(exclude),
            Profile.profile_visibility == VISIBILITY_PUBLIC,
        )
        .order_by(Profile.created_at, Profile.id)
    )


def _to_candidate(profile: Profile, requester_interests: set[str]) -> CandidateProfile:
    interests = profile.interest_tags
    return CandidateProfile(
        id=profile.id,
        name=profile.name,
        bio=profile.bio,
        city=profile.city,
        profile_photo_url=profile.profile_photo_url,
        kids=profile.kid_ages,
        interests=interests,
        shared_interests=sorted(requester_interests.intersection(interests)),
    )


@store_call
def get_candidates(
    db: Session,
    requesting_user_id: str,
    limit: int | None = None,
) -> list[CandidateProfile]:
    """Return up to ``limit`` profiles the requester may swipe on.

    Args:
        db: Database session
        requesting_user_id: Caller's identity
        limit: Page size; defaults to ``settings.candidate_page_size``

    Returns:
        Candidates in stable storage order. An empty list is a normal result.

    Raises:
        ValidationError: If ``limit`` is not positive
        NotFoundError: If the requester has no profile
    """
    limit = check_limit(settings.candidate_page_size if limit is None else limit)

    requester = db.get(Profile, requesting_user_id)
    if requester is None:
        raise NotFoundError("Could not fetch current user")

    exclude = swiped_ids(db, requesting_user_id) | {requesting_user_id}

    profiles: list[Profile] = []
    if requester.city:
        profiles = (
            _candidate_query(db, exclude)
            .filter(Profile.city == requester.city)
            .limit(limit)
            .all()
        )

    if not profiles:
        # Nobody left locally; widen to every city.
        profiles = _candidate_query(db, exclude).limit(limit).all()
        logger.debug(
            "No local candidates for %s in %r, fell back to %d from any city",
            requesting_user_id,
            requester.city,
            len(profiles),
        )

    requester_interests = set(requester.interest_tags)
    return [_to_candidate(profile, requester_interests) for profile in profiles]
