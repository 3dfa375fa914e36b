"""Profile lifecycle: first-login creation, onboarding updates and deletion."""

from __future__ import annotations

import logging

from sqlalchemy import delete, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from momlink.core.settings import settings
from momlink.models import Kid, Match, Profile, UserInterest
from momlink.models.profile import (
    KID_MAX_AGE,
    KID_MIN_AGE,
    VISIBILITY_MATCHES_ONLY,
    VISIBILITY_PUBLIC,
)
from momlink.schemas.profile import ProfileUpdate
from momlink.services.errors import NotFoundError, ValidationError, store_call
from momlink.services.policies import find_match
from momlink.services.realtime import commit_and_publish, event_for

logger = logging.getLogger(__name__)

__all__ = [
    "complete_onboarding",
    "delete_profile",
    "ensure_profile",
    "get_profile",
    "get_visible_profile",
    "update_profile",
]

_BASIC_FIELDS = (
    "name",
    "bio",
    "city",
    "state",
    "latitude",
    "longitude",
    "profile_visibility",
    "profile_photo_url",
    "onboarding_completed",
)


def _unique_tags(tags: list[str]) -> list[str]:
    seen: set[str] = set()
    unique: list[str] = []
    for tag in tags:
        if tag not in seen:
            seen.add(tag)
            unique.append(tag)
    return unique


def _check_update(data: ProfileUpdate) -> None:
    if not data.name.strip():
        raise ValidationError("name is required")
    if not data.city.strip():
        raise ValidationError("city is required")
    if data.bio is not None and len(data.bio) > settings.bio_max_length:
        raise ValidationError(f"bio must be at most {settings.bio_max_length} characters")
    for age in data.kids or ():
        if not KID_MIN_AGE <= age <= KID_MAX_AGE:
            raise ValidationError(f"kid ages must be between {KID_MIN_AGE} and {KID_MAX_AGE}")


def _check_email_free(db: Session, email: str, user_id: str) -> None:
    owner = db.query(Profile.id).filter(Profile.email == email).first()
    if owner is not None and owner.id != user_id:
        raise ValidationError("email is already registered to another account")


@store_call
def get_profile(db: Session, user_id: str) -> Profile | None:
    """Return the member's profile; None means the member has not onboarded."""
    return db.get(Profile, user_id)


@store_call
def ensure_profile(
    db: Session,
    user_id: str,
    email: str,
    user_type: str | None = None,
) -> Profile:
    """Create the bare profile row for a newly signed-up account.

    Calling it again for the same account returns the existing row.

    Raises:
        ValidationError: If another account already uses ``email``
    """
    existing = db.get(Profile, user_id)
    if existing is not None:
        return existing

    _check_email_free(db, email, user_id)
    profile = Profile(id=user_id, email=email, user_type=user_type)
    try:
        with db.begin_nested():
            db.add(profile)
    except IntegrityError:
        raced = db.get(Profile, user_id)
        if raced is None:
            raise
        return raced
    db.commit()
    logger.info("Profile created for %s", user_id)
    return profile


@store_call
def update_profile(db: Session, user_id: str, data: ProfileUpdate) -> Profile:
    """Create or update the caller's profile.

    When ``kids`` or ``interests`` are given they replace the stored rows
    wholesale; duplicate interest tags are collapsed.

    Raises:
        ValidationError: On a blank name/city, an over-long bio, an
            out-of-range kid age, a missing email for a new profile
            or an email already used by another account
    """
    _check_update(data)

    profile = db.get(Profile, user_id)
    if profile is None:
        if not data.email:
            raise ValidationError("email is required to create a profile")
        _check_email_free(db, data.email, user_id)
        profile = Profile(id=user_id, email=data.email)
        db.add(profile)
        logger.info("Profile created for %s during onboarding", user_id)

    changes = data.model_dump(include=set(_BASIC_FIELDS), exclude_unset=True)
    for field_name, value in changes.items():
        setattr(profile, field_name, value)
    # Required fields are always applied, even when left at a default.
    profile.name = data.name
    profile.city = data.city
    db.flush()

    if data.kids is not None:
        db.execute(delete(Kid).where(Kid.user_id == user_id))
        db.add_all(Kid(user_id=user_id, age=age) for age in data.kids)
    if data.interests is not None:
        db.execute(delete(UserInterest).where(UserInterest.user_id == user_id))
        db.add_all(
            UserInterest(user_id=user_id, interest=tag) for tag in _unique_tags(data.interests)
        )
    db.flush()
    db.expire(profile, ["kids", "interests"])

    db.commit()
    db.refresh(profile)
    return profile


@store_call
def complete_onboarding(db: Session, user_id: str) -> Profile:
    """Flag the member's onboarding as finished."""
    profile = db.get(Profile, user_id)
    if profile is None:
        raise NotFoundError("Profile not found")
    if not profile.onboarding_completed:
        profile.onboarding_completed = True
        db.commit()
        logger.info("Onboarding completed for %s", user_id)
    return profile


@store_call
def get_visible_profile(db: Session, viewer_id: str, profile_id: str) -> Profile:
    """Return another member's profile if its visibility lets ``viewer_id`` see it.

    Hidden profiles are reported as missing rather than forbidden.
    """
    profile = db.get(Profile, profile_id)
    if profile is None:
        raise NotFoundError("Profile not found")
    if viewer_id == profile_id or profile.profile_visibility == VISIBILITY_PUBLIC:
        return profile
    if (
        profile.profile_visibility == VISIBILITY_MATCHES_ONLY
        and find_match(db, viewer_id, profile_id) is not None
    ):
        return profile
    raise NotFoundError("Profile not found")


@store_call
def delete_profile(db: Session, user_id: str) -> bool:
    """Delete an account and everything hanging off it.

    Kids, interests, swipes, matches, messages and memberships go with the
    profile through ``ON DELETE CASCADE``; groups the member created stay
    and lose their creator.

    Returns:
        True if a profile was deleted.
    """
    if db.get(Profile, user_id) is None:
        return False

    # Matches disappear through the cascade; announce them so open
    # conversation lists of the other parties refresh.
    matches = (
        db.query(Match)
        .filter(or_(Match.user1_id == user_id, Match.user2_id == user_id))
        .all()
    )
    events = [event_for(match, "delete") for match in matches]

    db.execute(delete(Profile).where(Profile.id == user_id))
    commit_and_publish(db, events)
    # Cascaded rows are gone from the store; drop their stale instances.
    db.expunge_all()
    logger.info("Profile %s deleted (%d matches removed)", user_id, len(matches))
    return True
