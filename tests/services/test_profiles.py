# mypy: ignore-errors
# tests/services/test_profiles.py
"""Tests for the profile lifecycle."""

import pytest
from sqlalchemy.exc import IntegrityError

from momlink.models import Group, GroupMember, Kid, Match, Message, Profile, Swipe, UserInterest
from momlink.schemas.group import GroupCreate
from momlink.schemas.profile import ProfileUpdate
from momlink.services.conversations import send_message
from momlink.services.errors import NotFoundError, ValidationError
from momlink.services.groups import create_group, join_group
from momlink.services.profiles import (
    complete_onboarding,
    delete_profile,
    ensure_profile,
    get_profile,
    get_visible_profile,
    update_profile,
)
from momlink.services.swipes import record_swipe


def test_ensure_profile_is_idempotent(db_session) -> None:
    """First login creates the row once."""
    first = ensure_profile(db_session, "new-mom", "new@example.com", user_type="expecting")
    second = ensure_profile(db_session, "new-mom", "new@example.com")

    assert first.id == second.id == "new-mom"
    assert second.user_type == "expecting"
    assert db_session.query(Profile).count() == 1


def test_get_profile_absent_means_not_onboarded(db_session) -> None:
    """A missing row is reported as None."""
    assert get_profile(db_session, "nobody") is None


def test_update_creates_profile_with_kids_and_interests(db_session) -> None:
    """Onboarding creates the row and attaches kids and interests."""
    profile = update_profile(
        db_session,
        "new-mom",
        ProfileUpdate(
            email="new@example.com",
            name="Nora",
            city="Austin",
            bio="Coffee first.",
            kids=[1, 4],
            interests=["yoga", "books"],
        ),
    )

    assert profile.name == "Nora"
    assert profile.kid_ages == [1, 4]
    assert profile.interest_tags == ["yoga", "books"]
    assert profile.profile_visibility == "public"


def test_update_replaces_kids_and_interests_wholesale(db_session, alice) -> None:
    """Submitted lists replace the stored ones; duplicates collapse."""
    profile = update_profile(
        db_session,
        alice.id,
        ProfileUpdate(name="Alice", city="Austin", kids=[7], interests=["chess", "chess", "art"]),
    )

    assert profile.kid_ages == [7]
    assert profile.interest_tags == ["chess", "art"]
    assert db_session.query(Kid).filter_by(user_id=alice.id).count() == 1
    assert db_session.query(UserInterest).filter_by(user_id=alice.id).count() == 2


def test_update_without_lists_keeps_them(db_session, alice) -> None:
    """Leaving kids and interests out keeps the stored rows."""
    profile = update_profile(
        db_session, alice.id, ProfileUpdate(name="Alice B.", city="Dallas", bio="Moved!")
    )

    assert profile.name == "Alice B."
    assert profile.city == "Dallas"
    assert profile.kid_ages == [2, 5]
    assert profile.interest_tags == ["hiking", "reading", "yoga"]


def test_new_profile_requires_email(db_session) -> None:
    """A profile cannot be created without an email."""
    with pytest.raises(ValidationError):
        update_profile(db_session, "new-mom", ProfileUpdate(name="Nora", city="Austin"))


def test_email_of_another_account_is_rejected(db_session, alice) -> None:
    """A second account cannot claim an email that is already registered."""
    with pytest.raises(ValidationError, match="already registered"):
        update_profile(
            db_session,
            "new-mom",
            ProfileUpdate(email=alice.email, name="Nora", city="Austin"),
        )
    with pytest.raises(ValidationError, match="already registered"):
        ensure_profile(db_session, "new-mom", alice.email)

    assert db_session.query(Profile).count() == 1


def test_blank_name_is_rejected(db_session, alice) -> None:
    """Whitespace is not a name."""
    with pytest.raises(ValidationError):
        update_profile(db_session, alice.id, ProfileUpdate(name="  ", city="Austin"))


def test_out_of_range_kid_age_is_rejected(db_session, alice) -> None:
    """Kid ages outside 0-18 are rejected even when schema validation is bypassed."""
    data = ProfileUpdate.model_construct(name="Alice", city="Austin", kids=[19], bio=None)

    with pytest.raises(ValidationError):
        update_profile(db_session, alice.id, data)


def test_complete_onboarding(db_session) -> None:
    """Onboarding is flagged on an existing profile only."""
    ensure_profile(db_session, "new-mom", "new@example.com")

    assert complete_onboarding(db_session, "new-mom").onboarding_completed is True
    with pytest.raises(NotFoundError):
        complete_onboarding(db_session, "nobody")


def test_visibility_rules(db_session, alice, bob, make_profile) -> None:
    """Public is open, matches-only needs a match, private is owner-only."""
    make_profile("carol", visibility="matches_only")
    make_profile("dana", visibility="private")

    assert get_visible_profile(db_session, alice.id, bob.id).id == bob.id
    assert get_visible_profile(db_session, "dana", "dana").id == "dana"
    with pytest.raises(NotFoundError):
        get_visible_profile(db_session, alice.id, "carol")
    with pytest.raises(NotFoundError):
        get_visible_profile(db_session, alice.id, "dana")

    record_swipe(db_session, alice.id, "carol", "right")
    record_swipe(db_session, "carol", alice.id, "right")

    assert get_visible_profile(db_session, alice.id, "carol").id == "carol"


def test_delete_profile_cascades(db_session, alice, bob) -> None:
    """Deleting an account removes everything hanging off it."""
    record_swipe(db_session, alice.id, bob.id, "right")
    record_swipe(db_session, bob.id, alice.id, "right")
    send_message(db_session, alice.id, bob.id, "bye")
    group = create_group(db_session, alice.id, GroupCreate(name="G", group_type="local"))
    join_group(db_session, bob.id, group.id)
    group_id = group.id

    assert delete_profile(db_session, alice.id) is True

    assert db_session.get(Profile, "alice") is None
    assert db_session.query(Kid).filter_by(user_id="alice").count() == 0
    assert db_session.query(UserInterest).filter_by(user_id="alice").count() == 0
    assert db_session.query(Swipe).count() == 0
    assert db_session.query(Match).count() == 0
    assert db_session.query(Message).count() == 0
    assert db_session.query(GroupMember).filter_by(user_id="alice").count() == 0
    assert db_session.get(Group, group_id).created_by is None
    assert delete_profile(db_session, alice.id) is False


@pytest.mark.parametrize(
    "field,value", [("user_type", "dad"), ("profile_visibility", "friends")]
)
def test_store_refuses_unknown_enumerations(db_session, field, value) -> None:
    """The profiles table only accepts the known user types and visibilities."""
    db_session.add(Profile(id="odd", email="odd@example.com", **{field: value}))

    with pytest.raises(IntegrityError):
        db_session.flush()
    db_session.rollback()
