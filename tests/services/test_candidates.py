# mypy: ignore-errors
# tests/services/test_candidates.py
"""Tests for the candidate filter."""

import pytest

from momlink.services.candidates import get_candidates
from momlink.services.errors import NotFoundError, ValidationError
from momlink.services.swipes import record_swipe


def test_local_candidates_come_first(db_session, alice, bob, make_profile) -> None:
    """Profiles in the requester's city are served before anyone else."""
    make_profile("carol", city="Denver")

    candidates = get_candidates(db_session, alice.id)

    assert [c.id for c in candidates] == ["bob"]


def test_falls_back_to_any_city_when_nobody_local(db_session, alice, make_profile) -> None:
    """With no local profiles left the filter widens to every city."""
    make_profile("carol", city="Denver")
    make_profile("dana", city="Boston")

    candidates = get_candidates(db_session, alice.id)

    assert {c.id for c in candidates} == {"carol", "dana"}


def test_fallback_after_local_pool_is_exhausted(db_session, alice, bob, make_profile) -> None:
    """Swiping through every local profile switches to the wider pool."""
    make_profile("carol", city="Denver")
    record_swipe(db_session, alice.id, bob.id, "left")

    candidates = get_candidates(db_session, alice.id)

    assert [c.id for c in candidates] == ["carol"]


def test_requester_without_city_sees_every_city(db_session, make_profile) -> None:
    """A requester without a city skips the local pass."""
    make_profile("alice", city=None)
    make_profile("bob", city="Austin")
    make_profile("carol", city="Denver")

    candidates = get_candidates(db_session, "alice")

    assert {c.id for c in candidates} == {"bob", "carol"}


def test_excludes_self_and_every_swiped_profile(db_session, alice, bob, make_profile) -> None:
    """Neither the requester nor anyone already swiped (either way) is offered."""
    make_profile("carol")
    make_profile("dana")
    record_swipe(db_session, alice.id, bob.id, "right")
    record_swipe(db_session, alice.id, "carol", "left")

    ids = {c.id for c in get_candidates(db_session, alice.id)}

    assert ids == {"dana"}
    assert alice.id not in ids


def test_being_swiped_on_does_not_hide_the_swiper(db_session, alice, bob) -> None:
    """Only the requester's own swipes exclude profiles."""
    record_swipe(db_session, bob.id, alice.id, "right")

    assert [c.id for c in get_candidates(db_session, alice.id)] == ["bob"]


def test_hidden_profiles_are_never_candidates(db_session, alice, make_profile) -> None:
    """Only public profiles can be discovered."""
    make_profile("bob", visibility="private")
    make_profile("carol", visibility="matches_only")
    make_profile("dana")

    assert [c.id for c in get_candidates(db_session, alice.id)] == ["dana"]


def test_candidate_carries_kids_interests_and_shared_interests(db_session, alice, bob) -> None:
    """Kids and interests are passed through; shared interests are the sorted overlap."""
    (candidate,) = get_candidates(db_session, alice.id)

    assert candidate.name == "Bob"
    assert candidate.city == "Austin"
    assert candidate.kids == [3]
    assert candidate.interests == ["reading", "cooking"]
    assert candidate.shared_interests == ["reading"]


def test_limit_caps_the_page(db_session, alice, make_profile) -> None:
    """No more than ``limit`` candidates are returned."""
    for user_id in ("b1", "b2", "b3", "b4"):
        make_profile(user_id)

    assert len(get_candidates(db_session, alice.id, limit=2)) == 2


def test_empty_result_is_valid(db_session, alice) -> None:
    """A requester with nobody left gets an empty list, not an error."""
    assert get_candidates(db_session, alice.id) == []


def test_unknown_requester_is_not_found(db_session) -> None:
    """A caller without a profile cannot be served candidates."""
    with pytest.raises(NotFoundError, match="Could not fetch current user"):
        get_candidates(db_session, "ghost")


@pytest.mark.parametrize("limit", [0, -5])
def test_non_positive_limit_is_rejected(db_session, alice, limit) -> None:
    """The page size must be positive."""
    with pytest.raises(ValidationError):
        get_candidates(db_session, alice.id, limit=limit)
