# mypy: ignore-errors
# tests/v1/test_matching.py
"""Tests for candidate, swipe and match endpoints."""

from fastapi import status


def test_candidates_endpoint(client, alice, bob, auth_token) -> None:
    """Candidates come back with shared interests."""
    response = client.get("/api/v1/matching/candidates", headers=auth_token)

    assert response.status_code == status.HTTP_200_OK
    (candidate,) = response.json()
    assert candidate["id"] == bob.id
    assert candidate["shared_interests"] == ["reading"]


def test_candidates_limit_is_validated(client, alice, auth_token) -> None:
    """A zero page size is rejected."""
    response = client.get("/api/v1/matching/candidates?limit=0", headers=auth_token)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_candidates_without_profile(client, auth_headers) -> None:
    """Callers without a profile get a 404."""
    response = client.get("/api/v1/matching/candidates", headers=auth_headers("ghost"))

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "Could not fetch current user"


def test_swipe_flow_creates_match(client, alice, bob, auth_token, other_auth_token) -> None:
    """A one-sided like does nothing; the mutual like reports the match."""
    first = client.post(
        "/api/v1/matching/swipes",
        json={"target_id": bob.id, "direction": "right"},
        headers=auth_token,
    )
    assert first.status_code == status.HTTP_200_OK
    assert first.json() == {"matched": False, "match": None}

    second = client.post(
        "/api/v1/matching/swipes",
        json={"target_id": alice.id, "direction": "right"},
        headers=other_auth_token,
    )
    body = second.json()
    assert body["matched"] is True
    assert body["match"]["user1_id"] == "alice"
    assert body["match"]["user2_id"] == "bob"

    matches = client.get("/api/v1/matching/matches", headers=auth_token).json()
    assert [m["id"] for m in matches] == [body["match"]["id"]]


def test_swipe_rejects_unknown_direction(client, alice, bob, auth_token) -> None:
    """Directions other than left/right fail validation."""
    response = client.post(
        "/api/v1/matching/swipes",
        json={"target_id": bob.id, "direction": "up"},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_swipe_on_missing_profile(client, alice, auth_token) -> None:
    """Swiping on nobody is a 404."""
    response = client.post(
        "/api/v1/matching/swipes",
        json={"target_id": "ghost", "direction": "right"},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_unmatch(
    client, alice, bob, auth_token, other_auth_token, auth_headers, make_profile
) -> None:
    """A participant can unmatch; outsiders get 403."""
    client.post(
        "/api/v1/matching/swipes",
        json={"target_id": bob.id, "direction": "right"},
        headers=auth_token,
    )
    match = client.post(
        "/api/v1/matching/swipes",
        json={"target_id": alice.id, "direction": "right"},
        headers=other_auth_token,
    ).json()["match"]

    make_profile("carol")
    outsider = auth_headers("carol")
    forbidden = client.delete(f"/api/v1/matching/matches/{match['id']}", headers=outsider)
    assert forbidden.status_code == status.HTTP_403_FORBIDDEN

    response = client.delete(f"/api/v1/matching/matches/{match['id']}", headers=auth_token)
    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert client.get("/api/v1/matching/matches", headers=other_auth_token).json() == []


def test_swipe_without_profile(client, bob, auth_headers) -> None:
    """A caller who has not onboarded gets a 404 and no swipe is stored."""
    response = client.post(
        "/api/v1/matching/swipes",
        json={"target_id": bob.id, "direction": "right"},
        headers=auth_headers("ghost"),
    )

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "Profile not found"
