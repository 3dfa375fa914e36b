# mypy: ignore-errors
# tests/v1/test_profiles.py
"""Tests for profile endpoints."""

from fastapi import status


def test_read_own_profile(client, alice, auth_token) -> None:
    """The caller's profile includes kids and interests."""
    response = client.get("/api/v1/profiles/me", headers=auth_token)

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["id"] == alice.id
    assert data["kid_ages"] == [2, 5]
    assert data["interest_tags"] == ["hiking", "reading", "yoga"]


def test_profile_missing_before_onboarding(client, auth_headers) -> None:
    """A fresh account has no profile yet."""
    response = client.get("/api/v1/profiles/me", headers=auth_headers("newbie"))

    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_onboarding_creates_profile_from_token_email(client, auth_headers) -> None:
    """PUT creates the profile, taking the email from the token when omitted."""
    headers = auth_headers("newbie", email="newbie@example.com")

    response = client.put(
        "/api/v1/profiles/me",
        json={"name": "Nina", "city": "Austin", "kids": [0, 3], "interests": ["music"]},
        headers=headers,
    )

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["email"] == "newbie@example.com"
    assert data["kid_ages"] == [0, 3]
    assert data["onboarding_completed"] is False

    done = client.post("/api/v1/profiles/me/onboarding/complete", headers=headers)
    assert done.status_code == status.HTTP_200_OK
    assert done.json()["onboarding_completed"] is True


def test_onboarding_without_any_email_fails(client, auth_headers) -> None:
    """Creating a profile needs an email from the body or the token."""
    response = client.put(
        "/api/v1/profiles/me",
        json={"name": "Nina", "city": "Austin"},
        headers=auth_headers("newbie"),
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_update_rejects_invalid_input(client, alice, auth_token) -> None:
    """Schema validation guards bio length, kid ages and required fields."""
    for payload in (
        {"name": "Alice", "city": "Austin", "bio": "x" * 501},
        {"name": "Alice", "city": "Austin", "kids": [19]},
        {"name": "Alice"},
        {"name": "Alice", "city": "Austin", "profile_visibility": "secret"},
    ):
        response = client.put("/api/v1/profiles/me", json=payload, headers=auth_token)
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_read_other_profile_respects_visibility(client, alice, auth_token, make_profile) -> None:
    """Private profiles look missing to other members."""
    make_profile("bob")
    make_profile("carol", visibility="private")

    assert client.get("/api/v1/profiles/bob", headers=auth_token).status_code == 200
    hidden = client.get("/api/v1/profiles/carol", headers=auth_token)
    assert hidden.status_code == status.HTTP_404_NOT_FOUND


def test_delete_account(client, alice, auth_token) -> None:
    """Deleting the account removes the profile."""
    response = client.delete("/api/v1/profiles/me", headers=auth_token)
    assert response.status_code == status.HTTP_204_NO_CONTENT

    again = client.delete("/api/v1/profiles/me", headers=auth_token)
    assert again.status_code == status.HTTP_404_NOT_FOUND
