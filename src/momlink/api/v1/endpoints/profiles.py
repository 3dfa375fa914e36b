# src/momlink/api/v1/endpoints/profiles.py
"""Profile endpoints for the MomLink API."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from momlink.schemas.profile import ProfileResponse, ProfileUpdate
from momlink.services import profiles as profile_service

from ..dependencies import CurrentUserIdDep, SessionDep, TokenClaimsDep

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get("/me", response_model=ProfileResponse)
async def read_my_profile(
    current_user_id: CurrentUserIdDep,
    db: SessionDep,
) -> ProfileResponse:
    """Return the caller's profile; 404 means onboarding has not started."""
    profile = profile_service.get_profile(db, current_user_id)
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found",
        )
    return ProfileResponse.model_validate(profile)


@router.put("/me", response_model=ProfileResponse)
async def update_my_profile(
    payload: ProfileUpdate,
    claims: TokenClaimsDep,
    current_user_id: CurrentUserIdDep,
    db: SessionDep,
) -> ProfileResponse:
    """Create or update the caller's profile, kids and interests."""
    if payload.email is None and claims.get("email"):
        payload = payload.model_copy(update={"email": claims["email"]})
    profile = profile_service.update_profile(db, current_user_id, payload)
    return ProfileResponse.model_validate(profile)


@router.post("/me/onboarding/complete", response_model=ProfileResponse)
async def complete_onboarding(
    current_user_id: CurrentUserIdDep,
    db: SessionDep,
) -> ProfileResponse:
    """Mark the caller's onboarding as finished."""
    profile = profile_service.complete_onboarding(db, current_user_id)
    return ProfileResponse.model_validate(profile)


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
async def delete_my_profile(
    current_user_id: CurrentUserIdDep,
    db: SessionDep,
) -> None:
    """Delete the caller's account data."""
    if not profile_service.delete_profile(db, current_user_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found",
        )


@router.get("/{profile_id}", response_model=ProfileResponse)
async def read_profile(
    profile_id: str,
    current_user_id: CurrentUserIdDep,
    db: SessionDep,
) -> ProfileResponse:
    """Return another member's profile when its visibility allows it."""
    profile = profile_service.get_visible_profile(db, current_user_id, profile_id)
    return ProfileResponse.model_validate(profile)
