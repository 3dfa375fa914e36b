# src/momlink/schemas/profile.py
"""Profile-related Pydantic schemas."""

from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

KidAge = Annotated[int, Field(ge=0, le=18)]
Visibility = Literal["public", "matches_only", "private"]
UserType = Literal["mom", "expecting", "caregiver"]


class ProfileUpdate(BaseModel):
    """Schema for creating or updating the caller's profile.

    ``kids`` and ``interests`` replace the stored lists wholesale when
    present; leaving them out keeps the current rows.
    """

    email: str | None = Field(None, description="Required only when the profile row does not exist yet")
    name: str = Field(..., min_length=1, max_length=100)
    bio: str | None = Field(None, max_length=500)
    city: str = Field(..., min_length=1)
    state: str | None = None
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    profile_visibility: Visibility = "public"
    profile_photo_url: str | None = None
    kids: list[KidAge] | None = Field(None, description="Ages of the member's kids (0-18)")
    interests: list[str] | None = Field(None, description="Interest tags")
    onboarding_completed: bool | None = None

    @field_validator("interests")
    @classmethod
    def strip_interests(cls, v: list[str] | None) -> list[str] | None:
        """Drop blank tags and surrounding whitespace."""
        if v is None:
            return v
        return [tag.strip() for tag in v if tag.strip()]


class ProfileResponse(BaseModel):
    """Response schema for a member profile."""

    id: str
    email: str
    user_type: str | None
    name: str | None
    bio: str | None
    profile_photo_url: str | None
    city: str | None
    state: str | None
    latitude: float | None
    longitude: float | None
    profile_visibility: str
    onboarding_completed: bool
    kid_ages: list[int]
    interest_tags: list[str]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ParticipantSummary(BaseModel):
    """Display fields of another member shown next to a conversation or message."""

    id: str
    name: str | None
    profile_photo_url: str | None

    model_config = ConfigDict(from_attributes=True)
