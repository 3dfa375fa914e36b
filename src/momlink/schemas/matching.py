# src/momlink/schemas/matching.py
"""Matching-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class CandidateProfile(BaseModel):
    """Profile eligible to be shown to a member for swiping."""

    id: str
    name: str | None
    bio: str | None
    city: str | None
    profile_photo_url: str | None
    kids: list[int] = Field(default_factory=list, description="Kid ages, verbatim")
    interests: list[str] = Field(default_factory=list)
    shared_interests: list[str] = Field(default_factory=list)


class SwipeCreate(BaseModel):
    """Schema for recording a swipe decision."""

    target_id: str = Field(..., min_length=1, description="Profile being swiped on")
    direction: Literal["left", "right"]


class MatchResponse(BaseModel):
    """Schema for a materialized mutual match."""

    id: int
    user1_id: str
    user2_id: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SwipeResult(BaseModel):
    """Outcome of a swipe: the match it completed, if any."""

    matched: bool
    match: MatchResponse | None = None
