# src/momlink/schemas/group.py
"""Group-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class GroupCreate(BaseModel):
    """Schema for creating a new group."""

    name: str = Field(..., min_length=1, max_length=120)
    description: str | None = None
    group_type: Literal["season_of_life", "interest_based", "local"]
    category: str | None = None
    city: str | None = None
    min_age: int | None = Field(None, ge=0)
    max_age: int | None = Field(None, ge=0)
    interest: str | None = None
    cover_photo_url: str | None = None

    @model_validator(mode="after")
    def check_age_range(self) -> "GroupCreate":
        """Reject inverted age ranges."""
        if self.min_age is not None and self.max_age is not None and self.min_age > self.max_age:
            raise ValueError("min_age must not exceed max_age")
        return self


class GroupWithMembership(BaseModel):
    """Group annotated with the caller's membership and the member count."""

    id: int
    name: str
    description: str | None
    group_type: str
    category: str | None
    city: str | None
    min_age: int | None
    max_age: int | None
    interest: str | None
    cover_photo_url: str | None
    created_at: datetime
    member_count: int = 0
    is_member: bool = False

    model_config = ConfigDict(from_attributes=True)


class MembershipResponse(BaseModel):
    """Schema for a group membership row."""

    group_id: int
    user_id: str
    role: str
    joined_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GroupMessageCreate(BaseModel):
    """Schema for posting to a group chat."""

    content: str = Field(..., description="Message body, 1-2000 characters")


class SenderSummary(BaseModel):
    """Denormalized sender display fields."""

    name: str | None
    profile_photo_url: str | None


class GroupMessageView(BaseModel):
    """Group message with the sender's display fields attached."""

    id: int
    group_id: int
    sender_id: str
    content: str
    created_at: datetime
    sender: SenderSummary
