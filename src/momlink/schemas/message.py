# src/momlink/schemas/message.py
"""Direct message-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from momlink.schemas.profile import ParticipantSummary


class MessageCreate(BaseModel):
    """Schema for sending a direct message to a match."""

    recipient_id: str = Field(..., min_length=1)
    content: str = Field(..., description="Message body, 1-2000 characters")


class MessageResponse(BaseModel):
    """Schema for a direct message returned by the API."""

    id: int
    sender_id: str
    recipient_id: str
    content: str
    read_at: datetime | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ConversationSummary(BaseModel):
    """Derived view of one match: counterpart, latest message and unread count."""

    match_id: int
    other_user: ParticipantSummary
    last_message: MessageResponse | None = None
    unread_count: int = 0
    matched_at: datetime


class UnreadCountResponse(BaseModel):
    """Badge count of unread direct messages."""

    unread_count: int


class MarkReadResponse(BaseModel):
    """Result of marking a thread as read."""

    status: str
    updated: int
