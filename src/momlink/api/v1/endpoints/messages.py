# src/momlink/api/v1/endpoints/messages.py
"""Direct message endpoints for the MomLink API."""

from __future__ import annotations

from fastapi import APIRouter, status

from momlink.schemas.message import (
    ConversationSummary,
    MarkReadResponse,
    MessageCreate,
    MessageResponse,
    UnreadCountResponse,
)
from momlink.services import conversations as conversation_service

from ..dependencies import CurrentUserIdDep, SessionDep

router = APIRouter(prefix="/messages", tags=["messages"])


@router.get("/conversations", response_model=list[ConversationSummary])
async def list_conversations(
    current_user_id: CurrentUserIdDep,
    db: SessionDep,
) -> list[ConversationSummary]:
    """List one conversation per match with its latest message and unread count."""
    return conversation_service.list_conversations(db, current_user_id)


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(
    current_user_id: CurrentUserIdDep,
    db: SessionDep,
) -> UnreadCountResponse:
    """Return the unread badge count."""
    return UnreadCountResponse(
        unread_count=conversation_service.get_total_unread_count(db, current_user_id)
    )


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=MessageResponse)
async def send_message(
    payload: MessageCreate,
    current_user_id: CurrentUserIdDep,
    db: SessionDep,
) -> MessageResponse:
    """Send a direct message to a matched member."""
    message = conversation_service.send_message(
        db, current_user_id, payload.recipient_id, payload.content
    )
    return MessageResponse.model_validate(message)


@router.get("/with/{other_user_id}", response_model=list[MessageResponse])
async def read_thread(
    other_user_id: str,
    current_user_id: CurrentUserIdDep,
    db: SessionDep,
) -> list[MessageResponse]:
    """Return the message history with another member, oldest first."""
    return [
        MessageResponse.model_validate(message)
        for message in conversation_service.get_thread(db, current_user_id, other_user_id)
    ]


@router.post("/with/{other_user_id}/read", response_model=MarkReadResponse)
async def mark_thread_read(
    other_user_id: str,
    current_user_id: CurrentUserIdDep,
    db: SessionDep,
) -> MarkReadResponse:
    """Mark every unread message from ``other_user_id`` as read."""
    updated = conversation_service.mark_thread_read(db, other_user_id, current_user_id)
    return MarkReadResponse(status="ok", updated=updated)


@router.put("/{message_id}/read", response_model=MessageResponse)
async def mark_message_read(
    message_id: int,
    current_user_id: CurrentUserIdDep,
    db: SessionDep,
) -> MessageResponse:
    """Mark a single received message as read."""
    message = conversation_service.mark_message_read(db, message_id, current_user_id)
    return MessageResponse.model_validate(message)
