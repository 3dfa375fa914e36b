# src/momlink/api/v1/endpoints/groups.py
"""Group endpoints for the MomLink API."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, status

from momlink.schemas.group import (
    GroupCreate,
    GroupMessageCreate,
    GroupMessageView,
    GroupWithMembership,
    MembershipResponse,
)
from momlink.services import groups as group_service
from momlink.services.policies import require_active_member

from ..dependencies import CurrentUserIdDep, SessionDep

router = APIRouter(prefix="/groups", tags=["groups"])


@router.get("/", response_model=list[GroupWithMembership])
async def list_groups(
    current_user_id: CurrentUserIdDep,
    db: SessionDep,
    city: Annotated[str | None, Query(description="Only this city and city-less groups")] = None,
) -> list[GroupWithMembership]:
    """List groups with the caller's membership flag and member counts."""
    return group_service.list_groups(db, current_user_id, city_filter=city)


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=GroupWithMembership)
async def create_group(
    payload: GroupCreate,
    current_user_id: CurrentUserIdDep,
    db: SessionDep,
) -> GroupWithMembership:
    """Create a group with the caller as its admin."""
    group = group_service.create_group(db, current_user_id, payload)
    return GroupWithMembership.model_validate(group).model_copy(
        update={"member_count": 1, "is_member": True}
    )


@router.post("/{group_id}/join", response_model=MembershipResponse)
async def join_group(
    group_id: int,
    current_user_id: CurrentUserIdDep,
    db: SessionDep,
) -> MembershipResponse:
    """Join a group. Joining again returns the existing membership."""
    membership = group_service.join_group(db, current_user_id, group_id)
    return MembershipResponse.model_validate(membership)


@router.delete("/{group_id}/leave", status_code=status.HTTP_204_NO_CONTENT)
async def leave_group(
    group_id: int,
    current_user_id: CurrentUserIdDep,
    db: SessionDep,
) -> None:
    """Leave a group; leaving a group you are not in is a no-op."""
    group_service.leave_group(db, current_user_id, group_id)


@router.get("/{group_id}/messages", response_model=list[GroupMessageView])
async def list_group_messages(
    group_id: int,
    current_user_id: CurrentUserIdDep,
    db: SessionDep,
) -> list[GroupMessageView]:
    """Return the group chat, oldest first. Members only."""
    group_service.get_group(db, group_id)
    require_active_member(db, current_user_id, group_id)
    return group_service.list_group_messages(db, group_id)


@router.post(
    "/{group_id}/messages",
    status_code=status.HTTP_201_CREATED,
    response_model=GroupMessageView,
)
async def send_group_message(
    group_id: int,
    payload: GroupMessageCreate,
    current_user_id: CurrentUserIdDep,
    db: SessionDep,
) -> GroupMessageView:
    """Post to the group chat. Members only."""
    return group_service.send_group_message(db, current_user_id, group_id, payload.content)


@router.delete("/{group_id}/messages/{message_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_group_message(
    group_id: int,
    message_id: int,
    current_user_id: CurrentUserIdDep,
    db: SessionDep,
) -> None:
    """Hide a message from the group chat. Group admins only."""
    group_service.soft_delete_group_message(db, current_user_id, group_id, message_id)


@router.post("/{group_id}/members/{user_id}/approve", response_model=MembershipResponse)
async def approve_member(
    group_id: int,
    user_id: str,
    current_user_id: CurrentUserIdDep,
    db: SessionDep,
) -> MembershipResponse:
    """Approve a pending join request. Group admins only."""
    if user_id == current_user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Admins cannot approve themselves",
        )
    membership = group_service.approve_member(db, current_user_id, group_id, user_id)
    return MembershipResponse.model_validate(membership)
