# src/momlink/api/v1/endpoints/matching.py
"""Candidate discovery, swiping and match endpoints for the MomLink API."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query, status

from momlink.schemas.matching import CandidateProfile, MatchResponse, SwipeCreate, SwipeResult
from momlink.services import candidates as candidate_service
from momlink.services import swipes as swipe_service

from ..dependencies import CurrentUserIdDep, SessionDep

router = APIRouter(prefix="/matching", tags=["matching"])


@router.get("/candidates", response_model=list[CandidateProfile])
async def list_candidates(
    current_user_id: CurrentUserIdDep,
    db: SessionDep,
    limit: Annotated[int | None, Query(ge=1, le=100)] = None,
) -> list[CandidateProfile]:
    """Return the next batch of profiles to swipe on, local ones first."""
    return candidate_service.get_candidates(db, current_user_id, limit=limit)


@router.post("/swipes", response_model=SwipeResult)
async def swipe(
    payload: SwipeCreate,
    current_user_id: CurrentUserIdDep,
    db: SessionDep,
) -> SwipeResult:
    """Record a swipe; the response says whether it completed a match."""
    match = swipe_service.record_swipe(db, current_user_id, payload.target_id, payload.direction)
    if match is None:
        return SwipeResult(matched=False)
    return SwipeResult(matched=True, match=MatchResponse.model_validate(match))


@router.get("/matches", response_model=list[MatchResponse])
async def list_matches(
    current_user_id: CurrentUserIdDep,
    db: SessionDep,
) -> list[MatchResponse]:
    """List the caller's matches, newest first."""
    return [
        MatchResponse.model_validate(match)
        for match in swipe_service.list_matches(db, current_user_id)
    ]


@router.delete("/matches/{match_id}", status_code=status.HTTP_204_NO_CONTENT)
async def unmatch(
    match_id: int,
    current_user_id: CurrentUserIdDep,
    db: SessionDep,
) -> None:
    """Remove a match together with its message history."""
    swipe_service.unmatch(db, current_user_id, match_id)
