#!/usr/bin/env python3
"""
Match endpoints - list, complete and cancel study matches.
"""

import logging
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from core.lifecycle import LifecycleService
from ..dependencies import get_db, get_lifecycle_service, get_current_user_id
from ..services.match_service import MatchService
from ..models.requests import CompleteMatchRequest
from ..models.responses import (
    MatchesResponse,
    MatchActionResponse,
    CompleteMatchResponse,
    RatingSummary,
)
from .study_requests import match_record

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/matches", tags=["matches"])


@router.get("", response_model=MatchesResponse)
def get_matches(
    role: str = Query(default="learning", description="Match role: teaching or learning"),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Get the caller's matches, newest first.

    role=teaching lists matches where the caller teaches, role=learning where
    the caller is the student. Each match names the other participant.
    """
    matches = MatchService(db).list_matches(user_id, role)
    return MatchesResponse(success=True, role=role, count=len(matches), matches=matches)


@router.get("/{role}", response_model=MatchesResponse)
def get_matches_by_path(
    role: str,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Same listing as GET /api/matches?role=..., with the role in the path."""
    return get_matches(role=role, user_id=user_id, db=db)


@router.post("/{match_id}/complete", response_model=CompleteMatchResponse)
def complete_match(
    match_id: int,
    body: CompleteMatchRequest,
    user_id: int = Depends(get_current_user_id),
    service: LifecycleService = Depends(get_lifecycle_service)
):
    """
    Mark an active match completed and rate the other participant.

    Feedback is stored on the study request and as the rating comment.
    """
    result = service.complete(match_id, user_id, body.rating, body.feedback)
    return CompleteMatchResponse(
        success=True,
        match=match_record(result.match),
        rating=RatingSummary(
            request_id=result.rating.request_id,
            rater_id=result.rating.rater_id,
            rated_id=result.rating.rated_id,
            rating=result.rating.rating,
            comment=result.rating.comment
        ),
        message="Session marked as completed"
    )


@router.post("/{match_id}/cancel", response_model=MatchActionResponse)
def cancel_match(
    match_id: int,
    user_id: int = Depends(get_current_user_id),
    service: LifecycleService = Depends(get_lifecycle_service)
):
    """Cancel an active match; the other participant is notified."""
    record = service.cancel_active(match_id, user_id)
    return MatchActionResponse(
        success=True,
        match=match_record(record),
        message="Session cancelled successfully"
    )
