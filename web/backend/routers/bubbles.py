#!/usr/bin/env python3
"""
Bubble endpoints - browse bubbles, join and leave them.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.lifecycle import LifecycleService
from ..dependencies import get_db, get_lifecycle_service, get_current_user_id, get_optional_user_id
from ..services.directory_service import DirectoryService
from ..models.responses import (
    BubblesResponse,
    BubbleResponse,
    SkillsResponse,
    StudyRequestsResponse,
    JoinBubbleResponse,
    LeaveBubbleResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/bubbles", tags=["bubbles"])


@router.get("", response_model=BubblesResponse)
def list_bubbles(
    user_id: Optional[int] = Depends(get_optional_user_id),
    db: Session = Depends(get_db)
):
    """
    List all bubbles.

    With a bearer token, also returns the bubble the caller is currently in.
    """
    bubbles, current = DirectoryService(db).list_bubbles(user_id)
    return BubblesResponse(success=True, bubbles=bubbles, current_bubble=current)


@router.post("/leave", response_model=LeaveBubbleResponse)
def leave_bubble(
    user_id: int = Depends(get_current_user_id),
    service: LifecycleService = Depends(get_lifecycle_service)
):
    """
    Leave the current bubble.

    Cancels the caller's requests and matches in the bubble; pending requests
    where the caller was the chosen teacher are reopened for their students.
    """
    result = service.leave_bubble(user_id)
    return LeaveBubbleResponse(
        success=True,
        bubble_id=result.bubble_id,
        cancelled_request_ids=result.cancelled_request_ids,
        cancelled_match_ids=result.cancelled_match_ids,
        reopened_request_ids=result.reopened_request_ids,
        message="Successfully left bubble"
    )


@router.get("/{bubble_id}", response_model=BubbleResponse)
def get_bubble(bubble_id: int, db: Session = Depends(get_db)):
    """Get one bubble."""
    return BubbleResponse(success=True, bubble=DirectoryService(db).get_bubble(bubble_id))


@router.get("/{bubble_id}/skills", response_model=SkillsResponse)
def list_bubble_skills(bubble_id: int, db: Session = Depends(get_db)):
    """Skills scoped to a bubble."""
    skills = DirectoryService(db).list_bubble_skills(bubble_id)
    return SkillsResponse(success=True, count=len(skills), skills=skills)


@router.get("/{bubble_id}/requests", response_model=StudyRequestsResponse)
def list_bubble_requests(
    bubble_id: int,
    user_id: Optional[int] = Depends(get_optional_user_id),
    db: Session = Depends(get_db)
):
    """
    Open study requests in a bubble, newest first.

    With a bearer token each request carries is_own_request.
    """
    requests = DirectoryService(db).list_open_requests(bubble_id, viewer_id=user_id)
    return StudyRequestsResponse(success=True, count=len(requests), requests=requests)


@router.post("/{bubble_id}/join", response_model=JoinBubbleResponse)
def join_bubble(
    bubble_id: int,
    user_id: int = Depends(get_current_user_id),
    service: LifecycleService = Depends(get_lifecycle_service)
):
    """Join a bubble. Callers already in another bubble must leave it first."""
    joined = service.join_bubble(user_id, bubble_id)
    return JoinBubbleResponse(
        success=True,
        bubble_id=bubble_id,
        joined=joined,
        message="Successfully joined bubble" if joined else "Already a member of this bubble"
    )
